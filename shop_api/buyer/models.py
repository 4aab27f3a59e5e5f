from sqlalchemy import Column, String, DateTime, TIMESTAMP, text, func
from sqlalchemy.orm import relationship
from ..core.database import Base, BigIntId


class Buyer(Base):
    __tablename__ = "buyers"
    id = Column(BigIntId, primary_key=True, index=True, autoincrement=True)
    phone = Column(String(20), unique=True, nullable=False)
    username = Column(String(50), unique=True, nullable=False)
    activation_code = Column(String(6), nullable=False)
    # Naive UTC
    expired = Column(DateTime, nullable=False)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now())

    orders = relationship("Order", back_populates="buyer")
    ratings = relationship("Rating", back_populates="buyer", cascade="all, delete-orphan")
    vouchers = relationship("Voucher", back_populates="buyer")
