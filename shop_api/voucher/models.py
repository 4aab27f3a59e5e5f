from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, TIMESTAMP, text, func
from sqlalchemy.orm import relationship
from ..core.database import Base, BigIntId


class Voucher(Base):
    __tablename__ = "vouchers"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    code = Column(String(50), unique=True, nullable=False)
    expired_time = Column(DateTime, nullable=False)
    quantity_used = Column(Integer, nullable=False, default=0)
    quantity_max = Column(Integer, nullable=False)
    buyer_id = Column(BigIntId, ForeignKey("buyers.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now())

    buyer = relationship("Buyer", back_populates="vouchers")
