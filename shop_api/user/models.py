from sqlalchemy import Column, Integer, String, Text, Date, TIMESTAMP, text, func
from sqlalchemy.orm import relationship
from ..core.database import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, nullable=False)
    username = Column(String(50), unique=True, nullable=False)
    phone = Column(String(20), nullable=False)
    password = Column(String(255), nullable=False)
    gender = Column(String(20), nullable=False)
    dob = Column(Date, nullable=False)
    address = Column(Text)
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now())

    orders = relationship("Order", back_populates="user")
