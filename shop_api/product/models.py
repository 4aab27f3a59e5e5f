from sqlalchemy import Column, Integer, String, Text, Numeric, TIMESTAMP, text, func
from sqlalchemy.orm import relationship
from ..core.database import Base


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True)
    product_code = Column(String(50), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    image = Column(String(255))
    type = Column(String(50), nullable=False)
    price = Column(Numeric(15, 2), nullable=False)
    desc = Column(Text)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now())

    detail_orders = relationship("DetailOrder", back_populates="product")
    ratings = relationship("Rating", back_populates="product")
