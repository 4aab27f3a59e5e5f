from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, TIMESTAMP, text, func
from sqlalchemy.orm import relationship
from ..core.database import Base, BigIntId


def compute_sub_total(price, quantity) -> Decimal:
    """Exact price * quantity, never a float product."""
    return Decimal(str(price)) * Decimal(str(quantity))


class Order(Base):
    __tablename__ = "orders"
    id = Column(BigIntId, primary_key=True, index=True, autoincrement=True)
    order_code = Column(String(50), unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    buyer_id = Column(BigIntId, ForeignKey("buyers.id", ondelete="SET NULL"), nullable=True)
    total = Column(Numeric(15, 2), nullable=False)
    desc = Column(Text)
    discount = Column(Numeric(15, 2), nullable=False, default=0)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now())

    user = relationship("User", back_populates="orders")
    buyer = relationship("Buyer", back_populates="orders")
    detail_orders = relationship("DetailOrder", back_populates="order", cascade="all, delete-orphan")
    ratings = relationship("Rating", back_populates="order", cascade="all, delete-orphan")


class DetailOrder(Base):
    __tablename__ = "detail_orders"
    id = Column(BigIntId, primary_key=True, index=True, autoincrement=True)
    order_id = Column(BigIntId, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    price = Column(Numeric(15, 2), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False)
    # Always price * quantity; widths cover the full product of both columns
    sub_total = Column(Numeric(20, 4), nullable=False)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now())

    order = relationship("Order", back_populates="detail_orders")
    product = relationship("Product", back_populates="detail_orders")
