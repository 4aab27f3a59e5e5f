from sqlalchemy import Column, Integer, Float, ForeignKey, UniqueConstraint, TIMESTAMP, text, func
from sqlalchemy.orm import relationship
from ..core.database import Base, BigIntId


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("order_id", "product_id", "buyer_id", name="uq_rating_order_product_buyer"),
    )
    id = Column(BigIntId, primary_key=True, index=True, autoincrement=True)
    order_id = Column(BigIntId, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    buyer_id = Column(BigIntId, ForeignKey("buyers.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Float, nullable=False)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now())

    order = relationship("Order", back_populates="ratings")
    product = relationship("Product", back_populates="ratings")
    buyer = relationship("Buyer", back_populates="ratings")
