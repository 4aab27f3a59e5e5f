from sqlalchemy.orm import Session, Query
from sqlalchemy import func
from typing import Optional, Dict, Any
from .models import Rating
from .schemas import MIN_RATING, MAX_RATING
from ..order.models import Order
from ..product.models import Product
from ..buyer.models import Buyer


def is_valid_score(score: float) -> bool:
    return MIN_RATING <= score <= MAX_RATING


def get_rating(db: Session, rating_id: int) -> Optional[Rating]:
    return db.query(Rating).filter(Rating.id == rating_id).first()


def find_conflicting_rating(
    db: Session,
    order_id: int,
    product_id: int,
    buyer_id: int,
    exclude_id: Optional[int] = None
) -> Optional[Rating]:
    query = db.query(Rating).filter(
        Rating.order_id == order_id,
        Rating.product_id == product_id,
        Rating.buyer_id == buyer_id
    )
    if exclude_id is not None:
        query = query.filter(Rating.id != exclude_id)
    return query.first()


def missing_reference(db: Session, order_id=None, product_id=None, buyer_id=None) -> Optional[str]:
    """
    Return the not-found message of the first referenced row that does not exist.

    Only the given ids are checked: order first, then product, then buyer.
    """
    if order_id is not None and not db.query(Order.id).filter(Order.id == order_id).first():
        return "Pesanan tidak ditemukan"
    if product_id is not None and not db.query(Product.id).filter(Product.id == product_id).first():
        return "Produk tidak ditemukan"
    if buyer_id is not None and not db.query(Buyer.id).filter(Buyer.id == buyer_id).first():
        return "Pembeli tidak ditemukan"
    return None


def search_ratings(
    db: Session,
    order_id: Optional[int] = None,
    product_id: Optional[int] = None,
    buyer_id: Optional[int] = None
) -> Query:
    query = db.query(Rating)
    if order_id is not None:
        query = query.filter(Rating.order_id == order_id)
    if product_id is not None:
        query = query.filter(Rating.product_id == product_id)
    if buyer_id is not None:
        query = query.filter(Rating.buyer_id == buyer_id)
    return query.order_by(Rating.created_at.desc(), Rating.id.desc())


def average_rating(db: Session, product_id: int) -> float:
    average = db.query(func.avg(Rating.rating)).filter(Rating.product_id == product_id).scalar()
    return round(float(average), 2) if average is not None else 0


def create_rating(db: Session, data: Dict[str, Any]) -> Rating:
    db_rating = Rating(**data)
    db.add(db_rating)
    db.commit()
    db.refresh(db_rating)
    return db_rating


def update_rating(db: Session, db_rating: Rating, data: Dict[str, Any]) -> Rating:
    for field, value in data.items():
        setattr(db_rating, field, value)
    db.commit()
    db.refresh(db_rating)
    return db_rating


def delete_rating(db: Session, db_rating: Rating):
    db.delete(db_rating)
    db.commit()
