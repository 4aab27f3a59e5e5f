from sqlalchemy.orm import Session, Query
from sqlalchemy import or_
from typing import Optional, Dict, Any
from .models import Product
from ..order.models import DetailOrder
from ..rating.models import Rating


def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()


def get_product_by_code(db: Session, product_code: str) -> Optional[Product]:
    return db.query(Product).filter(Product.product_code == product_code).first()


def find_conflicting_product(db: Session, product_code: str, exclude_id: Optional[int] = None) -> Optional[Product]:
    query = db.query(Product).filter(Product.product_code == product_code)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    return query.first()


def search_products(db: Session, search: Optional[str] = None, product_type: Optional[str] = None) -> Query:
    """
    Build the catalog query, newest first.

    Args:
        db: Database session
        search: Matched against name, product_code and desc
        product_type: Exact match on the product type
    """
    query = db.query(Product)
    if search:
        query = query.filter(
            or_(
                Product.name.ilike(f"%{search}%"),
                Product.product_code.ilike(f"%{search}%"),
                Product.desc.ilike(f"%{search}%")
            )
        )
    if product_type:
        query = query.filter(Product.type == product_type)
    return query.order_by(Product.created_at.desc(), Product.id.desc())


def is_product_referenced(db: Session, product_id: int) -> bool:
    if db.query(DetailOrder.id).filter(DetailOrder.product_id == product_id).first():
        return True
    return db.query(Rating.id).filter(Rating.product_id == product_id).first() is not None


def create_product(db: Session, data: Dict[str, Any]) -> Product:
    db_product = Product(**data)
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def update_product(db: Session, db_product: Product, data: Dict[str, Any]) -> Product:
    for field, value in data.items():
        setattr(db_product, field, value)
    db.commit()
    db.refresh(db_product)
    return db_product


def delete_product(db: Session, db_product: Product):
    db.delete(db_product)
    db.commit()


def summarize_ratings(db_product: Product) -> Dict[str, Any]:
    """Average is rounded to 2 places and is 0 for an unrated product."""
    ratings = list(db_product.ratings)
    average = sum(r.rating for r in ratings) / len(ratings) if ratings else 0
    return {
        "product_id": db_product.id,
        "product_name": db_product.name,
        "total_ratings": len(ratings),
        "average_rating": round(average, 2),
        "ratings": ratings
    }
