from sqlalchemy.orm import Session, Query
from sqlalchemy import or_
from typing import Optional, Dict, Any, List
from .models import Order, DetailOrder, compute_sub_total
from ..product.models import Product


def get_order(db: Session, order_id: int) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id).first()


def get_order_by_code(db: Session, order_code: str) -> Optional[Order]:
    return db.query(Order).filter(Order.order_code == order_code).first()


def find_conflicting_order(db: Session, order_code: str, exclude_id: Optional[int] = None) -> Optional[Order]:
    query = db.query(Order).filter(Order.order_code == order_code)
    if exclude_id is not None:
        query = query.filter(Order.id != exclude_id)
    return query.first()


def product_exists(db: Session, product_id: int) -> bool:
    return db.query(Product.id).filter(Product.id == product_id).first() is not None


def search_orders(
    db: Session,
    search: Optional[str] = None,
    user_id: Optional[int] = None,
    buyer_id: Optional[int] = None
) -> Query:
    query = db.query(Order)
    if search:
        query = query.filter(
            or_(
                Order.order_code.ilike(f"%{search}%"),
                Order.desc.ilike(f"%{search}%")
            )
        )
    if user_id is not None:
        query = query.filter(Order.user_id == user_id)
    if buyer_id is not None:
        query = query.filter(Order.buyer_id == buyer_id)
    return query.order_by(Order.created_at.desc(), Order.id.desc())


def create_order(db: Session, data: Dict[str, Any], items: List[Dict[str, Any]]) -> Order:
    """
    Create an order together with its detail lines in one commit.

    Args:
        db: Database session
        data: Order columns
        items: Dicts with product_id, price and quantity; sub_total is computed here

    Returns:
        Order: The persisted order with detail_orders loaded
    """
    db_order = Order(**data)
    for item in items:
        db_order.detail_orders.append(
            DetailOrder(
                product_id=item["product_id"],
                price=item["price"],
                quantity=item["quantity"],
                sub_total=compute_sub_total(item["price"], item["quantity"])
            )
        )
    db.add(db_order)
    db.commit()
    db.refresh(db_order)
    return db_order


def update_order(db: Session, db_order: Order, data: Dict[str, Any]) -> Order:
    for field, value in data.items():
        setattr(db_order, field, value)
    db.commit()
    db.refresh(db_order)
    return db_order


def delete_order(db: Session, db_order: Order):
    # detail_orders and ratings go with it
    db.delete(db_order)
    db.commit()


def get_detail_order(db: Session, detail_order_id: int) -> Optional[DetailOrder]:
    return db.query(DetailOrder).filter(DetailOrder.id == detail_order_id).first()


def search_detail_orders(db: Session, order_id: Optional[int] = None, product_id: Optional[int] = None) -> Query:
    query = db.query(DetailOrder)
    if order_id is not None:
        query = query.filter(DetailOrder.order_id == order_id)
    if product_id is not None:
        query = query.filter(DetailOrder.product_id == product_id)
    return query.order_by(DetailOrder.created_at.desc(), DetailOrder.id.desc())


def create_detail_order(db: Session, data: Dict[str, Any]) -> DetailOrder:
    db_detail = DetailOrder(**data, sub_total=compute_sub_total(data["price"], data["quantity"]))
    db.add(db_detail)
    db.commit()
    db.refresh(db_detail)
    return db_detail


def update_detail_order(db: Session, db_detail: DetailOrder, data: Dict[str, Any]) -> DetailOrder:
    """Apply a partial update; sub_total follows whenever price or quantity is given."""
    for field, value in data.items():
        setattr(db_detail, field, value)

    if "price" in data or "quantity" in data:
        db_detail.sub_total = compute_sub_total(db_detail.price, db_detail.quantity)

    db.commit()
    db.refresh(db_detail)
    return db_detail


def delete_detail_order(db: Session, db_detail: DetailOrder):
    db.delete(db_detail)
    db.commit()
