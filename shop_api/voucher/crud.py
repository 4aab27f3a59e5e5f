from sqlalchemy.orm import Session, Query
from sqlalchemy import or_, update
from typing import Optional, Dict, Any
from .models import Voucher
from ..buyer.crud import to_naive_utc


def get_voucher(db: Session, voucher_id: int) -> Optional[Voucher]:
    return db.query(Voucher).filter(Voucher.id == voucher_id).first()


def get_voucher_by_code(db: Session, code: str) -> Optional[Voucher]:
    return db.query(Voucher).filter(Voucher.code == code).first()


def is_valid_quota(quantity_used: int, quantity_max: int) -> bool:
    return 0 <= quantity_used <= quantity_max


def find_conflicting_voucher(db: Session, code: str, exclude_id: Optional[int] = None) -> Optional[Voucher]:
    query = db.query(Voucher).filter(Voucher.code == code)
    if exclude_id is not None:
        query = query.filter(Voucher.id != exclude_id)
    return query.first()


def search_vouchers(db: Session, search: Optional[str] = None, buyer_id: Optional[int] = None) -> Query:
    query = db.query(Voucher)
    if search:
        query = query.filter(
            or_(
                Voucher.name.ilike(f"%{search}%"),
                Voucher.code.ilike(f"%{search}%")
            )
        )
    if buyer_id is not None:
        query = query.filter(Voucher.buyer_id == buyer_id)
    return query.order_by(Voucher.id)


def create_voucher(db: Session, data: Dict[str, Any]) -> Voucher:
    data = dict(data, quantity_used=0, expired_time=to_naive_utc(data["expired_time"]))
    db_voucher = Voucher(**data)
    db.add(db_voucher)
    db.commit()
    db.refresh(db_voucher)
    return db_voucher


def update_voucher(db: Session, db_voucher: Voucher, data: Dict[str, Any]) -> Voucher:
    if data.get("expired_time") is not None:
        data = dict(data, expired_time=to_naive_utc(data["expired_time"]))

    for field, value in data.items():
        setattr(db_voucher, field, value)
    db.commit()
    db.refresh(db_voucher)
    return db_voucher


def use_voucher(db: Session, voucher_id: int) -> bool:
    """
    Consume one use of a voucher.

    The increment and the quantity_used < quantity_max check are a single
    conditional UPDATE, so concurrent callers can never overshoot the maximum.

    Returns:
        bool: False when the voucher is already exhausted
    """
    result = db.execute(
        update(Voucher)
        .where(Voucher.id == voucher_id, Voucher.quantity_used < Voucher.quantity_max)
        .values(quantity_used=Voucher.quantity_used + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount == 1


def delete_voucher(db: Session, db_voucher: Voucher):
    db.delete(db_voucher)
    db.commit()
