from sqlalchemy.orm import Session, Query
from sqlalchemy import or_
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone
from .models import Buyer
from ..core import config
from ..core.security import generate_activation_code


def to_naive_utc(value: datetime) -> datetime:
    """Store timestamps as naive UTC; aware inputs are converted first."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def is_activation_code_expired(buyer: Buyer, now: Optional[datetime] = None) -> bool:
    """The code is still valid at the expiry instant itself and invalid strictly after."""
    if now is None:
        now = datetime.utcnow()
    return now > buyer.expired


def get_buyer(db: Session, buyer_id: int) -> Optional[Buyer]:
    return db.query(Buyer).filter(Buyer.id == buyer_id).first()


def get_buyer_by_phone(db: Session, phone: str) -> Optional[Buyer]:
    return db.query(Buyer).filter(Buyer.phone == phone).first()


def find_conflicting_buyer(
    db: Session,
    phone: Optional[str] = None,
    username: Optional[str] = None,
    exclude_id: Optional[int] = None
) -> Optional[Buyer]:
    conditions = []
    if phone:
        conditions.append(Buyer.phone == phone)
    if username:
        conditions.append(Buyer.username == username)
    if not conditions:
        return None

    query = db.query(Buyer).filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(Buyer.id != exclude_id)
    return query.first()


def search_buyers(db: Session, search: Optional[str] = None) -> Query:
    query = db.query(Buyer)
    if search:
        query = query.filter(
            or_(
                Buyer.username.ilike(f"%{search}%"),
                Buyer.phone.ilike(f"%{search}%")
            )
        )
    return query.order_by(Buyer.id)


def create_buyer(db: Session, data: Dict[str, Any]) -> Buyer:
    data = dict(data)
    data["expired"] = to_naive_utc(data["expired"])
    db_buyer = Buyer(**data)
    db.add(db_buyer)
    db.commit()
    db.refresh(db_buyer)
    return db_buyer


def register_buyer(db: Session, phone: str, username: str) -> Buyer:
    """
    Create a buyer with a fresh 6-digit activation code.

    The code expires ACTIVATION_CODE_EXPIRE_MINUTES from now.
    """
    expired = datetime.utcnow() + timedelta(minutes=config.ACTIVATION_CODE_EXPIRE_MINUTES)
    return create_buyer(db, {
        "phone": phone,
        "username": username,
        "activation_code": generate_activation_code(),
        "expired": expired
    })


def update_buyer(db: Session, db_buyer: Buyer, data: Dict[str, Any]) -> Buyer:
    if data.get("expired") is not None:
        data = dict(data, expired=to_naive_utc(data["expired"]))

    for field, value in data.items():
        setattr(db_buyer, field, value)

    db.commit()
    db.refresh(db_buyer)
    return db_buyer


def delete_buyer(db: Session, db_buyer: Buyer):
    db.delete(db_buyer)
    db.commit()
