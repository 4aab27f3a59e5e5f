from sqlalchemy.orm import Session, Query
from sqlalchemy import or_
from typing import Optional, Dict, Any
from .models import User
from ..core.security import hash_password


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_identifier(db: Session, identifier: str) -> Optional[User]:
    """
    Find a user whose email or username equals `identifier`.

    Args:
        db: Database session
        identifier: Email address or username typed at login

    Returns:
        Optional[User]: Matching user, or None
    """
    return db.query(User).filter(or_(User.email == identifier, User.username == identifier)).first()


def find_conflicting_user(
    db: Session,
    email: Optional[str] = None,
    username: Optional[str] = None,
    exclude_id: Optional[int] = None
) -> Optional[User]:
    """
    Return a user already holding `email` or `username`, ignoring `exclude_id`.

    One query covers both keys, matching either.
    """
    conditions = []
    if email:
        conditions.append(User.email == email)
    if username:
        conditions.append(User.username == username)
    if not conditions:
        return None

    query = db.query(User).filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first()


def search_users(db: Session, search: Optional[str] = None) -> Query:
    query = db.query(User)
    if search:
        query = query.filter(
            or_(
                User.username.ilike(f"%{search}%"),
                User.email.ilike(f"%{search}%")
            )
        )
    return query.order_by(User.id)


def create_user(db: Session, data: Dict[str, Any]) -> User:
    """Persist a new user; the plain password in `data` is hashed first."""
    data = dict(data)
    data["password"] = hash_password(data["password"])
    db_user = User(**data)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, db_user: User, data: Dict[str, Any]) -> User:
    if data.get("password"):
        data = dict(data, password=hash_password(data["password"]))

    for field, value in data.items():
        setattr(db_user, field, value)

    db.commit()
    db.refresh(db_user)
    return db_user


def change_password(db: Session, db_user: User, new_password: str) -> User:
    db_user.password = hash_password(new_password)
    db.commit()
    db.refresh(db_user)
    return db_user


def delete_user(db: Session, db_user: User):
    # Orders keep their history with user_id set to NULL
    db.delete(db_user)
    db.commit()
