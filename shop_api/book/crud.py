from sqlalchemy.orm import Session, Query
from typing import Optional, Dict, Any
from .models import Book


def get_book(db: Session, book_id: int) -> Optional[Book]:
    return db.query(Book).filter(Book.id == book_id).first()


def find_conflicting_book(db: Session, title: str, exclude_id: Optional[int] = None) -> Optional[Book]:
    query = db.query(Book).filter(Book.title == title)
    if exclude_id is not None:
        query = query.filter(Book.id != exclude_id)
    return query.first()


def search_books(db: Session, search: Optional[str] = None) -> Query:
    query = db.query(Book)
    if search:
        query = query.filter(Book.title.ilike(f"%{search}%"))
    return query.order_by(Book.id)


def create_book(db: Session, data: Dict[str, Any]) -> Book:
    db_book = Book(**data)
    db.add(db_book)
    db.commit()
    db.refresh(db_book)
    return db_book


def update_book(db: Session, db_book: Book, data: Dict[str, Any]) -> Book:
    for field, value in data.items():
        setattr(db_book, field, value)
    db.commit()
    db.refresh(db_book)
    return db_book


def delete_book(db: Session, db_book: Book):
    db.delete(db_book)
    db.commit()
