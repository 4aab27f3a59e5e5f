from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from ..core import config
from ..core.database import get_db
from ..core.auth import require_admin
from ..core.exceptions import ConflictError, NotFoundError, error_boundary, require_fields
from ..core.responses import Envelope, PaginatedEnvelope, paginate
from .schemas import BookCreate, BookUpdate, BookResponse
from .crud import get_book, find_conflicting_book, search_books, create_book, update_book, delete_book

router = APIRouter(prefix=f"{config.API_PREFIX}/books", tags=["Books"])


@router.get("", response_model=PaginatedEnvelope[BookResponse])
async def get_all_books(
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mengambil data buku"):
        books, pagination = paginate(search_books(db, search), page, limit)
        return {
            "status": True,
            "message": "Berhasil mengambil data buku",
            "data": [BookResponse.model_validate(book) for book in books],
            "pagination": pagination
        }


@router.get("/{book_id}", response_model=Envelope[BookResponse])
async def get_book_by_id(book_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal mengambil data buku"):
        book = get_book(db, book_id)
        if not book:
            raise NotFoundError("Buku tidak ditemukan")
        return {"status": True, "message": "Berhasil mengambil data buku", "data": BookResponse.model_validate(book)}


@router.post("", response_model=Envelope[BookResponse], status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
async def create_new_book(payload: BookCreate, db: Session = Depends(get_db)):
    with error_boundary("Gagal menambahkan data buku", db):
        require_fields(payload, ("title",), "Field wajib diisi (title)")

        if find_conflicting_book(db, payload.title):
            raise ConflictError("Buku sudah terdaftar")

        book = create_book(db, payload.model_dump())
        return {"status": True, "message": "Berhasil menambahkan data buku", "data": BookResponse.model_validate(book)}


@router.put("/{book_id}", response_model=Envelope[BookResponse], dependencies=[Depends(require_admin)])
async def update_existing_book(book_id: int, payload: BookUpdate, db: Session = Depends(get_db)):
    with error_boundary("Gagal mengubah buku", db):
        book = get_book(db, book_id)
        if not book:
            raise NotFoundError("Buku tidak ditemukan")

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "title" in update_data and find_conflicting_book(db, update_data["title"], book_id):
            raise ConflictError("Buku sudah ada")

        book = update_book(db, book, update_data)
        return {"status": True, "message": "Buku berhasil diubah", "data": BookResponse.model_validate(book)}


@router.delete("/{book_id}", response_model=Envelope[BookResponse], dependencies=[Depends(require_admin)])
async def delete_existing_book(book_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal menghapus buku", db):
        book = get_book(db, book_id)
        if not book:
            raise NotFoundError("Buku tidak ditemukan")

        deleted = BookResponse.model_validate(book)
        delete_book(db, book)
        return {"status": True, "message": "Buku berhasil dihapus", "data": deleted}
