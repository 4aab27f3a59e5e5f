from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core import config
from ..core.database import get_db
from ..core.auth import AuthBuyer, authenticate_buyer, require_admin
from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError, error_boundary, require_fields
from ..core.invalidation_helpers import invalidate_product_rating_cache
from ..core.responses import Envelope, PaginatedEnvelope, paginate
from .schemas import BuyerCreate, BuyerUpdate, BuyerResponse, REQUIRED_FIELDS, REQUIRED_MESSAGE
from .crud import get_buyer, find_conflicting_buyer, search_buyers, create_buyer, update_buyer, delete_buyer

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{config.API_PREFIX}/buyers", tags=["Buyers"])


def _ensure_self(current_buyer: AuthBuyer, buyer_id: int):
    if current_buyer.id != buyer_id:
        logger.warning(f"Buyer {current_buyer.id} denied access to buyer {buyer_id}")
        raise ForbiddenError("Anda hanya bisa mengakses data milik Anda sendiri")


@router.get("", response_model=PaginatedEnvelope[BuyerResponse], dependencies=[Depends(require_admin)])
async def get_all_buyers(
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan data pembeli"):
        buyers, pagination = paginate(search_buyers(db, search), page, limit)
        return {
            "status": True,
            "message": "Berhasil mendapatkan data semua pembeli",
            "data": [BuyerResponse.model_validate(buyer) for buyer in buyers],
            "pagination": pagination
        }


@router.get("/{buyer_id}", response_model=Envelope[BuyerResponse])
async def get_buyer_by_id(
    buyer_id: int,
    current_buyer: AuthBuyer = Depends(authenticate_buyer),
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan data pembeli"):
        _ensure_self(current_buyer, buyer_id)
        buyer = get_buyer(db, buyer_id)
        if not buyer:
            raise NotFoundError("Pembeli tidak ditemukan")
        return {
            "status": True,
            "message": "Berhasil mendapatkan data pembeli",
            "data": BuyerResponse.model_validate(buyer)
        }


@router.post("", response_model=Envelope[BuyerResponse], status_code=status.HTTP_201_CREATED)
async def create_new_buyer(payload: BuyerCreate, db: Session = Depends(get_db)):
    with error_boundary("Gagal membuat pembeli", db):
        require_fields(payload, REQUIRED_FIELDS, REQUIRED_MESSAGE)

        if find_conflicting_buyer(db, phone=payload.phone, username=payload.username):
            raise ConflictError("Phone atau username sudah terdaftar")

        buyer = create_buyer(db, payload.model_dump())
        logger.info(f"Buyer created: {buyer.username} (ID: {buyer.id})")
        return {
            "status": True,
            "message": "Pembeli berhasil dibuat",
            "data": BuyerResponse.model_validate(buyer)
        }


@router.put("/{buyer_id}", response_model=Envelope[BuyerResponse])
async def update_existing_buyer(
    buyer_id: int,
    payload: BuyerUpdate,
    current_buyer: AuthBuyer = Depends(authenticate_buyer),
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mengupdate pembeli", db):
        _ensure_self(current_buyer, buyer_id)
        buyer = get_buyer(db, buyer_id)
        if not buyer:
            raise NotFoundError("Pembeli tidak ditemukan")

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if find_conflicting_buyer(
            db,
            phone=update_data.get("phone"),
            username=update_data.get("username"),
            exclude_id=buyer_id
        ):
            raise ConflictError("Phone atau username sudah digunakan pembeli lain")

        buyer = update_buyer(db, buyer, update_data)
        return {
            "status": True,
            "message": "Pembeli berhasil diupdate",
            "data": BuyerResponse.model_validate(buyer)
        }


@router.delete("/{buyer_id}", response_model=Envelope, dependencies=[Depends(require_admin)])
async def delete_existing_buyer(buyer_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal menghapus pembeli", db):
        buyer = get_buyer(db, buyer_id)
        if not buyer:
            raise NotFoundError("Pembeli tidak ditemukan")

        had_ratings = bool(buyer.ratings)
        delete_buyer(db, buyer)
        if had_ratings:
            # Cascaded ratings may span any number of products
            await invalidate_product_rating_cache()
        logger.info(f"Buyer deleted: ID {buyer_id}")
        return {"status": True, "message": "Pembeli berhasil dihapus", "data": None}
