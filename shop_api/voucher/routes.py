from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core import config
from ..core.database import get_db
from ..core.auth import AuthUser, authenticate_token, require_admin
from ..core.exceptions import ConflictError, NotFoundError, ValidationError, error_boundary, require_fields
from ..core.responses import Envelope, PaginatedEnvelope, paginate
from .schemas import VoucherCreate, VoucherUpdate, VoucherResponse, REQUIRED_FIELDS, REQUIRED_MESSAGE
from .crud import (
    get_voucher,
    get_voucher_by_code,
    find_conflicting_voucher,
    is_valid_quota,
    search_vouchers,
    create_voucher,
    update_voucher,
    use_voucher,
    delete_voucher
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{config.API_PREFIX}/vouchers", tags=["Vouchers"])

QUOTA_MESSAGE = "Kuota voucher tidak valid (0 <= quantity_used <= quantity_max)"


@router.get("", response_model=PaginatedEnvelope[VoucherResponse])
async def get_all_vouchers(
    search: Optional[str] = None,
    buyer_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan data voucher"):
        vouchers, pagination = paginate(search_vouchers(db, search, buyer_id), page, limit)
        return {
            "status": True,
            "message": "Berhasil mendapatkan data semua voucher",
            "data": [VoucherResponse.model_validate(voucher) for voucher in vouchers],
            "pagination": pagination
        }


@router.get("/code/{code}", response_model=Envelope[VoucherResponse])
async def get_voucher_by_voucher_code(code: str, db: Session = Depends(get_db)):
    with error_boundary("Gagal mendapatkan data voucher"):
        voucher = get_voucher_by_code(db, code)
        if not voucher:
            raise NotFoundError("Voucher tidak ditemukan")
        return {
            "status": True,
            "message": "Berhasil mendapatkan data voucher",
            "data": VoucherResponse.model_validate(voucher)
        }


@router.get("/{voucher_id}", response_model=Envelope[VoucherResponse], dependencies=[Depends(require_admin)])
async def get_voucher_by_id(voucher_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal mendapatkan data voucher"):
        voucher = get_voucher(db, voucher_id)
        if not voucher:
            raise NotFoundError("Voucher tidak ditemukan")
        return {
            "status": True,
            "message": "Berhasil mendapatkan data voucher",
            "data": VoucherResponse.model_validate(voucher)
        }


@router.post("", response_model=Envelope[VoucherResponse], status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
async def create_new_voucher(payload: VoucherCreate, db: Session = Depends(get_db)):
    with error_boundary("Gagal membuat voucher", db):
        require_fields(payload, REQUIRED_FIELDS, REQUIRED_MESSAGE)

        if not is_valid_quota(0, payload.quantity_max):
            raise ValidationError(QUOTA_MESSAGE)

        if find_conflicting_voucher(db, payload.code):
            raise ConflictError("Kode voucher sudah digunakan")

        voucher = create_voucher(db, payload.model_dump())
        logger.info(f"Voucher created: {voucher.code} (ID: {voucher.id})")
        return {
            "status": True,
            "message": "Voucher berhasil dibuat",
            "data": VoucherResponse.model_validate(voucher)
        }


@router.put("/{voucher_id}/use", response_model=Envelope[VoucherResponse])
async def use_existing_voucher(
    voucher_id: int,
    current_user: AuthUser = Depends(authenticate_token),
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal menggunakan voucher", db):
        voucher = get_voucher(db, voucher_id)
        if not voucher:
            raise NotFoundError("Voucher tidak ditemukan")

        if not use_voucher(db, voucher_id):
            raise ValidationError("Voucher sudah habis digunakan")

        db.refresh(voucher)
        logger.info(f"Voucher {voucher.code} used by user {current_user.id} ({voucher.quantity_used}/{voucher.quantity_max})")
        return {
            "status": True,
            "message": "Voucher berhasil digunakan",
            "data": VoucherResponse.model_validate(voucher)
        }


@router.put("/{voucher_id}", response_model=Envelope[VoucherResponse], dependencies=[Depends(require_admin)])
async def update_existing_voucher(voucher_id: int, payload: VoucherUpdate, db: Session = Depends(get_db)):
    with error_boundary("Gagal mengupdate voucher", db):
        voucher = get_voucher(db, voucher_id)
        if not voucher:
            raise NotFoundError("Voucher tidak ditemukan")

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "code" in update_data and find_conflicting_voucher(db, update_data["code"], voucher_id):
            raise ConflictError("Kode voucher sudah digunakan voucher lain")

        quantity_used = update_data.get("quantity_used", voucher.quantity_used)
        quantity_max = update_data.get("quantity_max", voucher.quantity_max)
        if not is_valid_quota(quantity_used, quantity_max):
            raise ValidationError(QUOTA_MESSAGE)

        voucher = update_voucher(db, voucher, update_data)
        return {
            "status": True,
            "message": "Voucher berhasil diupdate",
            "data": VoucherResponse.model_validate(voucher)
        }


@router.delete("/{voucher_id}", response_model=Envelope, dependencies=[Depends(require_admin)])
async def delete_existing_voucher(voucher_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal menghapus voucher", db):
        voucher = get_voucher(db, voucher_id)
        if not voucher:
            raise NotFoundError("Voucher tidak ditemukan")

        delete_voucher(db, voucher)
        return {"status": True, "message": "Voucher berhasil dihapus", "data": None}
