from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core import config
from ..core.database import get_db
from ..core.auth import authenticate_token, require_admin
from ..core.exceptions import NotFoundError, error_boundary, require_fields
from ..core.responses import Envelope, PaginatedEnvelope, paginate
from .schemas import (
    DetailOrderCreate,
    DetailOrderUpdate,
    DetailOrderWithOrderResponse,
    DETAIL_REQUIRED_FIELDS,
    DETAIL_REQUIRED_MESSAGE
)
from .crud import (
    get_order,
    product_exists,
    get_detail_order,
    search_detail_orders,
    create_detail_order,
    update_detail_order,
    delete_detail_order
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=f"{config.API_PREFIX}/detail-orders",
    tags=["Detail Orders"],
    dependencies=[Depends(authenticate_token)]
)


@router.get("", response_model=PaginatedEnvelope[DetailOrderWithOrderResponse])
async def get_all_detail_orders(
    order_id: Optional[int] = None,
    product_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan data detail pesanan"):
        details, pagination = paginate(search_detail_orders(db, order_id, product_id), page, limit)
        return {
            "status": True,
            "message": "Data detail pesanan berhasil ditampilkan",
            "data": [DetailOrderWithOrderResponse.model_validate(detail) for detail in details],
            "pagination": pagination
        }


@router.get("/{detail_order_id}", response_model=Envelope[DetailOrderWithOrderResponse])
async def get_detail_order_by_id(detail_order_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal mendapatkan data detail pesanan"):
        detail = get_detail_order(db, detail_order_id)
        if not detail:
            raise NotFoundError("Detail pesanan tidak ditemukan")
        return {
            "status": True,
            "message": "Berhasil mendapatkan data detail pesanan",
            "data": DetailOrderWithOrderResponse.model_validate(detail)
        }


@router.post("", response_model=Envelope[DetailOrderWithOrderResponse], status_code=status.HTTP_201_CREATED)
async def create_new_detail_order(payload: DetailOrderCreate, db: Session = Depends(get_db)):
    with error_boundary("Gagal membuat detail pesanan", db):
        require_fields(payload, DETAIL_REQUIRED_FIELDS, DETAIL_REQUIRED_MESSAGE)

        if not get_order(db, payload.order_id):
            raise NotFoundError("Pesanan tidak ditemukan")
        if not product_exists(db, payload.product_id):
            raise NotFoundError("Produk tidak ditemukan")

        detail = create_detail_order(db, payload.model_dump())
        logger.info(f"Detail order created: ID {detail.id} for order {detail.order_id}")
        return {
            "status": True,
            "message": "Detail pesanan berhasil dibuat",
            "data": DetailOrderWithOrderResponse.model_validate(detail)
        }


@router.put("/{detail_order_id}", response_model=Envelope[DetailOrderWithOrderResponse])
async def update_existing_detail_order(
    detail_order_id: int,
    payload: DetailOrderUpdate,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mengupdate detail pesanan", db):
        detail = get_detail_order(db, detail_order_id)
        if not detail:
            raise NotFoundError("Detail pesanan tidak ditemukan")

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "order_id" in update_data and update_data["order_id"] != detail.order_id:
            if not get_order(db, update_data["order_id"]):
                raise NotFoundError("Pesanan tidak ditemukan")
        if "product_id" in update_data and update_data["product_id"] != detail.product_id:
            if not product_exists(db, update_data["product_id"]):
                raise NotFoundError("Produk tidak ditemukan")

        detail = update_detail_order(db, detail, update_data)
        return {
            "status": True,
            "message": "Detail pesanan berhasil diupdate",
            "data": DetailOrderWithOrderResponse.model_validate(detail)
        }


@router.delete("/{detail_order_id}", response_model=Envelope, dependencies=[Depends(require_admin)])
async def delete_existing_detail_order(detail_order_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal menghapus detail pesanan", db):
        detail = get_detail_order(db, detail_order_id)
        if not detail:
            raise NotFoundError("Detail pesanan tidak ditemukan")

        delete_detail_order(db, detail)
        return {"status": True, "message": "Detail pesanan berhasil dihapus", "data": None}
