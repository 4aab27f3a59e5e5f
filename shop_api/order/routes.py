from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core import config
from ..core.database import get_db
from ..core.auth import AuthUser, Role, authenticate_token, require_admin
from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError, error_boundary, require_fields
from ..core.invalidation_helpers import invalidate_specific_cache, product_rating_key
from ..core.responses import Envelope, PaginatedEnvelope, paginate
from .models import Order
from .schemas import (
    OrderCreate,
    OrderUpdate,
    OrderResponse,
    ORDER_REQUIRED_FIELDS,
    ORDER_REQUIRED_MESSAGE,
    ITEM_REQUIRED_FIELDS,
    ITEM_REQUIRED_MESSAGE
)
from .crud import (
    get_order,
    get_order_by_code,
    find_conflicting_order,
    product_exists,
    search_orders,
    create_order,
    update_order,
    delete_order
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{config.API_PREFIX}/orders", tags=["Orders"])


def ensure_order_access(current_user: AuthUser, order: Order):
    """Non-admin callers may only touch orders placed under their own user id."""
    if current_user.role != Role.ADMIN and order.user_id != current_user.id:
        logger.warning(f"User {current_user.id} denied access to order {order.id}")
        raise ForbiddenError("Anda hanya bisa mengakses data milik Anda sendiri")


@router.get("", response_model=PaginatedEnvelope[OrderResponse], dependencies=[Depends(require_admin)])
async def get_all_orders(
    search: Optional[str] = None,
    user_id: Optional[int] = None,
    buyer_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan data pesanan"):
        orders, pagination = paginate(search_orders(db, search, user_id, buyer_id), page, limit)
        return {
            "status": True,
            "message": "Data pesanan berhasil ditampilkan",
            "data": [OrderResponse.model_validate(order) for order in orders],
            "pagination": pagination
        }


@router.get("/code/{code}", response_model=Envelope[OrderResponse])
async def get_order_by_order_code(code: str, db: Session = Depends(get_db)):
    """Public order tracking by code."""
    with error_boundary("Gagal mendapatkan data pesanan"):
        order = get_order_by_code(db, code)
        if not order:
            raise NotFoundError("Pesanan tidak ditemukan")
        return {
            "status": True,
            "message": "Berhasil mendapatkan data pesanan",
            "data": OrderResponse.model_validate(order)
        }


@router.get("/{order_id}", response_model=Envelope[OrderResponse])
async def get_order_by_id(
    order_id: int,
    current_user: AuthUser = Depends(authenticate_token),
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan data pesanan"):
        order = get_order(db, order_id)
        if not order:
            raise NotFoundError("Pesanan tidak ditemukan")
        ensure_order_access(current_user, order)
        return {
            "status": True,
            "message": "Berhasil mendapatkan data pesanan",
            "data": OrderResponse.model_validate(order)
        }


@router.post("", response_model=Envelope[OrderResponse], status_code=status.HTTP_201_CREATED)
async def create_new_order(
    payload: OrderCreate,
    current_user: AuthUser = Depends(authenticate_token),
    db: Session = Depends(get_db)
):
    """
    Create an order and all of its detail lines.

    Every line is checked before anything is written; the order and its lines
    are then stored in a single commit with sub_total computed server-side.
    """
    with error_boundary("Gagal membuat pesanan", db):
        require_fields(payload, ORDER_REQUIRED_FIELDS, ORDER_REQUIRED_MESSAGE)

        if find_conflicting_order(db, payload.order_code):
            raise ConflictError("Kode pesanan sudah digunakan")

        for item in payload.detail_orders:
            require_fields(item, ITEM_REQUIRED_FIELDS, ITEM_REQUIRED_MESSAGE)
            if not product_exists(db, item.product_id):
                raise ValidationError(f"Produk dengan ID {item.product_id} tidak ditemukan")

        order = create_order(
            db,
            {
                "order_code": payload.order_code,
                "user_id": payload.user_id,
                "buyer_id": payload.buyer_id,
                "total": payload.total,
                "desc": payload.desc or "",
                "discount": payload.discount or 0
            },
            [item.model_dump() for item in payload.detail_orders]
        )
        logger.info(f"Order created: {order.order_code} (ID: {order.id}) by user {current_user.id}")
        return {
            "status": True,
            "message": "Pesanan berhasil dibuat",
            "data": OrderResponse.model_validate(order)
        }


@router.put("/{order_id}", response_model=Envelope[OrderResponse])
async def update_existing_order(
    order_id: int,
    payload: OrderUpdate,
    current_user: AuthUser = Depends(authenticate_token),
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mengupdate pesanan", db):
        order = get_order(db, order_id)
        if not order:
            raise NotFoundError("Pesanan tidak ditemukan")
        ensure_order_access(current_user, order)

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "order_code" in update_data and find_conflicting_order(db, update_data["order_code"], order_id):
            raise ConflictError("Kode pesanan sudah digunakan pesanan lain")

        order = update_order(db, order, update_data)
        return {
            "status": True,
            "message": "Pesanan berhasil diupdate",
            "data": OrderResponse.model_validate(order)
        }


@router.delete("/{order_id}", response_model=Envelope, dependencies=[Depends(require_admin)])
async def delete_existing_order(order_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal menghapus pesanan", db):
        order = get_order(db, order_id)
        if not order:
            raise NotFoundError("Pesanan tidak ditemukan")

        rated_products = {rating.product_id for rating in order.ratings}
        delete_order(db, order)
        await invalidate_specific_cache([product_rating_key(product_id) for product_id in rated_products])

        logger.info(f"Order deleted: ID {order_id}")
        return {"status": True, "message": "Pesanan berhasil dihapus", "data": None}
