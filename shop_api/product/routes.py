from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging
import json

from ..core import config
from ..core.database import get_db
from ..core.auth import require_admin
from ..core.cache import get_cache, set_cache
from ..core.invalidation_helpers import invalidate_product_rating_cache, product_rating_key
from ..core.exceptions import ConflictError, NotFoundError, error_boundary, require_fields
from ..core.responses import Envelope, PaginatedEnvelope, paginate
from .schemas import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductDetailResponse,
    ProductRatingSummary,
    REQUIRED_FIELDS,
    REQUIRED_MESSAGE
)
from .crud import (
    get_product,
    get_product_by_code,
    find_conflicting_product,
    search_products,
    is_product_referenced,
    create_product,
    update_product,
    delete_product,
    summarize_ratings
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{config.API_PREFIX}/products", tags=["Products"])

RATING_CACHE_TTL = 300


@router.get("", response_model=PaginatedEnvelope[ProductResponse])
async def get_all_products(
    search: Optional[str] = None,
    type: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan data produk"):
        products, pagination = paginate(search_products(db, search, type), page, limit)
        return {
            "status": True,
            "message": "Data produk berhasil ditampilkan",
            "data": [ProductResponse.model_validate(product) for product in products],
            "pagination": pagination
        }


@router.get("/code/{code}", response_model=Envelope[ProductResponse])
async def get_product_by_product_code(code: str, db: Session = Depends(get_db)):
    with error_boundary("Gagal mendapatkan data produk"):
        product = get_product_by_code(db, code)
        if not product:
            raise NotFoundError("Produk tidak ditemukan")
        return {
            "status": True,
            "message": "Berhasil mendapatkan data produk",
            "data": ProductResponse.model_validate(product)
        }


@router.get("/{product_id}/rating", response_model=Envelope[ProductRatingSummary])
async def get_product_rating(product_id: int, db: Session = Depends(get_db)):
    """Rating summary of one product, served from Redis for 5 minutes."""
    with error_boundary("Gagal mendapatkan rating produk"):
        cache_key = product_rating_key(product_id)
        cached_data = await get_cache(cache_key)
        if cached_data:
            return {
                "status": True,
                "message": "Berhasil mendapatkan rating produk",
                "data": json.loads(cached_data)
            }

        product = get_product(db, product_id)
        if not product:
            raise NotFoundError("Produk tidak ditemukan")

        summary = ProductRatingSummary.model_validate(summarize_ratings(product))
        await set_cache(cache_key, summary.model_dump_json(), RATING_CACHE_TTL)
        return {
            "status": True,
            "message": "Berhasil mendapatkan rating produk",
            "data": summary
        }


@router.get("/{product_id}", response_model=Envelope[ProductDetailResponse])
async def get_product_by_id(product_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal mendapatkan data produk"):
        product = get_product(db, product_id)
        if not product:
            raise NotFoundError("Produk tidak ditemukan")
        return {
            "status": True,
            "message": "Berhasil mendapatkan data produk",
            "data": ProductDetailResponse.model_validate(product)
        }


@router.post("", response_model=Envelope[ProductResponse], status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
async def create_new_product(payload: ProductCreate, db: Session = Depends(get_db)):
    with error_boundary("Gagal membuat produk", db):
        require_fields(payload, REQUIRED_FIELDS, REQUIRED_MESSAGE)

        if find_conflicting_product(db, payload.product_code):
            raise ConflictError("Kode produk sudah digunakan")

        product = create_product(db, payload.model_dump())
        logger.info(f"Product created: {product.product_code} (ID: {product.id})")
        return {
            "status": True,
            "message": "Produk berhasil dibuat",
            "data": ProductResponse.model_validate(product)
        }


@router.put("/{product_id}", response_model=Envelope[ProductResponse], dependencies=[Depends(require_admin)])
async def update_existing_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    with error_boundary("Gagal mengupdate produk", db):
        product = get_product(db, product_id)
        if not product:
            raise NotFoundError("Produk tidak ditemukan")

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "product_code" in update_data and find_conflicting_product(db, update_data["product_code"], product_id):
            raise ConflictError("Kode produk sudah digunakan produk lain")

        product = update_product(db, product, update_data)
        await invalidate_product_rating_cache(product_id)
        return {
            "status": True,
            "message": "Produk berhasil diupdate",
            "data": ProductResponse.model_validate(product)
        }


@router.delete("/{product_id}", response_model=Envelope, dependencies=[Depends(require_admin)])
async def delete_existing_product(product_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal menghapus produk", db):
        product = get_product(db, product_id)
        if not product:
            raise NotFoundError("Produk tidak ditemukan")

        if is_product_referenced(db, product_id):
            raise ConflictError("Produk masih digunakan pada pesanan atau rating")

        delete_product(db, product)
        await invalidate_product_rating_cache(product_id)
        logger.info(f"Product deleted: ID {product_id}")
        return {"status": True, "message": "Produk berhasil dihapus", "data": None}
