from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core import config
from ..core.database import get_db
from ..core.auth import authenticate_token, require_admin
from ..core.exceptions import ConflictError, NotFoundError, ValidationError, error_boundary, require_fields
from ..core.invalidation_helpers import invalidate_product_rating_cache, invalidate_specific_cache, product_rating_key
from ..core.responses import Envelope, PaginatedEnvelope, paginate
from .schemas import (
    RatingCreate,
    RatingUpdate,
    RatingDetailResponse,
    ProductRatingsEnvelope,
    REQUIRED_FIELDS,
    REQUIRED_MESSAGE
)
from .crud import (
    is_valid_score,
    get_rating,
    find_conflicting_rating,
    missing_reference,
    search_ratings,
    average_rating,
    create_rating,
    update_rating,
    delete_rating
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{config.API_PREFIX}/ratings", tags=["Ratings"])

DUPLICATE_MESSAGE = "Rating sudah ada untuk pesanan, produk, dan pembeli ini"
RANGE_MESSAGE = "Rating harus antara 1-5"


@router.get("/product/{product_id}", response_model=ProductRatingsEnvelope)
async def get_ratings_by_product(
    product_id: int,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan rating produk"):
        ratings, pagination = paginate(search_ratings(db, product_id=product_id), page, limit)
        return {
            "status": True,
            "message": "Data rating produk berhasil ditampilkan",
            "data": {
                "product_id": product_id,
                "average_rating": average_rating(db, product_id),
                "total_ratings": pagination.total_data,
                "ratings": [RatingDetailResponse.model_validate(rating) for rating in ratings]
            },
            "pagination": pagination
        }


@router.get("", response_model=PaginatedEnvelope[RatingDetailResponse], dependencies=[Depends(require_admin)])
async def get_all_ratings(
    order_id: Optional[int] = None,
    product_id: Optional[int] = None,
    buyer_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan data rating"):
        ratings, pagination = paginate(search_ratings(db, order_id, product_id, buyer_id), page, limit)
        return {
            "status": True,
            "message": "Data rating berhasil ditampilkan",
            "data": [RatingDetailResponse.model_validate(rating) for rating in ratings],
            "pagination": pagination
        }


@router.get("/{rating_id}", response_model=Envelope[RatingDetailResponse], dependencies=[Depends(authenticate_token)])
async def get_rating_by_id(rating_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal mendapatkan data rating"):
        rating = get_rating(db, rating_id)
        if not rating:
            raise NotFoundError("Rating tidak ditemukan")
        return {
            "status": True,
            "message": "Berhasil mendapatkan data rating",
            "data": RatingDetailResponse.model_validate(rating)
        }


@router.post("", response_model=Envelope[RatingDetailResponse], status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(authenticate_token)])
async def create_new_rating(payload: RatingCreate, db: Session = Depends(get_db)):
    with error_boundary("Gagal membuat rating", db):
        require_fields(payload, REQUIRED_FIELDS, REQUIRED_MESSAGE)

        if not is_valid_score(payload.rating):
            raise ValidationError(RANGE_MESSAGE)

        not_found = missing_reference(db, payload.order_id, payload.product_id, payload.buyer_id)
        if not_found:
            raise NotFoundError(not_found)

        if find_conflicting_rating(db, payload.order_id, payload.product_id, payload.buyer_id):
            raise ConflictError(DUPLICATE_MESSAGE)

        rating = create_rating(db, payload.model_dump())
        await invalidate_product_rating_cache(rating.product_id)
        logger.info(f"Rating created: ID {rating.id} for product {rating.product_id}")
        return {
            "status": True,
            "message": "Rating berhasil dibuat",
            "data": RatingDetailResponse.model_validate(rating)
        }


@router.put("/{rating_id}", response_model=Envelope[RatingDetailResponse], dependencies=[Depends(authenticate_token)])
async def update_existing_rating(rating_id: int, payload: RatingUpdate, db: Session = Depends(get_db)):
    with error_boundary("Gagal mengupdate rating", db):
        rating = get_rating(db, rating_id)
        if not rating:
            raise NotFoundError("Rating tidak ditemukan")

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "rating" in update_data and not is_valid_score(update_data["rating"]):
            raise ValidationError(RANGE_MESSAGE)

        not_found = missing_reference(
            db,
            order_id=update_data.get("order_id"),
            product_id=update_data.get("product_id"),
            buyer_id=update_data.get("buyer_id")
        )
        if not_found:
            raise NotFoundError(not_found)

        if find_conflicting_rating(
            db,
            update_data.get("order_id", rating.order_id),
            update_data.get("product_id", rating.product_id),
            update_data.get("buyer_id", rating.buyer_id),
            exclude_id=rating_id
        ):
            raise ConflictError(DUPLICATE_MESSAGE)

        previous_product_id = rating.product_id
        rating = update_rating(db, rating, update_data)
        await invalidate_specific_cache(
            [product_rating_key(product_id) for product_id in {previous_product_id, rating.product_id}]
        )

        return {
            "status": True,
            "message": "Rating berhasil diupdate",
            "data": RatingDetailResponse.model_validate(rating)
        }


@router.delete("/{rating_id}", response_model=Envelope, dependencies=[Depends(authenticate_token)])
async def delete_existing_rating(rating_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal menghapus rating", db):
        rating = get_rating(db, rating_id)
        if not rating:
            raise NotFoundError("Rating tidak ditemukan")

        product_id = rating.product_id
        delete_rating(db, rating)
        await invalidate_product_rating_cache(product_id)
        return {"status": True, "message": "Rating berhasil dihapus", "data": None}
