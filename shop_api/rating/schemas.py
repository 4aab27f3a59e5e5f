from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from ..buyer.schemas import BuyerSummary
from ..core.responses import Amount, Pagination

REQUIRED_FIELDS = ("order_id", "product_id", "buyer_id", "rating")
REQUIRED_MESSAGE = "Field wajib diisi (order_id, product_id, buyer_id, rating)"
MIN_RATING = 1
MAX_RATING = 5


class RatingCreate(BaseModel):
    order_id: Optional[int] = None
    product_id: Optional[int] = None
    buyer_id: Optional[int] = None
    rating: Optional[float] = None


class RatingUpdate(BaseModel):
    order_id: Optional[int] = None
    product_id: Optional[int] = None
    buyer_id: Optional[int] = None
    rating: Optional[float] = None


class RatingResponse(BaseModel):
    id: int
    order_id: int
    product_id: int
    buyer_id: int
    rating: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RatedOrder(BaseModel):
    id: int
    order_code: str

    class Config:
        from_attributes = True


class RatedProduct(BaseModel):
    id: int
    product_code: str
    name: str
    type: str
    price: Amount

    class Config:
        from_attributes = True


class RatingDetailResponse(RatingResponse):
    order: Optional[RatedOrder] = None
    product: Optional[RatedProduct] = None
    buyer: Optional[BuyerSummary] = None


class ProductRatingsPage(BaseModel):
    product_id: int
    average_rating: float
    total_ratings: int
    ratings: List[RatingDetailResponse] = []


class ProductRatingsEnvelope(BaseModel):
    status: bool = True
    message: str
    data: ProductRatingsPage
    pagination: Pagination
