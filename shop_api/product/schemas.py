from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from ..core.responses import Amount, InputAmount
from ..rating.schemas import RatingResponse

REQUIRED_FIELDS = ("product_code", "name", "type", "price")
REQUIRED_MESSAGE = "Field wajib diisi (product_code, name, type, price)"


class ProductCreate(BaseModel):
    product_code: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
    type: Optional[str] = None
    price: Optional[InputAmount] = None
    desc: Optional[str] = None


class ProductUpdate(BaseModel):
    product_code: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
    type: Optional[str] = None
    price: Optional[InputAmount] = None
    desc: Optional[str] = None


class ProductResponse(BaseModel):
    id: int
    product_code: str
    name: str
    image: Optional[str] = None
    type: str
    price: Amount
    desc: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductDetailResponse(ProductResponse):
    ratings: List[RatingResponse] = []


class ProductRatingSummary(BaseModel):
    product_id: int
    product_name: str
    total_ratings: int
    average_rating: float
    ratings: List[RatingResponse] = []
