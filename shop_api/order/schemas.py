from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from ..core.responses import Amount, InputAmount
from ..user.schemas import UserSummary
from ..buyer.schemas import BuyerSummary
from ..product.schemas import ProductResponse
from ..rating.schemas import RatingResponse

ORDER_REQUIRED_FIELDS = ("order_code", "total", "detail_orders")
ORDER_REQUIRED_MESSAGE = "Field wajib diisi (order_code, total, detail_orders)"
ITEM_REQUIRED_FIELDS = ("product_id", "price", "quantity")
ITEM_REQUIRED_MESSAGE = "Detail pesanan harus memiliki product_id, price, dan quantity"
DETAIL_REQUIRED_FIELDS = ("order_id", "product_id", "price", "quantity")
DETAIL_REQUIRED_MESSAGE = "Field wajib diisi (order_id, product_id, price, quantity)"


class DetailOrderItem(BaseModel):
    product_id: Optional[int] = None
    price: Optional[InputAmount] = None
    quantity: Optional[InputAmount] = None


class OrderCreate(BaseModel):
    order_code: Optional[str] = None
    user_id: Optional[int] = None
    buyer_id: Optional[int] = None
    total: Optional[InputAmount] = None
    desc: Optional[str] = None
    discount: Optional[InputAmount] = None
    detail_orders: Optional[List[DetailOrderItem]] = None


class OrderUpdate(BaseModel):
    order_code: Optional[str] = None
    user_id: Optional[int] = None
    buyer_id: Optional[int] = None
    total: Optional[InputAmount] = None
    desc: Optional[str] = None
    discount: Optional[InputAmount] = None


class DetailOrderCreate(BaseModel):
    order_id: Optional[int] = None
    product_id: Optional[int] = None
    price: Optional[InputAmount] = None
    quantity: Optional[InputAmount] = None


class DetailOrderUpdate(BaseModel):
    order_id: Optional[int] = None
    product_id: Optional[int] = None
    price: Optional[InputAmount] = None
    quantity: Optional[InputAmount] = None


class DetailOrderResponse(BaseModel):
    id: int
    order_id: int
    product_id: int
    price: Amount
    quantity: Amount
    sub_total: Amount
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product: Optional[ProductResponse] = None

    class Config:
        from_attributes = True


class OrderBrief(BaseModel):
    id: int
    order_code: str
    user_id: Optional[int] = None
    buyer_id: Optional[int] = None
    total: Amount
    discount: Amount
    user: Optional[UserSummary] = None
    buyer: Optional[BuyerSummary] = None

    class Config:
        from_attributes = True


class DetailOrderWithOrderResponse(DetailOrderResponse):
    order: Optional[OrderBrief] = None


class OrderResponse(BaseModel):
    id: int
    order_code: str
    user_id: Optional[int] = None
    buyer_id: Optional[int] = None
    total: Amount
    desc: Optional[str] = None
    discount: Amount
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None
    buyer: Optional[BuyerSummary] = None
    detail_orders: List[DetailOrderResponse] = []
    ratings: List[RatingResponse] = []

    class Config:
        from_attributes = True
