from pydantic import BaseModel
from typing import Optional
from datetime import datetime

REQUIRED_FIELDS = ("name", "code", "expired_time", "quantity_max")
REQUIRED_MESSAGE = "Field wajib diisi (name, code, expired_time, quantity_max)"


class VoucherCreate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    expired_time: Optional[datetime] = None
    quantity_max: Optional[int] = None
    buyer_id: Optional[int] = None


class VoucherUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    expired_time: Optional[datetime] = None
    quantity_used: Optional[int] = None
    quantity_max: Optional[int] = None
    buyer_id: Optional[int] = None


class VoucherResponse(BaseModel):
    id: int
    name: str
    code: str
    expired_time: datetime
    quantity_used: int
    quantity_max: int
    buyer_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
