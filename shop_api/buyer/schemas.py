from pydantic import BaseModel
from typing import Optional
from datetime import datetime

REQUIRED_FIELDS = ("phone", "username", "activation_code", "expired")
REQUIRED_MESSAGE = "Semua field wajib diisi (phone, username, activation_code, expired)"


class BuyerCreate(BaseModel):
    phone: Optional[str] = None
    username: Optional[str] = None
    activation_code: Optional[str] = None
    expired: Optional[datetime] = None


class BuyerUpdate(BaseModel):
    phone: Optional[str] = None
    username: Optional[str] = None
    activation_code: Optional[str] = None
    expired: Optional[datetime] = None


class BuyerResponse(BaseModel):
    # activation_code and expired are credentials and never leave the server
    id: int
    phone: str
    username: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BuyerSummary(BaseModel):
    id: int
    username: str
    phone: str

    class Config:
        from_attributes = True
