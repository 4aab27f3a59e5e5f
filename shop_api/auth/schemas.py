from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import date

from ..user.schemas import UserResponse
from ..buyer.schemas import BuyerResponse


class LoginRequest(BaseModel):
    # Email or username
    identifier: Optional[str] = None
    password: Optional[str] = None


class BuyerRegisterRequest(BaseModel):
    phone: Optional[str] = None
    username: Optional[str] = None


class BuyerLoginRequest(BaseModel):
    phone: Optional[str] = None
    activation_code: Optional[str] = Field(default=None, alias="activationCode")

    class Config:
        populate_by_name = True


class ProfileUpdate(BaseModel):
    email: Optional[EmailStr] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[date] = None
    address: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: Optional[str] = Field(default=None, alias="currentPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")

    class Config:
        populate_by_name = True


class UserAuthData(BaseModel):
    user: UserResponse
    token: str


class BuyerAuthData(BaseModel):
    buyer: BuyerResponse
    token: str


class BuyerRegisterData(BuyerAuthData):
    # Returned directly until SMS delivery exists
    activation_code: str = Field(alias="activationCode")

    class Config:
        populate_by_name = True
