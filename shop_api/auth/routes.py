from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from ..core import config
from ..core.database import get_db
from ..core.auth import AuthUser, Role, authenticate_token
from ..core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError, error_boundary, require_fields
from ..core.responses import Envelope
from ..core.security import create_access_token, create_buyer_token, verify_password
from ..user.models import User
from ..user.schemas import UserCreate, UserResponse, REQUIRED_FIELDS, REQUIRED_MESSAGE
from ..user.crud import (
    get_user,
    get_user_by_identifier,
    find_conflicting_user,
    create_user,
    update_user,
    change_password as store_new_password
)
from ..buyer.models import Buyer
from ..buyer.schemas import BuyerResponse
from ..buyer.crud import get_buyer_by_phone, find_conflicting_buyer, register_buyer as create_registered_buyer, is_activation_code_expired
from .schemas import (
    LoginRequest,
    BuyerRegisterRequest,
    BuyerLoginRequest,
    ProfileUpdate,
    ChangePasswordRequest,
    UserAuthData,
    BuyerAuthData,
    BuyerRegisterData
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{config.API_PREFIX}/auth", tags=["Authentication"])


def issue_user_token(user: User) -> str:
    return create_access_token({"userId": user.id, "username": user.username, "role": user.role})


def issue_buyer_token(buyer: Buyer) -> str:
    return create_buyer_token({"buyerId": buyer.id, "username": buyer.username})


@router.post("/register", response_model=Envelope[UserAuthData], status_code=status.HTTP_201_CREATED)
async def register(payload: UserCreate, db: Session = Depends(get_db)):
    with error_boundary("Gagal melakukan registrasi", db):
        require_fields(payload, REQUIRED_FIELDS, REQUIRED_MESSAGE)

        role = payload.role or Role.USER.value
        if role not in {r.value for r in Role}:
            raise ValidationError("Role tidak valid. Gunakan: admin, user")

        if find_conflicting_user(db, email=payload.email, username=payload.username):
            raise ConflictError("Email atau username sudah terdaftar")

        data = payload.model_dump()
        data["role"] = role
        user = create_user(db, data)
        logger.info(f"User registered: {user.username} (ID: {user.id}, role: {user.role})")

        return {
            "status": True,
            "message": "Registrasi berhasil",
            "data": {"user": UserResponse.model_validate(user), "token": issue_user_token(user)}
        }


@router.post("/login", response_model=Envelope[UserAuthData])
async def login(payload: LoginRequest, db: Session = Depends(get_db)):
    with error_boundary("Gagal melakukan login"):
        if not payload.identifier or not payload.password:
            raise ValidationError("Email/username dan password wajib diisi")

        user = get_user_by_identifier(db, payload.identifier)
        # Same message whether the account or the password was wrong
        if not user or not verify_password(payload.password, user.password):
            logger.warning(f"Failed login for identifier: {payload.identifier}")
            raise AuthError("Email/username atau password salah")

        logger.info(f"User logged in: {user.username} (ID: {user.id})")
        return {
            "status": True,
            "message": "Login berhasil",
            "data": {"user": UserResponse.model_validate(user), "token": issue_user_token(user)}
        }


@router.post("/buyer/register", response_model=Envelope[BuyerRegisterData], status_code=status.HTTP_201_CREATED)
async def register_buyer(payload: BuyerRegisterRequest, db: Session = Depends(get_db)):
    with error_boundary("Gagal melakukan registrasi buyer", db):
        if not payload.phone or not payload.username:
            raise ValidationError("Phone dan username wajib diisi")

        if find_conflicting_buyer(db, phone=payload.phone, username=payload.username):
            raise ConflictError("Phone atau username sudah terdaftar")

        buyer = create_registered_buyer(db, payload.phone, payload.username)
        logger.info(f"Buyer registered: {buyer.username} (ID: {buyer.id})")

        return {
            "status": True,
            "message": "Registrasi buyer berhasil",
            "data": BuyerRegisterData(
                buyer=BuyerResponse.model_validate(buyer),
                token=issue_buyer_token(buyer),
                activation_code=buyer.activation_code
            )
        }


@router.post("/buyer/login", response_model=Envelope[BuyerAuthData])
async def login_buyer(payload: BuyerLoginRequest, db: Session = Depends(get_db)):
    """
    Log a buyer in with phone and activation code.

    The code stays usable until it expires; a successful login does not consume it.
    """
    with error_boundary("Gagal melakukan login buyer"):
        if not payload.phone or not payload.activation_code:
            raise ValidationError("Phone dan activation code wajib diisi")

        buyer = get_buyer_by_phone(db, payload.phone)
        if not buyer:
            raise AuthError("Phone tidak terdaftar")

        if buyer.activation_code != payload.activation_code:
            logger.warning(f"Wrong activation code for buyer {buyer.id}")
            raise AuthError("Activation code salah")

        if is_activation_code_expired(buyer):
            raise AuthError("Activation code sudah expired")

        logger.info(f"Buyer logged in: {buyer.username} (ID: {buyer.id})")
        return {
            "status": True,
            "message": "Login buyer berhasil",
            "data": {"buyer": BuyerResponse.model_validate(buyer), "token": issue_buyer_token(buyer)}
        }


@router.get("/profile", response_model=Envelope[UserResponse])
async def get_profile(current_user: AuthUser = Depends(authenticate_token), db: Session = Depends(get_db)):
    with error_boundary("Gagal mengambil profile"):
        user = get_user(db, current_user.id)
        if not user:
            raise NotFoundError("User tidak ditemukan")
        return {
            "status": True,
            "message": "Profile berhasil diambil",
            "data": UserResponse.model_validate(user)
        }


@router.put("/profile", response_model=Envelope[UserResponse])
async def update_profile(
    payload: ProfileUpdate,
    current_user: AuthUser = Depends(authenticate_token),
    db: Session = Depends(get_db)
):
    """Update the caller's own profile. Role and password are not editable here."""
    with error_boundary("Gagal mengupdate profile", db):
        user = get_user(db, current_user.id)
        if not user:
            raise NotFoundError("User tidak ditemukan")

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if find_conflicting_user(
            db,
            email=update_data.get("email"),
            username=update_data.get("username"),
            exclude_id=current_user.id
        ):
            raise ConflictError("Email atau username sudah digunakan")

        user = update_user(db, user, update_data)
        return {
            "status": True,
            "message": "Profile berhasil diupdate",
            "data": UserResponse.model_validate(user)
        }


@router.put("/change-password", response_model=Envelope)
async def change_password(
    payload: ChangePasswordRequest,
    current_user: AuthUser = Depends(authenticate_token),
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mengubah password", db):
        if not payload.current_password or not payload.new_password:
            raise ValidationError("Current password dan new password wajib diisi")

        user = get_user(db, current_user.id)
        if not user:
            raise NotFoundError("User tidak ditemukan")

        if not verify_password(payload.current_password, user.password):
            raise AuthError("Current password salah")

        store_new_password(db, user, payload.new_password)
        logger.info(f"Password changed for user {user.id}")
        return {"status": True, "message": "Password berhasil diubah", "data": None}
