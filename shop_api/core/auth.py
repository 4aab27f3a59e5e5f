from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Iterable, Optional, Union
from enum import Enum
import logging

from .database import get_db
from .exceptions import AuthError, ForbiddenError
from .security import decode_access_token, TokenExpiredError, TokenError
from ..user.models import User
from ..buyer.models import Buyer

# Tokens are read from "Authorization: Bearer <token>"; a missing header is
# reported by authenticate_token itself so the message stays consistent
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)

logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class AuthUser(BaseModel):
    id: int
    username: str
    email: str
    role: Role


class AuthBuyer(BaseModel):
    id: int
    username: str
    phone: str


def _decode_claims(token: Optional[str]) -> dict:
    if not token:
        raise AuthError("Access token diperlukan")
    try:
        return decode_access_token(token)
    except TokenExpiredError:
        raise AuthError("Token sudah expired")
    except TokenError:
        raise ForbiddenError("Token tidak valid")


async def authenticate_token(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> AuthUser:
    """
    Resolve the calling user from a bearer token.

    The user row is re-read on every request, so a deleted account or a changed
    role takes effect even while an old token is still unexpired.

    Raises:
        AuthError: No token (401) or an expired token (401)
        ForbiddenError: Invalid token or the user no longer exists (403)
    """
    payload = _decode_claims(token)

    user_id = payload.get("userId")
    if user_id is None:
        raise ForbiddenError("Token tidak valid")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or user.role not in {role.value for role in Role}:
        logger.warning(f"Token refers to missing user {user_id}")
        raise ForbiddenError("Token tidak valid atau user tidak ditemukan")

    current_user = AuthUser(id=user.id, username=user.username, email=user.email, role=user.role)
    request.state.user = current_user
    return current_user


async def authenticate_buyer(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> AuthBuyer:
    payload = _decode_claims(token)

    buyer_id = payload.get("buyerId")
    if buyer_id is None:
        raise ForbiddenError("Token tidak valid")

    buyer = db.query(Buyer).filter(Buyer.id == buyer_id).first()
    if buyer is None:
        logger.warning(f"Token refers to missing buyer {buyer_id}")
        raise ForbiddenError("Token tidak valid atau buyer tidak ditemukan")

    current_buyer = AuthBuyer(id=buyer.id, username=buyer.username, phone=buyer.phone)
    request.state.buyer = current_buyer
    return current_buyer


def ensure_role(current_user: Optional[AuthUser], roles: Iterable[Role]) -> AuthUser:
    if current_user is None:
        raise AuthError("User tidak terautentikasi")
    if current_user.role not in roles:
        logger.warning(
            f"User {current_user.id} ({current_user.username}) with role {current_user.role.value} "
            f"denied, requires one of {[role.value for role in roles]}"
        )
        raise ForbiddenError("Anda tidak memiliki akses untuk resource ini")
    return current_user


def ensure_ownership(current_user: Optional[AuthUser], resource_id: Union[str, int, None]) -> AuthUser:
    if current_user is None:
        raise AuthError("User tidak terautentikasi")
    if current_user.role == Role.ADMIN or resource_id is None:
        return current_user
    try:
        owner_id = int(resource_id)
    except (TypeError, ValueError):
        raise ForbiddenError("Anda hanya bisa mengakses data milik Anda sendiri")
    if owner_id != current_user.id:
        logger.warning(f"User {current_user.id} denied access to resource of user {owner_id}")
        raise ForbiddenError("Anda hanya bisa mengakses data milik Anda sendiri")
    return current_user


def authorize(*roles: Role):
    """
    Dependency factory that only lets the given roles through.

    Usage:
        @router.get("", dependencies=[Depends(authorize(Role.ADMIN))])
    """
    async def _authorize(current_user: AuthUser = Depends(authenticate_token)) -> AuthUser:
        return ensure_role(current_user, roles)

    return _authorize


def check_ownership(field: str = "id"):
    """
    Dependency factory restricting non-admin callers to the path id equal to
    their own user id. Admins bypass the check.
    """
    async def _check_ownership(
        request: Request,
        current_user: AuthUser = Depends(authenticate_token)
    ) -> AuthUser:
        resource_id = request.path_params.get(field) or request.path_params.get("user_id")
        return ensure_ownership(current_user, resource_id)

    return _check_ownership


require_admin = authorize(Role.ADMIN)
