from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core import config
from ..core.database import get_db
from ..core.auth import AuthUser, Role, check_ownership, require_admin
from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError, error_boundary, require_fields
from ..core.responses import Envelope, PaginatedEnvelope, paginate
from .schemas import UserCreate, UserUpdate, UserResponse, REQUIRED_FIELDS, REQUIRED_MESSAGE
from .crud import get_user, find_conflicting_user, search_users, create_user, update_user, delete_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{config.API_PREFIX}/users-new", tags=["Users"])


@router.get("", response_model=PaginatedEnvelope[UserResponse], dependencies=[Depends(require_admin)])
async def get_all_users(
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mendapatkan data pengguna"):
        users, pagination = paginate(search_users(db, search), page, limit)
        return {
            "status": True,
            "message": "Data pengguna berhasil ditampilkan",
            "data": [UserResponse.model_validate(user) for user in users],
            "pagination": pagination
        }


@router.get("/{user_id}", response_model=Envelope[UserResponse], dependencies=[Depends(check_ownership("user_id"))])
async def get_user_by_id(user_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal mendapatkan data pengguna"):
        user = get_user(db, user_id)
        if not user:
            raise NotFoundError("Pengguna tidak ditemukan")
        return {
            "status": True,
            "message": "Berhasil mendapatkan data pengguna",
            "data": UserResponse.model_validate(user)
        }


@router.post("", response_model=Envelope[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_new_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Public sign-up without a token; the account always gets the user role."""
    with error_boundary("Gagal membuat pengguna", db):
        require_fields(payload, REQUIRED_FIELDS, REQUIRED_MESSAGE)

        if find_conflicting_user(db, email=payload.email, username=payload.username):
            raise ConflictError("Email atau username sudah terdaftar")

        data = payload.model_dump(exclude={"role"})
        data["role"] = Role.USER.value
        user = create_user(db, data)
        logger.info(f"User created: {user.username} (ID: {user.id})")
        return {
            "status": True,
            "message": "Pengguna berhasil dibuat",
            "data": UserResponse.model_validate(user)
        }


@router.put("/{user_id}", response_model=Envelope[UserResponse])
async def update_existing_user(
    user_id: int,
    payload: UserUpdate,
    current_user: AuthUser = Depends(check_ownership("user_id")),
    db: Session = Depends(get_db)
):
    with error_boundary("Gagal mengupdate pengguna", db):
        user = get_user(db, user_id)
        if not user:
            raise NotFoundError("Pengguna tidak ditemukan")

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)

        if "role" in update_data:
            if current_user.role != Role.ADMIN:
                raise ForbiddenError("Hanya admin yang dapat mengubah role")
            if update_data["role"] not in {role.value for role in Role}:
                raise ValidationError("Role tidak valid. Gunakan: admin, user")

        if find_conflicting_user(
            db,
            email=update_data.get("email"),
            username=update_data.get("username"),
            exclude_id=user_id
        ):
            raise ConflictError("Email atau username sudah digunakan pengguna lain")

        user = update_user(db, user, update_data)
        return {
            "status": True,
            "message": "Pengguna berhasil diupdate",
            "data": UserResponse.model_validate(user)
        }


@router.delete("/{user_id}", response_model=Envelope, dependencies=[Depends(require_admin)])
async def delete_existing_user(user_id: int, db: Session = Depends(get_db)):
    with error_boundary("Gagal menghapus pengguna", db):
        user = get_user(db, user_id)
        if not user:
            raise NotFoundError("Pengguna tidak ditemukan")

        delete_user(db, user)
        logger.info(f"User deleted: ID {user_id}")
        return {"status": True, "message": "Pengguna berhasil dihapus", "data": None}
