from contextlib import contextmanager
from typing import Optional, Dict
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    """
    Base class for every error the API reports through the response envelope.

    Subclasses fix the HTTP status; `message` becomes the envelope message and
    the optional `error` is passed through to the caller as-is.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=self.status_code, detail=message, headers=headers)
        self.error = error


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message, error=error, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def require_fields(payload, fields, message: str):
    """Raise ValidationError when any of `fields` is absent, null or empty."""
    for field in fields:
        value = getattr(payload, field, None)
        if value is None or value == "" or value == []:
            raise ValidationError(message)


@contextmanager
def error_boundary(message: str, db: Optional[Session] = None):
    """
    Convert everything raised inside a handler body into the error taxonomy.

    Args:
        message: Envelope message used when an unexpected failure occurs
        db: Session to roll back on failure
    """
    try:
        yield
    except HTTPException:
        if db is not None:
            db.rollback()
        raise
    except IntegrityError as e:
        # Unique constraint hit after the existence pre-check passed
        if db is not None:
            db.rollback()
        logger.warning(f"Integrity error: {e.orig}")
        raise ConflictError("Data sudah terdaftar", error=str(e.orig))
    except Exception as e:
        if db is not None:
            db.rollback()
        logger.error(f"{message}: {str(e)}")
        raise InternalError(message, error=str(e))
