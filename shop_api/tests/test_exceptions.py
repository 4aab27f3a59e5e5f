import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import IntegrityError

from ..core.exceptions import ConflictError, InternalError, NotFoundError, error_boundary


def test_integrity_error_becomes_conflict():
    db = MagicMock()
    with pytest.raises(ConflictError) as exc_info:
        with error_boundary("Gagal membuat produk", db):
            raise IntegrityError("INSERT INTO products", {}, Exception("UNIQUE constraint failed: products.product_code"))

    db.rollback.assert_called_once()
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Data sudah terdaftar"
    assert "UNIQUE constraint failed" in exc_info.value.error


def test_app_errors_pass_through_after_rollback():
    db = MagicMock()
    with pytest.raises(NotFoundError):
        with error_boundary("Gagal mengupdate produk", db):
            raise NotFoundError("Produk tidak ditemukan")
    db.rollback.assert_called_once()


def test_unexpected_error_becomes_internal():
    with pytest.raises(InternalError) as exc_info:
        with error_boundary("Gagal mendapatkan data produk"):
            raise RuntimeError("connection lost")

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Gagal mendapatkan data produk"
    assert exc_info.value.error == "connection lost"
