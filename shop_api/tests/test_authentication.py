import pytest
from datetime import timedelta

from ..core.auth import AuthUser, Role, ensure_role, ensure_ownership
from ..core.exceptions import AuthError, ForbiddenError
from ..core.security import create_access_token
from .conftest import bearer


def make_user(role=Role.USER, user_id=5):
    return AuthUser(id=user_id, username="budi", email="budi@mail.com", role=role)


def test_ensure_role_requires_identity():
    with pytest.raises(AuthError) as exc_info:
        ensure_role(None, (Role.ADMIN,))
    assert exc_info.value.status_code == 401


def test_ensure_role_rejects_other_roles():
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_role(make_user(), (Role.ADMIN,))
    assert exc_info.value.status_code == 403
    assert ensure_role(make_user(Role.ADMIN), (Role.ADMIN,)).role == Role.ADMIN


def test_ensure_ownership_admin_bypasses():
    admin = make_user(Role.ADMIN, user_id=1)
    assert ensure_ownership(admin, "99") is admin


def test_ensure_ownership_matches_numeric_id():
    user = make_user(user_id=5)
    assert ensure_ownership(user, "5") is user
    assert ensure_ownership(user, 5) is user
    with pytest.raises(ForbiddenError):
        ensure_ownership(user, "6")
    with pytest.raises(ForbiddenError):
        ensure_ownership(user, "abc")


def test_missing_token_is_401(client):
    response = client.get("/api/auth/profile")
    assert response.status_code == 401
    body = response.json()
    assert body["status"] is False
    assert body["message"] == "Access token diperlukan"
    assert body["data"] is None


def test_expired_token_is_401(client, user_auth):
    token = create_access_token(
        {"userId": user_auth["user"]["id"], "username": "budi", "role": "user"},
        expires_delta=timedelta(seconds=-5)
    )
    response = client.get("/api/auth/profile", headers=bearer(token))
    assert response.status_code == 401
    assert response.json()["message"] == "Token sudah expired"


def test_invalid_token_is_403(client):
    response = client.get("/api/auth/profile", headers=bearer("not-a-jwt"))
    assert response.status_code == 403
    assert response.json()["message"] == "Token tidak valid"


def test_buyer_token_is_not_a_user_token(client, buyer_headers):
    response = client.get("/api/auth/profile", headers=buyer_headers)
    assert response.status_code == 403


def test_deleted_user_is_locked_out(client, admin_headers, user_auth, user_headers):
    user_id = user_auth["user"]["id"]
    response = client.delete(f"/api/users-new/{user_id}", headers=admin_headers)
    assert response.status_code == 200

    response = client.get("/api/auth/profile", headers=user_headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Token tidak valid atau user tidak ditemukan"


def test_authorize_blocks_non_admin(client, user_headers):
    response = client.get("/api/users-new", headers=user_headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Anda tidak memiliki akses untuk resource ini"
