import os

# Must be set before the application modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["CACHE_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from ..main import app
from ..core.database import Base, SessionLocal, engine


@pytest.fixture
def client():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as test_client:
        yield test_client
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(client):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def register_user(client, username, role="user"):
    response = client.post("/api/auth/register", json={
        "email": f"{username}@mail.com",
        "username": username,
        "phone": "081234567890",
        "password": "secret123",
        "gender": "male",
        "dob": "1995-05-17",
        "role": role
    })
    assert response.status_code == 201, response.text
    return response.json()["data"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_auth(client):
    return register_user(client, "admin", role="admin")


@pytest.fixture
def user_auth(client):
    return register_user(client, "budi")


@pytest.fixture
def admin_headers(admin_auth):
    return bearer(admin_auth["token"])


@pytest.fixture
def user_headers(user_auth):
    return bearer(user_auth["token"])


@pytest.fixture
def buyer_auth(client):
    response = client.post("/api/auth/buyer/register", json={"phone": "08111111111", "username": "siti"})
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def buyer_headers(buyer_auth):
    return bearer(buyer_auth["token"])


@pytest.fixture
def product(client, admin_headers):
    response = client.post("/api/products", json={
        "product_code": "P1",
        "name": "Book",
        "type": "book",
        "price": 10
    }, headers=admin_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def order(client, user_headers, user_auth, buyer_auth, product):
    response = client.post("/api/orders", json={
        "order_code": "O1",
        "user_id": user_auth["user"]["id"],
        "buyer_id": buyer_auth["buyer"]["id"],
        "total": 20,
        "detail_orders": [{"product_id": product["id"], "price": 10, "quantity": 2}]
    }, headers=user_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
