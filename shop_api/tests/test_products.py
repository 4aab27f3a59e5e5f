from decimal import Decimal

from ..product import routes as product_routes
from ..product.models import Product


def test_create_product_and_duplicate_code(client, admin_headers):
    payload = {"product_code": "P1", "name": "Book", "type": "book", "price": 10}

    response = client.post("/api/products", json=payload, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["product_code"] == "P1"
    assert data["price"] == 10

    response = client.post("/api/products", json=payload, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Kode produk sudah digunakan"


def test_create_product_requires_fields(client, admin_headers):
    response = client.post("/api/products", json={"product_code": "P9"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Field wajib diisi (product_code, name, type, price)"


def test_create_product_is_admin_only(client, user_headers):
    payload = {"product_code": "P1", "name": "Book", "type": "book", "price": 10}
    assert client.post("/api/products", json=payload).status_code == 401
    assert client.post("/api/products", json=payload, headers=user_headers).status_code == 403


def test_list_products_pagination(client, db_session):
    for i in range(12):
        db_session.add(Product(product_code=f"C{i:02d}", name=f"Item {i}", type="food", price=Decimal("5.00")))
    db_session.commit()

    response = client.get("/api/products?page=2&limit=5")
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"total_data": 12, "total_page": 3, "page": 2, "limit": 5}
    assert len(body["data"]) == 5


def test_list_products_search_and_type(client, db_session):
    db_session.add_all([
        Product(product_code="A1", name="Nasi Goreng", type="food", price=Decimal("15000")),
        Product(product_code="A2", name="Es Teh", type="drink", price=Decimal("5000")),
        Product(product_code="A3", name="Mie Goreng", type="food", price=Decimal("12000"), desc="pedas"),
    ])
    db_session.commit()

    body = client.get("/api/products?search=goreng").json()
    assert {p["product_code"] for p in body["data"]} == {"A1", "A3"}

    body = client.get("/api/products?type=drink").json()
    assert [p["product_code"] for p in body["data"]] == ["A2"]

    body = client.get("/api/products?search=pedas").json()
    assert [p["product_code"] for p in body["data"]] == ["A3"]


def test_get_product_by_id_and_code(client, product):
    response = client.get(f"/api/products/{product['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["ratings"] == []

    response = client.get("/api/products/code/P1")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == product["id"]

    response = client.get("/api/products/999")
    assert response.status_code == 404
    assert response.json()["message"] == "Produk tidak ditemukan"


def test_update_product(client, admin_headers, product):
    other = client.post(
        "/api/products",
        json={"product_code": "P2", "name": "Pen", "type": "stationery", "price": 3},
        headers=admin_headers
    ).json()["data"]

    response = client.put(f"/api/products/{other['id']}", json={"product_code": "P1"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Kode produk sudah digunakan produk lain"

    response = client.put(f"/api/products/{other['id']}", json={"price": "4.50"}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["price"] == 4.50
    assert data["name"] == "Pen"

    response = client.put("/api/products/999", json={"name": "x"}, headers=admin_headers)
    assert response.status_code == 404


def test_delete_product(client, admin_headers, product):
    response = client.delete(f"/api/products/{product['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f"/api/products/{product['id']}").status_code == 404


def test_delete_product_in_use_is_rejected(client, admin_headers, order):
    product_id = order["detail_orders"][0]["product_id"]
    response = client.delete(f"/api/products/{product_id}", headers=admin_headers)
    assert response.status_code == 400


def test_product_rating_summary_without_ratings(client, product):
    response = client.get(f"/api/products/{product['id']}/rating")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data == {
        "product_id": product["id"],
        "product_name": "Book",
        "total_ratings": 0,
        "average_rating": 0,
        "ratings": []
    }


def test_invalid_query_type_is_400(client):
    response = client.get("/api/products?page=abc")
    assert response.status_code == 400
    assert response.json()["message"] == "Data tidak valid"


def test_unique_constraint_reported_as_conflict(client, admin_headers, product, monkeypatch, db_session):
    """A duplicate that slips past the lookup is still a 400, and the session stays usable"""
    monkeypatch.setattr(product_routes, "find_conflicting_product", lambda *args, **kwargs: None)

    response = client.post("/api/products", json={
        "product_code": "P1", "name": "Copy", "type": "book", "price": 12
    }, headers=admin_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["status"] is False
    assert body["message"] == "Data sudah terdaftar"
    assert "error" in body

    response = client.post("/api/products", json={
        "product_code": "P2", "name": "Pen", "type": "stationery", "price": 3
    }, headers=admin_headers)
    assert response.status_code == 201
    assert db_session.query(Product).count() == 2
