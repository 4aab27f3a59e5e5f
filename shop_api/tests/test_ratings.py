import pytest


@pytest.fixture
def rating_payload(order, product, buyer_auth):
    return {
        "order_id": order["id"],
        "product_id": product["id"],
        "buyer_id": buyer_auth["buyer"]["id"],
        "rating": 4
    }


def test_create_rating_once_per_triple(client, user_headers, rating_payload):
    response = client.post("/api/ratings", json=rating_payload, headers=user_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["rating"] == 4
    assert data["buyer"]["username"] == "siti"

    response = client.post("/api/ratings", json=dict(rating_payload, rating=5), headers=user_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Rating sudah ada untuk pesanan, produk, dan pembeli ini"


def test_rating_range(client, user_headers, rating_payload):
    for score in (0, 5.5, -1):
        response = client.post("/api/ratings", json=dict(rating_payload, rating=score), headers=user_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Rating harus antara 1-5"


def test_rating_references_must_exist(client, user_headers, rating_payload):
    response = client.post("/api/ratings", json=dict(rating_payload, order_id=999), headers=user_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Pesanan tidak ditemukan"

    response = client.post("/api/ratings", json=dict(rating_payload, buyer_id=999), headers=user_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Pembeli tidak ditemukan"


def test_rating_requires_fields(client, user_headers):
    response = client.post("/api/ratings", json={"rating": 3}, headers=user_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Field wajib diisi (order_id, product_id, buyer_id, rating)"


def test_ratings_by_product_and_summary(client, user_headers, rating_payload, product):
    client.post("/api/ratings", json=rating_payload, headers=user_headers)

    response = client.get(f"/api/ratings/product/{product['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["data"]["average_rating"] == 4
    assert body["data"]["total_ratings"] == 1
    assert body["pagination"]["total_data"] == 1

    summary = client.get(f"/api/products/{product['id']}/rating").json()["data"]
    assert summary["total_ratings"] == 1
    assert summary["average_rating"] == 4


def test_update_and_delete_rating(client, admin_headers, user_headers, rating_payload):
    rating_id = client.post("/api/ratings", json=rating_payload, headers=user_headers).json()["data"]["id"]

    response = client.put(f"/api/ratings/{rating_id}", json={"rating": 6}, headers=user_headers)
    assert response.status_code == 400

    response = client.put(f"/api/ratings/{rating_id}", json={"rating": 2}, headers=user_headers)
    assert response.status_code == 200
    assert response.json()["data"]["rating"] == 2

    assert client.get("/api/ratings", headers=user_headers).status_code == 403
    listing = client.get("/api/ratings", headers=admin_headers).json()
    assert listing["pagination"]["total_data"] == 1

    assert client.delete(f"/api/ratings/{rating_id}", headers=user_headers).status_code == 200
    assert client.get(f"/api/ratings/{rating_id}", headers=user_headers).status_code == 404
