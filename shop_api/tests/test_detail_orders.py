from ..order.models import DetailOrder


def test_detail_orders_require_token(client):
    assert client.get("/api/detail-orders").status_code == 401


def test_list_and_get_detail_orders(client, user_headers, order):
    response = client.get(f"/api/detail-orders?order_id={order['id']}", headers=user_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total_data"] == 1
    assert body["data"][0]["order"]["order_code"] == "O1"

    detail_id = body["data"][0]["id"]
    response = client.get(f"/api/detail-orders/{detail_id}", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["data"]["product"]["product_code"] == "P1"

    assert client.get("/api/detail-orders/999", headers=user_headers).status_code == 404


def test_create_detail_order(client, user_headers, order, product):
    response = client.post("/api/detail-orders", json={
        "order_id": order["id"],
        "product_id": product["id"],
        "price": "2.50",
        "quantity": 4
    }, headers=user_headers)
    assert response.status_code == 201
    assert response.json()["data"]["sub_total"] == 10


def test_create_detail_order_validation(client, user_headers, order, product):
    response = client.post("/api/detail-orders", json={"order_id": order["id"]}, headers=user_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Field wajib diisi (order_id, product_id, price, quantity)"

    response = client.post("/api/detail-orders", json={
        "order_id": 999, "product_id": product["id"], "price": 1, "quantity": 1
    }, headers=user_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Pesanan tidak ditemukan"

    response = client.post("/api/detail-orders", json={
        "order_id": order["id"], "product_id": 999, "price": 1, "quantity": 1
    }, headers=user_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Produk tidak ditemukan"


def test_update_detail_order_recomputes_sub_total(client, user_headers, order):
    detail_id = order["detail_orders"][0]["id"]

    response = client.put(f"/api/detail-orders/{detail_id}", json={"quantity": 5}, headers=user_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["sub_total"] == 50

    response = client.put(f"/api/detail-orders/{detail_id}", json={"price": "1.25"}, headers=user_headers)
    assert response.json()["data"]["sub_total"] == 6.25

    response = client.put(f"/api/detail-orders/{detail_id}", json={"product_id": 999}, headers=user_headers)
    assert response.status_code == 404


def test_update_detail_order_rejects_extra_decimals(client, user_headers, order, db_session):
    detail_id = order["detail_orders"][0]["id"]

    response = client.put(f"/api/detail-orders/{detail_id}", json={"price": "1.005"}, headers=user_headers)
    assert response.status_code == 400

    detail = db_session.query(DetailOrder).filter(DetailOrder.id == detail_id).first()
    assert detail.price == 10
    assert detail.sub_total == detail.price * detail.quantity


def test_delete_detail_order_is_admin_only(client, admin_headers, user_headers, order):
    detail_id = order["detail_orders"][0]["id"]
    assert client.delete(f"/api/detail-orders/{detail_id}", headers=user_headers).status_code == 403
    assert client.delete(f"/api/detail-orders/{detail_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/detail-orders/{detail_id}", headers=admin_headers).status_code == 404
