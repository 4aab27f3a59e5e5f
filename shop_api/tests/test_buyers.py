from ..core.security import create_buyer_token
from .conftest import bearer


def test_create_buyer(client):
    payload = {
        "phone": "0821",
        "username": "tono",
        "activation_code": "123456",
        "expired": "2030-01-01T00:00:00Z"
    }
    response = client.post("/api/buyers", json=payload)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["username"] == "tono"
    assert "activation_code" not in data
    assert "expired" not in data

    response = client.post("/api/buyers", json=payload)
    assert response.status_code == 400

    response = client.post("/api/buyers", json={"phone": "0822"})
    assert response.status_code == 400
    assert response.json()["message"] == "Semua field wajib diisi (phone, username, activation_code, expired)"


def test_buyer_reads_only_itself(client, buyer_auth, buyer_headers):
    own_id = buyer_auth["buyer"]["id"]
    response = client.get(f"/api/buyers/{own_id}", headers=buyer_headers)
    assert response.status_code == 200
    assert response.json()["data"]["phone"] == "08111111111"

    response = client.get(f"/api/buyers/{own_id + 1}", headers=buyer_headers)
    assert response.status_code == 403


def test_buyer_routes_reject_user_tokens(client, buyer_auth, user_headers):
    response = client.get(f"/api/buyers/{buyer_auth['buyer']['id']}", headers=user_headers)
    assert response.status_code == 403


def test_missing_buyer_token_is_rejected(client):
    token = create_buyer_token({"buyerId": 12345, "username": "ghost"})
    response = client.get("/api/buyers/12345", headers=bearer(token))
    assert response.status_code == 403
    assert response.json()["message"] == "Token tidak valid atau buyer tidak ditemukan"


def test_update_buyer(client, buyer_auth, buyer_headers):
    own_id = buyer_auth["buyer"]["id"]
    response = client.put(f"/api/buyers/{own_id}", json={"username": "siti2"}, headers=buyer_headers)
    assert response.status_code == 200
    assert response.json()["data"]["username"] == "siti2"


def test_list_and_delete_buyers_admin(client, admin_headers, buyer_auth):
    response = client.get("/api/buyers?search=siti", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["pagination"]["total_data"] == 1

    buyer_id = buyer_auth["buyer"]["id"]
    assert client.delete(f"/api/buyers/{buyer_id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/buyers/{buyer_id}", headers=admin_headers).status_code == 404
