def test_book_crud(client, admin_headers):
    response = client.post("/api/books", json={
        "title": "Laskar Pelangi",
        "author": "Andrea Hirata",
        "publisher": "Bentang",
        "year": 2005
    }, headers=admin_headers)
    assert response.status_code == 201
    book_id = response.json()["data"]["id"]

    response = client.post("/api/books", json={"title": "Laskar Pelangi"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Buku sudah terdaftar"

    body = client.get("/api/books?search=laskar").json()
    assert body["pagination"]["total_data"] == 1

    response = client.put(f"/api/books/{book_id}", json={"year": 2006}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["year"] == 2006

    response = client.delete(f"/api/books/{book_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Laskar Pelangi"

    response = client.get(f"/api/books/{book_id}")
    assert response.status_code == 404
    assert response.json()["message"] == "Buku tidak ditemukan"


def test_book_title_unique_on_update(client, admin_headers):
    client.post("/api/books", json={"title": "A"}, headers=admin_headers)
    second = client.post("/api/books", json={"title": "B"}, headers=admin_headers).json()["data"]

    response = client.put(f"/api/books/{second['id']}", json={"title": "A"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Buku sudah ada"


def test_book_writes_are_admin_only(client, user_headers):
    assert client.post("/api/books", json={"title": "X"}, headers=user_headers).status_code == 403
