"""
HTTP API tests through FastAPI's TestClient.
"""
import pytest


@pytest.fixture
def seeded_client(client, seed_file):
    response = client.post("/api/seed")
    assert response.status_code == 200
    return client


def test_root(client):
    assert client.get("/").json()["status"] == "online"


def test_suggestions_endpoint(client):
    response = client.get("/api/suggestions", params={"price": 2000})
    assert response.status_code == 200
    body = response.json()
    assert body["bracket"] == "PREMIUM"
    assert body["suggestions"] == [2150, 2190, 2200]
    assert body["raw_price"] == pytest.approx(2120)


@pytest.mark.parametrize("price", ["0", "-3", "nan", "inf"])
def test_suggestions_endpoint_rejects_invalid_price(client, price):
    response = client.get("/api/suggestions", params={"price": price})
    assert response.status_code == 422


def test_suggestions_endpoint_requires_price(client):
    assert client.get("/api/suggestions").status_code == 422


def test_seed_endpoint(client, seed_file):
    response = client.post("/api/seed")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["inserted"] == 5
    assert body["skipped"] == 4


def test_seed_endpoint_without_file(client):
    response = client.post("/api/seed")
    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "Seed failed"


def test_list_products(seeded_client):
    response = seeded_client.get("/api/products", params={"limit": 2})
    assert response.status_code == 200
    body = response.json()
    assert [p["sku"] for p in body["data"]] == ["A-101", "A-100"]
    assert body["meta"] == {"total": 5, "page": 1, "limit": 2}


def test_list_products_search(seeded_client):
    response = seeded_client.get("/api/products", params={"q": "кружка", "status": "all"})
    assert [p["sku"] for p in response.json()["data"]] == ["B-200"]


def test_list_products_unknown_status(seeded_client):
    assert seeded_client.get("/api/products", params={"status": "archived"}).status_code == 422


def test_list_products_rejects_page_zero(seeded_client):
    assert seeded_client.get("/api/products", params={"page": 0}).status_code == 422


def test_product_suggestions(seeded_client):
    response = seeded_client.get("/api/products/B-200/suggestions")
    assert response.status_code == 200
    assert response.json()["suggestions"] == [110, 150]


def test_product_suggestions_unknown_sku(seeded_client):
    assert seeded_client.get("/api/products/NOPE/suggestions").status_code == 404


def test_approve_then_reset(seeded_client):
    response = seeded_client.patch("/api/products/B-200", json={"new_price": 110, "status": "approved"})
    assert response.status_code == 200
    product = response.json()["product"]
    assert product["status"] == "approved"
    assert product["new_price"] == 110

    approved = seeded_client.get("/api/products", params={"status": "approved"}).json()
    assert [p["sku"] for p in approved["data"]] == ["B-200"]

    response = seeded_client.patch("/api/products/B-200", json={"new_price": None, "status": "pending"})
    product = response.json()["product"]
    assert product["status"] == "pending"
    assert product["new_price"] is None


def test_patch_only_touches_given_fields(seeded_client):
    seeded_client.patch("/api/products/C-300", json={"new_price": 45, "status": "approved"})
    response = seeded_client.patch("/api/products/C-300", json={"manual_flag": True})
    product = response.json()["product"]
    assert product["manual_flag"] is True
    assert product["new_price"] == 45
    assert product["status"] == "approved"


def test_patch_unknown_sku(seeded_client):
    response = seeded_client.patch("/api/products/NOPE", json={"status": "deferred"})
    assert response.status_code == 404


@pytest.mark.parametrize("body", [{"status": "archived"}, {"new_price": -1}, {"new_price": 0}])
def test_patch_validation(seeded_client, body):
    assert seeded_client.patch("/api/products/C-300", json=body).status_code == 422


def test_export_flow(seeded_client):
    assert seeded_client.post("/api/batches/create").status_code == 400

    seeded_client.patch("/api/products/A-100", json={"new_price": 1290, "status": "approved"})
    response = seeded_client.post("/api/batches/create")
    assert response.status_code == 200
    batch = response.json()
    assert batch["count"] == 1

    download = seeded_client.get(batch["download_url"])
    assert download.status_code == 200
    assert download.content[:2] == b"PK"

    history = seeded_client.get("/api/batches").json()
    assert [b["name"] for b in history] == [batch["filename"]]

    exported = seeded_client.get("/api/products", params={"status": "exported"}).json()
    assert exported["data"][0]["batch_id"] == batch["batch_id"]


def test_download_missing_file(client):
    assert client.get("/api/download/batch_1.xlsx").status_code == 404


def test_backup_endpoint(client):
    response = client.post("/api/backup")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["filename"].startswith("backup_user_request_")


def test_system_status(seeded_client):
    seeded_client.patch("/api/products/A-100", json={"status": "deferred"})
    body = seeded_client.get("/system/status").json()
    assert body["markup"] == 1.06
    assert body["products"]["deferred"] == 1
    assert body["products"]["pending"] == 4
    assert body["backups"] == 1
