# tests/test_api.py
from fastapi.testclient import TestClient

from stocktask.main import app

client = TestClient(app)


def reset():
    client.post("/reset")


def test_list_and_get():
    reset()
    r = client.get("/tasks")
    assert r.status_code == 200
    assert len(r.json()) == 4

    r = client.get("/products/8")
    assert r.status_code == 200
    assert r.json()["name"] == "Instant Coffee"


def test_product_query_params():
    reset()
    r = client.get("/products", params={"lowStock": "true", "sortBy": "price-asc"})
    assert [p["id"] for p in r.json()] == ["6", "11", "8", "2", "3"]

    r = client.get("/products", params={"sortBy": "latest", "page": 3, "limit": 6})
    assert [p["id"] for p in r.json()] == ["11"]


def test_missing_record_is_404():
    reset()
    r = client.get("/tasks/999")
    assert r.status_code == 404
    body = r.json()
    assert body["error"] == "not_found"
    assert body["resource"] == "tasks"
    assert body["id"] == "999"


def test_unknown_resource_is_reported():
    r = client.get("/widgets")
    assert r.status_code == 404
    assert r.json()["error"] == "unknown_endpoint"


def test_create_update_delete():
    reset()
    r = client.post("/tasks", json={"title": "Check fridge", "priority": "low"})
    assert r.status_code == 201
    task = r.json()
    assert task["status"] == "pending"

    r = client.put(f"/tasks/{task['id']}", json={"status": "in-progress"})
    assert r.status_code == 200
    assert r.json() == {**task, "status": "in-progress"}

    r = client.delete(f"/tasks/{task['id']}")
    assert r.json() == {"message": "Task deleted successfully"}
    assert client.get(f"/tasks/{task['id']}").status_code == 404


def test_empty_body_is_rejected():
    reset()
    r = client.post("/tasks", json={})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"
    assert len(client.get("/tasks").json()) == 4


def test_bad_query_param_is_422():
    r = client.get("/products", params={"page": "zero"})
    assert r.status_code == 422
    assert r.json()["field"] == "page"


def test_reset_restores_fixture():
    client.delete("/products/1")
    reset()
    assert client.get("/products/1").status_code == 200


def test_invalid_product_body_is_422_and_listing_survives():
    reset()
    r = client.post("/products", json={"price": 5})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"
    assert r.json()["field"] == "name"

    r = client.put("/products/2", json={"price": None})
    assert r.status_code == 422

    r = client.get("/products", params={"sortBy": "name"})
    assert r.status_code == 200
    assert len(r.json()) == 13
