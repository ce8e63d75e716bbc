"""Tests for admin endpoints."""

from fastapi.testclient import TestClient

from mcnutrition.api.app import create_app
from tests.conftest import InMemoryMenuRepository

ADMIN = {"X-Admin-Token": "admin-token"}


def test_admin_requires_token(container) -> None:
    client = TestClient(create_app(container))

    missing = client.post("/admin/data", json={"ITEM": "Fries"})
    wrong = client.delete("/admin/data/1", headers={"X-Admin-Token": "nope"})

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert wrong.json() == {"success": False, "error": "Admin token required"}


def test_admin_menu_crud(container, menu_repository: InMemoryMenuRepository) -> None:
    client = TestClient(create_app(container))

    created = client.post(
        "/admin/data",
        json={"id": "client-id", "ITEM": "Fries", "CATEGORY": "SNACKSIDE", "CAL": "320"},
        headers=ADMIN,
    )
    assert created.status_code == 201
    record = created.json()
    assert record["id"] != "client-id"
    assert record["CAL"] == "320"

    updated = client.put(
        f"/admin/data/{record['id']}", json={"CAL": "340"}, headers=ADMIN
    )
    assert updated.json()["CAL"] == "340"
    assert updated.json()["ITEM"] == "Fries"

    deleted = client.delete(f"/admin/data/{record['id']}", headers=ADMIN)
    assert deleted.json()["ITEM"] == "Fries"
    assert menu_repository.items == []


def test_admin_rejects_record_without_name(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/admin/data", json={"CATEGORY": "SNACKSIDE"}, headers=ADMIN
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_admin_missing_record(container) -> None:
    client = TestClient(create_app(container))

    response = client.put("/admin/data/missing", json={"CAL": "1"}, headers=ADMIN)

    assert response.status_code == 404
    assert response.json()["error"] == "Menu item not found"


def test_admin_ui_page(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/admin/ui")

    assert response.status_code == 200
    assert "McNutrition Menu Admin" in response.text
