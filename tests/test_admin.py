"""Tests for admin authentication."""

from fastapi.testclient import TestClient

from diet_coach.api.app import create_app
from diet_coach.containers import AppContainer


def test_admin_health_requires_token(container: AppContainer) -> None:
    app = create_app(container)
    client = TestClient(app)

    response = client.get("/admin/health")

    assert response.status_code == 401


def test_admin_health_rejects_wrong_token(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/admin/health", headers={"X-Admin-Token": "nope"})

    assert response.status_code == 401


def test_admin_health_accepts_valid_token(container: AppContainer) -> None:
    app = create_app(container)
    client = TestClient(app)

    response = client.get("/admin/health", headers={"X-Admin-Token": "admin-token"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
