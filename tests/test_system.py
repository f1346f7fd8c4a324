from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from codecollab_backend.api import create_api
from codecollab_backend.settings import get_settings


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["environment"] == "test"
    assert data["allowedOrigins"] == 0
    assert "timestamp" in data


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    generated = client.get("/health")

    assert response.headers["X-Request-ID"] == "abc123"
    assert generated.headers["X-Request-ID"]


def test_cors_info_reports_configured_origins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLIENT_URL", "http://localhost:5173")
    monkeypatch.setenv("CLIENT_URL_2", "https://codecollab.example")
    get_settings.cache_clear()

    with TestClient(create_api()) as client:
        response = client.get(
            "/api/cors-info", headers={"Origin": "http://localhost:5173"}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["allowedOrigins"] == [
        "http://localhost:5173",
        "https://codecollab.example",
    ]
    assert data["requestOrigin"] == "http://localhost:5173"
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_unhandled_errors_are_wrapped(client: TestClient) -> None:
    app = client.app

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as failing:
        response = failing.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"detail": "Something went wrong!", "error": "kaboom"}


def test_failed_requests_are_access_logged(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    app = client.app

    @app.get("/explode")
    def explode() -> None:
        raise RuntimeError("kaboom")

    caplog.set_level("INFO", logger="codecollab_backend.api")
    with TestClient(app, raise_server_exceptions=False) as failing:
        failing.get("/explode")

    access = [
        record.getMessage()
        for record in caplog.records
        if record.name == "codecollab_backend.api" and "/explode" in record.getMessage()
    ]
    assert any(message.startswith("GET /explode 500 ") for message in access)
