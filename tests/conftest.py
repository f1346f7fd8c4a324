"""Test configuration and fixtures for the backend test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import count
from typing import Any

import pytest
from fastapi.testclient import TestClient

from codecollab_backend.api import create_api
from codecollab_backend.database import DatabaseService, get_database
from codecollab_backend.settings import get_settings

PASSWORD = "Password123"


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings are loaded with predictable values during tests."""
    monkeypatch.setenv("AUTH_SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("ENVIRONMENT", "test")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database() -> Iterator[DatabaseService]:
    db = DatabaseService("sqlite+pysqlite:///:memory:")
    db.create_all()
    yield db
    db.drop_all()
    db.engine.dispose()


@pytest.fixture
def client(database: DatabaseService) -> Iterator[TestClient]:
    app = create_api()
    app.dependency_overrides[get_database] = lambda: database
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Register a fresh user and return its payload plus auth headers."""
    sequence = count(1)

    def _register(name: str | None = None) -> dict[str, Any]:
        number = next(sequence)
        name = name or f"Member {number}"
        email = f"member{number}@example.com"
        response = client.post(
            "/api/users/register",
            json={"name": name, "email": email, "password": PASSWORD},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        token = data["token"]["accessToken"]
        return {
            "id": data["user"]["id"],
            "email": email,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _register


@pytest.fixture
def create_group(client: TestClient) -> Callable[..., dict[str, Any]]:
    def _create_group(owner: dict[str, Any], **overrides: Any) -> dict[str, Any]:
        payload = {"name": "Graph Grinders", "description": "Daily graph problems"}
        payload.update(overrides)
        response = client.post(
            "/api/groups/create", json=payload, headers=owner["headers"]
        )
        assert response.status_code == 201, response.text
        return response.json()["group"]

    return _create_group


@pytest.fixture
def join_group(client: TestClient) -> Callable[[dict[str, Any], dict[str, Any]], None]:
    def _join(member: dict[str, Any], group: dict[str, Any]) -> None:
        response = client.post(
            "/api/groups/join",
            json={"inviteCode": group["inviteCode"]},
            headers=member["headers"],
        )
        assert response.status_code == 200, response.text

    return _join


@pytest.fixture
def create_question(client: TestClient) -> Callable[..., dict[str, Any]]:
    sequence = count(1)

    def _create_question(
        author: dict[str, Any], group: dict[str, Any], **overrides: Any
    ) -> dict[str, Any]:
        number = next(sequence)
        payload = {
            "title": f"Two Sum {number}",
            "description": "Find two numbers adding up to a target",
            "sourceUrl": f"https://leetcode.com/problems/two-sum-{number}/",
            "difficulty": "Easy",
            "category": "Arrays",
            "tags": ["hash-map"],
            "platform": "LeetCode",
            "groupId": group["id"],
        }
        payload.update(overrides)
        response = client.post(
            "/api/questions/create", json=payload, headers=author["headers"]
        )
        assert response.status_code == 201, response.text
        return response.json()["question"]

    return _create_question
