from __future__ import annotations

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from apps.batch_api import main as batch_api_main
from password_hash_batch.application.services.batch_hash_service import BatchHashService
from password_hash_batch.config.settings import load_settings
from password_hash_batch.infrastructure.security.password_hasher import BcryptPasswordHasher


def _client() -> TestClient:
    service = BatchHashService(password_hasher=BcryptPasswordHasher())
    return TestClient(batch_api_main.create_app(batch_service=service))


def test_execute_route_is_registered() -> None:
    app = batch_api_main.create_app(
        batch_service=BatchHashService(password_hasher=BcryptPasswordHasher())
    )

    routes = {
        (route.path, method)
        for route in app.routes
        if isinstance(route, APIRoute)
        for method in route.methods
    }

    assert ("/password-hash/execute", "POST") in routes


def test_hash_then_verify_round_trip_over_http() -> None:
    client = _client()

    hash_response = client.post(
        "/password-hash/execute",
        json={"items": [{"operation": "hash", "password": "abc123", "saltRounds": 4}]},
    )
    assert hash_response.status_code == 200
    [hash_item] = hash_response.json()["items"]
    assert set(hash_item) == {"hash"}

    verify_response = client.post(
        "/password-hash/execute",
        json={
            "items": [
                {"operation": "verify", "password": "abc123", "hash": hash_item["hash"]},
                {"operation": "verify", "password": "wrong", "hash": hash_item["hash"]},
            ]
        },
    )
    assert verify_response.status_code == 200
    assert verify_response.json() == {"items": [{"match": True}, {"match": False}]}


def test_continue_on_fail_returns_error_records_in_place() -> None:
    client = _client()

    response = client.post(
        "/password-hash/execute",
        json={
            "continueOnFail": True,
            "items": [
                {"operation": "hash", "password": "x", "saltRounds": 99},
                {"operation": "verify", "password": "x", "hash": "$2b$10$short"},
                "not-an-object",
                {"operation": "hash", "password": "x", "saltRounds": 4},
            ],
        },
    )

    assert response.status_code == 200
    items = response.json()["items"]
    assert len(items) == 4
    assert items[0] == {"error": "saltRounds: Input should be less than or equal to 20"}
    assert items[1] == {"error": "Invalid bcrypt hash format"}
    assert items[2] == {"error": "item must be an object, got str"}
    assert set(items[3]) == {"hash"}


def test_batch_abort_returns_422_with_failing_index() -> None:
    client = _client()

    response = client.post(
        "/password-hash/execute",
        json={
            "items": [
                {"operation": "hash", "password": "x", "saltRounds": 4},
                {"operation": "hash", "password": "x", "saltRounds": 0},
            ],
        },
    )

    assert response.status_code == 422
    assert response.json() == {
        "detail": {
            "message": "saltRounds: Input should be greater than or equal to 1",
            "itemIndex": 1,
        }
    }


def test_empty_items_returns_empty_output() -> None:
    client = _client()

    response = client.post("/password-hash/execute", json={"items": []})

    assert response.status_code == 200
    assert response.json() == {"items": []}


def test_malformed_envelope_returns_400() -> None:
    client = _client()

    response = client.post("/password-hash/execute", json={"records": []})

    assert response.status_code == 400


def test_create_app_builds_service_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEFAULT_SALT_ROUNDS", "4")
    monkeypatch.setenv("BATCH_MAX_CONCURRENCY", "2")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    load_settings.cache_clear()
    try:
        client = TestClient(batch_api_main.create_app())
        response = client.post("/password-hash/execute", json={"items": [{"password": "x"}]})
    finally:
        load_settings.cache_clear()

    assert response.status_code == 200
    [item] = response.json()["items"]
    assert item["hash"].startswith("$2b$04$")


def test_run_asgi_server_uses_factory_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, dict[str, object]]] = []

    def _fake_run(app: str, **kwargs: object) -> None:
        calls.append((app, kwargs))

    monkeypatch.setattr(batch_api_main.uvicorn, "run", _fake_run)

    batch_api_main.run_asgi_server(host="127.0.0.1", port=9000)

    assert calls == [
        (
            "apps.batch_api.main:create_app",
            {"host": "127.0.0.1", "port": 9000, "factory": True},
        )
    ]
