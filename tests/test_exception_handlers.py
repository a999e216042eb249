"""Tests for global exception handlers.

Every error kind maps to its HTTP status with the same JSON envelope, and
unexpected exceptions never leak internals.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from bind8.core.errors import (
    AppError,
    AuthenticationAppError,
    AuthorizationAppError,
    ConfigurationAppError,
    ConflictAppError,
    NotFoundAppError,
    RateLimitAppError,
    ValidationAppError,
)
from bind8.core.exception_handlers import general_exception_handler, setup_exception_handlers, status_for


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


@pytest.mark.parametrize(
    "error_cls, expected_status",
    [
        (ValidationAppError, 400),
        (AuthenticationAppError, 401),
        (AuthorizationAppError, 403),
        (NotFoundAppError, 404),
        (ConflictAppError, 409),
        (ConfigurationAppError, 500),
    ],
)
def test_error_kind_maps_to_status(client, app_with_handlers, error_cls, expected_status) -> None:
    @app_with_handlers.get("/boom")
    async def boom():
        raise error_cls(code="some_code", message="Something happened")

    response = client.get("/boom")

    assert response.status_code == expected_status
    error = response.json()["error"]
    assert error["code"] == "some_code"
    assert error["message"] == "Something happened"
    assert "request_id" in error
    assert "details" not in error


def test_details_included_when_present(client, app_with_handlers) -> None:
    @app_with_handlers.get("/details")
    async def details():
        raise ValidationAppError(
            code="invalid_wedding_id",
            message="Invalid wedding ID",
            details={"field": "wedding_id"},
        )

    response = client.get("/details")

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"field": "wedding_id"}


def test_rate_limit_error_renders_retry_metadata(client, app_with_handlers) -> None:
    @app_with_handlers.get("/throttled")
    async def throttled():
        raise RateLimitAppError(
            code="too_many_requests",
            message="Too many requests",
            details={"retry_after": 42, "limit": 5, "reset_at": "2025-01-01T00:00:42.000Z"},
        )

    response = client.get("/throttled")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "42"
    assert response.headers["X-RateLimit-Limit"] == "5"
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert response.headers["X-RateLimit-Reset"] == "2025-01-01T00:00:42.000Z"
    assert response.json()["error"]["retry_after"] == 42


def test_rate_limit_headers_can_be_disabled(client, app_with_handlers, monkeypatch) -> None:
    from bind8.core import exception_handlers

    monkeypatch.setattr(exception_handlers.settings.app, "rate_limit_include_headers", False)

    @app_with_handlers.get("/throttled-quiet")
    async def throttled():
        raise RateLimitAppError(code="too_many_requests", message="Too many requests", details={"retry_after": 3})

    response = client.get("/throttled-quiet")

    assert response.status_code == 429
    assert "Retry-After" not in response.headers


def test_subclass_inherits_status() -> None:
    class WeddingLockedError(ConflictAppError):
        pass

    assert status_for(WeddingLockedError(code="locked", message="locked")) == 409
    assert status_for(AppError(code="generic", message="generic")) == 400


def test_unexpected_exception_is_generic_500(client, app_with_handlers) -> None:
    @app_with_handlers.get("/crash")
    async def crash():
        raise RuntimeError("database connection failed at 10.0.0.3")

    response = client.get("/crash")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "internal_server_error"
    assert "10.0.0.3" not in response.text


def test_general_handler_never_leaks_stack_trace() -> None:
    request = AsyncMock()
    request.url.path = "/test"
    request.method = "GET"

    response = asyncio.run(general_exception_handler(request, ValueError("secret detail")))

    body = bytes(response.body).decode()
    data = json.loads(body)
    assert response.status_code == 500
    assert data["error"]["code"] == "internal_server_error"
    assert "Traceback" not in body
    assert "ValueError" not in body
    assert "secret detail" not in body


def test_setup_registers_handlers(app_with_handlers: FastAPI) -> None:
    assert AppError in app_with_handlers.exception_handlers
    assert Exception in app_with_handlers.exception_handlers
