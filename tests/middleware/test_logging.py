"""Tests for logging middleware and JSON log formatting."""

import contextlib
import json
import logging
import uuid
from io import StringIO
from unittest.mock import patch

import pytest
from fastapi import Depends, FastAPI, Request
from httpx import ASGITransport, AsyncClient

from src.auth.dependencies import require_authenticated
from src.config import settings
from src.logging.config import JSONFormatter
from src.main import install_repository
from src.middleware.logging import LoggingMiddleware
from src.repositories.api_key_repository import ApiKeyRepository


@pytest.fixture
def app_with_logging(repository: ApiKeyRepository) -> FastAPI:
    """Create a test FastAPI app with logging middleware."""
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
    install_repository(app, repository)

    @app.get("/test")
    async def test_endpoint(request: Request) -> dict[str, str]:
        """Test endpoint that returns correlation ID."""
        return {"correlation_id": request.state.correlation_id}

    @app.get("/private", dependencies=[Depends(require_authenticated)])
    async def private_endpoint() -> dict[str, str]:
        """Test endpoint behind authentication."""
        return {"ok": "yes"}

    @app.get("/error")
    async def error_endpoint() -> None:
        """Test endpoint that raises an exception."""
        raise ValueError("Test error")

    return app


async def test_logging_middleware_adds_correlation_id(
    app_with_logging: FastAPI,
) -> None:
    """Test that middleware adds a generated correlation ID."""
    transport = ASGITransport(app=app_with_logging)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/test")

    assert response.status_code == 200
    correlation_id = response.json()["correlation_id"]
    uuid.UUID(correlation_id)
    assert response.headers["x-request-id"] == correlation_id


async def test_logging_middleware_uses_existing_correlation_id(
    app_with_logging: FastAPI,
) -> None:
    """Test that middleware uses X-Request-ID header if provided."""
    correlation_id = str(uuid.uuid4())
    transport = ASGITransport(app=app_with_logging)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/test", headers={"X-Request-ID": correlation_id})

    assert response.json()["correlation_id"] == correlation_id


async def test_logging_middleware_logs_start_and_completion(
    app_with_logging: FastAPI,
) -> None:
    """Test that middleware logs request start and response timing."""
    with patch("src.middleware.logging.logger") as mock_logger:
        transport = ASGITransport(app=app_with_logging)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/test")

    first_call, last_call = mock_logger.info.call_args_list[0], mock_logger.info.call_args_list[-1]
    assert "Request started" in first_call[0]
    assert first_call[1]["extra"]["context"]["path"] == "/test"
    assert "Request completed" in last_call[0]
    context = last_call[1]["extra"]["context"]
    assert context["status_code"] == 200
    assert context["response_time_ms"] >= 0
    assert context["api_key_id"] is None


async def test_logging_middleware_records_key_id_not_key(
    app_with_logging: FastAPI, repository: ApiKeyRepository
) -> None:
    """Test that the completion log names the key_id but never the key."""
    record = repository.add("secret-123", label="agent")

    with patch("src.middleware.logging.logger") as mock_logger:
        transport = ASGITransport(app=app_with_logging)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/private", headers={"X-Api-Key": "secret-123"})

    assert response.status_code == 200
    context = mock_logger.info.call_args_list[-1][1]["extra"]["context"]
    assert context["api_key_id"] == record.key_id
    assert context["principal"] == "agent"
    assert "secret-123" not in str(mock_logger.mock_calls)


async def test_logging_middleware_logs_errors(
    app_with_logging: FastAPI,
) -> None:
    """Test that middleware logs exceptions."""
    with patch("src.middleware.logging.logger") as mock_logger:
        transport = ASGITransport(app=app_with_logging)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            with contextlib.suppress(Exception):
                await client.get("/error")

    error_call = mock_logger.error.call_args_list[0]
    assert "Request failed with exception" in error_call[0]
    assert "exc_info" in error_call[1]


def _format(logger_name: str, level: int, emit) -> dict:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger = logging.getLogger(logger_name)
    logger.handlers = [handler]
    logger.propagate = False
    logger.setLevel(level)
    emit(logger)
    return json.loads(stream.getvalue().strip())


def test_json_formatter_output() -> None:
    """Test that JSONFormatter merges context and correlation ID."""
    log_data = _format(
        "test_json_logger",
        logging.INFO,
        lambda logger: logger.info(
            "Test message",
            extra={"correlation_id": "test-correlation-id", "context": {"key_id": "k1"}},
        ),
    )

    assert log_data["level"] == "INFO"
    assert log_data["message"] == "Test message"
    assert log_data["correlation_id"] == "test-correlation-id"
    assert log_data["key_id"] == "k1"
    assert "timestamp" in log_data
    assert "file" not in log_data


def test_json_formatter_includes_exception_info() -> None:
    """Test that JSONFormatter includes exception details."""

    def emit(logger: logging.Logger) -> None:
        try:
            raise ValueError("Test exception")
        except ValueError:
            logger.error("Error occurred", exc_info=True)

    log_data = _format("test_exception_logger", logging.ERROR, emit)

    assert "ValueError" in log_data["exception"]
    assert "Test exception" in log_data["exception"]


def test_json_formatter_debug_includes_location() -> None:
    """Test that JSONFormatter includes file location at DEBUG level."""
    log_data = _format(
        "test_debug_logger", logging.DEBUG, lambda logger: logger.debug("Debug message")
    )

    assert "file" in log_data
    assert "line" in log_data
    assert "function" in log_data


@pytest.mark.parametrize("key", ["X-Api-Key", "x-api-key", "X_API_KEY"])
def test_json_formatter_drops_api_key_header(key: str) -> None:
    """Test that the credential header never reaches the log output."""
    log_data = _format(
        "test_redaction_logger",
        logging.INFO,
        lambda logger: logger.info(
            "Headers seen",
            extra={"context": {key: "secret-123", "path": "/whoami"}},
        ),
    )

    assert key not in log_data
    assert log_data["path"] == "/whoami"
    assert "secret-123" not in json.dumps(log_data)


def test_json_formatter_drops_api_key_from_nested_headers() -> None:
    """Test that a logged header mapping loses the credential entry."""
    headers = {"x-api-key": "secret-123", "user-agent": "curl"}
    log_data = _format(
        "test_nested_redaction_logger",
        logging.INFO,
        lambda logger: logger.info("Request", extra={"context": {"headers": headers}}),
    )

    assert log_data["headers"] == {"user-agent": "curl"}
    assert headers["x-api-key"] == "secret-123"


def test_json_formatter_follows_configured_header(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test that a custom API_KEY_HEADER is the one redacted."""
    monkeypatch.setattr(settings, "api_key_header", "X-Custom-Token")

    log_data = _format(
        "test_custom_header_logger",
        logging.INFO,
        lambda logger: logger.info(
            "Headers seen",
            extra={"context": {"x-custom-token": "secret-123", "X-Api-Key": "kept"}},
        ),
    )

    assert "x-custom-token" not in log_data
    assert log_data["X-Api-Key"] == "kept"


async def test_rejected_request_log_has_no_credential(
    app_with_logging: FastAPI, caplog: pytest.LogCaptureFixture
) -> None:
    """Test that formatted logs of a rejected request omit the presented key."""
    formatter = JSONFormatter()
    transport = ASGITransport(app=app_with_logging)
    with caplog.at_level(logging.DEBUG):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/private", headers={"X-Api-Key": "wrong-key"})

    assert response.status_code == 401
    output = "\n".join(formatter.format(r) for r in caplog.records)
    assert "Authentication rejected" in output
    assert "wrong-key" not in output
