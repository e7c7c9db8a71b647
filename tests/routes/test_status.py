"""Tests for GET /status endpoint."""

from typing import Any

from httpx import ASGITransport, AsyncClient

from src.config import settings
from src.main import create_app


async def test_status_reports_ok_with_scheme(api_client: AsyncClient) -> None:
    """Test that status is ok once a key store is installed."""
    response = await api_client.get("/status")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    data: dict[str, Any] = response.json()
    assert data["status"] == "ok"
    assert data["version"] == settings.api_version
    assert isinstance(data["uptime_seconds"], int)
    assert data["uptime_seconds"] >= 0
    assert data["authentication_scheme"] == "ApiKey"


async def test_status_is_degraded_before_key_store_loads() -> None:
    """Test the status of an app whose startup has not loaded keys."""
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get("/status")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["authentication_scheme"] is None
