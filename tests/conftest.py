"""Shared pytest fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.config import settings
from src.main import create_app
from src.repositories.api_key_repository import ApiKeyRepository
from src.storage.local_app_data import LocalAppData


@pytest.fixture(autouse=True)
def isolated_state_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the configured state directory at a per-test temporary path."""
    state_dir = tmp_path / "state"
    monkeypatch.setattr(settings, "state_dir", str(state_dir))
    return state_dir


@pytest.fixture
def local_state(tmp_path: Path) -> LocalAppData:
    """Create a LocalAppData rooted in a temporary directory."""
    return LocalAppData(tmp_path / "appdata", "aggregator-cli")


@pytest.fixture
def repository(local_state: LocalAppData) -> ApiKeyRepository:
    """Load an empty ApiKeyRepository from the temporary state directory."""
    return ApiKeyRepository.load(local_state)


@pytest.fixture
def app(repository: ApiKeyRepository) -> FastAPI:
    """Create the host application around the test repository."""
    return create_app(repository)


@pytest.fixture
async def api_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing API endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client
