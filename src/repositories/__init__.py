"""Repository layer for file-backed storage."""

from src.repositories.api_key_repository import ApiKeyRepository

__all__ = ["ApiKeyRepository"]
