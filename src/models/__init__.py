"""Data models for the Aggregator host."""

from src.models.api_key import ApiKeyRecord, ApiKeyStoreFile
from src.models.authentication import AuthenticationOutcome, RejectionReason

__all__ = [
    "ApiKeyRecord",
    "ApiKeyStoreFile",
    "AuthenticationOutcome",
    "RejectionReason",
]
