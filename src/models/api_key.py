"""API key models for the file-backed key store."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiKeyRecord(BaseModel):
    """
    A single API key accepted by the host.

    Attributes:
        key_id: Unique non-secret identifier (UUID v4), safe to log
        key_value: The secret presented by clients
        label: Optional human-readable name, used as the principal
        created_at: ISO 8601 timestamp of key creation
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "key_id": "660e9500-f39c-52e5-b827-557766551111",
                "key_value": "secret-123",
                "label": "build-agent",
                "created_at": "2025-11-11T12:00:00+00:00",
            }
        },
    )

    key_id: str = Field(..., description="Unique key identifier (UUID)")
    key_value: str = Field(..., min_length=1, description="Secret API key value")
    label: Optional[str] = Field(None, description="Human-readable label")
    created_at: str = Field(..., description="ISO 8601 creation timestamp")


class ApiKeyStoreFile(BaseModel):
    """On-disk layout of ``apikeys.json``; anything else is corrupt."""

    model_config = ConfigDict(extra="forbid")

    version: Literal[1] = Field(..., description="File format version")
    keys: List[ApiKeyRecord] = Field(..., description="Stored API keys")
