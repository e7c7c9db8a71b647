"""API key repository backed by a JSON file in the local state directory."""

import threading
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import List, Optional

from pydantic import ValidationError

from src.config import settings
from src.exceptions import (
    DuplicateKeyError,
    InvalidKeyError,
    KeyNotFoundError,
    KeyStoreCorruptError,
)
from src.logging.config import get_logger
from src.models.api_key import ApiKeyRecord, ApiKeyStoreFile
from src.repositories.base import MISSING, BaseRepository
from src.storage.local_app_data import LocalAppData, default_local_app_data

logger = get_logger(__name__)


def validate_key_value(key_value: str) -> None:
    """
    Check that a key can be sent verbatim in an HTTP header.

    Args:
        key_value: Candidate API key

    Raises:
        InvalidKeyError: If the key is empty, padded with whitespace, or
            contains control characters
    """
    if not key_value:
        raise InvalidKeyError("API key must not be empty")
    if key_value != key_value.strip():
        raise InvalidKeyError("API key must not start or end with whitespace")
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in key_value):
        raise InvalidKeyError("API key must not contain control characters")


class ApiKeyRepository(BaseRepository):
    """
    Repository for the set of valid API keys.

    Readers work on an immutable snapshot that is swapped in one assignment
    after each successful write, so lookups never block and never observe a
    half-applied change. Mutations are serialized by a lock and only publish
    the new snapshot once it is on disk.
    """

    def __init__(
        self, path: Path, records: Mapping[str, ApiKeyRecord] | None = None
    ) -> None:
        """
        Initialize ApiKeyRepository.

        Args:
            path: Location of the key store file
            records: Initial keys, indexed by key value
        """
        super().__init__(path)
        self._records: Mapping[str, ApiKeyRecord] = MappingProxyType(
            dict(records or {})
        )
        self._write_lock = threading.Lock()

    @classmethod
    def load(cls, state: LocalAppData | None = None) -> "ApiKeyRepository":
        """
        Load the key store from the local state directory.

        A missing file yields an empty repository.

        Args:
            state: State directory to use; the configured default when omitted

        Returns:
            Loaded ApiKeyRepository

        Raises:
            DirectoryUnavailableError: If the state directory cannot be created
            KeyStoreCorruptError: If the file content is malformed
        """
        state = state or default_local_app_data()
        repository = cls(state.get_path(settings.key_store_filename))
        repository._records = repository._read_snapshot()
        logger.info(
            "API key store loaded",
            extra={
                "context": {
                    "path": str(repository.path),
                    "key_count": len(repository._records),
                }
            },
        )
        return repository

    def _read_snapshot(self) -> Mapping[str, ApiKeyRecord]:
        document = self.read_document()
        if document is MISSING:
            return MappingProxyType({})

        try:
            store = ApiKeyStoreFile.model_validate(document)
        except ValidationError as exc:
            raise KeyStoreCorruptError(
                str(self.path), f"{exc.error_count()} invalid field(s)"
            ) from exc

        records: dict[str, ApiKeyRecord] = {}
        for record in store.keys:
            if record.key_value in records:
                raise KeyStoreCorruptError(
                    str(self.path), f"key {record.key_id} is listed more than once"
                )
            records[record.key_value] = record
        return MappingProxyType(records)

    def _persist(self, records: dict[str, ApiKeyRecord]) -> None:
        store = ApiKeyStoreFile(version=1, keys=list(records.values()))
        self.write_document(store.model_dump(mode="json"))
        self._records = MappingProxyType(records)

    def is_valid(self, candidate_key: str) -> bool:
        """
        Check whether ``candidate_key`` exactly matches a stored key.

        Args:
            candidate_key: Key presented by a client

        Returns:
            True if the key is stored, False otherwise
        """
        return candidate_key in self._records

    def get(self, candidate_key: str) -> Optional[ApiKeyRecord]:
        """
        Look up a key record by its value.

        Args:
            candidate_key: Key presented by a client

        Returns:
            ApiKeyRecord if stored, None otherwise
        """
        return self._records.get(candidate_key)

    def find_by_id(self, key_id: str) -> Optional[ApiKeyRecord]:
        """
        Look up a key record by its non-secret identifier.

        Args:
            key_id: Key identifier (UUID)

        Returns:
            ApiKeyRecord if found, None otherwise
        """
        for record in self._records.values():
            if record.key_id == key_id:
                return record
        return None

    def list_keys(self) -> List[ApiKeyRecord]:
        """Return all stored keys, oldest first."""
        return sorted(self._records.values(), key=lambda r: r.created_at)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, candidate_key: object) -> bool:
        return candidate_key in self._records

    def add(self, new_key: str, label: str | None = None) -> ApiKeyRecord:
        """
        Add a key and persist the updated store.

        Args:
            new_key: Secret key value
            label: Optional human-readable label

        Returns:
            The stored ApiKeyRecord

        Raises:
            InvalidKeyError: If the key cannot be carried in a header
            DuplicateKeyError: If the key is already stored
            KeyStorePersistError: If the store cannot be written
        """
        validate_key_value(new_key)

        with self._write_lock:
            existing = self._records.get(new_key)
            if existing is not None:
                raise DuplicateKeyError(key_id=existing.key_id)

            record = ApiKeyRecord(
                key_id=str(uuid.uuid4()),
                key_value=new_key,
                label=label,
                created_at=datetime.now(timezone.utc).isoformat(),
            )
            records = dict(self._records)
            records[new_key] = record
            self._persist(records)

        logger.info(
            "API key added",
            extra={"context": {"key_id": record.key_id, "label": label}},
        )
        return record

    def revoke(self, key: str) -> ApiKeyRecord:
        """
        Remove a key and persist the updated store.

        Args:
            key: Secret key value to revoke

        Returns:
            The removed ApiKeyRecord

        Raises:
            KeyNotFoundError: If the key is not stored
            KeyStorePersistError: If the store cannot be written
        """
        with self._write_lock:
            record = self._records.get(key)
            if record is None:
                raise KeyNotFoundError()

            records = dict(self._records)
            del records[key]
            self._persist(records)

        logger.info(
            "API key revoked",
            extra={"context": {"key_id": record.key_id}},
        )
        return record

    def reload(self) -> None:
        """
        Re-read the key store file, picking up changes made by other processes.

        Raises:
            KeyStoreCorruptError: If the file content is malformed; the
                current snapshot is kept
        """
        with self._write_lock:
            self._records = self._read_snapshot()

        logger.info(
            "API key store reloaded",
            extra={"context": {"key_count": len(self._records)}},
        )
