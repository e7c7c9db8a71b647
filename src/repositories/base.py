"""Base repository class with common JSON file operations."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from src.exceptions import KeyStoreCorruptError, KeyStorePersistError
from src.logging.config import get_logger

logger = get_logger(__name__)

# Returned by read_document when the file does not exist
MISSING = object()


class BaseRepository:
    """
    Base repository persisting one JSON document to a file.

    Writes are atomic: the document goes to a temporary file in the same
    directory which then replaces the target, so readers only ever see the
    previous or the new content.
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize repository with its backing file.

        Args:
            path: Location of the JSON document
        """
        self.path = Path(path)

    def read_document(self) -> Any:
        """
        Read and decode the JSON document.

        Returns:
            Decoded document, or MISSING if the file does not exist

        Raises:
            KeyStoreCorruptError: If the file is not valid UTF-8 JSON
            KeyStorePersistError: If the file exists but cannot be read
        """
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                text = handle.read()
        except FileNotFoundError:
            return MISSING
        except UnicodeDecodeError as exc:
            raise KeyStoreCorruptError(str(self.path), "not valid UTF-8") from exc
        except OSError as exc:
            raise KeyStorePersistError(
                str(self.path), exc.strerror or str(exc)
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise KeyStoreCorruptError(
                str(self.path), f"invalid JSON at line {exc.lineno}"
            ) from exc

    def write_document(self, document: Any) -> None:
        """
        Atomically replace the file with ``document`` encoded as JSON.

        Args:
            document: JSON-serializable document

        Raises:
            KeyStorePersistError: If any step of the write fails; the
                previous file content is left in place
        """
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
        except OSError as exc:
            raise KeyStorePersistError(
                str(self.path), exc.strerror or str(exc)
            ) from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            logger.error(
                "Failed to persist document",
                extra={"context": {"path": str(self.path), "error": str(exc)}},
            )
            raise KeyStorePersistError(
                str(self.path), exc.strerror or str(exc)
            ) from exc
