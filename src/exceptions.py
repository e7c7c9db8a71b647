"""Custom exception classes for the Aggregator host."""

from typing import Any


class AggregatorHostError(Exception):
    """Base exception for the Aggregator host."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class UnauthorizedError(AggregatorHostError):
    """Raised when authentication fails (401)."""

    def __init__(
        self,
        message: str = "Unauthorized: Invalid or missing API key",
        details: dict[str, Any] | None = None,
        challenge: str | None = None,
    ) -> None:
        """
        Initialize UnauthorizedError.

        Args:
            message: Error message
            details: Additional error details
            challenge: Value for the WWW-Authenticate response header
        """
        super().__init__(
            message=message,
            status_code=401,
            error_code="UNAUTHORIZED",
            details=details,
        )
        self.challenge = challenge


class DirectoryUnavailableError(AggregatorHostError):
    """Raised when the local state directory cannot be created."""

    def __init__(
        self,
        path: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize DirectoryUnavailableError.

        Args:
            path: Directory that could not be created
            reason: Underlying operating system error text
            details: Additional error details
        """
        error_details = details or {}
        error_details["path"] = path
        super().__init__(
            message=(
                f"Local state directory {path} is unavailable: {reason}. "
                "Check permissions and free disk space, or set STATE_DIR."
            ),
            status_code=500,
            error_code="DIRECTORY_UNAVAILABLE",
            details=error_details,
        )
        self.path = path


class KeyStoreCorruptError(AggregatorHostError):
    """Raised when the key store file cannot be parsed."""

    def __init__(
        self,
        path: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize KeyStoreCorruptError.

        Args:
            path: Key store file that failed to load
            reason: Description of what is wrong with the content
            details: Additional error details
        """
        error_details = details or {}
        error_details["path"] = path
        super().__init__(
            message=(
                f"Key store {path} is corrupt: {reason}. "
                "Fix or remove the file by hand; it is never reset automatically."
            ),
            status_code=500,
            error_code="KEY_STORE_CORRUPT",
            details=error_details,
        )
        self.path = path


class KeyStorePersistError(AggregatorHostError):
    """Raised when the key store cannot be written back to disk."""

    def __init__(
        self,
        path: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize KeyStorePersistError.

        Args:
            path: Key store file that could not be written
            reason: Underlying operating system error text
            details: Additional error details
        """
        error_details = details or {}
        error_details["path"] = path
        super().__init__(
            message=f"Could not write key store {path}: {reason}",
            status_code=500,
            error_code="KEY_STORE_WRITE_FAILED",
            details=error_details,
        )
        self.path = path


class DuplicateKeyError(AggregatorHostError):
    """Raised when adding a key that is already stored (409)."""

    def __init__(
        self,
        message: str = "API key already exists",
        key_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize DuplicateKeyError.

        Args:
            message: Error message
            key_id: Identifier of the existing key
            details: Additional error details
        """
        error_details = details or {}
        if key_id:
            error_details["key_id"] = key_id
        super().__init__(
            message=message,
            status_code=409,
            error_code="DUPLICATE_KEY",
            details=error_details,
        )


class KeyNotFoundError(AggregatorHostError):
    """Raised when revoking a key that is not stored (404)."""

    def __init__(
        self,
        message: str = "API key not found",
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize KeyNotFoundError.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(
            message=message,
            status_code=404,
            error_code="KEY_NOT_FOUND",
            details=details,
        )


class InvalidKeyError(AggregatorHostError):
    """Raised when a key value cannot be carried in a request header (400)."""

    def __init__(
        self,
        message: str = "API key value is not valid",
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize InvalidKeyError.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_KEY",
            details=details,
        )
