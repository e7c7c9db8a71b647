"""API key authentication scheme."""

from src.auth.scheme import AuthenticationScheme, RequestView
from src.config import settings
from src.logging.config import get_logger
from src.models.authentication import AuthenticationOutcome, RejectionReason
from src.repositories.api_key_repository import ApiKeyRepository

logger = get_logger(__name__)


def extract_api_key(
    request: RequestView, header_name: str
) -> tuple[str | None, RejectionReason | None]:
    """
    Extract the candidate API key from a request header.

    Args:
        request: The incoming request
        header_name: Name of the header carrying the key

    Returns:
        (key, None) when a single key is present, otherwise (None, reason).
        A missing header, or only empty values, is MISSING_CREDENTIAL.
        Repeated headers with different values, including an empty value
        next to a non-empty one, are INVALID_CREDENTIAL.
    """
    values = request.headers.getlist(header_name)
    if not any(values):
        return None, RejectionReason.MISSING_CREDENTIAL
    if len(set(values)) > 1:
        return None, RejectionReason.INVALID_CREDENTIAL
    return values[0], None


class ApiKeyAuthenticationHandler(AuthenticationScheme):
    """
    Authenticates requests carrying a stored API key in a header.

    The principal is the key's label, falling back to its key_id. The
    repository is only read, never modified.
    """

    def __init__(
        self,
        repository: ApiKeyRepository,
        header_name: str | None = None,
        name: str | None = None,
    ) -> None:
        """
        Initialize ApiKeyAuthenticationHandler.

        Args:
            repository: Key store consulted for every request
            header_name: Header carrying the key (default from settings)
            name: Scheme name (default from settings)
        """
        self.repository = repository
        self.header_name = header_name or settings.api_key_header
        self.name = name or settings.authentication_scheme

    def authenticate(self, request: RequestView) -> AuthenticationOutcome:
        """
        Authenticate a request by its API key header.

        Args:
            request: The incoming request

        Returns:
            Authenticated outcome with the key's principal, or a rejection
        """
        candidate, reason = extract_api_key(request, self.header_name)
        if reason is not None:
            return self._reject(reason)

        record = self.repository.get(candidate)
        if record is None:
            return self._reject(RejectionReason.INVALID_CREDENTIAL)

        logger.info(
            "Authentication succeeded",
            extra={"context": {"scheme": self.name, "key_id": record.key_id}},
        )
        return AuthenticationOutcome.success(
            principal=record.label or record.key_id, key_id=record.key_id
        )

    def _reject(self, reason: RejectionReason) -> AuthenticationOutcome:
        # Never log the presented value
        logger.warning(
            "Authentication rejected",
            extra={"context": {"scheme": self.name, "reason": reason.value}},
        )
        return AuthenticationOutcome.rejected(reason)
