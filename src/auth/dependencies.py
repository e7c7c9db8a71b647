"""FastAPI dependencies for running the configured authentication scheme."""

from fastapi import Request

from src.auth.scheme import AuthenticationScheme
from src.exceptions import UnauthorizedError
from src.models.authentication import AuthenticationOutcome


def get_authentication_scheme(request: Request) -> AuthenticationScheme:
    """
    Return the scheme the application was built with.

    Args:
        request: FastAPI request

    Returns:
        AuthenticationScheme stored on the application state

    Raises:
        RuntimeError: If the application has no scheme configured
    """
    scheme = getattr(request.app.state, "authentication_scheme", None)
    if scheme is None:
        raise RuntimeError("No authentication scheme configured")
    return scheme


async def require_authenticated(request: Request) -> AuthenticationOutcome:
    """
    Authenticate the request and return the outcome.

    This dependency can be used in FastAPI routes to require authentication.
    Both rejection reasons map to the same generic 401 so clients cannot
    tell a missing key from a wrong one.

    Args:
        request: FastAPI request

    Returns:
        Authenticated outcome

    Raises:
        UnauthorizedError: If the scheme rejects the request
    """
    scheme = get_authentication_scheme(request)
    outcome = scheme.authenticate(request)

    if not outcome.authenticated:
        header_name = getattr(scheme, "header_name", None)
        challenge = scheme.name
        if header_name:
            challenge = f'{scheme.name} header="{header_name}"'
        raise UnauthorizedError(
            details={"scheme": scheme.name},
            challenge=challenge,
        )

    # Non-secret identifiers only; picked up by the logging middleware
    request.state.principal = outcome.principal
    request.state.api_key_id = outcome.key_id
    return outcome
