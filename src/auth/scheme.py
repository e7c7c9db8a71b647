"""Pluggable authentication scheme interface."""

from abc import ABC, abstractmethod
from typing import Protocol

from src.models.authentication import AuthenticationOutcome


class HeaderView(Protocol):
    """Read-only access to request headers, including repeated ones."""

    def getlist(self, key: str) -> list[str]: ...


class RequestView(Protocol):
    """The parts of a request an authentication scheme may inspect."""

    @property
    def headers(self) -> HeaderView: ...


class AuthenticationScheme(ABC):
    """
    A named strategy deciding whether a request is authenticated.

    The host pipeline only depends on this interface, so strategies can be
    swapped without touching call sites.
    """

    name: str

    @abstractmethod
    def authenticate(self, request: RequestView) -> AuthenticationOutcome:
        """
        Authenticate a single request.

        Rejections are returned as outcomes, never raised.

        Args:
            request: The incoming request

        Returns:
            Authenticated or rejected outcome
        """
