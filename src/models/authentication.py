"""Authentication outcome model."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RejectionReason(str, Enum):
    """Why a request was not authenticated."""

    MISSING_CREDENTIAL = "missing_credential"
    INVALID_CREDENTIAL = "invalid_credential"


class AuthenticationOutcome(BaseModel):
    """
    Result of running an authentication scheme against one request.

    Exactly one of ``principal`` (authenticated) or ``reason`` (rejected)
    is set.
    """

    authenticated: bool
    principal: Optional[str] = Field(None, description="Authenticated identity")
    key_id: Optional[str] = Field(None, description="Non-secret key identifier")
    reason: Optional[RejectionReason] = Field(None, description="Rejection reason")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_consistent(self) -> "AuthenticationOutcome":
        """Reject partially authenticated outcomes."""
        if self.authenticated:
            if not self.principal or self.reason is not None:
                raise ValueError("authenticated outcome needs a principal and no reason")
        elif self.reason is None or self.principal is not None or self.key_id is not None:
            raise ValueError("rejected outcome needs a reason and no principal")
        return self

    @classmethod
    def success(cls, principal: str, key_id: str | None = None) -> "AuthenticationOutcome":
        """Build an authenticated outcome."""
        return cls(authenticated=True, principal=principal, key_id=key_id)

    @classmethod
    def rejected(cls, reason: RejectionReason) -> "AuthenticationOutcome":
        """Build a rejected outcome."""
        return cls(authenticated=False, reason=reason)
