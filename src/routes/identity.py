"""Endpoint reporting the identity behind an authenticated request."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.auth.dependencies import require_authenticated
from src.models.authentication import AuthenticationOutcome

router = APIRouter(tags=["Identity"])


class WhoAmIResponse(BaseModel):
    """Authenticated caller identity."""

    principal: str = Field(..., description="Principal assigned to the API key")
    key_id: str | None = Field(None, description="Non-secret key identifier")


@router.get("/whoami", response_model=WhoAmIResponse)
async def whoami(
    outcome: AuthenticationOutcome = Depends(require_authenticated),
) -> WhoAmIResponse:
    """
    Return the principal of the calling API key.

    Returns:
        WhoAmIResponse with principal and key_id
    """
    return WhoAmIResponse(principal=outcome.principal, key_id=outcome.key_id)
