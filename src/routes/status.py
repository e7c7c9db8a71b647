"""Health check endpoint."""

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.config import settings

# Module-level variable to track application start time
_app_start_time = time.time()

router = APIRouter(tags=["Health"])


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """
    Health check endpoint for monitoring.

    Returns basic status without authentication. Reports "degraded" while
    the key store has not been loaded, since no request can authenticate.

    Returns:
        JSONResponse with status, version, uptime_seconds and scheme
    """
    scheme = getattr(request.app.state, "authentication_scheme", None)

    return JSONResponse(
        status_code=200,
        content={
            "status": "ok" if scheme is not None else "degraded",
            "version": settings.api_version,
            "uptime_seconds": int(time.time() - _app_start_time),
            "authentication_scheme": scheme.name if scheme is not None else None,
        },
    )
