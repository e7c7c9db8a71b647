"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from src.auth.api_key import ApiKeyAuthenticationHandler
from src.config import settings
from src.exceptions import AggregatorHostError
from src.handlers.exception_handler import (
    aggregator_host_exception_handler,
    generic_exception_handler,
)
from src.logging.config import configure_logging, get_logger
from src.middleware.logging import LoggingMiddleware
from src.repositories.api_key_repository import ApiKeyRepository
from src.routes import identity, status

logger = get_logger(__name__)


def install_repository(app: FastAPI, repository: ApiKeyRepository) -> None:
    """
    Build the API key scheme around ``repository`` and attach it to the app.

    Args:
        app: Application to configure
        repository: The single key store shared by all requests
    """
    app.state.api_key_repository = repository
    app.state.authentication_scheme = ApiKeyAuthenticationHandler(repository)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load the key store at startup unless one was supplied."""
    if getattr(app.state, "authentication_scheme", None) is None:
        try:
            repository = ApiKeyRepository.load()
        except AggregatorHostError as exc:
            # Refuse to start rather than serve with an unknown key set
            logger.critical(
                exc.message,
                extra={"context": {"error_code": exc.error_code, **exc.details}},
            )
            raise
        install_repository(app, repository)
    yield


def create_app(repository: ApiKeyRepository | None = None) -> FastAPI:
    """
    Create the host application.

    Args:
        repository: Key store to authenticate against; loaded from the
            local state directory at startup when omitted

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=f"""
## {settings.api_title}

{settings.api_description}.

### Authentication

All endpoints except `/status` require an API key:

```
{settings.api_key_header}: YOUR_API_KEY
```

Keys are managed with `scripts/manage_api_keys.py`.
""",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    if repository is not None:
        install_repository(app, repository)

    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(AggregatorHostError, aggregator_host_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(status.router)
    app.include_router(identity.router)

    return app


def run() -> None:
    """Configure logging and serve the application with uvicorn."""
    configure_logging()
    uvicorn.run(create_app(), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
