"""Middleware components for request processing."""

from src.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
