"""API package - FastAPI routes."""

from error_relay.api.router import health_router

__all__ = ["health_router"]
