"""API router configuration."""

from error_relay.api.endpoints import health

# Health router at root level
health_router = health.router
