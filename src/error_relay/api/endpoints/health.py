"""Health check endpoints."""

from fastapi import APIRouter

from error_relay.core.config import configured_endpoint_url, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy", "service": get_settings().service_name}


@router.get("/ready")
async def ready() -> dict:
    """
    Readiness check - the relay is always ready.

    Reports whether diagnostic forwarding is currently enabled; a missing
    collector URL only disables reporting, it never fails requests.
    """
    return {
        "status": "ready",
        "checks": {"error_reporting": configured_endpoint_url() is not None},
    }
