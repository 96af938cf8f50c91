"""Health check endpoints."""

from typing import Any, Dict

from fastapi import APIRouter

from ...infrastructure.dependencies import get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Check the health of all service components.

    Returns:
        Provider availability and rate limit settings
    """
    container = get_service_container()
    rate_limiter = container.get_rate_limiter()

    model_status = {}
    for provider_name, is_active in container.model_factory.available_providers.items():
        model_status[provider_name.title()] = is_active

    return {
        "status": "healthy",
        "model_providers": model_status,
        "rate_limit": {
            "max_requests": rate_limiter.max_requests,
            "window_seconds": rate_limiter.window_ms / 1000,
            "tracked_identities": len(rate_limiter),
        },
    }
