"""
Deployment Health Check Endpoints
=================================
- GET /health            Quick check for load balancers
- GET /health/deployment Component status (store round-trip, AI key present)
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from fitbot import __version__
from fitbot.config import Settings, get_settings
from fitbot.db import open_client
from fitbot.shared.errors import FitbotException

router = APIRouter(prefix="/health", tags=["Health"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
def quick_health():
    """Quick health check for load balancers."""
    return {"status": "ok", "timestamp": _timestamp()}


@router.get("/deployment")
def deployment_health(settings: Settings = Depends(get_settings)):
    """
    Comprehensive deployment health check.
    Never raises; each component reports its own status.
    """
    status = {
        "timestamp": _timestamp(),
        "api_version": __version__,
        "environment": settings.environment,
        "components": {},
    }

    try:
        with open_client(settings) as client:
            client.ping()
        status["components"]["database"] = {"status": "healthy"}
    except FitbotException as e:
        status["components"]["database"] = {"status": "error", "error": e.message}

    if settings.openai_api_key:
        status["components"]["completion_api"] = {"status": "configured", "model": settings.openai_model}
    else:
        status["components"]["completion_api"] = {"status": "error", "error": "OPENAI_API_KEY not set"}

    status["components"]["debug_endpoints"] = {
        "status": "enabled" if settings.debug_endpoints_enabled else "disabled"
    }

    all_healthy = all(
        c.get("status") in ["healthy", "configured", "enabled", "disabled"]
        for c in status["components"].values()
    )
    status["overall_status"] = "healthy" if all_healthy else "degraded"
    return status
