"""
LinkGuard Health API Routes

Health check and status endpoints.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from linkguard.api.dependencies import get_link_checker, get_settings
from linkguard.utils.helpers import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(settings=Depends(get_settings)):
    """
    Basic health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": "linkguard-api",
        "version": settings.app_version,
    }


@router.get("/ready")
async def readiness_check(checker=Depends(get_link_checker)):
    """
    Readiness check - reports which providers are live and which are simulated.

    Simulated providers do not make the service unready.
    """
    checks: Dict[str, Any] = {}
    try:
        status = checker.aggregator.get_status()
        checks["security_providers"] = {
            "status": "ready",
            "enabled": status["enabled"],
            "configured": status["configured"],
            "simulated": [p["provider"] for p in status["providers"] if p["enabled"] and p["simulated"]],
        }
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        checks["security_providers"] = {"status": "error", "error": str(e)}

    checks["screenshots"] = {
        "status": "ready",
        "simulated": not checker.screenshot_service.is_configured,
    }

    all_ready = all(check["status"] == "ready" for check in checks.values())
    return {
        "status": "ready" if all_ready else "degraded",
        "timestamp": utc_now().isoformat(),
        "checks": checks,
    }


@router.get("/live")
async def liveness_check():
    """Liveness check - basic ping."""
    return {"status": "alive"}
