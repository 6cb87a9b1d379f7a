"""
LinkGuard Link API Routes

Endpoints for checking links and inspecting the provider roster.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from linkguard.api.dependencies import get_link_checker
from linkguard.services.link_checker import LinkChecker
from linkguard.utils.exceptions import InvalidURLError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/links", tags=["links"])


class LinkCheckRequest(BaseModel):
    """Request to check a URL."""
    url: str = Field(..., description="URL to check")


@router.post("/check")
async def check_link(
    request: LinkCheckRequest,
    checker: LinkChecker = Depends(get_link_checker),
):
    """
    Check a URL against every security provider, analyze its content and
    capture a screenshot.

    Returns:
        {"success": true, "result": {...}}
    """
    try:
        result = await checker.check(request.url)
    except InvalidURLError as e:
        logger.info(f"Rejected link check: {e.message}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": e.message},
        )

    return {"success": True, "result": result.to_dict()}


@router.get("/providers")
async def get_providers(checker: LinkChecker = Depends(get_link_checker)):
    """
    Get security provider roster status.

    Providers without an API key are listed with simulated=true.
    """
    status = checker.aggregator.get_status()
    return {"success": True, **status}
