"""
LinkGuard Screenshot Service

Captures page screenshots through ScreenshotLayer. Without an access key
a deterministic simulated image URL is returned; when every attempt
fails, a placeholder image naming the host is returned instead.
"""

import asyncio
import hashlib
import logging
from typing import Optional
from urllib.parse import quote

import aiohttp

from linkguard.models.link import ScreenshotResult
from linkguard.utils.constants import (
    PLACEHOLDER_SCREENSHOT_URL,
    SCREENSHOT_MAX_RETRIES,
    SCREENSHOT_RETRY_DELAY,
    SCREENSHOT_TIMEOUT_SECONDS,
    SCREENSHOTLAYER_API_URL,
    SIMULATED_SCREENSHOT_BASE_URL,
)
from linkguard.utils.exceptions import ProviderHTTPError
from linkguard.utils.helpers import extract_domain

logger = logging.getLogger(__name__)


def screenshot_url_for(url: str) -> str:
    """Stable image URL for a page, keyed on the MD5 of the URL."""
    return f"{SIMULATED_SCREENSHOT_BASE_URL}/{hashlib.md5(url.encode('utf-8')).hexdigest()}.png"


def placeholder_url_for(url: str) -> str:
    """Grey placeholder image labelled with the host."""
    domain = extract_domain(url) or "unknown"
    return f"{PLACEHOLDER_SCREENSHOT_URL}?text={quote(domain)}"


class ScreenshotService:
    """ScreenshotLayer client with retry and placeholder fallback."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = SCREENSHOT_TIMEOUT_SECONDS,
        retry_delay: float = SCREENSHOT_RETRY_DELAY,
        api_url: str = SCREENSHOTLAYER_API_URL,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self.retry_delay = retry_delay

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def capture(self, url: str) -> ScreenshotResult:
        """
        Capture a single screenshot.

        Raises:
            aiohttp.ClientError: On transport failure
            ProviderHTTPError: If ScreenshotLayer rejects the request
        """
        if not self.is_configured:
            return ScreenshotResult(url=url, screenshot_url=screenshot_url_for(url), simulated=True)

        params = {
            "access_key": self.api_key,
            "url": url,
            "viewport": "1440x900",
            "width": 1440,
            "format": "PNG",
            "fullpage": 0,
            "force": 0,
        }
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(self.api_url, params=params) as response:
                content_type = response.headers.get("Content-Type", "")
                if response.status != 200 or not content_type.startswith("image/"):
                    # Errors come back as a JSON body with HTTP 200
                    detail = (await response.text())[:200]
                    raise ProviderHTTPError("screenshotlayer", response.status, detail)
                image = await response.read()

        if not image:
            raise ProviderHTTPError("screenshotlayer", response.status, "Empty image body")

        # Image bytes are served from the screenshot store under a stable name
        return ScreenshotResult(
            url=url,
            screenshot_url=screenshot_url_for(url),
            size=len(image),
            format=content_type.split(";")[0].split("/", 1)[1].strip().lower(),
        )

    async def capture_with_retry(self, url: str, retries: int = SCREENSHOT_MAX_RETRIES) -> ScreenshotResult:
        """
        Capture with linear backoff (retry_delay * attempt), then fall back
        to a placeholder image.
        """
        last_error = None
        for attempt in range(1, retries + 2):
            try:
                result = await self.capture(url)
                if attempt > 1:
                    result = result.model_copy(update={"attempts": attempt})
                return result
            except (aiohttp.ClientError, asyncio.TimeoutError, ProviderHTTPError) as e:
                last_error = str(e) or type(e).__name__
                if attempt <= retries:
                    logger.info(f"Screenshot attempt {attempt} failed for {url}, retrying: {last_error}")
                    await asyncio.sleep(self.retry_delay * attempt)

        logger.error(f"All screenshot attempts failed for {url}: {last_error}")
        return ScreenshotResult(
            url=url,
            screenshot_url=placeholder_url_for(url),
            success=False,
            simulated=True,
            attempts=retries + 1,
            error=f"Screenshot capture failed after retries: {last_error}",
        )
