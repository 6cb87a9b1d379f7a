"""
LinkGuard Provider Retry

Optional retry with exponential backoff, layered around any provider.
Providers themselves make exactly one attempt; wrap them here to retry
transient failures without touching their request or parsing code.
"""

import asyncio
import logging
from typing import Any, Dict

from linkguard.models.security import ProviderResult
from linkguard.services.security.base import BaseSecurityProvider
from linkguard.utils.constants import (
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_INITIAL_BACKOFF,
    RETRY_MAX_BACKOFF,
)

logger = logging.getLogger(__name__)


class RetryingProvider:
    """
    Wraps a provider and re-runs check() while it returns an error result.

    Simulated and successful results are returned immediately. After the
    last attempt the final error result is returned as-is, with the number
    of attempts recorded in raw["attempts"].
    """

    def __init__(
        self,
        inner: BaseSecurityProvider,
        max_attempts: int = 3,
        initial_backoff: float = RETRY_INITIAL_BACKOFF,
        multiplier: float = RETRY_BACKOFF_MULTIPLIER,
        max_backoff: float = RETRY_MAX_BACKOFF,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.inner = inner
        self.max_attempts = max_attempts
        self.initial_backoff = initial_backoff
        self.multiplier = multiplier
        self.max_backoff = max_backoff

    def __getattr__(self, item: str) -> Any:
        return getattr(self.inner, item)

    async def check(self, url: str) -> ProviderResult:
        backoff = self.initial_backoff
        result = None

        for attempt in range(1, self.max_attempts + 1):
            result = await self.inner.check(url)
            if result.error is None or result.simulated:
                break

            if attempt < self.max_attempts:
                logger.info(
                    f"{self.inner.provider.value}: {result.error}, "
                    f"retry {attempt + 1}/{self.max_attempts} in {backoff}s"
                )
                await asyncio.sleep(backoff)
                backoff = min(backoff * self.multiplier, self.max_backoff)
            else:
                logger.error(
                    f"{self.inner.provider.value}: failed after {attempt} attempts ({result.error})"
                )

        if attempt > 1:
            raw = dict(result.raw)
            raw["attempts"] = attempt
            result = result.model_copy(update={"raw": raw})
        return result

    def get_status(self) -> Dict[str, Any]:
        status = self.inner.get_status()
        status["max_attempts"] = self.max_attempts
        return status


def with_retry(provider: BaseSecurityProvider, max_attempts: int, **kwargs) -> Any:
    """Wrap provider in RetryingProvider unless max_attempts is 1."""
    if max_attempts <= 1:
        return provider
    return RetryingProvider(provider, max_attempts=max_attempts, **kwargs)
