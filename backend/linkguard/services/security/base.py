"""
LinkGuard Base Security Provider

Abstract base class for all threat intelligence providers.

Every provider answers check(url) with a ProviderResult and never raises:
- unconfigured providers answer with a deterministic simulated result
- transport failures, timeouts and malformed replies become error results
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from linkguard.models.security import ProviderName, ProviderResult, ThreatTag
from linkguard.services.security.simulation import Simulation, simulate
from linkguard.utils.constants import PROVIDER_TIMEOUT_SECONDS
from linkguard.utils.exceptions import (
    ProviderError,
    ProviderHTTPError,
    ProviderResponseError,
)
from linkguard.utils.helpers import clamp, elapsed_ms, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class NormalizedSignal:
    """Provider reply translated into the shared schema."""
    score: Optional[float]
    safe: Optional[bool]
    tags: List[ThreatTag] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)


class BaseSecurityProvider(ABC):
    """
    Abstract base class for threat intelligence providers.

    Subclasses implement:
    - _fetch(url): build and send the provider request, return the decoded body
    - normalize(data): translate the body into a NormalizedSignal
    - simulated_details(url, simulation): provider shaped raw payload for demos
    """

    # Provider identification
    provider: ProviderName
    requires_api_key: bool = True
    base_url: str = ""
    capabilities: List[str] = []

    def __init__(self, api_key: Optional[str] = None, timeout: float = PROVIDER_TIMEOUT_SECONDS):
        """
        Initialize provider.

        Args:
            api_key: API key for the service (if required)
            timeout: Seconds allowed for one live lookup
        """
        self.api_key = api_key
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.provider.display_name

    @property
    def is_configured(self) -> bool:
        """Check if provider is properly configured."""
        if not self.requires_api_key:
            return True
        return self.api_key is not None and len(self.api_key) > 0

    @property
    def simulation_salt(self) -> str:
        return self.provider.value

    # =========================================================================
    # Public contract
    # =========================================================================

    async def check(self, url: str) -> ProviderResult:
        """
        Check a URL and return a normalized result. Never raises.

        Args:
            url: Normalized URL

        Returns:
            ProviderResult (live, simulated or errored)
        """
        if not self.is_configured:
            return self.simulated_result(url)

        started = time.perf_counter()
        try:
            data = await asyncio.wait_for(self._fetch(url), timeout=self.timeout)
            signal = self.normalize(data)
        except asyncio.TimeoutError:
            error = f"Request timed out after {self.timeout:g}s"
        except ProviderError as e:
            error = e.message
        except aiohttp.ClientError as e:
            error = f"Connection error: {e}"
        except Exception as e:
            logger.exception(f"{self.provider.value}: unexpected error checking {url}")
            error = f"Unexpected error: {e}"
        else:
            duration = elapsed_ms(started, time.perf_counter())
            logger.info(
                f"{self.provider.value}: safe={signal.safe} score={signal.score} ({duration}ms)"
            )
            return ProviderResult(
                provider=self.provider,
                safe=signal.safe,
                score=self._bound_score(signal.score),
                threat_tags=signal.tags,
                raw=signal.details,
                duration_ms=duration,
            )

        duration = elapsed_ms(started, time.perf_counter())
        logger.warning(f"{self.provider.value}: check failed for {url}: {error}")
        return ProviderResult.failed(self.provider, error, duration_ms=duration)

    def simulated_result(self, url: str) -> ProviderResult:
        """Deterministic stand-in result used when no API key is configured."""
        simulation = simulate(url, self.simulation_salt)
        logger.debug(f"{self.provider.value}: not configured, simulated risk={simulation.risk}")
        return ProviderResult(
            provider=self.provider,
            safe=simulation.safe,
            score=simulation.score,
            threat_tags=simulation.tags,
            raw=self.simulated_details(url, simulation),
            simulated=True,
        )

    def get_status(self) -> Dict[str, Any]:
        """Describe this provider for status endpoints."""
        return {
            "provider": self.provider.value,
            "name": self.name,
            "configured": self.is_configured,
            "requires_key": self.requires_api_key,
            "simulated": not self.is_configured,
            "base_url": self.base_url,
            "capabilities": list(self.capabilities),
            "timeout": self.timeout,
        }

    # =========================================================================
    # Subclass hooks
    # =========================================================================

    @abstractmethod
    async def _fetch(self, url: str) -> Dict[str, Any]:
        """Query the provider and return the decoded response body."""
        pass

    @abstractmethod
    def normalize(self, data: Dict[str, Any]) -> NormalizedSignal:
        """Translate a provider response into the shared schema."""
        pass

    def simulated_details(self, url: str, simulation: Simulation) -> Dict[str, Any]:
        """Provider shaped raw details for simulated results."""
        return {"risk": simulation.risk}

    # =========================================================================
    # Helpers
    # =========================================================================

    def _client_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.timeout)

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        accept_statuses: Tuple[int, ...] = (200,),
        **kwargs,
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Send one request and decode a JSON object body.

        Args:
            method: HTTP method
            endpoint: Absolute URL
            accept_statuses: Statuses treated as a usable answer

        Returns:
            Tuple of (status, body)

        Raises:
            ProviderHTTPError: On any other status
            ProviderResponseError: If the body is not a JSON object
        """
        async with aiohttp.ClientSession(timeout=self._client_timeout()) as session:
            async with session.request(method, endpoint, **kwargs) as response:
                if response.status not in accept_statuses:
                    text = await response.text()
                    raise ProviderHTTPError(self.provider.value, response.status, text[:200] or None)
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise ProviderResponseError(self.provider.value, f"Invalid JSON: {e}") from e
                if not isinstance(data, dict):
                    raise ProviderResponseError(self.provider.value, "Expected a JSON object")
                return response.status, data

    def _require(self, data: Dict[str, Any], key: str) -> Any:
        """Fetch a mandatory key from a response body."""
        if not isinstance(data, dict) or key not in data:
            raise ProviderResponseError(self.provider.value, f"Response missing '{key}'")
        return data[key]

    @staticmethod
    def _bound_score(score: Optional[float]) -> Optional[int]:
        if score is None:
            return None
        return round_half_up(clamp(float(score)))
