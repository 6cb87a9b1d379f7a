"""
LinkGuard Security Aggregator

Fans a URL out to every registered provider concurrently and fuses the
answers into a SecurityVerdict.

Graceful degradation: a provider that fails, hangs or is switched off
only lowers confidence. analyze() raises only for an invalid URL, and it
does so before any provider is contacted.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from linkguard.config.scoring import ScoringConfig, get_scoring_config
from linkguard.config.settings import Settings, get_settings
from linkguard.models.security import ProviderName, ProviderResult, SecurityVerdict
from linkguard.services.security.base import BaseSecurityProvider
from linkguard.services.security.criminalip import CriminalIPProvider
from linkguard.services.security.google_safebrowsing import GoogleSafeBrowsingProvider
from linkguard.services.security.ipqualityscore import IPQualityScoreProvider
from linkguard.services.security.national_feed import NationalFeedProvider
from linkguard.services.security.phishtank import PhishTankProvider
from linkguard.services.security.retry import RetryingProvider, with_retry
from linkguard.services.security.scamadviser import ScamAdviserProvider
from linkguard.services.security.scoring import WeightedConsensusScorer, summarize
from linkguard.services.security.virustotal import VirusTotalProvider
from linkguard.utils.constants import AGGREGATION_TIMEOUT_SECONDS, PROVIDER_TIMEOUT_SECONDS
from linkguard.utils.exceptions import ConfigurationError
from linkguard.utils.helpers import elapsed_ms
from linkguard.utils.validators import validate_url

logger = logging.getLogger(__name__)


@dataclass
class ProviderRegistration:
    """One roster entry: the provider, its consensus weight and its switch."""
    provider: Any
    weight: float
    enabled: bool = True

    @property
    def name(self) -> ProviderName:
        return self.provider.provider


@dataclass
class AggregationConfig:
    """Explicit roster and time budgets for one aggregator."""
    registrations: List[ProviderRegistration] = field(default_factory=list)
    provider_timeout: float = PROVIDER_TIMEOUT_SECONDS
    global_timeout: float = AGGREGATION_TIMEOUT_SECONDS

    def weights(self) -> Dict[str, float]:
        return {reg.name.value: reg.weight for reg in self.registrations}


class SecurityAggregator:
    """
    Concurrent multi-provider URL checker.

    Results always come back in registration order, whatever order the
    providers finish in.
    """

    def __init__(
        self,
        config: AggregationConfig,
        scorer: Optional[WeightedConsensusScorer] = None,
    ):
        names = [reg.name for reg in config.registrations]
        if len(set(names)) != len(names):
            raise ConfigurationError("Each provider may be registered only once")
        if config.provider_timeout <= 0 or config.global_timeout <= 0:
            raise ConfigurationError("Timeouts must be positive")

        self.config = config
        self.scorer = scorer or WeightedConsensusScorer(config.weights())

    @property
    def registrations(self) -> List[ProviderRegistration]:
        return self.config.registrations

    async def analyze(self, url: str) -> SecurityVerdict:
        """
        Check a URL with every enabled provider and fuse the results.

        Args:
            url: URL to check

        Returns:
            SecurityVerdict with one result per registered provider

        Raises:
            InvalidURLError: If the URL is not a valid http(s) URL
        """
        normalized = validate_url(url)
        started = time.perf_counter()

        results: List[Optional[ProviderResult]] = [None] * len(self.registrations)
        tasks: Dict[asyncio.Task, int] = {}

        for index, registration in enumerate(self.registrations):
            if not registration.enabled:
                results[index] = ProviderResult.disabled(registration.name)
                continue
            task = asyncio.create_task(
                self._run_provider(registration, normalized),
                name=f"check-{registration.name.value}",
            )
            tasks[task] = index

        logger.info(f"Checking {normalized} with {len(tasks)}/{len(self.registrations)} providers")

        try:
            if tasks:
                done, pending = await asyncio.wait(tasks.keys(), timeout=self.config.global_timeout)
                for task in pending:
                    task.cancel()
                for task, index in tasks.items():
                    results[index] = self._collect(task, done, self.registrations[index])
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        ordered = [r for r in results if r is not None]
        outcome = self.scorer.score(ordered)
        summary = summarize(ordered)
        duration = elapsed_ms(started, time.perf_counter())

        logger.info(
            f"Security check: {summary.enabled - summary.errors}/{summary.total} providers answered, "
            f"score={outcome.overall_score}, safety={outcome.overall_safety.value}, "
            f"confidence={outcome.confidence:.0%} ({duration}ms)"
        )

        return SecurityVerdict(
            url=normalized,
            overall_score=outcome.overall_score,
            overall_safety=outcome.overall_safety,
            confidence=outcome.confidence,
            provider_results=ordered,
            summary=summary,
            duration_ms=duration,
        )

    async def _run_provider(self, registration: ProviderRegistration, url: str) -> ProviderResult:
        """Run one provider under the per-provider deadline."""
        started = time.perf_counter()
        deadline = self._deadline_for(registration)
        try:
            return await asyncio.wait_for(registration.provider.check(url), timeout=deadline)
        except asyncio.TimeoutError:
            error = f"Request timed out after {deadline:g}s"
        except Exception as e:
            # check() is not supposed to raise; keep the fan-out alive if it does
            logger.exception(f"{registration.name.value}: provider raised")
            error = f"Unexpected error: {e}"

        logger.warning(f"{registration.name.value}: {error}")
        return ProviderResult.failed(
            registration.name,
            error,
            duration_ms=elapsed_ms(started, time.perf_counter()),
        )

    def _deadline_for(self, registration: ProviderRegistration) -> float:
        """Per-provider deadline; retried providers get one slot per attempt."""
        provider = registration.provider
        if not isinstance(provider, RetryingProvider):
            return self.config.provider_timeout
        attempts = provider.max_attempts
        return self.config.provider_timeout * attempts + provider.max_backoff * (attempts - 1)

    def _collect(self, task: asyncio.Task, done: set, registration: ProviderRegistration) -> ProviderResult:
        if task not in done:
            logger.warning(f"{registration.name.value}: still running at global deadline, cancelled")
            return ProviderResult.failed(
                registration.name,
                f"Timed out after {self.config.global_timeout:g}s waiting for provider",
                duration_ms=int(self.config.global_timeout * 1000),
            )
        if task.cancelled():
            return ProviderResult.failed(registration.name, "Check was cancelled")
        error = task.exception()
        if error is not None:
            return ProviderResult.failed(registration.name, f"Unexpected error: {error}")
        return task.result()

    def get_status(self) -> Dict[str, Any]:
        """Roster status for monitoring endpoints."""
        providers = []
        for registration in self.registrations:
            status = registration.provider.get_status()
            status["weight"] = registration.weight
            status["enabled"] = registration.enabled
            providers.append(status)
        return {
            "providers": providers,
            "total": len(providers),
            "enabled": sum(1 for p in providers if p["enabled"]),
            "configured": sum(1 for p in providers if p["enabled"] and p["configured"]),
            "provider_timeout": self.config.provider_timeout,
            "global_timeout": self.config.global_timeout,
        }


# =============================================================================
# FACTORY
# =============================================================================

def build_providers(settings: Settings) -> List[BaseSecurityProvider]:
    """Instantiate every provider in roster order."""
    timeout = settings.provider_timeout_seconds
    return [
        VirusTotalProvider(api_key=settings.virustotal_api_key, timeout=timeout),
        GoogleSafeBrowsingProvider(api_key=settings.google_safebrowsing_api_key, timeout=timeout),
        PhishTankProvider(api_key=settings.phishtank_api_key, timeout=timeout),
        IPQualityScoreProvider(api_key=settings.ipqualityscore_api_key, timeout=timeout),
        NationalFeedProvider(
            api_key=settings.national_feed_api_key,
            timeout=timeout,
            base_url=settings.national_feed_base_url,
        ),
        ScamAdviserProvider(api_key=settings.scamadviser_api_key, timeout=timeout),
        CriminalIPProvider(api_key=settings.criminalip_api_key, timeout=timeout),
    ]


def build_aggregation_config(
    settings: Settings,
    scoring: Optional[ScoringConfig] = None,
) -> AggregationConfig:
    """Build the explicit roster from settings and scoring weights."""
    scoring = scoring or get_scoring_config()
    enabled = settings.get_enabled_providers()

    known = {name.value for name in ProviderName}
    if enabled is not None:
        unknown = sorted(set(enabled) - known)
        if unknown:
            raise ConfigurationError(f"Unknown providers in ENABLED_PROVIDERS: {', '.join(unknown)}")

    registrations = []
    for provider in build_providers(settings):
        name = provider.provider.value
        registrations.append(ProviderRegistration(
            provider=with_retry(provider, settings.provider_max_attempts),
            weight=scoring.provider_weights.get_weight(name),
            enabled=enabled is None or name in enabled,
        ))

    return AggregationConfig(
        registrations=registrations,
        provider_timeout=settings.provider_timeout_seconds,
        global_timeout=settings.aggregation_timeout_seconds,
    )


def build_security_aggregator(
    settings: Optional[Settings] = None,
    scoring: Optional[ScoringConfig] = None,
) -> SecurityAggregator:
    """Create an aggregator wired from configuration."""
    settings = settings or get_settings()
    return SecurityAggregator(build_aggregation_config(settings, scoring))
