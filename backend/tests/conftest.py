"""
LinkGuard Test Configuration

Pytest fixtures and configuration.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from linkguard.models.security import ProviderName
from linkguard.services.security.aggregator import (
    AggregationConfig,
    ProviderRegistration,
    SecurityAggregator,
)
from linkguard.services.security.base import BaseSecurityProvider, NormalizedSignal
from linkguard.services.security.scoring import WeightedConsensusScorer


class StubProvider(BaseSecurityProvider):
    """
    Configured provider whose reply is scripted.

    payload:  {"score": int|None, "safe": bool|None}
    error:    exception raised from _fetch
    delay:    seconds slept before answering
    """

    def __init__(
        self,
        name: ProviderName,
        payload: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        timeout: float = 10,
    ):
        super().__init__(api_key="test-key", timeout=timeout)
        self.provider = name
        self.payload = payload or {}
        self.error = error
        self.delay = delay
        self.calls = 0

    async def _fetch(self, url: str) -> Dict[str, Any]:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload

    def normalize(self, data: Dict[str, Any]) -> NormalizedSignal:
        return NormalizedSignal(score=data.get("score"), safe=data.get("safe"))


@pytest.fixture
def stub_provider():
    """Factory for StubProvider instances."""
    return StubProvider


@pytest.fixture
def make_aggregator():
    """
    Build an aggregator from (provider, weight[, enabled]) tuples.

    Weights need not cover every ProviderName, only the registered ones.
    """
    def _make(
        entries: List[tuple],
        provider_timeout: float = 10,
        global_timeout: float = 30,
    ) -> SecurityAggregator:
        registrations = []
        for entry in entries:
            provider, weight = entry[0], entry[1]
            enabled = entry[2] if len(entry) > 2 else True
            registrations.append(ProviderRegistration(provider=provider, weight=weight, enabled=enabled))
        config = AggregationConfig(
            registrations=registrations,
            provider_timeout=provider_timeout,
            global_timeout=global_timeout,
        )
        return SecurityAggregator(config, scorer=WeightedConsensusScorer(config.weights()))

    return _make


@pytest.fixture
def roster_names() -> List[ProviderName]:
    """Every provider in default roster order."""
    return [
        ProviderName.VIRUSTOTAL,
        ProviderName.GOOGLE_SAFEBROWSING,
        ProviderName.PHISHTANK,
        ProviderName.IPQUALITYSCORE,
        ProviderName.NATIONAL_FEED,
        ProviderName.SCAMADVISER,
        ProviderName.CRIMINALIP,
    ]
