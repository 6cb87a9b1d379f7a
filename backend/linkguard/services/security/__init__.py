"""
LinkGuard Security Services

Threat intelligence provider adapters, deterministic simulation,
weighted consensus scoring and the concurrent aggregator.
"""

from .base import BaseSecurityProvider, NormalizedSignal
from .simulation import Simulation, simulate
from .retry import RetryingProvider, with_retry
from .scoring import ScoreOutcome, WeightedConsensusScorer, summarize
from .virustotal import VirusTotalProvider
from .google_safebrowsing import GoogleSafeBrowsingProvider
from .phishtank import PhishTankProvider
from .ipqualityscore import IPQualityScoreProvider
from .national_feed import NationalFeedProvider
from .scamadviser import ScamAdviserProvider
from .criminalip import CriminalIPProvider
from .aggregator import (
    AggregationConfig,
    ProviderRegistration,
    SecurityAggregator,
    build_aggregation_config,
    build_providers,
    build_security_aggregator,
)

__all__ = [
    'BaseSecurityProvider',
    'NormalizedSignal',
    'Simulation',
    'simulate',
    'RetryingProvider',
    'with_retry',
    'ScoreOutcome',
    'WeightedConsensusScorer',
    'summarize',
    'VirusTotalProvider',
    'GoogleSafeBrowsingProvider',
    'PhishTankProvider',
    'IPQualityScoreProvider',
    'NationalFeedProvider',
    'ScamAdviserProvider',
    'CriminalIPProvider',
    'AggregationConfig',
    'ProviderRegistration',
    'SecurityAggregator',
    'build_aggregation_config',
    'build_providers',
    'build_security_aggregator',
]
