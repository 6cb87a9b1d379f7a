"""
LinkGuard Scoring Configuration

Provider weights and final-score thresholds are centralized here.

Usage:
    from linkguard.config.scoring import get_scoring_config
    config = get_scoring_config()

    weight = config.provider_weights.get_weight("virustotal")
"""

import os
import logging
from dataclasses import dataclass, field, fields
from typing import Dict, Optional

from linkguard.utils.constants import (
    CREDIBILITY_SCORE_WEIGHT,
    SAFE_STATUS_MIN_SCORE,
    SECURITY_SCORE_WEIGHT,
    SUSPICIOUS_STATUS_MIN_SCORE,
)
from linkguard.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 1e-6


# =============================================================================
# PROVIDER WEIGHTS
# =============================================================================

@dataclass
class ProviderWeights:
    """Weights for threat intelligence providers in the consensus score."""

    # Antivirus engines
    virustotal: float = 0.25

    # Malware / phishing lists
    google_safebrowsing: float = 0.20
    phishtank: float = 0.15

    # IP/URL reputation
    ipqualityscore: float = 0.15
    criminalip: float = 0.05

    # National threat feed
    national_feed: float = 0.10

    # Domain trust
    scamadviser: float = 0.10

    def get_weight(self, provider: str) -> float:
        """Get weight for a provider id."""
        return getattr(self, provider.lower().replace("-", "_"), 0.0)

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def total(self) -> float:
        return sum(self.as_dict().values())

    def validate(self) -> None:
        """
        Check every weight lies in [0, 1] and the roster sums to 1.0.

        Raises:
            ConfigurationError: If the weights are unusable
        """
        for name, weight in self.as_dict().items():
            if weight < 0 or weight > 1:
                raise ConfigurationError(f"Weight for {name} must be between 0 and 1, got {weight}")
        total = self.total()
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ConfigurationError(f"Provider weights must sum to 1.0, got {total:.6f}")


# =============================================================================
# FINAL SCORE
# =============================================================================

@dataclass
class FinalScoreConfig:
    """Blend of security and credibility scores and status cut-offs."""

    security_weight: float = SECURITY_SCORE_WEIGHT
    credibility_weight: float = CREDIBILITY_SCORE_WEIGHT

    # final >= safe_min -> safe, >= suspicious_min -> suspicious, else dangerous
    safe_min: int = SAFE_STATUS_MIN_SCORE
    suspicious_min: int = SUSPICIOUS_STATUS_MIN_SCORE

    def validate(self) -> None:
        total = self.security_weight + self.credibility_weight
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ConfigurationError(
                f"Security and credibility weights must sum to 1.0, got {total:.6f}"
            )
        if not 0 <= self.suspicious_min <= self.safe_min <= 100:
            raise ConfigurationError("Status thresholds must satisfy 0 <= suspicious <= safe <= 100")


# =============================================================================
# MASTER CONFIGURATION
# =============================================================================

@dataclass
class ScoringConfig:
    """Master scoring configuration."""

    provider_weights: ProviderWeights = field(default_factory=ProviderWeights)
    final_score: FinalScoreConfig = field(default_factory=FinalScoreConfig)

    @classmethod
    def from_env(cls) -> "ScoringConfig":
        """Create config from environment variables."""
        config = cls()

        # Provider weights: PROVIDER_WEIGHT_VIRUSTOTAL=0.3 etc.
        for name in config.provider_weights.as_dict():
            value = os.getenv(f"PROVIDER_WEIGHT_{name.upper()}")
            if value:
                setattr(config.provider_weights, name, float(value))

        if os.getenv("SECURITY_WEIGHT"):
            config.final_score.security_weight = float(os.getenv("SECURITY_WEIGHT"))
        if os.getenv("CREDIBILITY_WEIGHT"):
            config.final_score.credibility_weight = float(os.getenv("CREDIBILITY_WEIGHT"))
        if os.getenv("STATUS_SAFE_MIN"):
            config.final_score.safe_min = int(os.getenv("STATUS_SAFE_MIN"))
        if os.getenv("STATUS_SUSPICIOUS_MIN"):
            config.final_score.suspicious_min = int(os.getenv("STATUS_SUSPICIOUS_MIN"))

        config.provider_weights.validate()
        config.final_score.validate()
        return config


# =============================================================================
# GLOBAL CONFIG INSTANCE
# =============================================================================

_scoring_config: Optional[ScoringConfig] = None


def get_scoring_config() -> ScoringConfig:
    """Get the global scoring configuration."""
    global _scoring_config
    if _scoring_config is None:
        _scoring_config = ScoringConfig.from_env()
        logger.info("Loaded scoring configuration")
    return _scoring_config


def reset_scoring_config() -> None:
    """Reset to default configuration."""
    global _scoring_config
    _scoring_config = None
