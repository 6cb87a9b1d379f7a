"""
LinkGuard Weighted Consensus Scoring

Fuses per-provider results into one score, one safety verdict and a
confidence value.

Rules:
- overall score is the weighted mean over providers that answered with a
  score; disabled and errored providers are left out, never counted as 0
- safety is a simple majority of safe vs unsafe votes; a tie is "unknown"
- confidence = answered providers / registered providers
"""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from linkguard.models.security import (
    ProviderResult,
    SafetyVerdict,
    SecuritySummary,
)
from linkguard.utils.exceptions import ConfigurationError
from linkguard.utils.helpers import clamp, round_half_up

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 1e-6


@dataclass(frozen=True)
class ScoreOutcome:
    """Result of fusing provider results."""
    overall_score: Optional[int]
    overall_safety: SafetyVerdict
    confidence: float


class WeightedConsensusScorer:
    """
    Weighted mean score plus majority vote.

    Weights are keyed by provider id and must each lie in [0, 1] and sum
    to 1.0 across the roster.
    """

    def __init__(self, weights: Mapping[str, float], require_unit_sum: bool = True):
        self.weights: Dict[str, float] = {str(k): float(v) for k, v in weights.items()}
        self._validate(require_unit_sum)

    def _validate(self, require_unit_sum: bool) -> None:
        for provider, weight in self.weights.items():
            if weight < 0 or weight > 1:
                raise ConfigurationError(f"Weight for {provider} must be between 0 and 1, got {weight}")
        total = sum(self.weights.values())
        if require_unit_sum and abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ConfigurationError(f"Provider weights must sum to 1.0, got {total:.6f}")

    def weight_for(self, provider: str) -> float:
        return self.weights.get(provider, 0.0)

    def score(self, results: Sequence[ProviderResult]) -> ScoreOutcome:
        """
        Fuse provider results.

        Args:
            results: One result per registered provider, disabled ones included

        Returns:
            ScoreOutcome
        """
        answered = [r for r in results if r.answered]

        weighted_sum = 0.0
        weight_sum = 0.0
        for result in answered:
            if result.score is None:
                continue
            weight = self.weight_for(result.provider.value)
            weighted_sum += weight * result.score
            weight_sum += weight

        overall_score = None
        if weight_sum > 0:
            overall_score = round_half_up(clamp(weighted_sum / weight_sum))

        safe_votes = sum(1 for r in answered if r.safe is True)
        unsafe_votes = sum(1 for r in answered if r.safe is False)

        if overall_score is None:
            overall_safety = SafetyVerdict.UNKNOWN
        elif safe_votes > unsafe_votes:
            overall_safety = SafetyVerdict.SAFE
        elif unsafe_votes > safe_votes:
            overall_safety = SafetyVerdict.UNSAFE
        else:
            overall_safety = SafetyVerdict.UNKNOWN

        confidence = 0.0
        if results:
            confidence = round(clamp(len(answered) / len(results), 0.0, 1.0), 4)

        logger.debug(
            f"Consensus: score={overall_score} safe={safe_votes} unsafe={unsafe_votes} "
            f"answered={len(answered)}/{len(results)}"
        )
        return ScoreOutcome(
            overall_score=overall_score,
            overall_safety=overall_safety,
            confidence=confidence,
        )


def summarize(results: Sequence[ProviderResult]) -> SecuritySummary:
    """Count results by outcome."""
    return SecuritySummary(
        total=len(results),
        enabled=sum(1 for r in results if r.enabled),
        safe=sum(1 for r in results if r.answered and r.safe is True),
        unsafe=sum(1 for r in results if r.answered and r.safe is False),
        errors=sum(1 for r in results if r.enabled and r.error is not None),
        simulated=sum(1 for r in results if r.simulated),
    )
