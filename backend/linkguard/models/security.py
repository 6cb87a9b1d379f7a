"""
LinkGuard Security Data Models

Pydantic models for per-provider results and the aggregated verdict.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from linkguard.utils.helpers import utc_now


class ProviderName(str, Enum):
    """Threat intelligence providers known to the aggregator."""
    VIRUSTOTAL = "virustotal"
    GOOGLE_SAFEBROWSING = "google_safebrowsing"
    PHISHTANK = "phishtank"
    IPQUALITYSCORE = "ipqualityscore"
    NATIONAL_FEED = "national_feed"
    SCAMADVISER = "scamadviser"
    CRIMINALIP = "criminalip"

    @property
    def display_name(self) -> str:
        return PROVIDER_DISPLAY_NAMES[self]


PROVIDER_DISPLAY_NAMES: Dict[ProviderName, str] = {
    ProviderName.VIRUSTOTAL: "VirusTotal",
    ProviderName.GOOGLE_SAFEBROWSING: "Google Safe Browsing",
    ProviderName.PHISHTANK: "PhishTank",
    ProviderName.IPQUALITYSCORE: "IPQualityScore",
    ProviderName.NATIONAL_FEED: "National Threat Feed",
    ProviderName.SCAMADVISER: "ScamAdviser",
    ProviderName.CRIMINALIP: "Criminal IP",
}


class SafetyVerdict(str, Enum):
    """Consensus safety verdict."""
    SAFE = "safe"
    UNSAFE = "unsafe"
    UNKNOWN = "unknown"


class ThreatTag(str, Enum):
    """Shared threat vocabulary all providers map into."""
    MALWARE = "malware"
    PHISHING = "phishing"
    SUSPICIOUS = "suspicious"
    SCAM = "scam"
    UNWANTED_SOFTWARE = "unwanted_software"
    SPAM = "spam"
    COMPROMISED = "compromised"


class _CamelModel(BaseModel):
    """Immutable model serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ProviderResult(_CamelModel):
    """Normalized answer from a single provider."""
    provider: ProviderName = Field(..., description="Provider identifier")
    enabled: bool = Field(True, description="Provider participated in this check")
    safe: Optional[bool] = Field(None, description="Provider verdict, None when unknown")
    score: Optional[int] = Field(None, ge=0, le=100, description="Trust score, 100 = trustworthy")
    threat_tags: List[ThreatTag] = Field(default_factory=list)
    raw: Dict[str, Any] = Field(default_factory=dict, description="Provider specific details")
    error: Optional[str] = Field(None, description="Failure reason")
    checked_at: datetime = Field(default_factory=utc_now)
    simulated: bool = Field(False, description="Produced by the deterministic fallback")
    duration_ms: int = Field(0, ge=0)

    @field_validator("threat_tags")
    @classmethod
    def _dedupe_tags(cls, tags: List[ThreatTag]) -> List[ThreatTag]:
        return sorted(set(tags), key=lambda tag: tag.value)

    @model_validator(mode="after")
    def _check_consistency(self) -> "ProviderResult":
        if self.error is not None:
            if self.score is not None:
                raise ValueError("error and score are mutually exclusive")
            if self.safe is not None or self.threat_tags:
                raise ValueError("errored result cannot carry a verdict")
        if not self.enabled:
            if self.score is not None or self.error is not None or self.safe is not None:
                raise ValueError("disabled provider cannot carry a result")
            if self.simulated:
                raise ValueError("disabled provider cannot be simulated")
        return self

    @property
    def answered(self) -> bool:
        """Provider ran and returned a usable answer."""
        return self.enabled and self.error is None

    @classmethod
    def failed(
        cls,
        provider: ProviderName,
        error: str,
        duration_ms: int = 0,
        raw: Optional[Dict[str, Any]] = None,
    ) -> "ProviderResult":
        return cls(
            provider=provider,
            error=error,
            duration_ms=duration_ms,
            raw=raw or {},
        )

    @classmethod
    def disabled(cls, provider: ProviderName) -> "ProviderResult":
        return cls(provider=provider, enabled=False)


class SecuritySummary(_CamelModel):
    """Counts across all provider results."""
    total: int = 0
    enabled: int = 0
    safe: int = 0
    unsafe: int = 0
    errors: int = 0
    simulated: int = 0


class SecurityVerdict(_CamelModel):
    """Aggregated security verdict for one URL."""
    url: str = Field(..., description="Normalized URL that was checked")
    overall_score: Optional[int] = Field(None, ge=0, le=100)
    overall_safety: SafetyVerdict = Field(SafetyVerdict.UNKNOWN)
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    provider_results: List[ProviderResult] = Field(default_factory=list)
    summary: SecuritySummary = Field(default_factory=SecuritySummary)
    duration_ms: int = Field(0, ge=0)
    checked_at: datetime = Field(default_factory=utc_now)
