"""
LinkGuard Link Check Data Models

Pydantic models for content analysis, screenshots and the combined
result returned to API callers.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from linkguard.models.security import (
    ProviderResult,
    SafetyVerdict,
    SecuritySummary,
    SecurityVerdict,
)
from linkguard.utils.helpers import utc_now


class LinkStatus(str, Enum):
    """Final classification shown to the user."""
    SAFE = "safe"
    SUSPICIOUS = "suspicious"
    DANGEROUS = "dangerous"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# =============================================================================
# CONTENT ANALYSIS
# =============================================================================

class ContentQuality(_CamelModel):
    """Structural statistics of the page body."""
    word_count: int = 0
    paragraph_count: int = 0
    heading_count: int = 0
    image_count: int = 0
    link_count: int = 0
    has_structure: bool = False
    content_ratio: float = Field(0.0, description="Visible text as a percentage of body markup")


class TechnicalFactors(_CamelModel):
    """Transport level facts about the fetched page."""
    has_ssl: bool = False
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    server: Optional[str] = None
    security_headers: List[str] = Field(default_factory=list)


class ContentAnalysis(_CamelModel):
    """Metadata and credibility assessment of a page."""
    url: str
    final_url: Optional[str] = None
    title: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)
    language: str = "en"
    content_quality: ContentQuality = Field(default_factory=ContentQuality)
    technical: TechnicalFactors = Field(default_factory=TechnicalFactors)
    credibility_score: int = Field(50, ge=0, le=100)
    simulated: bool = False
    error: Optional[str] = None
    analyzed_at: datetime = Field(default_factory=utc_now)


# =============================================================================
# SCREENSHOT
# =============================================================================

class ScreenshotResult(_CamelModel):
    """Screenshot reference for a URL."""
    url: str
    screenshot_url: str
    success: bool = True
    simulated: bool = False
    attempts: int = 1
    size: Optional[int] = None
    format: Optional[str] = None
    error: Optional[str] = None
    captured_at: datetime = Field(default_factory=utc_now)


# =============================================================================
# COMBINED RESULT
# =============================================================================

class SecurityReport(_CamelModel):
    """Security section of a link check result."""
    overall_safety: SafetyVerdict = SafetyVerdict.UNKNOWN
    overall_score: Optional[int] = None
    confidence: float = 0.0
    summary: SecuritySummary = Field(default_factory=SecuritySummary)
    details: List[ProviderResult] = Field(default_factory=list)
    duration_ms: int = 0

    @classmethod
    def from_verdict(cls, verdict: SecurityVerdict) -> "SecurityReport":
        return cls(
            overall_safety=verdict.overall_safety,
            overall_score=verdict.overall_score,
            confidence=verdict.confidence,
            summary=verdict.summary,
            details=verdict.provider_results,
            duration_ms=verdict.duration_ms,
        )


class LinkCheckResult(_CamelModel):
    """Everything known about a checked link."""
    url: str
    status: LinkStatus
    final_score: int = Field(..., ge=0, le=100)
    security_score: int = Field(..., ge=0, le=100)
    credibility_score: int = Field(..., ge=0, le=100)
    security: SecurityReport
    content: Optional[ContentAnalysis] = None
    screenshot: Optional[ScreenshotResult] = None
    checked_at: datetime = Field(default_factory=utc_now)
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
