"""
LinkGuard Link Checker

Assembles the final answer for a link: security verdict, content
credibility and screenshot, blended into one score and status.

    final_score = 0.6 * security_score + 0.4 * credibility_score
    status      = safe (>= 60) | suspicious (30-59) | dangerous (< 30)
"""

import asyncio
import logging
import time
from typing import Optional

from linkguard.config.scoring import FinalScoreConfig, get_scoring_config
from linkguard.config.settings import get_settings
from linkguard.models.link import (
    ContentAnalysis,
    LinkCheckResult,
    LinkStatus,
    ScreenshotResult,
    SecurityReport,
)
from linkguard.models.security import SecurityVerdict
from linkguard.services.content.crawler import ContentAnalyzer, simulated_analysis
from linkguard.services.content.screenshot import ScreenshotService, placeholder_url_for
from linkguard.services.security.aggregator import SecurityAggregator, build_security_aggregator
from linkguard.utils.constants import NEUTRAL_SCORE
from linkguard.utils.helpers import clamp, elapsed_ms, round_half_up
from linkguard.utils.validators import validate_url

logger = logging.getLogger(__name__)


def calculate_final_score(
    security_score: Optional[int],
    credibility_score: int,
    config: Optional[FinalScoreConfig] = None,
) -> int:
    """
    Blend security and credibility scores.

    A missing security score (no provider answered) counts as neutral 50.
    """
    config = config or FinalScoreConfig()
    security = NEUTRAL_SCORE if security_score is None else security_score
    blended = security * config.security_weight + credibility_score * config.credibility_weight
    return round_half_up(clamp(blended))


def classify_final_score(final_score: int, config: Optional[FinalScoreConfig] = None) -> LinkStatus:
    """Map a final score to safe / suspicious / dangerous."""
    config = config or FinalScoreConfig()
    if final_score >= config.safe_min:
        return LinkStatus.SAFE
    if final_score >= config.suspicious_min:
        return LinkStatus.SUSPICIOUS
    return LinkStatus.DANGEROUS


class LinkChecker:
    """Runs security, content and screenshot checks for one URL concurrently."""

    def __init__(
        self,
        aggregator: SecurityAggregator,
        content_analyzer: Optional[ContentAnalyzer] = None,
        screenshot_service: Optional[ScreenshotService] = None,
        final_score_config: Optional[FinalScoreConfig] = None,
    ):
        self.aggregator = aggregator
        self.content_analyzer = content_analyzer or ContentAnalyzer()
        self.screenshot_service = screenshot_service or ScreenshotService()
        self.final_score_config = final_score_config or FinalScoreConfig()

    async def check(self, url: str) -> LinkCheckResult:
        """
        Check a link end to end.

        Args:
            url: URL submitted by the caller

        Returns:
            LinkCheckResult

        Raises:
            InvalidURLError: If the URL is not a valid http(s) URL
        """
        normalized = validate_url(url)
        started = time.perf_counter()

        verdict, content, screenshot = await asyncio.gather(
            self.aggregator.analyze(normalized),
            self.content_analyzer.analyze(normalized),
            self.screenshot_service.capture_with_retry(normalized),
            return_exceptions=True,
        )

        # The aggregator degrades internally; anything raised here is a bug
        if isinstance(verdict, BaseException):
            logger.error(f"Security analysis failed for {normalized}: {verdict}")
            verdict = SecurityVerdict(url=normalized)
        if isinstance(content, BaseException):
            logger.warning(f"Content analysis failed for {normalized}: {content}")
            content = simulated_analysis(normalized, error=str(content))
        if isinstance(screenshot, BaseException):
            logger.warning(f"Screenshot failed for {normalized}: {screenshot}")
            screenshot = ScreenshotResult(
                url=normalized,
                screenshot_url=placeholder_url_for(normalized),
                success=False,
                simulated=True,
                error=str(screenshot),
            )

        return self.assemble(normalized, verdict, content, screenshot, elapsed_ms(started, time.perf_counter()))

    def assemble(
        self,
        url: str,
        verdict: SecurityVerdict,
        content: ContentAnalysis,
        screenshot: Optional[ScreenshotResult] = None,
        duration_ms: int = 0,
    ) -> LinkCheckResult:
        """Combine the partial results into the final answer."""
        security_score = NEUTRAL_SCORE if verdict.overall_score is None else verdict.overall_score
        final_score = calculate_final_score(
            verdict.overall_score,
            content.credibility_score,
            self.final_score_config,
        )
        status = classify_final_score(final_score, self.final_score_config)

        logger.info(
            f"Link check {url}: status={status.value} final={final_score} "
            f"security={security_score} credibility={content.credibility_score}"
        )

        return LinkCheckResult(
            url=url,
            status=status,
            final_score=final_score,
            security_score=security_score,
            credibility_score=content.credibility_score,
            security=SecurityReport.from_verdict(verdict),
            content=content,
            screenshot=screenshot,
            duration_ms=duration_ms,
        )


_link_checker: Optional[LinkChecker] = None


def get_link_checker() -> LinkChecker:
    """Get or create the shared link checker."""
    global _link_checker
    if _link_checker is None:
        settings = get_settings()
        scoring = get_scoring_config()
        _link_checker = LinkChecker(
            aggregator=build_security_aggregator(settings, scoring),
            screenshot_service=ScreenshotService(api_key=settings.screenshotlayer_api_key),
            final_score_config=scoring.final_score,
        )
    return _link_checker


def reset_link_checker() -> None:
    global _link_checker
    _link_checker = None
