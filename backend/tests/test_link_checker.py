"""
LinkGuard - Link Checker Tests

Tests for the final score blend, status classification and result assembly.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from linkguard.config.scoring import FinalScoreConfig
from linkguard.models.link import ContentAnalysis, LinkStatus
from linkguard.models.security import ProviderName
from linkguard.services.content.screenshot import ScreenshotService
from linkguard.services.link_checker import (
    LinkChecker,
    calculate_final_score,
    classify_final_score,
)
from linkguard.utils.exceptions import InvalidURLError, ProviderHTTPError


URL = "https://shop.example.com/deal"


class TestFinalScore:
    """Tests for calculate_final_score() and classify_final_score()."""

    def test_blend(self):
        """Test 60% security plus 40% credibility."""
        assert calculate_final_score(80, 50) == 68

    def test_missing_security_is_neutral(self):
        """Test no security score counts as 50."""
        assert calculate_final_score(None, 40) == 46

    def test_custom_weights(self):
        config = FinalScoreConfig(security_weight=0.5, credibility_weight=0.5)
        assert calculate_final_score(90, 30, config) == 60

    @pytest.mark.parametrize("score,status", [
        (100, LinkStatus.SAFE),
        (60, LinkStatus.SAFE),
        (59, LinkStatus.SUSPICIOUS),
        (30, LinkStatus.SUSPICIOUS),
        (29, LinkStatus.DANGEROUS),
        (0, LinkStatus.DANGEROUS),
    ])
    def test_classification_boundaries(self, score, status):
        assert classify_final_score(score) == status


def _content_analyzer(credibility: int):
    analyzer = MagicMock()
    analyzer.analyze = AsyncMock(
        side_effect=lambda url: ContentAnalysis(url=url, title="Deal", credibility_score=credibility)
    )
    return analyzer


class TestLinkChecker:
    """Tests for LinkChecker.check()."""

    def test_check_assembles_result(self, make_aggregator, stub_provider):
        """Test all three checks are combined into one result."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 80, "safe": True})
        checker = LinkChecker(
            aggregator=make_aggregator([(vt, 1.0)]),
            content_analyzer=_content_analyzer(50),
            screenshot_service=ScreenshotService(),
        )

        result = asyncio.run(checker.check(URL))

        assert result.url == URL
        assert result.security_score == 80
        assert result.credibility_score == 50
        assert result.final_score == 68
        assert result.status == LinkStatus.SAFE
        assert result.screenshot.simulated is True
        assert len(result.security.details) == 1

    def test_dangerous_link(self, make_aggregator, stub_provider):
        """Test low security and credibility classify as dangerous."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 5, "safe": False})
        checker = LinkChecker(
            aggregator=make_aggregator([(vt, 1.0)]),
            content_analyzer=_content_analyzer(30),
            screenshot_service=ScreenshotService(),
        )

        result = asyncio.run(checker.check(URL))

        # 0.6*5 + 0.4*30 = 15
        assert result.final_score == 15
        assert result.status == LinkStatus.DANGEROUS

    def test_serialized_keys_are_camel_case(self, make_aggregator, stub_provider):
        """Test the API representation uses camelCase keys."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 80, "safe": True})
        checker = LinkChecker(
            aggregator=make_aggregator([(vt, 1.0)]),
            content_analyzer=_content_analyzer(50),
            screenshot_service=ScreenshotService(),
        )

        data = asyncio.run(checker.check(URL)).to_dict()

        assert data["finalScore"] == 68
        assert data["status"] == "safe"
        assert data["security"]["overallSafety"] == "safe"
        assert data["security"]["details"][0]["provider"] == "virustotal"
        assert "threatTags" in data["security"]["details"][0]
        assert "credibilityScore" in data["content"]
        assert "screenshotUrl" in data["screenshot"]

    def test_content_failure_falls_back(self, make_aggregator, stub_provider):
        """Test a raising content analyzer does not fail the check."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 80, "safe": True})
        analyzer = MagicMock()
        analyzer.analyze = AsyncMock(side_effect=RuntimeError("parser crashed"))
        checker = LinkChecker(
            aggregator=make_aggregator([(vt, 1.0)]),
            content_analyzer=analyzer,
            screenshot_service=ScreenshotService(),
        )

        result = asyncio.run(checker.check(URL))

        assert result.content.simulated is True
        assert result.content.error == "parser crashed"
        assert 30 <= result.credibility_score < 90

    def test_screenshot_failure_falls_back(self, make_aggregator, stub_provider):
        """Test a raising screenshot service yields a placeholder."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 80, "safe": True})
        screenshots = MagicMock()
        screenshots.capture_with_retry = AsyncMock(side_effect=RuntimeError("no browser"))
        checker = LinkChecker(
            aggregator=make_aggregator([(vt, 1.0)]),
            content_analyzer=_content_analyzer(50),
            screenshot_service=screenshots,
        )

        result = asyncio.run(checker.check(URL))

        assert result.screenshot.success is False
        assert "text=shop.example.com" in result.screenshot.screenshot_url

    def test_no_provider_answers(self, make_aggregator, stub_provider):
        """Test a null security score is reported as neutral."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, error=ProviderHTTPError("virustotal", 500))
        checker = LinkChecker(
            aggregator=make_aggregator([(vt, 1.0)]),
            content_analyzer=_content_analyzer(40),
            screenshot_service=ScreenshotService(),
        )

        result = asyncio.run(checker.check(URL))

        assert result.security.overall_score is None
        assert result.security_score == 50
        assert result.final_score == 46
        assert result.status == LinkStatus.SUSPICIOUS

    def test_invalid_url(self, make_aggregator, stub_provider):
        """Test an invalid URL raises before any work is done."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 80, "safe": True})
        analyzer = _content_analyzer(50)
        checker = LinkChecker(
            aggregator=make_aggregator([(vt, 1.0)]),
            content_analyzer=analyzer,
            screenshot_service=ScreenshotService(),
        )

        with pytest.raises(InvalidURLError):
            asyncio.run(checker.check("javascript:alert(1)"))

        assert vt.calls == 0
        analyzer.analyze.assert_not_called()


class TestSharedChecker:
    """Tests for the get_link_checker() singleton."""

    def test_built_from_settings(self, monkeypatch):
        """Test the shared checker is wired from settings and reused."""
        from linkguard.config.scoring import reset_scoring_config
        from linkguard.config.settings import get_settings
        from linkguard.services.link_checker import get_link_checker, reset_link_checker

        monkeypatch.setenv("ENABLED_PROVIDERS", "virustotal,phishtank")
        get_settings.cache_clear()
        reset_scoring_config()
        reset_link_checker()
        try:
            checker = get_link_checker()

            assert get_link_checker() is checker
            enabled = [reg.name.value for reg in checker.aggregator.registrations if reg.enabled]
            assert enabled == ["virustotal", "phishtank"]
            assert checker.final_score_config.security_weight == 0.6
        finally:
            reset_link_checker()
            get_settings.cache_clear()
