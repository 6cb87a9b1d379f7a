"""
LinkGuard - Security Aggregator Tests

Tests for concurrent fan-out, ordering, timeouts and graceful degradation.
"""

import asyncio
import time

import pytest

from linkguard.config.settings import Settings
from linkguard.models.security import ProviderName, SafetyVerdict
from linkguard.services.security.aggregator import (
    AggregationConfig,
    ProviderRegistration,
    SecurityAggregator,
    build_aggregation_config,
    build_security_aggregator,
)
from linkguard.services.security.retry import RetryingProvider
from linkguard.utils.exceptions import ConfigurationError, InvalidURLError, ProviderHTTPError


URL = "https://example.com/account/verify"


class TestFanOut:
    """Tests for SecurityAggregator.analyze()."""

    def test_results_keep_registration_order(self, make_aggregator, stub_provider):
        """Test result order follows registration, not completion."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 90, "safe": True}, delay=0.15)
        gsb = stub_provider(ProviderName.GOOGLE_SAFEBROWSING, {"score": 80, "safe": True}, delay=0.05)
        pt = stub_provider(ProviderName.PHISHTANK, {"score": 95, "safe": True}, delay=0.0)
        aggregator = make_aggregator([(vt, 0.5), (gsb, 0.3), (pt, 0.2)])

        verdict = asyncio.run(aggregator.analyze(URL))

        assert [r.provider for r in verdict.provider_results] == [
            ProviderName.VIRUSTOTAL,
            ProviderName.GOOGLE_SAFEBROWSING,
            ProviderName.PHISHTANK,
        ]
        assert verdict.overall_safety == SafetyVerdict.SAFE
        assert verdict.confidence == 1.0

    def test_providers_run_concurrently(self, make_aggregator, stub_provider):
        """Test total time is close to the slowest provider, not the sum."""
        providers = [
            stub_provider(name, {"score": 70, "safe": True}, delay=0.2)
            for name in (ProviderName.VIRUSTOTAL, ProviderName.PHISHTANK, ProviderName.CRIMINALIP)
        ]
        aggregator = make_aggregator([(p, 1 / 3) for p in providers])

        started = time.perf_counter()
        asyncio.run(aggregator.analyze(URL))
        elapsed = time.perf_counter() - started

        assert elapsed < 0.5

    def test_url_is_normalized(self, make_aggregator, stub_provider):
        """Test the verdict carries the normalized URL."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 90, "safe": True})
        aggregator = make_aggregator([(vt, 1.0)])

        verdict = asyncio.run(aggregator.analyze("  HTTPS://Example.COM#top "))

        assert verdict.url == "https://example.com/"

    def test_invalid_url_contacts_nobody(self, make_aggregator, stub_provider):
        """Test an invalid URL raises before any provider is called."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 90, "safe": True})
        aggregator = make_aggregator([(vt, 1.0)])

        with pytest.raises(InvalidURLError):
            asyncio.run(aggregator.analyze("ftp://example.com/file"))

        assert vt.calls == 0

    def test_disabled_provider(self, make_aggregator, stub_provider):
        """Test a disabled provider is reported but never called."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, {"score": 90, "safe": True})
        pt = stub_provider(ProviderName.PHISHTANK, {"score": 0, "safe": False})
        aggregator = make_aggregator([(vt, 0.5), (pt, 0.5, False)])

        verdict = asyncio.run(aggregator.analyze(URL))
        disabled = verdict.provider_results[1]

        assert pt.calls == 0
        assert disabled.enabled is False
        assert disabled.score is None
        assert verdict.overall_score == 90
        assert verdict.confidence == 0.5
        assert verdict.summary.enabled == 1


class TestTimeouts:
    """Tests for per-provider and global deadlines."""

    def test_global_deadline(self, make_aggregator, stub_provider):
        """Test a hanging provider is cut off without holding up the rest."""
        hanging = stub_provider(ProviderName.VIRUSTOTAL, {"score": 90, "safe": True}, delay=3600)
        fast = stub_provider(ProviderName.PHISHTANK, {"score": 95, "safe": True})
        aggregator = make_aggregator([(hanging, 0.5), (fast, 0.5)], global_timeout=0.2)

        started = time.perf_counter()
        verdict = asyncio.run(aggregator.analyze(URL))
        elapsed = time.perf_counter() - started

        assert elapsed < 2
        assert verdict.provider_results[0].error == "Timed out after 0.2s waiting for provider"
        assert verdict.provider_results[1].score == 95
        assert verdict.overall_score == 95
        assert verdict.confidence == 0.5

    def test_provider_deadline(self, make_aggregator, stub_provider):
        """Test the per-provider timeout yields an error result."""
        slow = stub_provider(ProviderName.VIRUSTOTAL, {"score": 90, "safe": True}, delay=1, timeout=0.05)
        fast = stub_provider(ProviderName.PHISHTANK, {"score": 40, "safe": False})
        aggregator = make_aggregator([(slow, 0.5), (fast, 0.5)])

        verdict = asyncio.run(aggregator.analyze(URL))

        assert verdict.provider_results[0].error == "Request timed out after 0.05s"
        assert verdict.overall_safety == SafetyVerdict.UNSAFE

    def test_aggregator_deadline_applies_to_check(self, make_aggregator, stub_provider):
        """Test the aggregator's own provider timeout also bounds check()."""
        slow = stub_provider(ProviderName.VIRUSTOTAL, {"score": 90, "safe": True}, delay=1)
        aggregator = make_aggregator([(slow, 1.0)], provider_timeout=0.05)

        verdict = asyncio.run(aggregator.analyze(URL))

        assert verdict.provider_results[0].error == "Request timed out after 0.05s"

    def test_retry_scales_deadline(self, stub_provider):
        """Test a retried provider gets one timeout slot per attempt."""
        inner = stub_provider(ProviderName.VIRUSTOTAL, {"score": 90, "safe": True})
        wrapped = RetryingProvider(inner, max_attempts=3, max_backoff=8.0)
        config = AggregationConfig(
            registrations=[ProviderRegistration(provider=wrapped, weight=1.0)],
            provider_timeout=10,
        )
        aggregator = SecurityAggregator(config)

        assert aggregator._deadline_for(config.registrations[0]) == 46


class TestDegradation:
    """Tests for partial and total provider failure."""

    def test_two_of_seven_fail(self, make_aggregator, stub_provider, roster_names):
        """Test K errors out of N providers gives confidence (N-K)/N."""
        entries = []
        for index, name in enumerate(roster_names):
            if index < 2:
                provider = stub_provider(name, error=ProviderHTTPError(name.value, 500))
            else:
                provider = stub_provider(name, {"score": 80, "safe": True})
            entries.append((provider, 1 / 7))
        aggregator = make_aggregator(entries)

        verdict = asyncio.run(aggregator.analyze(URL))

        assert verdict.confidence == pytest.approx(5 / 7, abs=1e-4)
        assert verdict.overall_score == 80
        assert verdict.summary.errors == 2
        assert "HTTP 500" in verdict.provider_results[0].error

    def test_all_fail(self, make_aggregator, stub_provider):
        """Test no answers gives a null score, unknown and zero confidence."""
        vt = stub_provider(ProviderName.VIRUSTOTAL, error=ProviderHTTPError("virustotal", 401))
        pt = stub_provider(ProviderName.PHISHTANK, error=ProviderHTTPError("phishtank", 503))
        aggregator = make_aggregator([(vt, 0.5), (pt, 0.5)])

        verdict = asyncio.run(aggregator.analyze(URL))

        assert verdict.overall_score is None
        assert verdict.overall_safety == SafetyVerdict.UNKNOWN
        assert verdict.confidence == 0.0

    def test_raising_provider_is_contained(self, make_aggregator, stub_provider):
        """Test a provider whose check() raises still yields a result."""
        broken = stub_provider(ProviderName.VIRUSTOTAL)

        async def explode(url):
            raise RuntimeError("bug")

        broken.check = explode
        ok = stub_provider(ProviderName.PHISHTANK, {"score": 95, "safe": True})
        aggregator = make_aggregator([(broken, 0.5), (ok, 0.5)])

        verdict = asyncio.run(aggregator.analyze(URL))

        assert verdict.provider_results[0].error == "Unexpected error: bug"
        assert verdict.overall_score == 95


class TestConfiguration:
    """Tests for roster validation and the settings factory."""

    def test_duplicate_registration(self, make_aggregator, stub_provider):
        """Test a provider cannot be registered twice."""
        a = stub_provider(ProviderName.VIRUSTOTAL)
        b = stub_provider(ProviderName.VIRUSTOTAL)
        with pytest.raises(ConfigurationError):
            make_aggregator([(a, 0.5), (b, 0.5)])

    def test_non_positive_timeout(self, make_aggregator, stub_provider):
        """Test timeouts must be positive."""
        vt = stub_provider(ProviderName.VIRUSTOTAL)
        with pytest.raises(ConfigurationError):
            make_aggregator([(vt, 1.0)], global_timeout=0)

    def test_unconfigured_roster_simulates(self):
        """Test a roster without keys answers fully from simulation."""
        aggregator = build_security_aggregator(Settings(_env_file=None))

        verdict = asyncio.run(aggregator.analyze(URL))
        again = asyncio.run(aggregator.analyze(URL))

        assert len(verdict.provider_results) == 7
        assert all(r.simulated for r in verdict.provider_results)
        assert verdict.confidence == 1.0
        assert verdict.overall_score == again.overall_score
        assert verdict.overall_safety == again.overall_safety

    def test_enabled_providers_setting(self):
        """Test ENABLED_PROVIDERS switches providers off without removing them."""
        settings = Settings(_env_file=None, enabled_providers="virustotal, phishtank")
        config = build_aggregation_config(settings)

        enabled = [reg.name.value for reg in config.registrations if reg.enabled]
        assert enabled == ["virustotal", "phishtank"]
        assert len(config.registrations) == 7

    def test_unknown_provider_name(self):
        """Test an unknown ENABLED_PROVIDERS entry fails loudly."""
        settings = Settings(_env_file=None, enabled_providers="virustotal,shodan")
        with pytest.raises(ConfigurationError, match="shodan"):
            build_aggregation_config(settings)

    def test_max_attempts_wraps_providers(self):
        """Test PROVIDER_MAX_ATTEMPTS above 1 enables retries."""
        settings = Settings(_env_file=None, provider_max_attempts=2)
        config = build_aggregation_config(settings)

        assert all(isinstance(reg.provider, RetryingProvider) for reg in config.registrations)
        assert config.registrations[0].name == ProviderName.VIRUSTOTAL

    def test_status(self):
        """Test roster status lists every provider with its weight."""
        aggregator = build_security_aggregator(Settings(_env_file=None))
        status = aggregator.get_status()

        assert status["total"] == 7
        assert status["configured"] == 0
        assert status["providers"][0]["weight"] == 0.25
