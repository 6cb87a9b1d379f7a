"""
LinkGuard - Settings Tests

Tests for environment driven configuration.
"""

from linkguard.config.settings import Settings
from linkguard.utils.constants import DEFAULT_CORS_ORIGINS


class TestCorsOrigins:
    """Tests for Settings.get_cors_origins()."""

    def test_comma_separated_env(self, monkeypatch):
        """Test CORS_ORIGINS is read as a comma separated list."""
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")

        settings = Settings(_env_file=None)

        assert settings.get_cors_origins() == ["https://a.example", "https://b.example"]

    def test_single_origin(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "https://app.example")
        assert Settings(_env_file=None).get_cors_origins() == ["https://app.example"]

    def test_defaults_are_localhost_only(self, monkeypatch):
        """Test the fallback never allows every origin."""
        monkeypatch.delenv("CORS_ORIGINS", raising=False)

        origins = Settings(_env_file=None).get_cors_origins()

        assert origins == list(DEFAULT_CORS_ORIGINS)
        assert "*" not in origins
        assert all("localhost" in o or "127.0.0.1" in o for o in origins)


class TestEnabledProviders:
    """Tests for Settings.get_enabled_providers()."""

    def test_all(self):
        assert Settings(_env_file=None).get_enabled_providers() is None

    def test_list(self, monkeypatch):
        monkeypatch.setenv("ENABLED_PROVIDERS", "VirusTotal, phishtank")
        assert Settings(_env_file=None).get_enabled_providers() == ["virustotal", "phishtank"]
