"""
LinkGuard Application Configuration

Configuration management using pydantic-settings.
All configuration values are loaded from environment variables or a .env file.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from linkguard.utils.constants import (
    AGGREGATION_TIMEOUT_SECONDS,
    APP_NAME,
    APP_VERSION,
    DEFAULT_CORS_ORIGINS,
    NATIONAL_FEED_API_URL,
    PROVIDER_MAX_ATTEMPTS,
    PROVIDER_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Values can be set via:
    1. Environment variables
    2. .env file (local development)
    3. Default values defined here

    A provider without an API key is not an error: it answers with a
    deterministic simulated result instead.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = APP_NAME
    app_version: str = APP_VERSION
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root logging level")

    # =========================================================================
    # Server
    # =========================================================================
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: str = Field(default="", description="Comma separated allowed origins, empty for localhost defaults")

    # =========================================================================
    # Threat Intelligence API Keys
    # =========================================================================
    virustotal_api_key: Optional[str] = Field(default=None, description="VirusTotal API key")
    google_safebrowsing_api_key: Optional[str] = Field(default=None, description="Google Safe Browsing API key")
    phishtank_api_key: Optional[str] = Field(default=None, description="PhishTank application key")
    ipqualityscore_api_key: Optional[str] = Field(default=None, description="IPQualityScore API key")
    scamadviser_api_key: Optional[str] = Field(default=None, description="ScamAdviser RapidAPI key")
    criminalip_api_key: Optional[str] = Field(default=None, description="Criminal IP API key")
    national_feed_api_key: Optional[str] = Field(default=None, description="National threat feed API key")
    national_feed_base_url: str = Field(default=NATIONAL_FEED_API_URL, description="National threat feed base URL")

    # =========================================================================
    # Screenshots
    # =========================================================================
    screenshotlayer_api_key: Optional[str] = Field(default=None, description="ScreenshotLayer access key")

    # =========================================================================
    # Aggregation
    # =========================================================================
    provider_timeout_seconds: float = Field(default=PROVIDER_TIMEOUT_SECONDS, gt=0)
    aggregation_timeout_seconds: float = Field(default=AGGREGATION_TIMEOUT_SECONDS, gt=0)
    provider_max_attempts: int = Field(default=PROVIDER_MAX_ATTEMPTS, ge=1, description="1 disables retries")
    enabled_providers: str = Field(
        default="all",
        description="Comma separated provider ids, or 'all'",
    )

    def get_enabled_providers(self) -> Optional[List[str]]:
        """Provider ids switched on, or None when every provider is enabled."""
        value = (self.enabled_providers or "").strip().lower()
        if value in ("", "all", "*"):
            return None
        return [item.strip() for item in value.split(",") if item.strip()]

    def get_cors_origins(self) -> List[str]:
        """Allowed CORS origins; localhost development origins when unset."""
        origins = [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        return origins or list(DEFAULT_CORS_ORIGINS)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are cached to avoid re-reading environment on every access.
    Use get_settings.cache_clear() to reload settings.
    """
    return Settings()
