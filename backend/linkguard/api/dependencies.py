"""
LinkGuard API Dependencies

FastAPI dependency injection for settings and services.
"""

import logging

from linkguard.config.settings import Settings, get_settings as _get_settings
from linkguard.services.link_checker import LinkChecker, get_link_checker as _get_link_checker

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    """Dependency returning application settings."""
    return _get_settings()


def get_link_checker() -> LinkChecker:
    """Dependency returning the shared link checker."""
    return _get_link_checker()
