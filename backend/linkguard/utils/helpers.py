"""
LinkGuard Helper Functions

Utility functions used throughout the application.
"""

import math
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse


# ============================================================================
# Timestamps
# ============================================================================

def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def elapsed_ms(started: float, finished: float) -> int:
    """Convert a pair of perf_counter readings into whole milliseconds."""
    return max(0, int(round((finished - started) * 1000)))


# ============================================================================
# Numbers
# ============================================================================

def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


# ============================================================================
# URL Helpers
# ============================================================================

def extract_domain(url: str) -> Optional[str]:
    """
    Extract the host from a URL.

    Args:
        url: Full URL

    Returns:
        Lower-cased host or None
    """
    try:
        host = urlparse(url).hostname
        return host.lower() if host else None
    except ValueError:
        return None
