"""
LinkGuard Input Validators

Functions for validating user inputs and data.
"""

import ipaddress
import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from .constants import MAX_URL_LENGTH
from .exceptions import InvalidURLError


# ============================================================================
# Regular Expression Patterns
# ============================================================================

# URL pattern
URL_REGEX = re.compile(
    r'^https?://[^\s<>"\']+$',
    re.IGNORECASE
)

# Hostname label (letters, digits, hyphen, underscore; IDN already punycoded or unicode)
HOST_REGEX = re.compile(r'^[^\s/:?#@]+$')

ALLOWED_SCHEMES = ("http", "https")


# ============================================================================
# URL Validation
# ============================================================================

def validate_url(url: Optional[str]) -> str:
    """
    Validate and normalize a URL submitted for checking.

    Scheme and host are lower-cased, the fragment is dropped and
    surrounding whitespace is stripped.

    Args:
        url: Raw URL from the caller

    Returns:
        Normalized URL

    Raises:
        InvalidURLError: If the URL is missing, malformed or not http(s)
    """
    if url is None or not isinstance(url, str):
        raise InvalidURLError("URL is required")

    url = url.strip()
    if not url:
        raise InvalidURLError("URL is required")

    if len(url) > MAX_URL_LENGTH:
        raise InvalidURLError(f"URL exceeds maximum length of {MAX_URL_LENGTH} characters")

    if not URL_REGEX.match(url):
        raise InvalidURLError(f"Invalid URL format: {url}")

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL format: {url}") from e

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidURLError(f"Unsupported URL scheme: {parts.scheme}")

    host = parts.hostname
    if not host:
        raise InvalidURLError(f"URL has no valid host: {url}")
    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError as e:
            raise InvalidURLError(f"URL has no valid host: {url}") from e
    elif not HOST_REGEX.match(host):
        raise InvalidURLError(f"URL has no valid host: {url}")

    netloc = host.lower()
    if ":" in netloc:
        # IPv6 literal
        netloc = f"[{netloc}]"
    if parts.username or parts.password:
        credentials = parts.username or ""
        if parts.password:
            credentials = f"{credentials}:{parts.password}"
        netloc = f"{credentials}@{netloc}"
    if port is not None:
        netloc = f"{netloc}:{port}"

    path = parts.path or "/"
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def is_valid_url(url: Optional[str]) -> bool:
    """Check if URL passes validation."""
    try:
        validate_url(url)
        return True
    except InvalidURLError:
        return False
