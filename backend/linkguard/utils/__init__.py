"""
LinkGuard Utilities Package
===========================

Common utilities, constants, and helper functions used throughout the application.
"""

from linkguard.utils.constants import (
    APP_NAME,
    APP_VERSION,
    APP_DESCRIPTION,
    PROVIDER_TIMEOUT_SECONDS,
    AGGREGATION_TIMEOUT_SECONDS,
)

from linkguard.utils.exceptions import (
    LinkGuardError,
    ValidationError,
    InvalidURLError,
    ProviderError,
    ProviderHTTPError,
    ProviderResponseError,
    ContentFetchError,
    ConfigurationError,
)

from linkguard.utils.helpers import (
    utc_now,
    round_half_up,
    extract_domain,
)

from linkguard.utils.validators import validate_url, is_valid_url
