"""
LinkGuard Constants - Central location for ALL constant values.
"""

# APPLICATION INFO
APP_NAME: str = "LinkGuard"
APP_VERSION: str = "1.0.0"
APP_DESCRIPTION: str = "Multi-provider fraud and security risk checker for URLs"

# CORS
DEFAULT_CORS_ORIGINS: tuple = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)

# URL LIMITS
MAX_URL_LENGTH: int = 2048

# TIMEOUTS (seconds)
PROVIDER_TIMEOUT_SECONDS: float = 10
AGGREGATION_TIMEOUT_SECONDS: float = 30
CONTENT_FETCH_TIMEOUT_SECONDS: float = 15
SCREENSHOT_TIMEOUT_SECONDS: float = 30

# RETRY
PROVIDER_MAX_ATTEMPTS: int = 1
RETRY_INITIAL_BACKOFF: float = 1.0
RETRY_BACKOFF_MULTIPLIER: float = 2.0
RETRY_MAX_BACKOFF: float = 8.0
SCREENSHOT_MAX_RETRIES: int = 2
SCREENSHOT_RETRY_DELAY: float = 2.0

# SIMULATION THRESHOLDS (risk on 0-100, higher is worse)
SIMULATION_MALICIOUS_RISK: int = 90
SIMULATION_SUSPICIOUS_RISK: int = 80

# PROVIDER SAFETY THRESHOLDS (trust on 0-100, higher is better)
SCAMADVISER_SAFE_TRUST: int = 70
CRIMINALIP_SAFE_SCORE: int = 70
IPQS_UNSAFE_SCORE_CAP: int = 50
GOOGLE_SAFEBROWSING_PENALTY_PER_THREAT: int = 25
NATIONAL_FEED_PENALTY_PER_SOURCE: int = 25
PHISHTANK_VERIFIED_PHISH_SCORE: int = 0
PHISHTANK_CLEAN_SCORE: int = 95

# FINAL SCORE BLEND
SECURITY_SCORE_WEIGHT: float = 0.6
CREDIBILITY_SCORE_WEIGHT: float = 0.4
NEUTRAL_SCORE: int = 50

# LINK STATUS THRESHOLDS (final score 0-100)
SAFE_STATUS_MIN_SCORE: int = 60
SUSPICIOUS_STATUS_MIN_SCORE: int = 30

# EXTERNAL API URLS
VIRUSTOTAL_API_URL: str = "https://www.virustotal.com/api/v3"
GOOGLE_SAFEBROWSING_API_URL: str = "https://safebrowsing.googleapis.com/v4/threatMatches:find"
PHISHTANK_API_URL: str = "https://checkurl.phishtank.com/checkurl/"
IPQUALITYSCORE_API_URL: str = "https://ipqualityscore.com/api/json/url"
SCAMADVISER_API_URL: str = "https://scamadviser1.p.rapidapi.com/v1/trust/single"
SCAMADVISER_API_HOST: str = "scamadviser1.p.rapidapi.com"
CRIMINALIP_API_URL: str = "https://api.criminalip.io/v1"
NATIONAL_FEED_API_URL: str = "https://api.ncsc.gov.vn"
SCREENSHOTLAYER_API_URL: str = "http://api.screenshotlayer.com/api/capture"

# FALLBACK IMAGES
SIMULATED_SCREENSHOT_BASE_URL: str = "https://screenshots.linkguard.local"
PLACEHOLDER_SCREENSHOT_URL: str = "https://via.placeholder.com/800x600/cccccc/666666"

# CONTENT FETCHING
CONTENT_USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
CONTENT_MAX_REDIRECTS: int = 5
CONTENT_MAX_BYTES: int = 2 * 1024 * 1024
CREDIBILITY_BASE_SCORE: int = 50
