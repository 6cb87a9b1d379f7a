"""
LinkGuard Content Analyzer

Fetches a page and estimates how credible it looks from its metadata,
structure and transport security. When the page cannot be fetched a
deterministic simulated analysis is returned instead, so the link check
always has a credibility score.

Credibility heuristic (base 50, clamped to 0-100):
- title longer than 10 chars +10, longer than 30 chars +5
- description longer than 50 chars +10
- more than 300 words +10, headings and >2 paragraphs +10, text ratio >20% +5
- HTTPS +10, security headers +5, HTTP 200 +5
- .gov/.edu host +15, .org host +10, at most 3 host labels +5
"""

import asyncio
import hashlib
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlparse

import aiohttp
from bs4 import BeautifulSoup

from linkguard.models.link import ContentAnalysis, ContentQuality, TechnicalFactors
from linkguard.utils.constants import (
    CONTENT_FETCH_TIMEOUT_SECONDS,
    CONTENT_MAX_BYTES,
    CONTENT_MAX_REDIRECTS,
    CONTENT_USER_AGENT,
    CREDIBILITY_BASE_SCORE,
)
from linkguard.utils.exceptions import ContentFetchError
from linkguard.utils.helpers import clamp, extract_domain

logger = logging.getLogger(__name__)

SECURITY_HEADERS = [
    "strict-transport-security",
    "x-frame-options",
    "content-security-policy",
    "x-content-type-options",
]

WHITESPACE_REGEX = re.compile(r"\s+")


# =============================================================================
# HTML EXTRACTION
# =============================================================================

def _meta_content(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return tag["content"].strip()
    return ""


def extract_title(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)
    h1 = soup.find("h1")
    return (
        _meta_content(soup, property="og:title")
        or _meta_content(soup, name="twitter:title")
        or (h1.get_text(strip=True) if h1 else "")
    )


def extract_description(soup: BeautifulSoup) -> str:
    description = (
        _meta_content(soup, name="description")
        or _meta_content(soup, property="og:description")
        or _meta_content(soup, name="twitter:description")
    )
    if description:
        return description
    paragraph = soup.find("p")
    return paragraph.get_text(" ", strip=True)[:200] if paragraph else ""


def extract_keywords(soup: BeautifulSoup) -> List[str]:
    keywords = _meta_content(soup, name="keywords")
    return [k.strip() for k in keywords.split(",") if k.strip()]


def detect_language(soup: BeautifulSoup) -> str:
    html = soup.find("html")
    if html and html.get("lang"):
        return html["lang"].strip()
    return _meta_content(soup, **{"http-equiv": "content-language"}) or "en"


def analyze_content_quality(soup: BeautifulSoup) -> ContentQuality:
    body = soup.body or soup
    text = WHITESPACE_REGEX.sub(" ", body.get_text(" ", strip=True)).strip()
    markup = str(body)

    paragraphs = len(body.find_all("p"))
    headings = len(body.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]))

    return ContentQuality(
        word_count=len(text.split()) if text else 0,
        paragraph_count=paragraphs,
        heading_count=headings,
        image_count=len(body.find_all("img")),
        link_count=len(body.find_all("a")),
        has_structure=headings > 0 and paragraphs > 2,
        content_ratio=round(len(text) / len(markup) * 100, 1) if markup else 0.0,
    )


def analyze_technical_factors(final_url: str, status: int, headers: Mapping[str, str]) -> TechnicalFactors:
    lowered = {k.lower(): v for k, v in headers.items()}
    return TechnicalFactors(
        has_ssl=final_url.lower().startswith("https://"),
        status_code=status,
        content_type=lowered.get("content-type"),
        server=lowered.get("server"),
        security_headers=[h for h in SECURITY_HEADERS if h in lowered],
    )


# =============================================================================
# SCORING
# =============================================================================

def calculate_credibility_score(
    url: str,
    title: str,
    description: str,
    quality: ContentQuality,
    technical: TechnicalFactors,
) -> int:
    """Heuristic credibility score in 0-100."""
    score = CREDIBILITY_BASE_SCORE

    if len(title) > 10:
        score += 10
    if len(title) > 30:
        score += 5

    if len(description) > 50:
        score += 10

    if quality.word_count > 300:
        score += 10
    if quality.has_structure:
        score += 10
    if quality.content_ratio > 20:
        score += 5

    if technical.has_ssl:
        score += 10
    if technical.security_headers:
        score += 5
    if technical.status_code == 200:
        score += 5

    labels = (extract_domain(url) or "").split(".")
    if "gov" in labels or "edu" in labels:
        score += 15
    if "org" in labels:
        score += 10
    if len(labels) <= 3:
        score += 5

    return int(clamp(score))


def title_from_url(url: str) -> str:
    """Readable fallback title built from the URL path."""
    parsed = urlparse(url)
    domain = parsed.hostname or url
    parts = [p for p in parsed.path.split("/") if p]
    if parts:
        return f"{re.sub(r'[-_]', ' ', parts[-1])} - {domain}"
    return f"Homepage - {domain}"


def parse_page(url: str, html: str, status: int, headers: Mapping[str, str], final_url: Optional[str] = None) -> ContentAnalysis:
    """Build a ContentAnalysis from a fetched page."""
    final_url = final_url or url
    soup = BeautifulSoup(html, "html.parser")

    title = extract_title(soup)
    description = extract_description(soup)
    quality = analyze_content_quality(soup)
    technical = analyze_technical_factors(final_url, status, headers)

    return ContentAnalysis(
        url=url,
        final_url=final_url,
        title=title or title_from_url(url),
        description=description,
        keywords=extract_keywords(soup),
        language=detect_language(soup),
        content_quality=quality,
        technical=technical,
        credibility_score=calculate_credibility_score(url, title, description, quality, technical),
    )


def simulated_analysis(url: str, error: Optional[str] = None) -> ContentAnalysis:
    """Deterministic stand-in used when the page cannot be fetched."""
    digest = hashlib.md5(url.encode("utf-8")).digest()
    credibility = 30 + digest[0] % 60
    domain = extract_domain(url) or url

    return ContentAnalysis(
        url=url,
        title=title_from_url(url),
        description=f"Content analysis for {domain} is based on a simulated profile.",
        content_quality=ContentQuality(
            word_count=500 + digest[1] * 4 % 1000,
            paragraph_count=5 + digest[2] % 10,
            heading_count=2 + digest[3] % 5,
            image_count=digest[4] % 10,
            link_count=10 + digest[5] % 20,
            has_structure=credibility > 50,
            content_ratio=float(20 + digest[6] % 30),
        ),
        technical=TechnicalFactors(
            has_ssl=url.lower().startswith("https://"),
            status_code=200,
            content_type="text/html; charset=utf-8",
            security_headers=["strict-transport-security"] if credibility > 60 else [],
        ),
        credibility_score=credibility,
        simulated=True,
        error=error,
    )


# =============================================================================
# ANALYZER
# =============================================================================

class ContentAnalyzer:
    """Fetches and scores pages; never raises for unreachable sites."""

    # Only markup is parsed; anything else is rejected before the body is read
    PARSEABLE_TYPES = ("text/html", "application/xhtml+xml", "text/xml", "application/xml", "text/plain")

    def __init__(
        self,
        timeout: float = CONTENT_FETCH_TIMEOUT_SECONDS,
        user_agent: str = CONTENT_USER_AGENT,
        max_bytes: int = CONTENT_MAX_BYTES,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_bytes = max_bytes

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }

    async def fetch(self, url: str) -> Dict[str, Any]:
        """
        Download a page, reading at most max_bytes of the body.

        Returns:
            Dict with html, status, headers, final_url and truncated

        Raises:
            aiohttp.ClientError: On transport failure or HTTP status >= 400
            ContentFetchError: If the response is not markup or is too large
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout, headers=self._headers()) as session:
            async with session.get(url, allow_redirects=True, max_redirects=CONTENT_MAX_REDIRECTS) as response:
                response.raise_for_status()

                content_type = response.content_type if "Content-Type" in response.headers else ""
                if content_type and content_type not in self.PARSEABLE_TYPES:
                    raise ContentFetchError(f"Unsupported content type: {content_type}")
                if response.content_length is not None and response.content_length > self.max_bytes:
                    raise ContentFetchError(
                        f"Page is {response.content_length} bytes, limit is {self.max_bytes}"
                    )

                # Chunked bodies have no length up front; stop after max_bytes
                body, truncated = await self._read_capped(response)

                return {
                    "html": body.decode(response.charset or "utf-8", errors="replace"),
                    "status": response.status,
                    "headers": dict(response.headers),
                    "final_url": str(response.url),
                    "truncated": truncated,
                }

    async def _read_capped(self, response: aiohttp.ClientResponse) -> Tuple[bytes, bool]:
        """Read the body up to max_bytes; returns (body, truncated)."""
        chunks = []
        size = 0
        async for chunk in response.content.iter_chunked(64 * 1024):
            chunks.append(chunk)
            size += len(chunk)
            if size >= self.max_bytes:
                truncated = size > self.max_bytes or not response.content.at_eof()
                return b"".join(chunks)[:self.max_bytes], truncated
        return b"".join(chunks), False

    async def analyze(self, url: str) -> ContentAnalysis:
        """
        Analyze a page, falling back to a simulated analysis on failure.

        Args:
            url: Validated URL

        Returns:
            ContentAnalysis
        """
        try:
            page = await self.fetch(url)
            if page.get("truncated"):
                logger.info(f"Content for {url} truncated at {self.max_bytes} bytes")
            analysis = parse_page(url, page["html"], page["status"], page["headers"], page["final_url"])
            logger.info(f"Content analysis for {url}: credibility={analysis.credibility_score}")
            return analysis
        except (aiohttp.ClientError, asyncio.TimeoutError, ContentFetchError) as e:
            logger.warning(f"Content fetch failed for {url}, using simulated analysis: {e}")
            error = str(e) or type(e).__name__
        except Exception as e:
            logger.exception(f"Content analysis failed for {url}, using simulated analysis")
            error = f"Unexpected error: {e}"
        return simulated_analysis(url, error=error)
