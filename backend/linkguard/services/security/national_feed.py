"""
LinkGuard National Threat Feed Integration

Queries a national CERT style threat feed that fans the lookup out to
several local sources (NCSC, CyRadar, Tin Nhiem Mang, ScamVN) and returns
one status per source.

Expected response body:
    {"sources": [{"name": "NCSC", "status": "clean|suspicious|malicious",
                  "category": "phishing", "details": "..."}]}
A body with a top-level "status" and no "sources" is treated as one source.
"""

import logging
from typing import Any, Dict, List

from linkguard.models.security import ProviderName, ThreatTag
from linkguard.services.security.base import BaseSecurityProvider, NormalizedSignal
from linkguard.services.security.simulation import Simulation
from linkguard.utils.constants import (
    APP_NAME,
    APP_VERSION,
    NATIONAL_FEED_API_URL,
    NATIONAL_FEED_PENALTY_PER_SOURCE,
    PROVIDER_TIMEOUT_SECONDS,
)
from linkguard.utils.exceptions import ProviderResponseError

logger = logging.getLogger(__name__)

FLAGGED_STATUSES = ("suspicious", "malicious")

CATEGORY_TAGS = {
    "phishing": ThreatTag.PHISHING,
    "scam": ThreatTag.SCAM,
    "fraud": ThreatTag.SCAM,
    "malware": ThreatTag.MALWARE,
    "spam": ThreatTag.SPAM,
}


class NationalFeedProvider(BaseSecurityProvider):
    """
    National threat feed.

    Each source that reports suspicious or malicious costs 25 points:
    score = max(0, 100 - 25 * flagged_sources). Safe when nothing is flagged.
    """

    provider = ProviderName.NATIONAL_FEED
    capabilities = ["national_threat_feed", "scam_reports"]

    SOURCES = ["NCSC", "CyRadar", "Tin Nhiem Mang", "ScamVN"]

    def __init__(self, api_key=None, timeout: float = PROVIDER_TIMEOUT_SECONDS, base_url: str = NATIONAL_FEED_API_URL):
        super().__init__(api_key=api_key, timeout=timeout)
        self.base_url = base_url.rstrip("/")

    async def _fetch(self, url: str) -> Dict[str, Any]:
        _, data = await self._request_json(
            "GET",
            f"{self.base_url}/api/check",
            params={"url": url},
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "User-Agent": f"{APP_NAME}/{APP_VERSION}",
            },
        )
        return data

    def normalize(self, data: Dict[str, Any]) -> NormalizedSignal:
        sources = data.get("sources")
        if sources is None and "status" in data:
            sources = [{"name": data.get("service", "feed"), **data}]
        if not isinstance(sources, list) or not sources:
            raise ProviderResponseError(self.provider.value, "Response has no source results")

        checked: List[Dict[str, Any]] = []
        tags = set()
        for source in sources:
            status = str(source.get("status", "clean")).lower()
            category = str(source.get("category") or "").lower()
            checked.append({
                "name": source.get("name", "unknown"),
                "status": status,
                "category": category or None,
            })
            if status in FLAGGED_STATUSES:
                if category in CATEGORY_TAGS:
                    tags.add(CATEGORY_TAGS[category])
                else:
                    tags.add(ThreatTag.MALWARE if status == "malicious" else ThreatTag.SUSPICIOUS)

        flagged = sum(1 for source in checked if source["status"] in FLAGGED_STATUSES)
        return NormalizedSignal(
            score=max(0, 100 - flagged * NATIONAL_FEED_PENALTY_PER_SOURCE),
            safe=flagged == 0,
            tags=list(tags),
            details={"sources": checked, "flagged_sources": flagged, "sources_checked": len(checked)},
        )

    def simulated_details(self, url: str, simulation: Simulation) -> Dict[str, Any]:
        flagged = 0
        if simulation.suspicious:
            flagged = 2 if simulation.malicious else 1
        # The first `flagged` sources in a digest-chosen rotation report the URL
        offset = simulation.byte(2) % len(self.SOURCES)
        rotation = self.SOURCES[offset:] + self.SOURCES[:offset]
        checked = []
        for position, name in enumerate(rotation):
            status = "clean"
            if position < flagged:
                status = "malicious" if simulation.malicious else "suspicious"
            checked.append({"name": name, "status": status, "category": None})
        return {"sources": checked, "flagged_sources": flagged, "sources_checked": len(checked)}
