"""
LinkGuard VirusTotal Integration

Antivirus engine consensus for URLs via VirusTotal API v3.

API Docs: https://docs.virustotal.com/reference/url-info
"""

import base64
import logging
from typing import Any, Dict

from linkguard.models.security import ProviderName, ThreatTag
from linkguard.services.security.base import BaseSecurityProvider, NormalizedSignal
from linkguard.services.security.simulation import Simulation
from linkguard.utils.constants import VIRUSTOTAL_API_URL
from linkguard.utils.exceptions import ProviderResponseError

logger = logging.getLogger(__name__)


class VirusTotalProvider(BaseSecurityProvider):
    """
    VirusTotal API v3 integration.

    Score is the share of engines that did NOT flag the URL:
        score = 100 - positives / total * 100
    where positives = malicious + suspicious engine verdicts.

    Unknown URLs (HTTP 404) are submitted for scanning and reported
    without a score; they still count as an answer.
    """

    provider = ProviderName.VIRUSTOTAL
    base_url = VIRUSTOTAL_API_URL
    capabilities = ["antivirus_engines", "url_reputation"]

    # Engine result categories that map onto threat tags
    CATEGORY_TAGS = {
        "malware": ThreatTag.MALWARE,
        "malicious": ThreatTag.MALWARE,
        "phishing": ThreatTag.PHISHING,
        "suspicious": ThreatTag.SUSPICIOUS,
        "spam": ThreatTag.SPAM,
    }

    ENGINE_NAMES = [
        "Kaspersky", "BitDefender", "ESET-NOD32", "Sophos", "Fortinet",
        "Avira", "G-Data", "Emsisoft", "Dr.Web", "Webroot",
    ]

    def _headers(self) -> Dict[str, str]:
        return {"x-apikey": self.api_key, "Accept": "application/json"}

    @staticmethod
    def url_id(url: str) -> str:
        """URL identifier: base64url of the URL without padding."""
        return base64.urlsafe_b64encode(url.encode()).decode().rstrip("=")

    async def _fetch(self, url: str) -> Dict[str, Any]:
        status, data = await self._request_json(
            "GET",
            f"{self.base_url}/urls/{self.url_id(url)}",
            accept_statuses=(200, 404),
            headers=self._headers(),
        )
        if status == 200:
            return data

        # Not seen before: queue a scan so the next lookup has data
        logger.info(f"VirusTotal has no report for {url}, submitting for analysis")
        _, submitted = await self._request_json(
            "POST",
            f"{self.base_url}/urls",
            headers=self._headers(),
            data={"url": url},
        )
        return {"queued": True, "analysis_id": submitted.get("data", {}).get("id")}

    def normalize(self, data: Dict[str, Any]) -> NormalizedSignal:
        if data.get("queued"):
            return NormalizedSignal(
                score=None,
                safe=None,
                details={"queued": True, "analysis_id": data.get("analysis_id")},
            )

        attributes = self._require(self._require(data, "data"), "attributes")
        stats = attributes.get("last_analysis_stats")
        if not isinstance(stats, dict):
            raise ProviderResponseError(self.provider.value, "Response missing 'last_analysis_stats'")

        malicious = int(stats.get("malicious", 0))
        suspicious = int(stats.get("suspicious", 0))
        total = sum(int(v) for v in stats.values() if isinstance(v, (int, float)))
        positives = malicious + suspicious

        if total == 0:
            return NormalizedSignal(score=None, safe=None, details={"stats": stats, "total": 0})

        tags = set()
        for engine_result in (attributes.get("last_analysis_results") or {}).values():
            category = (engine_result or {}).get("category")
            result = ((engine_result or {}).get("result") or "").lower()
            if category in ("malicious", "suspicious"):
                tags.add(self.CATEGORY_TAGS.get(result, self.CATEGORY_TAGS[category]))
        if positives and not tags:
            tags.add(ThreatTag.MALWARE if malicious else ThreatTag.SUSPICIOUS)

        return NormalizedSignal(
            score=100 - positives / total * 100,
            safe=positives == 0,
            tags=sorted(tags),
            details={
                "positives": positives,
                "total": total,
                "stats": stats,
                "reputation": attributes.get("reputation"),
                "last_analysis_date": attributes.get("last_analysis_date"),
                "permalink": f"https://www.virustotal.com/gui/url/{data['data'].get('id', '')}",
            },
        )

    def simulated_details(self, url: str, simulation: Simulation) -> Dict[str, Any]:
        total = 70 + simulation.byte(2) % 20
        positives = round(simulation.risk / 100 * total) if simulation.suspicious else 0
        flagged_by = [simulation.pick(self.ENGINE_NAMES, 3 + i) for i in range(min(positives, 3))]
        return {
            "positives": positives,
            "total": total,
            "flagged_by": sorted(set(flagged_by)),
            "permalink": f"https://www.virustotal.com/gui/url/{self.url_id(url)}",
        }
