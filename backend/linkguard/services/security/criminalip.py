"""
LinkGuard Criminal IP Integration

Domain and IP reputation via the Criminal IP domain scan API.
"""

import logging
from typing import Any, Dict, Optional

from linkguard.models.security import ProviderName, ThreatTag
from linkguard.services.security.base import BaseSecurityProvider, NormalizedSignal
from linkguard.services.security.simulation import Simulation
from linkguard.utils.constants import CRIMINALIP_API_URL, CRIMINALIP_SAFE_SCORE
from linkguard.utils.exceptions import ProviderResponseError
from linkguard.utils.helpers import extract_domain

logger = logging.getLogger(__name__)


class CriminalIPProvider(BaseSecurityProvider):
    """
    Criminal IP domain scan.

    The API score is already a trust score (higher is better); a domain
    is safe when score >= 70.
    """

    provider = ProviderName.CRIMINALIP
    base_url = CRIMINALIP_API_URL
    capabilities = ["domain_reputation", "ip_reputation"]

    COUNTRIES = ["US", "CN", "RU", "DE", "GB", "FR", "JP", "CA", "AU", "BR"]
    REGISTRARS = ["GoDaddy", "Namecheap", "Cloudflare", "Google Domains", "Amazon", "Unknown"]
    CATEGORIES = ["business", "technology", "news", "entertainment", "shopping", "social"]

    async def _fetch(self, url: str) -> Dict[str, Any]:
        _, data = await self._request_json(
            "GET",
            f"{self.base_url}/domain/scan",
            params={"query": extract_domain(url) or url},
            headers={"x-api-key": self.api_key},
        )
        return data

    @staticmethod
    def risk_level(score: Optional[int]) -> str:
        if score is None:
            return "unknown"
        if score >= 80:
            return "low"
        if score >= CRIMINALIP_SAFE_SCORE:
            return "moderate"
        if score >= 40:
            return "high"
        return "critical"

    def normalize(self, data: Dict[str, Any]) -> NormalizedSignal:
        # The API mirrors the HTTP status inside the body
        status = data.get("status", 200)
        if status != 200:
            raise ProviderResponseError(self.provider.value, data.get("message") or f"status {status}")
        if data.get("score") is None:
            raise ProviderResponseError(self.provider.value, "Response missing 'score'")

        score = int(data["score"])
        malware = bool(data.get("malware_detected"))
        phishing = bool(data.get("phishing_detected"))

        tags = []
        if malware:
            tags.append(ThreatTag.MALWARE)
        if phishing:
            tags.append(ThreatTag.PHISHING)

        return NormalizedSignal(
            score=score,
            safe=score >= CRIMINALIP_SAFE_SCORE,
            tags=tags,
            details={
                "risk_level": data.get("risk_level") or self.risk_level(score),
                "categories": data.get("categories") or [],
                "malware_detected": malware,
                "phishing_detected": phishing,
                "country_code": data.get("country_code") or "unknown",
                "registrar": data.get("registrar") or "unknown",
            },
        )

    def simulated_details(self, url: str, simulation: Simulation) -> Dict[str, Any]:
        categories = []
        if simulation.malicious:
            categories.append("malware")
        if simulation.suspicious:
            categories.append("suspicious")
        if not categories:
            categories.append(simulation.pick(self.CATEGORIES, 2))
        return {
            "risk_level": self.risk_level(simulation.score),
            "categories": categories,
            "malware_detected": simulation.malicious,
            "phishing_detected": False,
            "country_code": simulation.pick(self.COUNTRIES, 3),
            "registrar": simulation.pick(self.REGISTRARS, 4),
        }
