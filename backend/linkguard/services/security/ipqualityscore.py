"""
IPQualityScore URL Scanner Integration

Real-time URL reputation: phishing, malware, suspicious and parked domains.

API Docs: https://www.ipqualityscore.com/documentation/malicious-url-scanner-api/overview
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote_plus

from linkguard.models.security import ProviderName, ThreatTag
from linkguard.services.security.base import BaseSecurityProvider, NormalizedSignal
from linkguard.services.security.simulation import Simulation
from linkguard.utils.constants import (
    IPQS_UNSAFE_SCORE_CAP,
    IPQUALITYSCORE_API_URL,
    PROVIDER_TIMEOUT_SECONDS,
)
from linkguard.utils.exceptions import ProviderResponseError

logger = logging.getLogger(__name__)


class IPQualityScoreProvider(BaseSecurityProvider):
    """
    IPQualityScore Malicious URL Scanner.

    A URL is safe only when none of unsafe/malware/phishing/suspicious is
    set. Safe URLs score 100 - risk_score; unsafe URLs are capped at 50.
    """

    provider = ProviderName.IPQUALITYSCORE
    base_url = IPQUALITYSCORE_API_URL
    capabilities = ["url_reputation", "ip_reputation"]

    CATEGORIES = ["Business", "Technology", "Shopping", "News", "Parked Domain", "Unknown"]

    def __init__(self, api_key: Optional[str] = None, timeout: float = PROVIDER_TIMEOUT_SECONDS, strictness: int = 1):
        super().__init__(api_key=api_key, timeout=timeout)
        self.strictness = strictness

    async def _fetch(self, url: str) -> Dict[str, Any]:
        request_url = f"{self.base_url}/{self.api_key}/{quote_plus(url)}"
        _, data = await self._request_json(
            "GET",
            request_url,
            params={"strictness": self.strictness, "fast": "true"},
        )
        return data

    def normalize(self, data: Dict[str, Any]) -> NormalizedSignal:
        if data.get("success") is False:
            raise ProviderResponseError(self.provider.value, data.get("message") or "Request rejected")
        if "risk_score" not in data:
            raise ProviderResponseError(self.provider.value, "Response missing 'risk_score'")

        risk_score = int(data.get("risk_score") or 0)
        unsafe = bool(data.get("unsafe"))
        malware = bool(data.get("malware"))
        phishing = bool(data.get("phishing"))
        suspicious = bool(data.get("suspicious"))
        safe = not (unsafe or malware or phishing or suspicious)

        tags = []
        if malware:
            tags.append(ThreatTag.MALWARE)
        if phishing:
            tags.append(ThreatTag.PHISHING)
        if suspicious or unsafe:
            tags.append(ThreatTag.SUSPICIOUS)
        if data.get("spamming"):
            tags.append(ThreatTag.SPAM)

        score = max(0, 100 - risk_score) if safe else min(IPQS_UNSAFE_SCORE_CAP, 100 - risk_score)
        return NormalizedSignal(
            score=score,
            safe=safe,
            tags=tags,
            details={
                "risk_score": risk_score,
                "unsafe": unsafe,
                "malware": malware,
                "phishing": phishing,
                "suspicious": suspicious,
                "adult": bool(data.get("adult")),
                "parking": bool(data.get("parking")),
                "domain": data.get("domain"),
                "ip_address": data.get("ip_address"),
                "country_code": data.get("country_code"),
                "category": data.get("category"),
                "domain_age": (data.get("domain_age") or {}).get("human"),
            },
        )

    def simulated_details(self, url: str, simulation: Simulation) -> Dict[str, Any]:
        return {
            "risk_score": simulation.risk,
            "unsafe": simulation.suspicious,
            "malware": simulation.malicious,
            "phishing": False,
            "suspicious": simulation.suspicious,
            "category": simulation.pick(self.CATEGORIES, 2),
        }
