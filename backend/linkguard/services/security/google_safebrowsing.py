"""
Google Safe Browsing API Integration

Checks URLs against Google's constantly updated lists of unsafe web resources:
- Malware
- Social Engineering (Phishing)
- Unwanted Software
- Potentially Harmful Applications

API Docs: https://developers.google.com/safe-browsing/v4/lookup-api
"""

import logging
from typing import Any, Dict, List

from linkguard.models.security import ProviderName, ThreatTag
from linkguard.services.security.base import BaseSecurityProvider, NormalizedSignal
from linkguard.services.security.simulation import Simulation
from linkguard.utils.constants import (
    APP_NAME,
    APP_VERSION,
    GOOGLE_SAFEBROWSING_API_URL,
    GOOGLE_SAFEBROWSING_PENALTY_PER_THREAT,
)
from linkguard.utils.exceptions import ProviderResponseError

logger = logging.getLogger(__name__)


class GoogleSafeBrowsingProvider(BaseSecurityProvider):
    """
    Google Safe Browsing Lookup API v4.

    No match means safe with score 100. Each matched threat entry costs
    25 points: score = max(0, 100 - 25 * matches).
    """

    provider = ProviderName.GOOGLE_SAFEBROWSING
    base_url = GOOGLE_SAFEBROWSING_API_URL
    capabilities = ["malware_list", "phishing_list"]

    # Threat types to check
    THREAT_TYPES = [
        "MALWARE",
        "SOCIAL_ENGINEERING",
        "UNWANTED_SOFTWARE",
        "POTENTIALLY_HARMFUL_APPLICATION",
    ]

    THREAT_TAGS = {
        "MALWARE": ThreatTag.MALWARE,
        "SOCIAL_ENGINEERING": ThreatTag.PHISHING,
        "UNWANTED_SOFTWARE": ThreatTag.UNWANTED_SOFTWARE,
        "POTENTIALLY_HARMFUL_APPLICATION": ThreatTag.MALWARE,
    }

    def build_payload(self, url: str) -> Dict[str, Any]:
        return {
            "client": {
                "clientId": APP_NAME.lower(),
                "clientVersion": APP_VERSION,
            },
            "threatInfo": {
                "threatTypes": self.THREAT_TYPES,
                "platformTypes": ["ANY_PLATFORM"],
                "threatEntryTypes": ["URL"],
                "threatEntries": [{"url": url}],
            },
        }

    async def _fetch(self, url: str) -> Dict[str, Any]:
        _, data = await self._request_json(
            "POST",
            self.base_url,
            params={"key": self.api_key},
            json=self.build_payload(url),
        )
        return data

    def normalize(self, data: Dict[str, Any]) -> NormalizedSignal:
        # An empty object is the documented "no match" answer
        matches = data.get("matches", [])
        if not isinstance(matches, list):
            raise ProviderResponseError(self.provider.value, "'matches' is not a list")

        threats: List[Dict[str, Any]] = []
        tags = set()
        for match in matches:
            threat_type = match.get("threatType", "UNKNOWN")
            threats.append({
                "threat_type": threat_type,
                "platform_type": match.get("platformType", "ANY_PLATFORM"),
                "threat_entry_type": match.get("threatEntryType", "URL"),
            })
            tags.add(self.THREAT_TAGS.get(threat_type, ThreatTag.SUSPICIOUS))

        safe = len(threats) == 0
        score = 100 if safe else max(0, 100 - len(threats) * GOOGLE_SAFEBROWSING_PENALTY_PER_THREAT)
        return NormalizedSignal(
            score=score,
            safe=safe,
            tags=list(tags),
            details={"threats": threats, "threat_count": len(threats)},
        )

    def simulated_details(self, url: str, simulation: Simulation) -> Dict[str, Any]:
        threats = []
        if simulation.malicious:
            threats.append({"threat_type": "MALWARE", "platform_type": "ANY_PLATFORM", "threat_entry_type": "URL"})
        elif simulation.suspicious:
            threats.append({
                "threat_type": simulation.pick(["SOCIAL_ENGINEERING", "UNWANTED_SOFTWARE"], 2),
                "platform_type": "ANY_PLATFORM",
                "threat_entry_type": "URL",
            })
        return {"threats": threats, "threat_count": len(threats)}
