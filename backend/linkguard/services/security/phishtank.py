"""
LinkGuard PhishTank Integration

Community verified phishing URL database.

A URL counts as phishing only when it is both in the database and
verified valid; unverified submissions are reported but treated as safe.
"""

import logging
from typing import Any, Dict

from linkguard.models.security import ProviderName, ThreatTag
from linkguard.services.security.base import BaseSecurityProvider, NormalizedSignal
from linkguard.services.security.simulation import Simulation
from linkguard.utils.constants import (
    APP_NAME,
    PHISHTANK_API_URL,
    PHISHTANK_CLEAN_SCORE,
    PHISHTANK_VERIFIED_PHISH_SCORE,
)
from linkguard.utils.exceptions import ProviderResponseError

logger = logging.getLogger(__name__)


class PhishTankProvider(BaseSecurityProvider):
    """PhishTank checkurl API (form POST, JSON response)."""

    provider = ProviderName.PHISHTANK
    base_url = PHISHTANK_API_URL
    capabilities = ["phishing_list"]

    async def _fetch(self, url: str) -> Dict[str, Any]:
        _, data = await self._request_json(
            "POST",
            self.base_url,
            data={"url": url, "format": "json", "app_key": self.api_key},
            headers={"User-Agent": f"phishtank/{APP_NAME.lower()}"},
        )
        return data

    def normalize(self, data: Dict[str, Any]) -> NormalizedSignal:
        results = self._require(data, "results")
        if not isinstance(results, dict):
            raise ProviderResponseError(self.provider.value, "'results' is not an object")

        in_database = bool(results.get("in_database", False))
        verified = bool(results.get("valid", False)) or bool(results.get("verified", False))
        is_phish = in_database and verified

        return NormalizedSignal(
            score=PHISHTANK_VERIFIED_PHISH_SCORE if is_phish else PHISHTANK_CLEAN_SCORE,
            safe=not is_phish,
            tags=[ThreatTag.PHISHING] if is_phish else [],
            details={
                "in_database": in_database,
                "verified": verified,
                "phish_id": results.get("phish_id"),
                "phish_detail_page": results.get("phish_detail_page"),
            },
        )

    def simulated_details(self, url: str, simulation: Simulation) -> Dict[str, Any]:
        return {
            "in_database": simulation.suspicious,
            "verified": simulation.malicious,
            "phish_id": str(1_000_000 + simulation.number(2, 9_000_000)) if simulation.suspicious else None,
        }
