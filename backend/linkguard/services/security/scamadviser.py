"""
LinkGuard ScamAdviser Integration

Domain trust scores from ScamAdviser (via RapidAPI).
"""

import logging
from typing import Any, Dict

from linkguard.models.security import ProviderName, ThreatTag
from linkguard.services.security.base import BaseSecurityProvider, NormalizedSignal
from linkguard.services.security.simulation import Simulation
from linkguard.utils.constants import (
    SCAMADVISER_API_HOST,
    SCAMADVISER_API_URL,
    SCAMADVISER_SAFE_TRUST,
)
from linkguard.utils.exceptions import ProviderResponseError
from linkguard.utils.helpers import extract_domain

logger = logging.getLogger(__name__)


class ScamAdviserProvider(BaseSecurityProvider):
    """ScamAdviser trust score: safe when trust_score >= 70; score = trust_score."""

    provider = ProviderName.SCAMADVISER
    base_url = SCAMADVISER_API_URL
    capabilities = ["domain_trust"]

    COUNTRIES = ["US", "GB", "DE", "NL", "SG", "VN", "CN", "RU"]

    async def _fetch(self, url: str) -> Dict[str, Any]:
        _, data = await self._request_json(
            "GET",
            self.base_url,
            params={"domain": extract_domain(url) or url},
            headers={
                "X-RapidAPI-Key": self.api_key,
                "X-RapidAPI-Host": SCAMADVISER_API_HOST,
            },
        )
        return data

    def normalize(self, data: Dict[str, Any]) -> NormalizedSignal:
        # Some plans wrap the payload in "data"
        payload = data.get("data") if isinstance(data.get("data"), dict) else data
        trust_score = payload.get("trust_score", payload.get("score"))
        if trust_score is None:
            raise ProviderResponseError(self.provider.value, "Response missing 'trust_score'")

        trust_score = int(trust_score)
        safe = trust_score >= SCAMADVISER_SAFE_TRUST
        return NormalizedSignal(
            score=trust_score,
            safe=safe,
            tags=[] if safe else [ThreatTag.SCAM],
            details={
                "trust_score": trust_score,
                "risk_level": payload.get("risk_level"),
                "country": payload.get("country"),
                "registration_date": payload.get("registration_date"),
            },
        )

    def simulated_details(self, url: str, simulation: Simulation) -> Dict[str, Any]:
        return {
            "trust_score": simulation.score,
            "risk_level": "high" if simulation.suspicious else "low",
            "country": simulation.pick(self.COUNTRIES, 2),
            "registration_date": None,
        }
