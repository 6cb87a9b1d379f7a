"""
LinkGuard Deterministic Simulation

Stand-in results for providers that have no credentials configured.
The same (url, salt) pair always yields the same answer, so demos and
tests behave identically across runs and processes. Nothing here reads
the clock or a random number generator.
"""

import hashlib
from dataclasses import dataclass
from typing import List, Sequence, TypeVar

from linkguard.models.security import ThreatTag
from linkguard.utils.constants import SIMULATION_MALICIOUS_RISK, SIMULATION_SUSPICIOUS_RISK

T = TypeVar("T")


@dataclass(frozen=True)
class Simulation:
    """Outcome of hashing a URL for one provider."""
    risk: int
    score: int
    malicious: bool
    suspicious: bool
    digest: bytes

    @property
    def safe(self) -> bool:
        return not self.suspicious

    @property
    def tags(self) -> List[ThreatTag]:
        tags = []
        if self.malicious:
            tags.append(ThreatTag.MALWARE)
        if self.suspicious:
            tags.append(ThreatTag.SUSPICIOUS)
        return tags

    def byte(self, index: int) -> int:
        """Digest byte at index, wrapping around the digest length."""
        return self.digest[index % len(self.digest)]

    def pick(self, options: Sequence[T], index: int) -> T:
        """Deterministically choose one of options using digest byte index."""
        return options[self.byte(index) % len(options)]

    def number(self, index: int, modulo: int) -> int:
        """Deterministic integer in [0, modulo) from two digest bytes."""
        value = (self.byte(index) << 8) | self.byte(index + 1)
        return value % modulo


def simulate(url: str, salt: str) -> Simulation:
    """
    Produce a stable simulated verdict for url.

    The salt keeps providers from agreeing by construction: the same URL
    hashes differently for each provider.

    Args:
        url: Normalized URL
        salt: Provider specific salt

    Returns:
        Simulation with risk in 0..100 and trust score = 100 - risk
    """
    digest = hashlib.sha256(f"{salt}|{url}".encode("utf-8")).digest()
    risk = int.from_bytes(digest[:2], "big") % 101
    return Simulation(
        risk=risk,
        score=100 - risk,
        malicious=risk > SIMULATION_MALICIOUS_RISK,
        suspicious=risk > SIMULATION_SUSPICIOUS_RISK,
        digest=digest,
    )
