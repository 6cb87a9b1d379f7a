"""
LinkGuard Services Package

Business logic modules for link checking:
- security: Threat intelligence providers, scoring and aggregation
- content: Page credibility analysis and screenshots
- link_checker: Final result assembly
"""

# Services are imported explicitly when needed to avoid circular imports
# Example: from linkguard.services.security import SecurityAggregator
# Example: from linkguard.services.link_checker import get_link_checker

__all__ = [
    'security',
    'content',
    'link_checker',
]
