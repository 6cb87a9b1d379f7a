"""
LinkGuard Configuration Package
"""

from linkguard.config.settings import Settings, get_settings
from linkguard.config.scoring import (
    FinalScoreConfig,
    ProviderWeights,
    ScoringConfig,
    get_scoring_config,
    reset_scoring_config,
)
