"""Configuration for the response validator."""

from .constants import (
    PESSIMISTIC_DEFAULTS,
    SCORING_THRESHOLDS,
    SCORING_WEIGHTS,
    SOURCE_QUALITY_CONFIG,
    PessimisticDefaults,
    ScoringThresholds,
    ScoringWeights,
    SourceQualityConfig,
)
from .settings import SUPPORTED_PROVIDERS, ValidatorConfig

__all__ = [
    "ValidatorConfig",
    "SUPPORTED_PROVIDERS",
    "ScoringWeights",
    "ScoringThresholds",
    "SourceQualityConfig",
    "PessimisticDefaults",
    "SCORING_WEIGHTS",
    "SCORING_THRESHOLDS",
    "SOURCE_QUALITY_CONFIG",
    "PESSIMISTIC_DEFAULTS",
]
