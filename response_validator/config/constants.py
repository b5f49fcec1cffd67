"""
Configuration Constants for the response validator.

IMPORTANT: The weights and thresholds below are fixed defaults carried over
from the first production deployment. They are not derived from first
principles; keep them as defaults and override per validator through
ValidatorConfig rather than editing them here.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

logger = logging.getLogger(__name__)

CONFIG_VERSION = "1.0.0"

# ============================================================================
# CONFIDENCE SCORING WEIGHTS
# ============================================================================

@dataclass
class ScoringWeights:
    """
    Weights used to combine the four signals into one confidence score.

    Usage in code:
        from response_validator.config.constants import SCORING_WEIGHTS
        score = accuracy * SCORING_WEIGHTS.ACCURACY + ...

    The hallucination signal is applied as (1 - risk) so that every
    component points in the same direction.
    """

    ACCURACY: float = 0.35
    CONTEXT: float = 0.25
    HALLUCINATION: float = 0.30
    SOURCE_QUALITY: float = 0.10

    def __post_init__(self):
        """Validate weights are in [0,1] and sum to 1.0."""
        for field_name, value in self.__dict__.items():
            if not 0 <= value <= 1:
                raise ValueError(f"Weight {field_name}={value} outside range [0,1]")
        total = self.ACCURACY + self.CONTEXT + self.HALLUCINATION + self.SOURCE_QUALITY
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.4f}")

    def as_dict(self) -> Dict[str, float]:
        return {
            "accuracy": self.ACCURACY,
            "context": self.CONTEXT,
            "hallucination": self.HALLUCINATION,
            "source_quality": self.SOURCE_QUALITY,
        }


SCORING_WEIGHTS = ScoringWeights()

# ============================================================================
# THRESHOLDS
# ============================================================================

@dataclass
class ScoringThresholds:
    """
    Level boundaries, relevance cut-off and warning triggers.

    Usage in code:
        from response_validator.config.constants import SCORING_THRESHOLDS
        if score >= SCORING_THRESHOLDS.HIGH_CONFIDENCE:
            level = "high"
    """

    # Confidence levels
    HIGH_CONFIDENCE: float = 0.80
    MEDIUM_CONFIDENCE: float = 0.50

    # Pass/fail cut-off applied by the validator
    DEFAULT_CONFIDENCE_THRESHOLD: float = 0.7

    # Context relevance: valid when strictly above this
    CONTEXT_RELEVANCE: float = 0.3

    # Warning triggers
    LOW_VERIFICATION_RATE: float = 0.5   # warn when rate < this
    LOW_CONTEXT_RELEVANCE: float = 0.3   # warn when relevance < this
    HIGH_HALLUCINATION_RISK: float = 0.5  # warn when risk > this

    def __post_init__(self):
        """Validate thresholds are within valid ranges."""
        for field_name, value in self.__dict__.items():
            if not 0 <= value <= 1:
                raise ValueError(f"Threshold {field_name}={value} outside range [0,1]")
        if self.MEDIUM_CONFIDENCE > self.HIGH_CONFIDENCE:
            raise ValueError("MEDIUM_CONFIDENCE must not exceed HIGH_CONFIDENCE")


SCORING_THRESHOLDS = ScoringThresholds()

# ============================================================================
# SOURCE QUALITY
# ============================================================================

@dataclass
class SourceQualityConfig:
    """
    Per-source quality heuristic.

    A source starts at BASE_QUALITY and earns bonuses for length and for
    carrying a title. The total is capped at MAX_QUALITY.
    """

    BASE_QUALITY: float = 0.5
    MEDIUM_LENGTH_CHARS: int = 100
    MEDIUM_LENGTH_BONUS: float = 0.2
    LONG_LENGTH_CHARS: int = 500
    LONG_LENGTH_BONUS: float = 0.2
    TITLE_BONUS: float = 0.1
    MAX_QUALITY: float = 1.0

    def __post_init__(self):
        assert 0 <= self.BASE_QUALITY <= 1, "BASE_QUALITY must be in [0,1]"
        assert self.LONG_LENGTH_CHARS > self.MEDIUM_LENGTH_CHARS, \
            "LONG_LENGTH_CHARS must exceed MEDIUM_LENGTH_CHARS"
        assert 0 < self.MAX_QUALITY <= 1, "MAX_QUALITY must be in (0,1]"


SOURCE_QUALITY_CONFIG = SourceQualityConfig()

# ============================================================================
# PESSIMISTIC FALLBACKS
# ============================================================================
# Uncertainty is always resolved toward distrust.

@dataclass
class PessimisticDefaults:
    """Fixed results used when a check cannot run or fails."""

    NO_SOURCES_HALLUCINATION_RISK: float = 0.8
    FAILED_CHECK_HALLUCINATION_RISK: float = 0.9
    PIPELINE_ERROR_HALLUCINATION_RISK: float = 1.0
    NEUTRAL_RELEVANCE: float = 0.5  # no qualifying words to compare

    def __post_init__(self):
        for field_name, value in self.__dict__.items():
            if not 0 <= value <= 1:
                raise ValueError(f"Default {field_name}={value} outside range [0,1]")


PESSIMISTIC_DEFAULTS = PessimisticDefaults()

# ============================================================================
# JUDGE REQUEST DEFAULTS
# ============================================================================

DEFAULT_OPENAI_MODEL = "gpt-4o"
DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-5-20250929"
JUDGE_TEMPERATURE = 0.0
JUDGE_MAX_TOKENS = 500

# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

def validate_all_constants() -> bool:
    """
    Validate that all constants are within reasonable ranges.

    This runs automatically on import to catch configuration errors early.

    Returns:
        True if all validations pass

    Raises:
        ValueError: If any constant is invalid
    """
    try:
        SCORING_WEIGHTS.__post_init__()
        SCORING_THRESHOLDS.__post_init__()
        SOURCE_QUALITY_CONFIG.__post_init__()
        PESSIMISTIC_DEFAULTS.__post_init__()

        assert SCORING_THRESHOLDS.MEDIUM_CONFIDENCE <= SCORING_THRESHOLDS.DEFAULT_CONFIDENCE_THRESHOLD \
            <= SCORING_THRESHOLDS.HIGH_CONFIDENCE, \
            "Default pass threshold should sit between the medium and high levels"

        assert PESSIMISTIC_DEFAULTS.NO_SOURCES_HALLUCINATION_RISK > SCORING_THRESHOLDS.HIGH_HALLUCINATION_RISK, \
            "Missing sources must always trigger the hallucination risk warning"

        return True

    except (AssertionError, ValueError) as e:
        raise ValueError(f"Configuration validation failed: {e}")


def get_config_summary() -> Dict[str, Any]:
    """
    Get summary of current configuration for logging/debugging.

    Returns:
        Dictionary with configuration summary
    """
    return {
        "version": CONFIG_VERSION,
        "weights": SCORING_WEIGHTS.as_dict(),
        "levels": {
            "high": SCORING_THRESHOLDS.HIGH_CONFIDENCE,
            "medium": SCORING_THRESHOLDS.MEDIUM_CONFIDENCE,
        },
        "confidence_threshold": SCORING_THRESHOLDS.DEFAULT_CONFIDENCE_THRESHOLD,
        "context_relevance_threshold": SCORING_THRESHOLDS.CONTEXT_RELEVANCE,
        "judge": {
            "openai_model": DEFAULT_OPENAI_MODEL,
            "claude_model": DEFAULT_CLAUDE_MODEL,
            "temperature": JUDGE_TEMPERATURE,
            "max_tokens": JUDGE_MAX_TOKENS,
        },
    }


# Validate configuration when module is imported
validate_all_constants()
logger.debug(f"Config summary: {get_config_summary()}")
