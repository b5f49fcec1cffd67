"""
Confidence Scorer - combines the check results into one score.

The score is a fixed weighted sum of four signals:

    accuracy        verification_rate            (weight 0.35)
    context         source_relevance             (weight 0.25)
    hallucination   1 - risk                     (weight 0.30)
    source quality  mean per-source quality      (weight 0.10)

The level is read from the rounded score, so a returned score of 0.80 is
always "high" and 0.50 always "medium".
"""

import logging
import math
from typing import Optional, Sequence

from response_validator.config.constants import (
    SCORING_THRESHOLDS,
    SCORING_WEIGHTS,
    SOURCE_QUALITY_CONFIG,
    ScoringThresholds,
    ScoringWeights,
    SourceQualityConfig,
)
from response_validator.validation.models import (
    AccuracyResult,
    ConfidenceBreakdown,
    ConfidenceLevel,
    ConfidenceResult,
    ContextResult,
    HallucinationResult,
    Source,
    clamp_unit,
)

logger = logging.getLogger(__name__)


def round_score(value: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    return math.floor(value * 100 + 0.5) / 100


class ConfidenceScorer:
    """
    Weighted confidence scorer.

    Pure and deterministic: identical inputs always give identical output,
    including rounding.
    """

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        thresholds: Optional[ScoringThresholds] = None,
        source_quality: Optional[SourceQualityConfig] = None,
    ):
        self.weights = weights or SCORING_WEIGHTS
        self.thresholds = thresholds or SCORING_THRESHOLDS
        self.source_quality_config = source_quality or SOURCE_QUALITY_CONFIG

    def score(
        self,
        accuracy: AccuracyResult,
        context: ContextResult,
        hallucination: HallucinationResult,
        sources: Sequence[Source],
    ) -> ConfidenceResult:
        """
        Combine check results into a confidence score.

        Args:
            accuracy: Accuracy check result
            context: Context relevance result
            hallucination: Hallucination check result
            sources: Sources the response was checked against

        Returns:
            ConfidenceResult with score, level and rounded breakdown
        """
        accuracy_score = clamp_unit(accuracy.verification_rate)
        context_score = clamp_unit(context.source_relevance)
        hallucination_score = clamp_unit(1 - hallucination.risk)
        source_quality_score = self.calculate_source_quality(sources)

        raw_score = (
            accuracy_score * self.weights.ACCURACY
            + context_score * self.weights.CONTEXT
            + hallucination_score * self.weights.HALLUCINATION
            + source_quality_score * self.weights.SOURCE_QUALITY
        )
        confidence_score = round_score(clamp_unit(raw_score))
        level = self.level_for(confidence_score)

        logger.info(
            f"Confidence Score: {confidence_score * 100:.1f}% "
            f"(Accuracy: {accuracy_score * 100:.0f}%, "
            f"Context: {context_score * 100:.0f}%, "
            f"Hallucination: {hallucination_score * 100:.0f}%)"
        )

        return ConfidenceResult(
            confidence_score=confidence_score,
            level=level,
            breakdown=ConfidenceBreakdown(
                accuracy_score=round_score(accuracy_score),
                context_score=round_score(context_score),
                hallucination_score=round_score(hallucination_score),
                source_quality=round_score(source_quality_score),
            ),
        )

    def level_for(self, score: float) -> ConfidenceLevel:
        if score >= self.thresholds.HIGH_CONFIDENCE:
            return ConfidenceLevel.HIGH
        if score >= self.thresholds.MEDIUM_CONFIDENCE:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW

    def source_quality(self, source: Source) -> float:
        """Quality of a single source."""
        cfg = self.source_quality_config
        quality = cfg.BASE_QUALITY
        length = len(source.content or "")

        if length > cfg.MEDIUM_LENGTH_CHARS:
            quality += cfg.MEDIUM_LENGTH_BONUS
        if length > cfg.LONG_LENGTH_CHARS:
            quality += cfg.LONG_LENGTH_BONUS
        if source.title:
            quality += cfg.TITLE_BONUS

        # round away float drift (0.5 + 0.2 + 0.2 + 0.1 != 1.0)
        return min(round(quality, 6), cfg.MAX_QUALITY)

    def calculate_source_quality(self, sources: Sequence[Source]) -> float:
        """Mean source quality; 0 when there are no sources."""
        if not sources:
            return 0.0
        return sum(self.source_quality(source) for source in sources) / len(sources)
