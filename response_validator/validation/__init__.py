"""
Validation module for response confidence assessment.

Implements the judge-backed accuracy and hallucination checks, the weighted
confidence scorer and the ResponseValidator pipeline that ties them
together.
"""

from .accuracy_checker import AccuracyChecker
from .confidence_scorer import ConfidenceScorer
from .hallucination_detector import HallucinationDetector
from .judge_check import JudgeCheck
from .models import (
    AccuracyResult,
    ConfidenceBreakdown,
    ConfidenceLevel,
    ConfidenceResult,
    ContextResult,
    HallucinationResult,
    QueryClassificationResult,
    QueryType,
    Source,
    ValidationInput,
    ValidationResult,
)
from .validator import ResponseValidator

__all__ = [
    "ResponseValidator",
    "AccuracyChecker",
    "HallucinationDetector",
    "ConfidenceScorer",
    "JudgeCheck",
    "Source",
    "ValidationInput",
    "QueryType",
    "QueryClassificationResult",
    "AccuracyResult",
    "ContextResult",
    "HallucinationResult",
    "ConfidenceLevel",
    "ConfidenceBreakdown",
    "ConfidenceResult",
    "ValidationResult",
]
