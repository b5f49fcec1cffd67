"""
Response validator.

Scores how trustworthy an AI-generated response is with respect to the
source documents it was generated from, and decides whether it is fit to
show to an end user.
"""

from .config import ScoringThresholds, ScoringWeights, ValidatorConfig
from .exceptions import ConfigurationError, LLMError
from .llm import ClaudeProvider, LLMFactory, LLMProvider, LLMResponse, OpenAIProvider
from .utils import PipelineTracer, TraceEvent, get_tracer
from .validation import (
    AccuracyChecker,
    AccuracyResult,
    ConfidenceLevel,
    ConfidenceResult,
    ConfidenceScorer,
    ContextResult,
    HallucinationDetector,
    HallucinationResult,
    QueryClassificationResult,
    QueryType,
    ResponseValidator,
    Source,
    ValidationInput,
    ValidationResult,
)
from .routing import QueryClassifier
from .safety import ContextRelevanceEstimator

__version__ = "1.0.0"

__all__ = [
    "ResponseValidator",
    "ValidatorConfig",
    "ScoringWeights",
    "ScoringThresholds",
    "QueryClassifier",
    "ContextRelevanceEstimator",
    "AccuracyChecker",
    "HallucinationDetector",
    "ConfidenceScorer",
    "LLMProvider",
    "LLMResponse",
    "LLMFactory",
    "OpenAIProvider",
    "ClaudeProvider",
    "PipelineTracer",
    "TraceEvent",
    "get_tracer",
    "Source",
    "ValidationInput",
    "QueryType",
    "QueryClassificationResult",
    "AccuracyResult",
    "ContextResult",
    "HallucinationResult",
    "ConfidenceLevel",
    "ConfidenceResult",
    "ValidationResult",
    "ConfigurationError",
    "LLMError",
]
