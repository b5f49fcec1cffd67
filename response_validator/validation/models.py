"""
Data model for response validation.

Inputs (Source, ValidationInput) are immutable. Every result dataclass
clamps its real-valued fields to [0,1] on construction so that no code
path can hand an out-of-range score to the scorer or to callers.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


def clamp_unit(value: float) -> float:
    """Clamp a score to [0,1]. NaN clamps to 0."""
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


class QueryType(str, Enum):
    """Categories produced by the query classifier."""
    GREETING = "greeting"
    TYPO = "typo"
    SMALL_TALK = "small_talk"
    CLARIFICATION = "clarification"
    META = "meta"
    QUESTION = "question"


class ConfidenceLevel(str, Enum):
    """Discrete confidence levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Source:
    """A retrieved document snippet used as ground truth."""
    content: str
    title: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.content, str):
            raise TypeError(f"Source content must be str, got {type(self.content).__name__}")
        if self.title is not None and not isinstance(self.title, str):
            raise TypeError(f"Source title must be str or None, got {type(self.title).__name__}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Source":
        title = data.get("title")
        return cls(
            content=str(data.get("content") or ""),
            title=str(title) if title is not None else None,
        )


@dataclass(frozen=True)
class ValidationInput:
    """The unit of work for a single validate() call."""
    query: str
    response: str
    sources: Tuple[Source, ...] = ()

    def __post_init__(self):
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "sources", tuple(self.sources))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ValidationInput":
        sources = [
            s if isinstance(s, Source) else Source.from_dict(s)
            for s in data.get("sources") or []
        ]
        return cls(
            query=str(data.get("query") or ""),
            response=str(data.get("response") or ""),
            sources=tuple(sources),
        )


@dataclass(frozen=True)
class QueryClassificationResult:
    type: QueryType
    confidence: float
    skip_validation: bool

    def __post_init__(self):
        object.__setattr__(self, "confidence", clamp_unit(self.confidence))


@dataclass
class AccuracyResult:
    verified: bool
    verification_rate: float
    reason: Optional[str] = None

    def __post_init__(self):
        self.verification_rate = clamp_unit(self.verification_rate)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "verified": self.verified,
            "verification_rate": self.verification_rate,
        }
        if self.reason is not None:
            data["reason"] = self.reason
        return data


@dataclass
class ContextResult:
    source_relevance: float
    source_usage_rate: float
    valid: bool

    def __post_init__(self):
        self.source_relevance = clamp_unit(self.source_relevance)
        self.source_usage_rate = clamp_unit(self.source_usage_rate)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_relevance": self.source_relevance,
            "source_usage_rate": self.source_usage_rate,
            "valid": self.valid,
        }


@dataclass
class HallucinationResult:
    detected: bool
    risk: float
    hallucinated_parts: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.risk = clamp_unit(self.risk)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"detected": self.detected, "risk": self.risk}
        if self.hallucinated_parts:
            data["hallucinated_parts"] = list(self.hallucinated_parts)
        return data


@dataclass
class ConfidenceBreakdown:
    accuracy_score: float
    context_score: float
    hallucination_score: float
    source_quality: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "accuracy_score": self.accuracy_score,
            "context_score": self.context_score,
            "hallucination_score": self.hallucination_score,
            "source_quality": self.source_quality,
        }


@dataclass
class ConfidenceResult:
    confidence_score: float
    level: ConfidenceLevel
    breakdown: ConfidenceBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "confidence_score": self.confidence_score,
            "level": self.level.value,
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass
class ValidationResult:
    """
    Terminal artifact of a validate() call.

    query_type and skip_validation are only set on the short-circuit path;
    confidence_details is only set when the scorer ran.
    """
    confidence: float
    valid: bool
    accuracy: AccuracyResult
    context: ContextResult
    hallucination: HallucinationResult
    warnings: List[str] = field(default_factory=list)
    query_type: Optional[QueryType] = None
    skip_validation: bool = False
    confidence_details: Optional[ConfidenceResult] = None
    trace_id: Optional[str] = None

    def __post_init__(self):
        self.confidence = clamp_unit(self.confidence)

    @property
    def level(self) -> Optional[ConfidenceLevel]:
        if self.confidence_details is None:
            return None
        return self.confidence_details.level

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "confidence": self.confidence,
            "valid": self.valid,
            "accuracy": self.accuracy.to_dict(),
            "context": self.context.to_dict(),
            "hallucination": self.hallucination.to_dict(),
            "warnings": list(self.warnings),
        }
        if self.query_type is not None:
            data["query_type"] = self.query_type.value
        if self.skip_validation:
            data["skip_validation"] = True
        return data
