"""
Query Classifier - decides whether a query needs full validation.

Validation costs two judge calls, so conversational filler is detected with
cheap, high-precision patterns and skipped. Anything that resembles a real
question defaults to full scrutiny.

CLASSIFICATION PRIORITY (first match wins):
1. greeting, typo, small_talk, clarification, meta patterns (confidence 0.9)
2. short utterances of 10 characters or fewer -> greeting (confidence 0.7)
3. question mark or interrogative opening -> question (confidence 0.8)
4. everything else -> question (confidence 0.6)
"""

import logging
import re
from typing import Dict, Optional, Pattern, Tuple

from response_validator.validation.models import QueryClassificationResult, QueryType

logger = logging.getLogger(__name__)

PATTERN_CONFIDENCE = 0.9
SHORT_QUERY_CONFIDENCE = 0.7
INTERROGATIVE_CONFIDENCE = 0.8
FALLBACK_CONFIDENCE = 0.6
SHORT_QUERY_MAX_CHARS = 10

# Ordered: dict insertion order is the match order
QUERY_PATTERNS: Dict[QueryType, Pattern] = {
    QueryType.GREETING: re.compile(
        r"^(hi|hello|hey|good morning|good afternoon|good evening|greetings|sup|what's up)",
        re.IGNORECASE,
    ),
    QueryType.TYPO: re.compile(
        r"(helo|whta|thnak|recieve|seperate|occured|definately|accomodate|begining|neccessary)",
        re.IGNORECASE,
    ),
    QueryType.SMALL_TALK: re.compile(
        r"^(how are you|what's up|nice weather|how's it going|how's your day)",
        re.IGNORECASE,
    ),
    QueryType.CLARIFICATION: re.compile(
        r"^(what do you mean|can you repeat|can you explain|i don't understand|what does that mean)",
        re.IGNORECASE,
    ),
    QueryType.META: re.compile(
        r"^(what can you help with|what's your name|who are you|what are you|what do you do)",
        re.IGNORECASE,
    ),
}

# Clarifications ask about a prior answer, so they are still validated
SKIPPABLE_TYPES = frozenset({
    QueryType.GREETING,
    QueryType.TYPO,
    QueryType.SMALL_TALK,
    QueryType.META,
})

INTERROGATIVE_PREFIXES: Tuple[str, ...] = (
    "how", "what", "when", "where", "why", "who", "which",
)


class QueryClassifier:
    """
    Pattern-based query classifier.

    classify() never fails and holds no mutable state, so one instance can
    serve concurrent validations.
    """

    def __init__(self, patterns: Optional[Dict[QueryType, Pattern]] = None):
        """
        Initialize classifier.

        Args:
            patterns: Optional ordered pattern table replacing QUERY_PATTERNS
        """
        self.patterns = patterns if patterns is not None else QUERY_PATTERNS

    def classify(self, query: str) -> QueryClassificationResult:
        """
        Classify a query.

        Args:
            query: Raw user query

        Returns:
            QueryClassificationResult with type, confidence and skip flag
        """
        normalized = (query or "").strip().lower()

        for query_type, pattern in self.patterns.items():
            if pattern.search(normalized):
                logger.debug(f"Query matched {query_type.value} pattern")
                return QueryClassificationResult(
                    type=query_type,
                    confidence=PATTERN_CONFIDENCE,
                    skip_validation=query_type in SKIPPABLE_TYPES,
                )

        if len(normalized) <= SHORT_QUERY_MAX_CHARS:
            return QueryClassificationResult(
                type=QueryType.GREETING,
                confidence=SHORT_QUERY_CONFIDENCE,
                skip_validation=True,
            )

        if "?" in normalized or normalized.startswith(INTERROGATIVE_PREFIXES):
            return QueryClassificationResult(
                type=QueryType.QUESTION,
                confidence=INTERROGATIVE_CONFIDENCE,
                skip_validation=False,
            )

        return QueryClassificationResult(
            type=QueryType.QUESTION,
            confidence=FALLBACK_CONFIDENCE,
            skip_validation=False,
        )
