"""
Context relevance estimation.

A deterministic, lexical proxy for grounding: how many of the response's
content words appear in the sources, and how many of the query's words the
response picks up. No model call and no embeddings are involved.

Tokens are lowercased with punctuation stripped. Response and source words
must be longer than 3 characters, query words longer than 2. Response words
are counted per occurrence, so repeated words weigh more.
"""

import logging
import re
from typing import List, Sequence

from response_validator.config.constants import (
    PESSIMISTIC_DEFAULTS,
    SCORING_THRESHOLDS,
)
from response_validator.validation.models import ContextResult, Source

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s]")

MIN_CONTENT_WORD_LENGTH = 4
MIN_QUERY_WORD_LENGTH = 3


def tokenize(text: str, min_length: int) -> List[str]:
    """Lowercase, strip punctuation and keep words of at least min_length."""
    cleaned = _PUNCTUATION.sub("", (text or "").lower())
    return [word for word in cleaned.split() if len(word) >= min_length]


class ContextRelevanceEstimator:
    """
    Lexical context relevance heuristic.

    Pure and stateless: identical inputs always give identical results.
    """

    def __init__(self, relevance_threshold: float = SCORING_THRESHOLDS.CONTEXT_RELEVANCE):
        """
        Args:
            relevance_threshold: Relevance must be strictly above this for
                the context to count as valid
        """
        self.relevance_threshold = relevance_threshold

    def estimate(self, query: str, response: str, sources: Sequence[Source]) -> ContextResult:
        """
        Estimate how well the response is grounded in the sources.

        Args:
            query: User query
            response: Response under review
            sources: Retrieved sources

        Returns:
            ContextResult with source_relevance, source_usage_rate and valid
        """
        if not sources:
            return ContextResult(source_relevance=0.0, source_usage_rate=0.0, valid=False)

        response_words = tokenize(response, MIN_CONTENT_WORD_LENGTH)
        source_words = set(tokenize(" ".join(s.content for s in sources), MIN_CONTENT_WORD_LENGTH))

        if response_words:
            words_in_source = sum(1 for word in response_words if word in source_words)
            source_relevance = min(words_in_source / len(response_words), 1.0)
        else:
            source_relevance = PESSIMISTIC_DEFAULTS.NEUTRAL_RELEVANCE

        query_words = tokenize(query, MIN_QUERY_WORD_LENGTH)
        if query_words:
            response_vocabulary = set(response_words)
            query_words_in_response = sum(1 for word in query_words if word in response_vocabulary)
            source_usage_rate = min(query_words_in_response / len(query_words), 1.0)
        else:
            source_usage_rate = PESSIMISTIC_DEFAULTS.NEUTRAL_RELEVANCE

        logger.debug(
            f"Context relevance: {source_relevance:.2f} "
            f"({len(response_words)} response words), usage rate: {source_usage_rate:.2f}"
        )

        return ContextResult(
            source_relevance=source_relevance,
            source_usage_rate=source_usage_rate,
            valid=source_relevance > self.relevance_threshold,
        )
