"""
Safety module for grounding checks.

Holds the lexical context relevance heuristic that runs alongside the
judge-backed checks.
"""

from .context_relevance import ContextRelevanceEstimator, tokenize

__all__ = ["ContextRelevanceEstimator", "tokenize"]
