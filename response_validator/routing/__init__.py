"""
Routing module for query classification.

Decides, before any judge call is made, whether a query is conversational
filler that can skip validation.
"""

from .query_classifier import QueryClassifier

__all__ = ["QueryClassifier"]
