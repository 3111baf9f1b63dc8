"""Relevance and deadline filters."""

from .deadline import deadline_of, has_future_deadline
from .relevance import RelevanceClassifier, RelevanceDecision

__all__ = [
    "RelevanceClassifier",
    "RelevanceDecision",
    "deadline_of",
    "has_future_deadline",
]
