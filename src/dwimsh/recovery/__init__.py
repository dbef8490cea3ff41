"""Command recovery - similarity search and interactive correction."""

from .dedup import deduplicate
from .resolver import InteractiveResolver, Resolution, ResolutionState
from .similarity import MatchRule, Recommendation, SimilarityEngine

__all__ = [
    "InteractiveResolver",
    "MatchRule",
    "Recommendation",
    "Resolution",
    "ResolutionState",
    "SimilarityEngine",
    "deduplicate",
]
