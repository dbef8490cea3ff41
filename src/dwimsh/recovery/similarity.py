"""Similarity search - propose index entries close to an unknown command."""

from __future__ import annotations

import logging
import os
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from rapidfuzz.distance import Hamming, Levenshtein
from thefuzz import fuzz

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECOMMENDATIONS = 100
LEVENSHTEIN_THRESHOLD = 0.4
HAMMING_RATIO = 0.5


class MatchRule(Enum):
    """Heuristic that admitted a candidate."""

    HAMMING = "hamming"
    LEVENSHTEIN = "levenshtein"
    ANAGRAM = "anagram"
    SUBSTRING = "substring"


@dataclass(frozen=True)
class Recommendation:
    """A candidate command name for an unknown token."""

    name: str
    rule: MatchRule
    score: float  # 0.0 to 1.0, display only


def hamming_distance(a: str, b: str) -> int:
    """Count differing positions; -1 if lengths differ."""
    if len(a) != len(b):
        return -1
    return int(Hamming.distance(a, b))


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance."""
    return int(Levenshtein.distance(a, b))


def normalized_levenshtein(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return levenshtein_distance(a, b) / longest


def are_anagrams(a: str, b: str) -> bool:
    return len(a) == len(b) and Counter(os.fsencode(a)) == Counter(os.fsencode(b))


class SimilarityEngine:
    """Finds index entries similar to a token.

    Every entry is tested against the rules in priority order and the
    first rule that matches admits it. Results keep index order; they are
    never re-sorted by score.
    """

    def __init__(
        self,
        max_recommendations: int = DEFAULT_MAX_RECOMMENDATIONS,
        levenshtein_threshold: float = LEVENSHTEIN_THRESHOLD,
        hamming_ratio: float = HAMMING_RATIO,
        min_candidate_length: int = 2,
    ) -> None:
        """Initialize the engine.

        Args:
            max_recommendations: Stop scanning once this many are found
            levenshtein_threshold: Max edit distance divided by the longer length
            hamming_ratio: Max differing positions as a fraction of token length
            min_candidate_length: Entries shorter than this are skipped
        """
        self.max_recommendations = max_recommendations
        self.levenshtein_threshold = levenshtein_threshold
        self.hamming_ratio = hamming_ratio
        self.min_candidate_length = min_candidate_length

    def match_rule(self, token: str, entry: str) -> MatchRule | None:
        """Return the first rule admitting ``entry`` for ``token``, if any."""
        if len(entry) < self.min_candidate_length:
            return None

        if len(token) == len(entry):
            distance = hamming_distance(token, entry)
            # Float comparison: odd lengths truncate (5 allows 2, not 2.5).
            if 0 <= distance <= len(token) * self.hamming_ratio:
                return MatchRule.HAMMING

        if normalized_levenshtein(token, entry) <= self.levenshtein_threshold:
            return MatchRule.LEVENSHTEIN

        if are_anagrams(token, entry):
            return MatchRule.ANAGRAM

        if token in entry:
            return MatchRule.SUBSTRING

        return None

    def find_matches(self, token: str, index: Iterable[str]) -> list[Recommendation]:
        """Scan the index and collect recommendations with their rule.

        Args:
            token: The unmatched command name
            index: Command names in index order

        Returns:
            Recommendations in index order, at most ``max_recommendations``
        """
        matches: list[Recommendation] = []
        if not token:
            return matches

        for entry in index:
            if len(matches) >= self.max_recommendations:
                break
            rule = self.match_rule(token, entry)
            if rule is None:
                continue
            matches.append(Recommendation(entry, rule, fuzz.ratio(token, entry) / 100.0))

        logger.debug(f"Found {len(matches)} candidates for {token!r}")
        return matches

    def find(self, token: str, index: Iterable[str]) -> list[str]:
        """Return candidate names for ``token`` in index order."""
        return [match.name for match in self.find_matches(token, index)]
