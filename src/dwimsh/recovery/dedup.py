"""Remove repeated recommendations."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import TypeVar

T = TypeVar("T")


def deduplicate(
    items: Iterable[T],
    key: Callable[[T], Hashable] | None = None,
) -> list[T]:
    """Drop later duplicates, keeping first occurrences in their original order.

    Args:
        items: Candidate sequence, possibly with repeats
        key: Optional function giving the identity to compare on

    Returns:
        List of unique items
    """
    seen: set[Hashable] = set()
    unique: list[T] = []
    for item in items:
        marker = key(item) if key else item
        if marker not in seen:
            seen.add(marker)
            unique.append(item)
    return unique
