"""
Feature Search.

Case-insensitive substring search over feature labels (falling back to the
id when a feature has no label). Results are ids in source order; there is
no ranking and no fuzzy matching. Search does not need the hierarchy, so it
can run before or without one.
"""

from typing import List, Optional, Sequence, Tuple

from .core.types import Feature


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().lower()


def search_features(features: Sequence[Feature], query: Optional[str]) -> List[str]:
    """
    Return the ids of features whose label (or id) contains `query`.

    An empty or whitespace-only query matches nothing.
    """
    needle = normalize_query(query)
    if not needle:
        return []
    return [f.id for f in features if needle in f.display_name.lower()]


class SearchIndex:
    """
    Reusable search over one feature list.

    Labels are lowercased once up front; every query is then a linear scan
    that preserves source order.
    """

    def __init__(self, features: Sequence[Feature]):
        self._entries: Tuple[Tuple[str, str], ...] = tuple(
            (f.id, f.display_name.lower()) for f in features
        )

    def __len__(self) -> int:
        return len(self._entries)

    def search(self, query: Optional[str]) -> List[str]:
        needle = normalize_query(query)
        if not needle:
            return []
        return [fid for fid, haystack in self._entries if needle in haystack]

    def count(self, query: Optional[str]) -> int:
        return len(self.search(query))
