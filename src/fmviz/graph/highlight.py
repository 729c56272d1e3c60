"""
Highlight Propagation.

Expands a set of matched feature ids into the "related" closure: every match
plus all of its ancestors up to the root and all of its descendants down to
the leaves. Callers draw exact matches and related nodes differently, so
both sets are kept.

The tree is mirrored into a rustworkx digraph (parent -> child edges) with
an id/index bimap, and ancestor/descendant queries run on that.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, FrozenSet, Iterable, Optional, Set

import rustworkx as rx

from ..core.types import HierarchyNode

logger = logging.getLogger(__name__)


class Emphasis(StrEnum):
    MATCH = "match"
    RELATED = "related"
    NONE = "none"


@dataclass(frozen=True)
class HighlightState:
    """
    Attributes:
        matched: Ids the search reported, whether or not they are in the tree.
        related: Closure over the tree; includes the matched ids it contains.
    """
    matched: FrozenSet[str] = field(default_factory=frozenset)
    related: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_active(self) -> bool:
        return bool(self.matched)

    def emphasis(self, node_id: str) -> Emphasis:
        if node_id in self.matched:
            return Emphasis.MATCH
        if node_id in self.related:
            return Emphasis.RELATED
        return Emphasis.NONE

    def link_is_related(self, parent_id: str, child_id: str) -> bool:
        """A tree edge is related only when both of its ends are."""
        return parent_id in self.related and child_id in self.related


class TreeIndex:
    """
    rustworkx mirror of a HierarchyNode tree.

    Provides O(1) id lookup via the id/index bimap and delegates the
    closure walks to rustworkx.
    """

    def __init__(self, root: HierarchyNode):
        self._graph = rx.PyDiGraph()
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}

        for node in root.walk():
            idx = self._graph.add_node(node.id)
            self._id_to_idx[node.id] = idx
            self._idx_to_id[idx] = node.id

        for parent, child in root.links():
            self._graph.add_edge(self._id_to_idx[parent.id], self._id_to_idx[child.id], None)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._id_to_idx

    def get_ancestors(self, node_id: str) -> Set[str]:
        """Ids on the path from `node_id` up to the root, excluding itself."""
        if node_id not in self._id_to_idx:
            return set()
        return {self._idx_to_id[i] for i in rx.ancestors(self._graph, self._id_to_idx[node_id])}

    def get_descendants(self, node_id: str) -> Set[str]:
        """Ids of the whole subtree below `node_id`, excluding itself."""
        if node_id not in self._id_to_idx:
            return set()
        return {self._idx_to_id[i] for i in rx.descendants(self._graph, self._id_to_idx[node_id])}

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()


class HighlightPropagator:
    """Computes HighlightState for one tree; reuse it across queries."""

    def __init__(self, root: Optional[HierarchyNode]):
        self.root = root
        self._index = TreeIndex(root) if root is not None else None

    def expand(self, matched_ids: Iterable[str]) -> HighlightState:
        matched = frozenset(matched_ids)
        if not matched or self._index is None:
            return HighlightState(matched=matched)

        related: Set[str] = set()
        # ids whose complete subtree is already in `related`
        covered: Set[str] = set()

        for node in self.root.walk():
            if node.id not in matched or node.id in covered:
                continue
            descendants = self._index.get_descendants(node.id)
            related.add(node.id)
            related |= self._index.get_ancestors(node.id)
            related |= descendants
            covered.add(node.id)
            covered |= descendants

        missing = matched - related
        if missing:
            logger.debug(f"{len(missing)} matched id(s) are not in the tree: {sorted(missing)}")

        return HighlightState(matched=matched, related=frozenset(related))


def expand_highlights(matched_ids: Iterable[str], root: Optional[HierarchyNode]) -> HighlightState:
    """Convenience wrapper around HighlightPropagator.expand."""
    return HighlightPropagator(root).expand(matched_ids)
