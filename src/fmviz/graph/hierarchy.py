"""
Hierarchy Builder.

Turns the flat feature list (each feature naming its parent) into a single
owned tree. The builder is deliberately permissive: features it cannot place
are left out of the tree and listed in the BuildReport, never raised.

Placement rules:
- Sibling order equals source order.
- The first parentless feature in source order is the root.
- Other parentless features, features whose parent id is unknown, and
  everything beneath them are omitted.
- A repeated id is owned by its last occurrence; earlier ones are omitted.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from ..config import RootPolicy
from ..core.types import BuildReport, Feature, HierarchyNode

logger = logging.getLogger(__name__)


class HierarchyBuilder:
    """
    Builds a HierarchyNode tree from parent pointers.

    Args:
        root_policy: FIRST keeps the first parentless feature as root and
            drops the rest; STRICT refuses to pick and yields no tree when
            more than one root candidate (or any dangling parent) exists.
    """

    def __init__(self, root_policy: RootPolicy = RootPolicy.FIRST):
        self.root_policy = RootPolicy(root_policy)

    def build(self, features: Sequence[Feature]) -> Optional[HierarchyNode]:
        """Return the tree root, or None when no tree can be formed."""
        return self.build_with_report(features).root

    def build_with_report(self, features: Sequence[Feature]) -> BuildReport:
        if not features:
            return BuildReport(root=None)

        owner_index: Dict[str, int] = {}
        for index, feature in enumerate(features):
            owner_index[feature.id] = index

        children_of: Dict[str, List[str]] = defaultdict(list)
        candidates: List[str] = []
        dangling: List[str] = []

        for index, feature in enumerate(features):
            if owner_index[feature.id] != index:
                continue
            if feature.parent is None:
                candidates.append(feature.id)
            elif feature.parent in owner_index:
                children_of[feature.parent].append(feature.id)
            else:
                dangling.append(feature.id)

        root_id = self._select_root(candidates, dangling)
        if root_id is None:
            omitted = tuple(f.id for f in features)
            logger.debug(
                f"No tree formed: {len(candidates)} root candidate(s), "
                f"{len(dangling)} dangling parent(s)"
            )
            return BuildReport(
                root=None,
                root_candidates=tuple(candidates),
                dangling=tuple(dangling),
                omitted=omitted,
            )

        root = self._assemble(root_id, features, owner_index, children_of)
        placed = {node.id for node in root.walk()}

        omitted = tuple(
            feature.id
            for index, feature in enumerate(features)
            if feature.id not in placed or owner_index[feature.id] != index
        )
        if omitted:
            logger.debug(f"Omitted {len(omitted)} feature(s) not reachable from '{root_id}': {list(omitted)}")

        return BuildReport(
            root=root,
            root_candidates=tuple(candidates),
            dangling=tuple(dangling),
            omitted=omitted,
        )

    def _select_root(self, candidates: List[str], dangling: List[str]) -> Optional[str]:
        if not candidates:
            return None
        if self.root_policy is RootPolicy.STRICT and len(candidates) + len(dangling) > 1:
            return None
        return candidates[0]

    @staticmethod
    def _assemble(
        root_id: str,
        features: Sequence[Feature],
        owner_index: Dict[str, int],
        children_of: Dict[str, List[str]],
    ) -> HierarchyNode:
        """Build frozen nodes bottom-up with an explicit post-order stack."""
        built: Dict[str, HierarchyNode] = {}
        seen = {root_id}
        stack = [(root_id, False)]

        while stack:
            node_id, expanded = stack.pop()
            if expanded:
                kids = tuple(built[c] for c in children_of.get(node_id, ()) if c in built)
                built[node_id] = HierarchyNode(
                    feature=features[owner_index[node_id]],
                    children=kids,
                )
                continue

            stack.append((node_id, True))
            for child_id in reversed(children_of.get(node_id, ())):
                if child_id not in seen:
                    seen.add(child_id)
                    stack.append((child_id, False))

        return built[root_id]


def build_hierarchy(
    features: Sequence[Feature],
    root_policy: RootPolicy = RootPolicy.FIRST,
) -> Optional[HierarchyNode]:
    """Convenience wrapper around HierarchyBuilder.build."""
    return HierarchyBuilder(root_policy).build(features)


def path_to_root(target_id: str, parent_map: Dict[str, str]) -> List[str]:
    """
    Ids from the root down to `target_id`.

    `parent_map` maps child id -> parent id (see HierarchyNode.parent_map).
    A target that is not in the map is returned on its own.
    """
    path: List[str] = []
    seen = set()
    current: Optional[str] = target_id
    while current is not None and current not in seen:
        seen.add(current)
        path.append(current)
        current = parent_map.get(current)
    path.reverse()
    return path
