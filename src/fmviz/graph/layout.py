"""
Tree Layout Engine.

Tidy tree placement (Reingold-Tilford with Walker's linear-time apportioning,
as refined by Buchheim et al.). This produces the same coordinates as d3's
`tree().nodeSize([dx, dy])`:

- siblings sit `separation` units apart (1 for siblings, 2 for cousins),
- each parent is centered over its first and last child,
- subtrees never overlap,
- the root is at (0, 0) and y = depth * dy.

Both walks use explicit stacks so deep models do not hit the recursion limit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from ..config import COUSIN_SEPARATION, DEFAULT_MARGIN, DEFAULT_SPACING, SIBLING_SEPARATION
from ..core.types import BoundingBox, HierarchyNode, Margin, PositionedNode, Spacing

logger = logging.getLogger(__name__)

Separation = Callable[["_WalkerNode", "_WalkerNode"], float]


@dataclass(frozen=True)
class LayoutResult:
    """
    Positions for every node of one tree.

    Attributes:
        positioned: Nodes in pre-order.
        by_id: Same nodes keyed by feature id.
        extent: Box around node centers only (zero-sized for one node).
        bounding_box: `extent` grown by the layout margin.
    """
    positioned: Tuple[PositionedNode, ...] = ()
    by_id: Mapping[str, PositionedNode] = field(default_factory=dict)
    extent: BoundingBox = field(default_factory=BoundingBox.empty)
    bounding_box: BoundingBox = field(default_factory=BoundingBox.empty)

    @property
    def is_empty(self) -> bool:
        return not self.positioned


class _WalkerNode:
    """Mutable bookkeeping for one node while the walks run."""

    __slots__ = (
        "source", "parent", "children", "number", "depth",
        "prelim", "modifier", "change", "shift", "thread",
        "ancestor", "default_ancestor", "x",
    )

    def __init__(self, source: Optional[HierarchyNode], number: int, depth: int):
        self.source = source
        self.parent: Optional[_WalkerNode] = None
        self.children: List[_WalkerNode] = []
        self.number = number
        self.depth = depth
        self.prelim = 0.0
        self.modifier = 0.0
        self.change = 0.0
        self.shift = 0.0
        self.thread: Optional[_WalkerNode] = None
        self.ancestor: _WalkerNode = self
        self.default_ancestor: Optional[_WalkerNode] = None
        self.x = 0.0


def default_separation(a: _WalkerNode, b: _WalkerNode) -> float:
    return SIBLING_SEPARATION if a.parent is b.parent else COUSIN_SEPARATION


def _next_left(v: _WalkerNode) -> Optional[_WalkerNode]:
    return v.children[0] if v.children else v.thread


def _next_right(v: _WalkerNode) -> Optional[_WalkerNode]:
    return v.children[-1] if v.children else v.thread


def _move_subtree(wm: _WalkerNode, wp: _WalkerNode, shift: float) -> None:
    change = shift / (wp.number - wm.number)
    wp.change -= change
    wp.shift += shift
    wm.change += change
    wp.prelim += shift
    wp.modifier += shift


def _execute_shifts(v: _WalkerNode) -> None:
    shift = 0.0
    change = 0.0
    for w in reversed(v.children):
        w.prelim += shift
        w.modifier += shift
        change += w.change
        shift += w.shift + change


def _next_ancestor(vim: _WalkerNode, v: _WalkerNode, ancestor: _WalkerNode) -> _WalkerNode:
    return vim.ancestor if vim.ancestor.parent is v.parent else ancestor


class TreeLayoutEngine:
    """
    Assigns coordinates to a HierarchyNode tree.

    Args:
        spacing: Sibling distance (x) and level distance (y).
        margin: Added around the node extent to form the bounding box.
        separation: Units of spacing.x between two neighbouring nodes.
    """

    def __init__(
        self,
        spacing: Spacing = DEFAULT_SPACING,
        margin: Margin = DEFAULT_MARGIN,
        separation: Separation = default_separation,
    ):
        self.spacing = spacing
        self.margin = margin
        self.separation = separation

    def layout(self, root: Optional[HierarchyNode]) -> LayoutResult:
        if root is None:
            return LayoutResult()

        sentinel, walker_root, order = self._wrap(root)

        for v in self._post_order(walker_root):
            self._first_walk(v)
        sentinel.modifier = -walker_root.prelim

        for v in order:
            self._second_walk(v)

        positioned: List[PositionedNode] = []
        for v in order:
            parent_id = v.parent.source.id if v.parent.source is not None else None
            positioned.append(
                PositionedNode(
                    node=v.source,
                    x=v.x * self.spacing.x,
                    y=v.depth * self.spacing.y,
                    depth=v.depth,
                    parent_id=parent_id,
                )
            )

        by_id: Dict[str, PositionedNode] = {p.id: p for p in positioned}
        extent = BoundingBox.around([p.point for p in positioned])
        logger.debug(f"Laid out {len(positioned)} node(s), extent {extent.width:.1f}x{extent.height:.1f}")

        return LayoutResult(
            positioned=tuple(positioned),
            by_id=by_id,
            extent=extent,
            bounding_box=extent.grow(self.margin),
        )

    # =========================================================================
    # Walks
    # =========================================================================

    @staticmethod
    def _wrap(root: HierarchyNode) -> Tuple[_WalkerNode, _WalkerNode, List[_WalkerNode]]:
        """Mirror the tree into walker nodes. Returns (sentinel, root, pre-order)."""
        sentinel = _WalkerNode(None, 0, -1)
        walker_root = _WalkerNode(root, 0, 0)
        walker_root.parent = sentinel
        sentinel.children = [walker_root]

        order: List[_WalkerNode] = []
        stack = [walker_root]
        while stack:
            v = stack.pop()
            order.append(v)
            for i, child in enumerate(v.source.children):
                w = _WalkerNode(child, i, v.depth + 1)
                w.parent = v
                v.children.append(w)
            stack.extend(reversed(v.children))
        return sentinel, walker_root, order

    @staticmethod
    def _post_order(root: _WalkerNode) -> List[_WalkerNode]:
        """Children left to right before their parent."""
        visit: List[_WalkerNode] = []
        stack = [root]
        while stack:
            v = stack.pop()
            visit.append(v)
            stack.extend(v.children)
        visit.reverse()
        return visit

    def _first_walk(self, v: _WalkerNode) -> None:
        siblings = v.parent.children
        w = siblings[v.number - 1] if v.number else None

        if v.children:
            _execute_shifts(v)
            midpoint = (v.children[0].prelim + v.children[-1].prelim) / 2
            if w is not None:
                v.prelim = w.prelim + self.separation(v, w)
                v.modifier = v.prelim - midpoint
            else:
                v.prelim = midpoint
        elif w is not None:
            v.prelim = w.prelim + self.separation(v, w)

        v.parent.default_ancestor = self._apportion(
            v, w, v.parent.default_ancestor or siblings[0]
        )

    def _apportion(
        self, v: _WalkerNode, w: Optional[_WalkerNode], ancestor: _WalkerNode
    ) -> _WalkerNode:
        if w is None:
            return ancestor

        vip = vop = v
        vim = w
        vom = vip.parent.children[0]
        sip = vip.modifier
        sop = vop.modifier
        sim = vim.modifier
        som = vom.modifier

        vim = _next_right(vim)
        vip = _next_left(vip)
        while vim is not None and vip is not None:
            vom = _next_left(vom)
            vop = _next_right(vop)
            vop.ancestor = v
            shift = vim.prelim + sim - vip.prelim - sip + self.separation(vim, vip)
            if shift > 0:
                _move_subtree(_next_ancestor(vim, v, ancestor), v, shift)
                sip += shift
                sop += shift
            sim += vim.modifier
            sip += vip.modifier
            som += vom.modifier
            sop += vop.modifier
            vim = _next_right(vim)
            vip = _next_left(vip)

        if vim is not None and _next_right(vop) is None:
            vop.thread = vim
            vop.modifier += sim - sop
        if vip is not None and _next_left(vom) is None:
            vom.thread = vip
            vom.modifier += sip - som
            ancestor = v
        return ancestor

    @staticmethod
    def _second_walk(v: _WalkerNode) -> None:
        v.x = v.prelim + v.parent.modifier
        v.modifier += v.parent.modifier


def layout_tree(
    root: Optional[HierarchyNode],
    spacing: Spacing = DEFAULT_SPACING,
    margin: Margin = DEFAULT_MARGIN,
) -> LayoutResult:
    """Convenience wrapper around TreeLayoutEngine.layout."""
    return TreeLayoutEngine(spacing=spacing, margin=margin).layout(root)
