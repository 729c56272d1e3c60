"""
Core type definitions for fmviz.

The input side (Feature, Constraint, FeatureModel) is validated with pydantic
and treated as read-only. Everything the engine derives from it (hierarchy
nodes, positions, boxes) is a frozen dataclass that is rebuilt in full on
every recomputation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeatureType(StrEnum):
    """Known feature kinds. Any other string is accepted and drawn neutral."""
    MANDATORY = "mandatory"
    OPTIONAL = "optional"


class ConstraintKind(StrEnum):
    """Cross-tree relations between two features."""
    REQUIRES = "requires"
    EXCLUDES = "excludes"


class Feature(BaseModel):
    """
    A node of the variability model.
    """
    id: str
    label: str = ""
    type: str = ""
    parent: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("label", "type", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("parent", mode="before")
    @classmethod
    def _blank_parent_is_absent(cls, value):
        # "" and null both mean "no parent"
        return value or None

    @property
    def display_name(self) -> str:
        return self.label or self.id


class Constraint(BaseModel):
    """
    A requires/excludes relation between features `a` and `b`.
    """
    a: str
    b: str
    type: ConstraintKind

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def pair(self) -> Tuple[str, str]:
        return (self.a, self.b)


class FeatureModel(BaseModel):
    """
    The whole model as supplied by the loader. Never mutated by the engine.
    """
    features: List[Feature] = Field(default_factory=list)
    constraints: List[Constraint] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("constraints", mode="before")
    @classmethod
    def _null_constraints(cls, value):
        return [] if value is None else value


# =============================================================================
# Geometry
# =============================================================================

@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Spacing:
    """Distance between adjacent siblings (x) and between depth levels (y)."""
    x: float
    y: float


@dataclass(frozen=True)
class Margin:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


@dataclass(frozen=True)
class ViewportSize:
    width: float
    height: float


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def empty(cls) -> "BoundingBox":
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def around(cls, points: List[Point]) -> "BoundingBox":
        """Smallest axis-aligned box containing every point."""
        if not points:
            return cls.empty()
        min_x = min(p.x for p in points)
        max_x = max(p.x for p in points)
        min_y = min(p.y for p in points)
        max_y = max(p.y for p in points)
        return cls(min_x, min_y, max_x - min_x, max_y - min_y)

    def grow(self, margin: Margin) -> "BoundingBox":
        return BoundingBox(
            x=self.x - margin.left,
            y=self.y - margin.top,
            width=self.width + margin.left + margin.right,
            height=self.height + margin.top + margin.bottom,
        )

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)


# =============================================================================
# Derived tree
# =============================================================================

@dataclass(frozen=True)
class HierarchyNode:
    """
    One feature plus the subtrees it owns.

    Children keep the order the features had in the source list.
    """
    feature: Feature
    children: Tuple["HierarchyNode", ...] = ()

    @property
    def id(self) -> str:
        return self.feature.id

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator["HierarchyNode"]:
        """Pre-order traversal, left to right."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def links(self) -> Iterator[Tuple["HierarchyNode", "HierarchyNode"]]:
        """(parent, child) pairs in pre-order of the child."""
        stack = [(self, child) for child in reversed(self.children)]
        while stack:
            parent, node = stack.pop()
            yield parent, node
            stack.extend((node, child) for child in reversed(node.children))

    def find(self, node_id: str) -> Optional["HierarchyNode"]:
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def parent_map(self) -> Dict[str, str]:
        """child id -> parent id for every edge of the tree."""
        return {child.id: parent.id for parent, child in self.links()}

    def size(self) -> int:
        return sum(1 for _ in self.walk())


@dataclass(frozen=True)
class PositionedNode:
    """A hierarchy node with its layout coordinates."""
    node: HierarchyNode
    x: float
    y: float
    depth: int
    parent_id: Optional[str] = None

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def feature(self) -> Feature:
        return self.node.feature

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class BuildReport:
    """
    Outcome of turning the flat feature list into a tree.

    Attributes:
        root: The selected root, or None when no tree could be formed.
        root_candidates: Ids without a resolvable parent, in input order.
        dangling: Ids whose declared parent does not exist.
        omitted: Ids present in the input but not reachable from the root.
    """
    root: Optional[HierarchyNode]
    root_candidates: Tuple[str, ...] = ()
    dangling: Tuple[str, ...] = ()
    omitted: Tuple[str, ...] = field(default_factory=tuple)
