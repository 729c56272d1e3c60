"""
Constraint Overlay.

Computes the curved, non-tree edges drawn for requires/excludes constraints
on top of a laid-out tree. Every curve has three control points: the two
endpoint positions and the chord midpoint pushed sideways, so that even
constraints between neighbours stay visibly curved.

Constraints whose endpoints are not in the laid-out tree are skipped.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Mapping, Sequence, Tuple

from ..config import (
    CONSTRAINT_DASH,
    CONSTRAINT_STROKE,
    CURVE_OFFSET_DIVISOR,
    MIN_CURVE_OFFSET,
)
from ..core.types import Constraint, ConstraintKind, Point, PositionedNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndpointMarker:
    """A marker circle drawn at one end of a constraint curve."""
    feature_id: str
    position: Point
    pair: Tuple[str, str]
    kind: ConstraintKind


@dataclass(frozen=True)
class CurveStyle:
    stroke: str
    dash: str


@dataclass(frozen=True)
class ConstraintCurve:
    """
    Drawable form of one constraint.

    Attributes:
        source: Id of the `a` endpoint.
        target: Id of the `b` endpoint.
        kind: requires or excludes.
        control_points: (start, bent midpoint, end).
        path: SVG path data for the basis spline through the control points.
        endpoints: Marker for `a`, marker for `b`.
    """
    source: str
    target: str
    kind: ConstraintKind
    control_points: Tuple[Point, Point, Point]
    path: str
    endpoints: Tuple[EndpointMarker, EndpointMarker]

    @property
    def style(self) -> CurveStyle:
        return CurveStyle(
            stroke=CONSTRAINT_STROKE[self.kind.value],
            dash=CONSTRAINT_DASH[self.kind.value],
        )


def curve_offset(start: Point, end: Point, min_offset: float = MIN_CURVE_OFFSET) -> float:
    """Bend magnitude: grows with vertical distance, never below `min_offset`."""
    return max(min_offset, abs(start.y - end.y) / CURVE_OFFSET_DIVISOR)


def bend_point(start: Point, end: Point, min_offset: float = MIN_CURVE_OFFSET) -> Point:
    """
    Chord midpoint moved along the chord normal.

    The normal is the one pointing up the screen (negative y); for a vertical
    chord, the one pointing right. A zero-length chord bends straight up.
    """
    mid = Point((start.x + end.x) / 2, (start.y + end.y) / 2)
    offset = curve_offset(start, end, min_offset)

    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length == 0:
        return Point(mid.x, mid.y - offset)

    nx, ny = dy / length, -dx / length
    if ny > 0 or (ny == 0 and nx < 0):
        nx, ny = -nx, -ny
    return Point(mid.x + nx * offset, mid.y + ny * offset)


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def basis_path(points: Sequence[Point]) -> str:
    """
    SVG path data for a uniform cubic B-spline through `points`.

    Matches d3's `curveBasis`: the spline starts and ends on the first and
    last point and is pulled toward the inner ones.
    """
    if not points:
        return ""
    if len(points) == 1:
        return f"M{_fmt(points[0].x)},{_fmt(points[0].y)}Z"
    if len(points) == 2:
        a, b = points
        return f"M{_fmt(a.x)},{_fmt(a.y)}L{_fmt(b.x)},{_fmt(b.y)}"

    parts: List[str] = []

    def bezier(p0: Point, p1: Point, p: Point) -> None:
        parts.append(
            "C{},{},{},{},{},{}".format(
                _fmt((2 * p0.x + p1.x) / 3), _fmt((2 * p0.y + p1.y) / 3),
                _fmt((p0.x + 2 * p1.x) / 3), _fmt((p0.y + 2 * p1.y) / 3),
                _fmt((p0.x + 4 * p1.x + p.x) / 6), _fmt((p0.y + 4 * p1.y + p.y) / 6),
            )
        )

    first, second = points[0], points[1]
    parts.append(f"M{_fmt(first.x)},{_fmt(first.y)}")
    parts.append(f"L{_fmt((5 * first.x + second.x) / 6)},{_fmt((5 * first.y + second.y) / 6)}")

    p0, p1 = first, second
    for p in points[2:]:
        bezier(p0, p1, p)
        p0, p1 = p1, p

    # closing segment repeats the last point
    bezier(p0, p1, p1)
    parts.append(f"L{_fmt(p1.x)},{_fmt(p1.y)}")
    return "".join(parts)


class ConstraintOverlay:
    """Builds ConstraintCurves from constraints and node positions."""

    def __init__(self, min_offset: float = MIN_CURVE_OFFSET):
        self.min_offset = min_offset

    def compute(
        self,
        constraints: Sequence[Constraint],
        positioned: Mapping[str, PositionedNode],
    ) -> List[ConstraintCurve]:
        curves: List[ConstraintCurve] = []
        skipped = 0

        for constraint in constraints:
            source = positioned.get(constraint.a)
            target = positioned.get(constraint.b)
            if source is None or target is None:
                skipped += 1
                continue
            curves.append(self._curve(constraint, source.point, target.point))

        if skipped:
            logger.debug(f"Skipped {skipped} constraint(s) with endpoints outside the tree")
        return curves

    def _curve(self, constraint: Constraint, start: Point, end: Point) -> ConstraintCurve:
        control = (start, bend_point(start, end, self.min_offset), end)
        kind = ConstraintKind(constraint.type)
        return ConstraintCurve(
            source=constraint.a,
            target=constraint.b,
            kind=kind,
            control_points=control,
            path=basis_path(control),
            endpoints=(
                EndpointMarker(constraint.a, start, constraint.pair, kind),
                EndpointMarker(constraint.b, end, constraint.pair, kind),
            ),
        )


def compute_overlay(
    constraints: Sequence[Constraint],
    positioned: Mapping[str, PositionedNode],
    min_offset: float = MIN_CURVE_OFFSET,
) -> List[ConstraintCurve]:
    """Convenience wrapper around ConstraintOverlay.compute."""
    return ConstraintOverlay(min_offset).compute(constraints, positioned)
