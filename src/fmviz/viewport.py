"""
Viewport Transform.

Pan/zoom state for the rendered diagram, expressed as a d3-style transform:
a content point p is drawn at `p * scale + translate`.

Three states are tracked:
- identity: where every freshly loaded model starts,
- fit: computed once per layout so the whole bounding box is visible,
- current: what the user sees after gestures and align/reset.

States are immutable; every operation replaces `current` with a new value
and returns it. Gestures never trigger a new layout.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional

from .config import FIT_SHRINK, SCALE_EXTENT, WHEEL_DELTA_FACTORS
from .core.types import BoundingBox, Point, ViewportSize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewportState:
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0

    @classmethod
    def identity(cls) -> "ViewportState":
        return cls()

    def apply(self, point: Point) -> Point:
        """Content coordinates -> screen coordinates."""
        return Point(point.x * self.scale + self.translate_x, point.y * self.scale + self.translate_y)

    def invert(self, point: Point) -> Point:
        """Screen coordinates -> content coordinates."""
        return Point((point.x - self.translate_x) / self.scale, (point.y - self.translate_y) / self.scale)

    def translate_by(self, dx: float, dy: float) -> "ViewportState":
        return replace(self, translate_x=self.translate_x + dx, translate_y=self.translate_y + dy)

    def scaled_about(self, anchor: Point, factor: float) -> "ViewportState":
        """Multiply the scale by `factor` keeping the screen point `anchor` fixed."""
        content = self.invert(anchor)
        scale = self.scale * factor
        return ViewportState(
            translate_x=anchor.x - content.x * scale,
            translate_y=anchor.y - content.y * scale,
            scale=scale,
        )

    def is_close(self, other: "ViewportState", tolerance: float = 1e-9) -> bool:
        return (
            abs(self.translate_x - other.translate_x) <= tolerance
            and abs(self.translate_y - other.translate_y) <= tolerance
            and abs(self.scale - other.scale) <= tolerance
        )

    def to_svg(self) -> str:
        return f"translate({self.translate_x:.3f},{self.translate_y:.3f}) scale({self.scale:.6f})"


def fit_scale(box: BoundingBox, viewport: ViewportSize, shrink: float = FIT_SHRINK) -> float:
    """
    Largest scale that shows `box` inside `viewport`, times `shrink`.

    Zero-sized dimensions are ignored; with nothing left to compare the
    scale falls back to 1.
    """
    ratios: List[float] = []
    if box.width > 0 and viewport.width > 0:
        ratios.append(viewport.width / box.width)
    if box.height > 0 and viewport.height > 0:
        ratios.append(viewport.height / box.height)
    if not ratios:
        return 1.0
    return min(ratios) * shrink


def centered(box: BoundingBox, viewport: ViewportSize, scale: float) -> ViewportState:
    """Transform at `scale` that puts the middle of `box` in the middle of `viewport`."""
    return ViewportState(
        translate_x=(viewport.width - box.width * scale) / 2 - box.x * scale,
        translate_y=(viewport.height - box.height * scale) / 2 - box.y * scale,
        scale=scale,
    )


class ViewportTransform:
    """
    Viewport state machine for one laid-out model.

    Args:
        bounding_box: Content box from the layout.
        viewport: Size of the drawing surface.
        shrink: Fraction of the viewport the fitted content may fill.
    """

    def __init__(
        self,
        bounding_box: BoundingBox,
        viewport: ViewportSize,
        shrink: float = FIT_SHRINK,
    ):
        self.shrink = shrink
        self.identity = ViewportState.identity()
        self.load(bounding_box, viewport)

    def load(self, bounding_box: BoundingBox, viewport: ViewportSize) -> ViewportState:
        """Start over for a new layout: reset to identity, then fit."""
        self.bounding_box = bounding_box
        self.viewport = viewport
        self.current = self.identity
        self.fit = centered(bounding_box, viewport, fit_scale(bounding_box, viewport, self.shrink))
        return self.fit_to_view()

    @property
    def viewport_center(self) -> Point:
        return Point(self.viewport.width / 2, self.viewport.height / 2)

    def fit_to_view(self) -> ViewportState:
        self.current = self.fit
        return self.current

    def align_center(self) -> ViewportState:
        """Center the bounding box at the current scale."""
        self.current = centered(self.bounding_box, self.viewport, self.current.scale)
        return self.current

    def reset_zoom(self) -> ViewportState:
        """Return to the fitted scale while keeping the on-screen center fixed."""
        center = self.viewport_center
        content = self.current.invert(center)
        scale = self.fit.scale
        self.current = ViewportState(
            translate_x=center.x - content.x * scale,
            translate_y=center.y - content.y * scale,
            scale=scale,
        )
        return self.current

    def pan(self, dx: float, dy: float) -> ViewportState:
        self.current = self.current.translate_by(dx, dy)
        return self.current

    def wheel(
        self,
        delta_y: float,
        modifier: bool,
        anchor: Optional[Point] = None,
        delta_mode: int = 0,
    ) -> ViewportState:
        """
        Apply a wheel event. Without the modifier key the scale never changes.
        """
        if not modifier:
            return self.current
        factor_index = min(max(delta_mode, 0), len(WHEEL_DELTA_FACTORS) - 1)
        delta = -delta_y * WHEEL_DELTA_FACTORS[factor_index]
        # anything past the span of SCALE_EXTENT saturates anyway
        limit = math.log2(SCALE_EXTENT[1] / SCALE_EXTENT[0])
        delta = min(max(delta, -limit), limit)
        return self.pinch(2 ** delta, anchor)

    def pinch(self, factor: float, anchor: Optional[Point] = None) -> ViewportState:
        if factor <= 0:
            logger.debug(f"Ignoring non-positive zoom factor {factor}")
            return self.current
        low, high = SCALE_EXTENT
        target = min(max(self.current.scale * factor, low), high)
        factor = target / self.current.scale
        self.current = self.current.scaled_about(anchor or self.viewport_center, factor)
        return self.current
