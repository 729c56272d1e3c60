"""
Graph engine: hierarchy, layout, constraint overlay and highlight closure.
"""

from .hierarchy import HierarchyBuilder, build_hierarchy, path_to_root
from .highlight import Emphasis, HighlightPropagator, HighlightState, TreeIndex, expand_highlights
from .layout import LayoutResult, TreeLayoutEngine, layout_tree
from .overlay import (
    ConstraintCurve, ConstraintOverlay, EndpointMarker, basis_path, bend_point, compute_overlay,
)

__all__ = [
    "HierarchyBuilder", "build_hierarchy", "path_to_root",
    "TreeLayoutEngine", "LayoutResult", "layout_tree",
    "ConstraintOverlay", "ConstraintCurve", "EndpointMarker", "compute_overlay",
    "basis_path", "bend_point",
    "HighlightPropagator", "HighlightState", "Emphasis", "TreeIndex", "expand_highlights",
]
