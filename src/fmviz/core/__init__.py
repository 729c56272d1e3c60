"""
Core building blocks for fmviz.

- types: input model (Feature, Constraint, FeatureModel) and derived
  geometry (HierarchyNode, PositionedNode, BoundingBox, ...)
- result: Ok/Err values for fallible loading
- exceptions: errors raised by the loader and settings layers
"""

from .exceptions import FmvizError, ModelLoadError, ModelValidationError, SettingsError
from .result import Err, Ok, Result, map_ok
from .types import (
    BoundingBox, BuildReport, Constraint, ConstraintKind, Feature, FeatureModel,
    FeatureType, HierarchyNode, Margin, Point, PositionedNode, Spacing, ViewportSize,
)

__all__ = [
    # Types
    "Feature", "FeatureType", "Constraint", "ConstraintKind", "FeatureModel",
    "HierarchyNode", "PositionedNode", "BuildReport",
    "Point", "Spacing", "Margin", "BoundingBox", "ViewportSize",
    # Result
    "Ok", "Err", "Result", "map_ok",
    # Errors
    "FmvizError", "ModelLoadError", "ModelValidationError", "SettingsError",
]
