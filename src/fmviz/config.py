"""
Global Configuration and Defaults.

This module centralizes the tunables of the feature-model engine: layout
spacing, surface margins, fit shrink factor, constraint curve shape, and the
colour tables the renderer uses. `EngineSettings` bundles the values that a
user may override from `.fmviz/config.yaml`.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .core.exceptions import SettingsError
from .core.types import Margin, Spacing

logger = logging.getLogger(__name__)

# --- Layout ---
# Horizontal distance between adjacent siblings, vertical distance per depth level
DEFAULT_SPACING = Spacing(x=140.0, y=200.0)

# Extra room around the node extent when sizing the drawing surface
DEFAULT_MARGIN = Margin(top=100.0, right=200.0, bottom=200.0, left=200.0)

# Subtree separation in units of spacing.x
SIBLING_SEPARATION = 1.0
COUSIN_SEPARATION = 2.0

# --- Viewport ---
# Fraction of the viewport the fitted content may fill
FIT_SHRINK = 0.8

# d3-zoom wheel deltas per DOM deltaMode (pixel, line, page)
WHEEL_DELTA_FACTORS = (0.002, 0.05, 1.0)

# Allowed zoom scale range, like d3-zoom scaleExtent
SCALE_EXTENT = (1e-6, 1e6)

# --- Constraint curves ---
MIN_CURVE_OFFSET = 80.0
CURVE_OFFSET_DIVISOR = 3.0

# --- Rendering ---
NODE_RADIUS = 25.0
MARKER_RADIUS = 4.0
LABEL_WRAP_CHARS = 18

FEATURE_FILL: Dict[str, str] = {
    "mandatory": "#43a047",
    "optional": "#1e88e5",
}
DEFAULT_FEATURE_FILL = "#999"

CONSTRAINT_STROKE: Dict[str, str] = {
    "requires": "#2196f3",
    "excludes": "#e53935",
}
CONSTRAINT_DASH: Dict[str, str] = {
    "requires": "4 3",
    "excludes": "6 4",
}

LINK_STROKE = "#bbb"
RELATED_STROKE = "#f48fb1"
MATCH_STROKE = "#e53935"
NODE_STROKE = "#fff"

# --- Settings file ---
SETTINGS_DIR = ".fmviz"
SETTINGS_FILE = "config.yaml"


class RootPolicy(StrEnum):
    """How the hierarchy builder treats more than one root candidate."""
    FIRST = "first"    # first parentless feature in input order wins
    STRICT = "strict"  # several candidates means no tree at all


class EngineSettings(BaseModel):
    """User-overridable engine tunables."""
    spacing_x: float = Field(DEFAULT_SPACING.x, gt=0)
    spacing_y: float = Field(DEFAULT_SPACING.y, gt=0)
    margin_top: float = Field(DEFAULT_MARGIN.top, ge=0)
    margin_right: float = Field(DEFAULT_MARGIN.right, ge=0)
    margin_bottom: float = Field(DEFAULT_MARGIN.bottom, ge=0)
    margin_left: float = Field(DEFAULT_MARGIN.left, ge=0)
    fit_shrink: float = Field(FIT_SHRINK, gt=0, le=1)
    min_curve_offset: float = Field(MIN_CURVE_OFFSET, ge=0)
    root_policy: RootPolicy = RootPolicy.FIRST

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def spacing(self) -> Spacing:
        return Spacing(x=self.spacing_x, y=self.spacing_y)

    @property
    def margin(self) -> Margin:
        return Margin(
            top=self.margin_top,
            right=self.margin_right,
            bottom=self.margin_bottom,
            left=self.margin_left,
        )


def default_settings_path(root: Optional[Path] = None) -> Path:
    return (root or Path.cwd()) / SETTINGS_DIR / SETTINGS_FILE


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """
    Load engine settings from a YAML file.

    A missing file yields the defaults. The file may hold the keys at the
    top level or under an `engine:` section.

    Raises:
        SettingsError: If the file is not valid YAML or holds invalid values.
    """
    settings_path = Path(path) if path else default_settings_path()
    if not settings_path.exists():
        logger.debug(f"No settings file at {settings_path}, using defaults")
        return EngineSettings()

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {settings_path}: {e}") from e

    if not isinstance(raw, dict):
        raise SettingsError(f"{settings_path} must contain a mapping")

    section = raw.get("engine", raw)
    try:
        settings = EngineSettings.model_validate(section or {})
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e}") from e

    logger.debug(f"Loaded settings from {settings_path}")
    return settings
