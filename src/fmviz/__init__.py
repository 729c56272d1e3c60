"""
fmviz: feature-model graph engine.

Builds a tree from a flat feature list, lays it out, overlays
requires/excludes constraints, propagates search highlights and computes
viewport transforms for the rendered diagram.
"""

from .config import EngineSettings, RootPolicy, load_settings
from .engine import FeatureModelEngine, Scene
from .search import SearchIndex, search_features

__version__ = "0.3.0"

__all__ = [
    "FeatureModelEngine", "Scene",
    "EngineSettings", "RootPolicy", "load_settings",
    "SearchIndex", "search_features",
]
