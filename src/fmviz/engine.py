"""
Feature-Model Engine.

Runs the whole derivation for one model, synchronously and from scratch:

    features -> hierarchy -> layout -> constraint overlay
                                    -> search hits -> highlight closure
                                    -> fitted viewport

Nothing is carried over between calls; a new model, query or highlight set
means a new Scene. Viewport gestures operate on `Scene.viewport` and never
re-run the pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .config import EngineSettings
from .core.types import BuildReport, FeatureModel, ViewportSize
from .graph.hierarchy import HierarchyBuilder
from .graph.highlight import HighlightPropagator, HighlightState
from .graph.layout import LayoutResult, TreeLayoutEngine
from .graph.overlay import ConstraintCurve, ConstraintOverlay
from .search import search_features
from .viewport import ViewportTransform

logger = logging.getLogger(__name__)


@dataclass
class Scene:
    """Everything a renderer needs for one model."""
    model: FeatureModel
    report: BuildReport
    layout: LayoutResult
    overlays: List[ConstraintCurve]
    highlights: HighlightState
    viewport: ViewportTransform
    query: Optional[str] = None
    hits: List[str] = field(default_factory=list)

    @property
    def root(self):
        return self.report.root

    @property
    def is_empty(self) -> bool:
        return self.layout.is_empty


class FeatureModelEngine:
    """
    Entry point tying the graph components together.

    Args:
        settings: Spacing, margins, fit shrink, curve floor and root policy.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()
        self.builder = HierarchyBuilder(self.settings.root_policy)
        self.layout_engine = TreeLayoutEngine(
            spacing=self.settings.spacing,
            margin=self.settings.margin,
        )
        self.overlay = ConstraintOverlay(self.settings.min_curve_offset)

    def render(
        self,
        model: FeatureModel,
        query: Optional[str] = None,
        highlights: Optional[Iterable[str]] = None,
        viewport: Optional[ViewportSize] = None,
    ) -> Scene:
        """
        Build a Scene for `model`.

        Args:
            query: Search text; its hits are added to the highlight set.
            highlights: Ids to highlight in addition to the query hits.
            viewport: Drawing surface size. Defaults to the bounding box size.
        """
        report = self.builder.build_with_report(model.features)
        layout = self.layout_engine.layout(report.root)
        overlays = self.overlay.compute(model.constraints, layout.by_id)

        hits = search_features(model.features, query) if query is not None else []
        matched = list(hits)
        if highlights:
            matched.extend(h for h in highlights if h not in matched)
        state = HighlightPropagator(report.root).expand(matched)

        box = layout.bounding_box
        surface = viewport or ViewportSize(width=box.width, height=box.height)
        transform = ViewportTransform(box, surface, shrink=self.settings.fit_shrink)

        logger.debug(
            f"Scene: {len(layout.positioned)} node(s), {len(overlays)} constraint curve(s), "
            f"{len(state.matched)} match(es), {len(state.related)} related"
        )
        return Scene(
            model=model,
            report=report,
            layout=layout,
            overlays=overlays,
            highlights=state,
            viewport=transform,
            query=query,
            hits=hits,
        )
