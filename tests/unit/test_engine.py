"""Unit tests for the feature-model pipeline."""

import pytest

from fmviz.config import EngineSettings, RootPolicy
from fmviz.core.types import FeatureModel, ViewportSize
from fmviz.engine import FeatureModelEngine
from fmviz.graph.highlight import Emphasis


@pytest.fixture
def scenario_model():
    return FeatureModel.model_validate(
        {
            "features": [{"id": "root"}, {"id": "a", "parent": "root"}, {"id": "b", "parent": "root"}],
            "constraints": [{"a": "a", "b": "b", "type": "excludes"}],
        }
    )


class TestFeatureModelEngine:
    def test_scenario_end_to_end(self, scenario_model):
        scene = FeatureModelEngine().render(scenario_model)

        assert len(scene.root.children) == 2
        root, a, b = (scene.layout.by_id[i] for i in ("root", "a", "b"))
        assert root.x - a.x == pytest.approx(b.x - root.x)
        assert a.y == b.y
        assert len(scene.overlays) == 1
        assert scene.overlays[0].kind.value == "excludes"
        assert scene.overlays[0].control_points[0] == a.point
        assert scene.overlays[0].control_points[2] == b.point

    def test_query_highlights_closure(self, sample_model):
        scene = FeatureModelEngine().render(sample_model, query="electric")

        assert scene.hits == ["electric"]
        assert scene.highlights.emphasis("electric") == Emphasis.MATCH
        assert scene.highlights.emphasis("engine") == Emphasis.RELATED
        assert scene.highlights.emphasis("car") == Emphasis.RELATED
        assert scene.highlights.emphasis("gps") == Emphasis.NONE

    def test_explicit_highlights_merge_with_query(self, sample_model):
        scene = FeatureModelEngine().render(sample_model, query="radio", highlights=["gps"])
        assert scene.highlights.matched == {"radio", "gps"}

    def test_no_query_means_no_highlights(self, sample_model):
        scene = FeatureModelEngine().render(sample_model)
        assert scene.hits == []
        assert not scene.highlights.is_active

    def test_empty_model_gives_empty_scene(self):
        scene = FeatureModelEngine().render(FeatureModel())
        assert scene.is_empty
        assert scene.root is None
        assert scene.overlays == []
        assert scene.viewport.current.scale == 1.0

    def test_surface_defaults_to_bounding_box(self, sample_model):
        scene = FeatureModelEngine().render(sample_model)
        box = scene.layout.bounding_box
        assert scene.viewport.viewport == ViewportSize(box.width, box.height)
        assert scene.viewport.fit.scale == pytest.approx(0.8)

    def test_viewport_size_is_used(self, sample_model):
        scene = FeatureModelEngine().render(sample_model, viewport=ViewportSize(300, 300))
        assert scene.viewport.viewport == ViewportSize(300, 300)
        assert scene.viewport.current == scene.viewport.fit

    def test_settings_are_applied(self, scenario_model):
        settings = EngineSettings(spacing_x=50, spacing_y=10)
        scene = FeatureModelEngine(settings).render(scenario_model)
        assert scene.layout.by_id["b"].x == 25
        assert scene.layout.by_id["b"].y == 10

    def test_strict_policy_yields_empty_scene(self):
        model = FeatureModel.model_validate({"features": [{"id": "r1"}, {"id": "r2"}]})
        scene = FeatureModelEngine(EngineSettings(root_policy=RootPolicy.STRICT)).render(model)
        assert scene.is_empty
        assert scene.report.root_candidates == ("r1", "r2")

    def test_recomputation_is_independent(self, sample_model):
        engine = FeatureModelEngine()
        first = engine.render(sample_model, query="gps")
        engine.render(sample_model, query="radio")
        again = engine.render(sample_model, query="gps")
        assert first.highlights == again.highlights
        assert [(p.id, p.x, p.y) for p in first.layout.positioned] == [
            (p.id, p.x, p.y) for p in again.layout.positioned
        ]
