"""Unit tests for the hierarchy builder."""

import pytest

from fmviz.config import RootPolicy
from fmviz.core.types import Feature
from fmviz.graph.hierarchy import HierarchyBuilder, build_hierarchy, path_to_root
from tests.conftest import make_features


class TestBuildHierarchy:
    def test_scenario_root_with_two_children(self):
        features = make_features(("root", None), ("a", "root"), ("b", "root"))

        root = build_hierarchy(features)

        assert root.id == "root"
        assert [c.id for c in root.children] == ["a", "b"]

    def test_sibling_order_follows_source_order(self):
        features = make_features(
            ("root", None), ("z", "root"), ("m", "root"), ("a", "root"),
        )
        root = build_hierarchy(features)
        assert [c.id for c in root.children] == ["z", "m", "a"]

    def test_children_declared_before_parent(self):
        features = make_features(("leaf", "mid"), ("mid", "root"), ("root", None))
        root = build_hierarchy(features)

        assert root.id == "root"
        assert root.children[0].id == "mid"
        assert root.children[0].children[0].id == "leaf"

    def test_empty_input_returns_none(self):
        assert build_hierarchy([]) is None

    def test_fully_cyclic_parents_return_none(self):
        features = make_features(("a", "b"), ("b", "a"))
        assert build_hierarchy(features) is None

    def test_first_root_wins(self):
        features = make_features(
            ("first", None), ("x", "first"), ("second", None), ("y", "second"),
        )
        root = build_hierarchy(features)

        ids = {n.id for n in root.walk()}
        assert ids == {"first", "x"}

    def test_dangling_parent_is_omitted_without_error(self):
        features = make_features(("root", None), ("a", "root"), ("orphan", "ghost"), ("kid", "orphan"))
        root = build_hierarchy(features)

        assert {n.id for n in root.walk()} == {"root", "a"}

    def test_blank_parent_counts_as_no_parent(self):
        features = [Feature(id="root", parent=""), Feature(id="a", parent="root")]
        root = build_hierarchy(features)
        assert root.id == "root"
        assert root.children[0].id == "a"

    def test_source_features_are_not_mutated(self):
        features = make_features(("root", None), ("a", "root"))
        before = [f.model_dump() for f in features]
        build_hierarchy(features)
        assert [f.model_dump() for f in features] == before

    def test_deep_chain_does_not_recurse(self):
        depth = 5000
        features = [Feature(id="n0")] + [
            Feature(id=f"n{i}", parent=f"n{i - 1}") for i in range(1, depth)
        ]
        root = build_hierarchy(features)
        assert root.size() == depth


class TestBuildReport:
    def test_report_lists_omissions_in_input_order(self):
        features = make_features(
            ("root", None), ("a", "root"), ("other", None), ("lost", "nowhere"), ("b", "other"),
        )
        report = HierarchyBuilder().build_with_report(features)

        assert report.root.id == "root"
        assert report.root_candidates == ("root", "other")
        assert report.dangling == ("lost",)
        assert report.omitted == ("other", "lost", "b")

    def test_duplicate_id_last_occurrence_owns_it(self):
        features = [
            Feature(id="root"),
            Feature(id="a", label="first", parent="root"),
            Feature(id="a", label="second", parent="root"),
        ]
        report = HierarchyBuilder().build_with_report(features)

        assert [c.feature.label for c in report.root.children] == ["second"]
        assert report.omitted == ("a",)

    def test_no_root_reports_everything_omitted(self):
        features = make_features(("a", "b"), ("b", "a"))
        report = HierarchyBuilder().build_with_report(features)

        assert report.root is None
        assert report.omitted == ("a", "b")


class TestRootPolicy:
    def test_strict_rejects_multiple_roots(self):
        features = make_features(("r1", None), ("r2", None))
        assert HierarchyBuilder(RootPolicy.STRICT).build(features) is None

    def test_strict_rejects_dangling_parent(self):
        features = make_features(("root", None), ("x", "ghost"))
        assert HierarchyBuilder("strict").build(features) is None

    def test_strict_accepts_single_root(self):
        features = make_features(("root", None), ("a", "root"))
        assert HierarchyBuilder(RootPolicy.STRICT).build(features).id == "root"

    def test_unknown_policy_is_rejected(self):
        with pytest.raises(ValueError):
            HierarchyBuilder("most_children")


class TestTreeHelpers:
    @pytest.fixture
    def root(self):
        return build_hierarchy(
            make_features(("root", None), ("a", "root"), ("a1", "a"), ("b", "root"))
        )

    def test_walk_is_pre_order(self, root):
        assert [n.id for n in root.walk()] == ["root", "a", "a1", "b"]

    def test_links(self, root):
        assert [(p.id, c.id) for p, c in root.links()] == [("root", "a"), ("a", "a1"), ("root", "b")]

    def test_links_follow_walk_order(self):
        root = build_hierarchy(
            make_features(("r", None), ("a", "r"), ("a1", "a"), ("a1x", "a1"), ("a2", "a"), ("b", "r"))
        )
        children = [c.id for _, c in root.links()]
        assert children == [n.id for n in root.walk()][1:]
        assert ("a1", "a1x") in [(p.id, c.id) for p, c in root.links()]

    def test_find(self, root):
        assert root.find("a1").id == "a1"
        assert root.find("ghost") is None

    def test_path_to_root(self, root):
        assert path_to_root("a1", root.parent_map()) == ["root", "a", "a1"]
        assert path_to_root("root", root.parent_map()) == ["root"]

    def test_path_to_root_unknown_id(self, root):
        assert path_to_root("ghost", root.parent_map()) == ["ghost"]

    def test_path_to_root_stops_on_cycle(self):
        assert path_to_root("a", {"a": "b", "b": "a"}) == ["b", "a"]
