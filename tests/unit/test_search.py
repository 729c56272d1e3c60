"""Unit tests for feature search."""

from fmviz.core.types import Feature
from fmviz.search import SearchIndex, normalize_query, search_features


class TestSearchFeatures:
    def test_empty_feature_list(self):
        assert search_features([], "x") == []

    def test_empty_query_matches_nothing(self):
        features = [Feature(id="a", label="Alpha")]
        assert search_features(features, "") == []
        assert search_features(features, "   ") == []
        assert search_features(features, None) == []

    def test_case_insensitive(self):
        assert search_features([Feature(id="a", label="Hello")], "HELLO") == ["a"]

    def test_query_is_trimmed(self):
        assert search_features([Feature(id="a", label="Hello")], "  ell ") == ["a"]

    def test_substring_and_source_order(self):
        features = [
            Feature(id="3", label="Payment Gateway"),
            Feature(id="1", label="Shipping"),
            Feature(id="2", label="Card payment"),
        ]
        assert search_features(features, "pay") == ["3", "2"]

    def test_falls_back_to_id_without_label(self):
        features = [Feature(id="wifi_module"), Feature(id="x", label="Bluetooth")]
        assert search_features(features, "wifi") == ["wifi_module"]

    def test_label_takes_precedence_over_id(self):
        assert search_features([Feature(id="gps", label="Navigation")], "gps") == []


class TestSearchIndex:
    def test_index_matches_function(self):
        features = [Feature(id="a", label="Alpha"), Feature(id="b", label="Beta"), Feature(id="c")]
        index = SearchIndex(features)
        for query in ["a", "ALP", "c", "", "zzz"]:
            assert index.search(query) == search_features(features, query)

    def test_count_and_len(self):
        index = SearchIndex([Feature(id="a", label="Alpha"), Feature(id="b", label="Alpine")])
        assert len(index) == 2
        assert index.count("alp") == 2

    def test_normalize_query(self):
        assert normalize_query("  MiXeD ") == "mixed"
        assert normalize_query(None) == ""
