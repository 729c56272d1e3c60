"""Tests for fmviz.core: types, result values and errors."""
