"""Command line interface for fmviz."""
