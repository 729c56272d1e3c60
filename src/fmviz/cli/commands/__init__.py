"""fmviz CLI commands."""
