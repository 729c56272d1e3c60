"""
Exceptions raised at the edges of fmviz.

The engine itself never raises for malformed models; these only cover the
loader and configuration layers, where failing loudly is the right call.
"""

from typing import List


class FmvizError(Exception):
    """Base class for all fmviz errors."""


class ModelLoadError(FmvizError):
    """The model file could not be read or decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {path}: {reason}")


class ModelValidationError(FmvizError):
    """The decoded payload does not have the feature-model shape."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid model:\n" + "\n".join(self.errors))


class SettingsError(FmvizError):
    """The settings file exists but holds invalid values."""
