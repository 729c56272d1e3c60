"""Loading and validating feature-model files."""

from .loader import load_model, load_model_strict, model_warnings, parse_model, validate_model

__all__ = ["load_model", "load_model_strict", "parse_model", "validate_model", "model_warnings"]
