"""
Model Loader.

Reads a feature-model JSON file and checks its shape before anything reaches
the engine. Hard problems (unreadable file, bad JSON, schema violations) come
back as Err values; soft problems the engine tolerates (dangling parents,
extra roots, constraints pointing at unknown features) are reported as
warnings and logged.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from pydantic import ValidationError

from ..core.exceptions import ModelLoadError, ModelValidationError
from ..core.result import Err, Ok, Result
from ..core.types import ConstraintKind, FeatureModel

logger = logging.getLogger(__name__)

_CONSTRAINT_KINDS = {kind.value for kind in ConstraintKind}


def validate_model(payload: Any) -> Result[FeatureModel, List[str]]:
    """
    Check that `payload` has the feature-model shape.

    Every problem found is reported, not just the first one.
    """
    if not isinstance(payload, dict):
        return Err(["Model must be a JSON object"])

    errors: List[str] = []
    features = payload.get("features")
    if not isinstance(features, list):
        errors.append("'features' must be an array")
        features = []

    seen = set()
    for i, feature in enumerate(features):
        if not isinstance(feature, dict):
            errors.append(f"features[{i}] must be an object")
            continue
        fid = feature.get("id")
        if not isinstance(fid, str) or not fid:
            errors.append(f"features[{i}] is missing a non-empty string 'id'")
            continue
        if fid in seen:
            errors.append(f"Duplicate feature id '{fid}'")
        seen.add(fid)
        parent = feature.get("parent")
        if parent is not None and not isinstance(parent, str):
            errors.append(f"features[{i}] ('{fid}') has a non-string 'parent'")
        label = feature.get("label")
        if label is not None and not isinstance(label, str):
            errors.append(f"features[{i}] ('{fid}') has a non-string 'label'")

    constraints = payload.get("constraints", [])
    if constraints is None:
        constraints = []
    if not isinstance(constraints, list):
        errors.append("'constraints' must be an array")
        constraints = []

    for i, constraint in enumerate(constraints):
        if not isinstance(constraint, dict):
            errors.append(f"constraints[{i}] must be an object")
            continue
        for end in ("a", "b"):
            if not isinstance(constraint.get(end), str) or not constraint.get(end):
                errors.append(f"constraints[{i}] is missing '{end}'")
        if constraint.get("type") not in _CONSTRAINT_KINDS:
            errors.append(
                f"constraints[{i}] has unsupported type '{constraint.get('type')}' "
                f"(expected requires or excludes)"
            )

    if errors:
        return Err(errors)

    try:
        return Ok(FeatureModel.model_validate(payload))
    except ValidationError as e:
        return Err([f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()])


def model_warnings(model: FeatureModel) -> List[str]:
    """Soft issues: the engine copes with these by leaving things out."""
    warnings: List[str] = []
    ids = {f.id for f in model.features}

    roots = [f.id for f in model.features if f.parent is None]
    if not roots:
        warnings.append("No root feature (every feature has a parent)")
    elif len(roots) > 1:
        warnings.append(
            f"{len(roots)} root features found; only '{roots[0]}' is shown "
            f"(ignored: {', '.join(roots[1:])})"
        )

    for f in model.features:
        if f.parent is not None and f.parent not in ids:
            warnings.append(f"Feature '{f.id}' references unknown parent '{f.parent}'")

    for i, c in enumerate(model.constraints):
        for end in (c.a, c.b):
            if end not in ids:
                warnings.append(f"Constraint {i} ({c.type.value}) references unknown feature '{end}'")

    return warnings


def parse_model(text: str, source: str = "<string>") -> Result[FeatureModel, Union[ModelLoadError, List[str]]]:
    """Decode JSON text and validate it."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ModelLoadError(source, f"Invalid JSON: {e}"))

    result = validate_model(payload)
    if result.is_ok():
        for warning in model_warnings(result.value):
            logger.warning(f"{source}: {warning}")
    return result


def load_model(path: Union[str, Path]) -> Result[FeatureModel, Union[ModelLoadError, List[str]]]:
    """
    Read and validate a model file.

    Returns:
        Ok(FeatureModel), Err(ModelLoadError) when the file cannot be read or
        decoded, or Err(list of messages) when the shape is wrong.
    """
    model_path = Path(path)
    if not model_path.exists():
        return Err(ModelLoadError(str(path), "file not found"))
    try:
        text = model_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(ModelLoadError(str(path), str(e)))

    logger.debug(f"Loaded {len(text)} bytes from {model_path}")
    return parse_model(text, source=str(model_path))


def load_model_strict(path: Union[str, Path]) -> FeatureModel:
    """
    Like load_model, but raises instead of returning Err.

    Raises:
        ModelLoadError: The file is missing, unreadable or not JSON.
        ModelValidationError: The payload does not have the model shape.
    """
    result = load_model(path)
    if result.is_ok():
        return result.value
    if isinstance(result.error, ModelLoadError):
        raise result.error
    raise ModelValidationError(result.error)
