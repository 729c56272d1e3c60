"""Shared fixtures for the fmviz test suite."""

import json

import pytest

from fmviz.core.types import Feature, FeatureModel


SAMPLE_PAYLOAD = {
    "features": [
        {"id": "car", "label": "Car", "type": "mandatory"},
        {"id": "engine", "label": "Engine", "type": "mandatory", "parent": "car"},
        {"id": "electric", "label": "Electric Motor", "type": "optional", "parent": "engine"},
        {"id": "petrol", "label": "Petrol Engine", "type": "optional", "parent": "engine"},
        {"id": "gps", "label": "GPS Navigation", "type": "optional", "parent": "car"},
        {"id": "radio", "label": "Radio", "type": "optional", "parent": "car"},
    ],
    "constraints": [
        {"a": "gps", "b": "electric", "type": "requires"},
        {"a": "electric", "b": "petrol", "type": "excludes"},
    ],
}


def make_features(*rows):
    """Build Features from (id, parent) or (id, parent, label) tuples."""
    features = []
    for row in rows:
        fid, parent = row[0], row[1]
        label = row[2] if len(row) > 2 else fid.title()
        features.append(Feature(id=fid, label=label, type="optional", parent=parent))
    return features


@pytest.fixture
def sample_payload():
    return json.loads(json.dumps(SAMPLE_PAYLOAD))


@pytest.fixture
def sample_model(sample_payload):
    return FeatureModel.model_validate(sample_payload)


@pytest.fixture
def model_file(tmp_path, sample_payload):
    path = tmp_path / "model.json"
    path.write_text(json.dumps(sample_payload))
    return path
