"""Shared fixtures for engine and API tests."""

import pytest

pytest.importorskip("numpy")

import numpy as np

from semantic_graph.engine.normalizer import normalize
from semantic_graph.models.record import Record


@pytest.fixture
def three_blobs():
    """Three well separated groups of 5 points in 6 dimensions."""
    rng = np.random.default_rng(42)
    centers = np.array([
        [0, 0, 0, 0, 0, 0],
        [10, 10, 0, 0, 0, 0],
        [0, 0, 10, 10, 10, 0],
    ], dtype=float)
    rows = [center + rng.normal(scale=0.1, size=6) for center in centers for _ in range(5)]
    return np.vstack(rows)


@pytest.fixture
def blob_matrix(three_blobs):
    return normalize(three_blobs.tolist())


@pytest.fixture
def tagged_records(three_blobs):
    """Records over three_blobs with one numeric and one categorical metadata field."""
    regions = ["Asia", "Europe", "Global"]
    records = []
    for i, vec in enumerate(three_blobs):
        group = i // 5
        records.append(Record(
            id=f"rec-{i:02d}",
            embedding=vec.tolist(),
            metadata={
                "region": regions[group],
                "volatility": 0.1 * (group + 1),
            },
        ))
    return records
