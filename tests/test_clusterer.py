"""Tests for parameter models and algorithm dispatch."""

import pytest
from pydantic import BaseModel, ValidationError

from semantic_graph.engine.clusterer import ClusterRegistry, cluster, default_registry
from semantic_graph.models.cluster import (
    AgglomerativeParams,
    ClusterAssignment,
    DbscanParams,
    KMeansParams,
    build_params,
    cluster_label,
)


def test_build_params_per_algorithm():
    assert build_params("kmeans", k=3, seed=9) == KMeansParams(k=3, seed=9)
    assert build_params("dbscan", eps=0.5, min_pts=4) == DbscanParams(eps=0.5, min_pts=4)


def test_k_drives_agglomerative_target():
    assert build_params("agglomerative", k=5) == AgglomerativeParams(target=5)
    assert build_params("agglomerative", k=5, target=2).target == 2


def test_none_values_fall_back_to_defaults():
    params = build_params("kmeans", k=None, seed=None)
    assert params == KMeansParams()


def test_irrelevant_keys_are_ignored():
    params = build_params("kmeans", k=4, eps=1.0, min_pts=3)
    assert isinstance(params, KMeansParams)
    assert params.k == 4


def test_unknown_algorithm_rejected():
    with pytest.raises(ValidationError):
        build_params("spectral", k=3)


def test_bad_values_rejected():
    with pytest.raises(ValidationError):
        build_params("kmeans", k="many")
    with pytest.raises(ValidationError):
        KMeansParams(max_iterations=0)


def test_cluster_label():
    assert cluster_label(-1) == "Noise"
    assert cluster_label(0) == "Cluster 1"
    assert cluster_label(12) == "Cluster 13"


def test_default_registry_algorithms():
    assert default_registry.algorithms() == ["kmeans", "agglomerative", "dbscan"]


@pytest.mark.parametrize("params,algorithm", [
    (KMeansParams(k=3), "kmeans"),
    (AgglomerativeParams(target=3), "agglomerative"),
    (DbscanParams(eps=1.0, min_pts=3), "dbscan"),
])
def test_cluster_dispatches_on_params_type(blob_matrix, params, algorithm):
    result = cluster(blob_matrix, params)
    assert result.algorithm == algorithm
    assert len(result.labels) == blob_matrix.n_rows


def test_unregistered_params_raise(blob_matrix):
    class SpectralParams(BaseModel):
        algorithm: str = "spectral"

    with pytest.raises(TypeError):
        cluster(blob_matrix, SpectralParams())


def test_custom_registry(blob_matrix):
    calls = []

    def everything_in_one(matrix, params, random_source):
        calls.append(params)
        return ClusterAssignment(
            algorithm="kmeans", labels=[0] * matrix.n_rows, n_clusters=1
        )

    registry = ClusterRegistry()
    registry.register(KMeansParams, everything_in_one)
    result = registry.run(blob_matrix, KMeansParams(k=2))

    assert result.labels == [0] * blob_matrix.n_rows
    assert calls == [KMeansParams(k=2)]
    assert registry.algorithms() == ["kmeans"]
