"""Tests for DBSCAN density clustering."""

import numpy as np
import pytest

from semantic_graph.engine.dbscan import run_dbscan
from semantic_graph.engine.neighbors import BruteForceIndex, KDTreeIndex, build_index
from semantic_graph.engine.normalizer import normalize


def test_isolated_points_are_noise():
    result = run_dbscan(normalize([[0, 0], [100, 100]]), eps=1.0, min_pts=2)
    assert result.labels == [-1, -1]
    assert result.noise_count == 2
    assert result.n_clusters == 0
    assert result.centroids == []


def test_finds_blobs(blob_matrix):
    result = run_dbscan(blob_matrix, eps=1.0, min_pts=3)
    assert result.labels == [0] * 5 + [1] * 5 + [2] * 5
    assert result.noise_count == 0
    assert result.n_clusters == 3


def test_border_point_joins_cluster():
    matrix = normalize([[0.0], [1.0], [2.0], [10.0]])
    result = run_dbscan(matrix, eps=1.0, min_pts=3)
    # row 0 is visited first and is not core, but row 1 later claims it
    assert result.labels == [0, 0, 0, -1]
    assert result.noise_count == 1
    assert result.centroids == [[1.0]]


def test_min_pts_counts_the_point_itself():
    matrix = normalize([[0.0], [0.5]])
    assert run_dbscan(matrix, eps=1.0, min_pts=2).labels == [0, 0]
    assert run_dbscan(matrix, eps=1.0, min_pts=3).labels == [-1, -1]


def test_single_point_cluster_with_min_pts_one():
    result = run_dbscan(normalize([[0.0], [50.0]]), eps=1.0, min_pts=1)
    assert result.labels == [0, 1]
    assert result.noise_count == 0


@pytest.mark.parametrize("eps,min_pts", [(0.0, 3), (-1.0, 3), (1.0, 0), (1.0, -2)])
def test_degenerate_parameters_give_all_noise(blob_matrix, eps, min_pts):
    result = run_dbscan(blob_matrix, eps=eps, min_pts=min_pts)
    assert result.labels == [-1] * blob_matrix.n_rows
    assert result.noise_count == blob_matrix.n_rows
    assert result.n_clusters == 0


def test_noise_count_matches_labels():
    rng = np.random.default_rng(3)
    matrix = normalize(rng.uniform(0, 10, size=(60, 2)).tolist())
    result = run_dbscan(matrix, eps=0.9, min_pts=4)
    assert result.noise_count == result.labels.count(-1)
    assert all(label == -1 or 0 <= label < result.n_clusters for label in result.labels)


def test_kdtree_backend_matches_brute_force():
    rng = np.random.default_rng(11)
    matrix = normalize(rng.normal(size=(120, 3)).tolist())
    brute = run_dbscan(matrix, eps=0.7, min_pts=4, brute_force_limit=10_000)
    tree = run_dbscan(matrix, eps=0.7, min_pts=4, brute_force_limit=0)
    assert brute.labels == tree.labels
    assert brute.n_clusters == tree.n_clusters


def test_build_index_switches_backend():
    vectors = np.zeros((5, 2))
    assert isinstance(build_index(vectors, 10), BruteForceIndex)
    assert isinstance(build_index(vectors, 4), KDTreeIndex)


def test_index_backends_return_sorted_neighbors():
    vectors = np.array([[0.0], [0.4], [3.0], [0.9], [0.2]])
    expected = [0, 1, 3, 4]
    assert BruteForceIndex(vectors).query_radius(0, 1.0).tolist() == expected
    assert KDTreeIndex(vectors).query_radius(0, 1.0).tolist() == expected


def test_empty_matrix():
    result = run_dbscan(normalize([]), eps=1.0, min_pts=2)
    assert result.labels == []
    assert result.noise_count == 0
