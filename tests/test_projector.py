"""Tests for the power-iteration PCA projection."""

import numpy as np

from semantic_graph.engine.normalizer import normalize
from semantic_graph.engine.projector import covariance_matrix, power_iteration, project
from semantic_graph.engine.random_source import SequenceRandom, XorShiftRandom


def test_basis_is_orthonormal(blob_matrix):
    basis, points = project(blob_matrix, seed=3)

    first, second = basis.components
    assert np.isclose(np.linalg.norm(first), 1.0)
    assert np.isclose(np.linalg.norm(second), 1.0)
    assert abs(float(first @ second)) < 1e-8
    assert points.shape == (blob_matrix.n_rows, 2)


def test_matches_numpy_eigenvectors_up_to_sign(three_blobs):
    matrix = normalize(three_blobs)
    basis, _ = project(matrix, random_source=XorShiftRandom(11))

    centered = three_blobs - three_blobs.mean(axis=0)
    eigvals, eigvecs = np.linalg.eigh(np.cov(centered, rowvar=False))
    order = np.argsort(eigvals)[::-1]

    for component, idx in zip(basis.components, order[:2]):
        assert abs(abs(float(component @ eigvecs[:, idx])) - 1.0) < 1e-6
    assert np.allclose(basis.eigenvalues, eigvals[order[:2]], rtol=1e-6)


def test_points_are_centered_projections(blob_matrix):
    basis, points = project(blob_matrix, seed=1)
    expected = (blob_matrix.vectors - basis.mean) @ basis.components.T
    assert np.allclose(points, expected)
    assert np.allclose(basis.transform(blob_matrix.vectors), points)
    assert np.allclose(points.mean(axis=0), 0.0, atol=1e-9)


def test_deterministic_with_fixed_seed(blob_matrix):
    basis_a, points_a = project(blob_matrix, seed=99)
    basis_b, points_b = project(blob_matrix, seed=99)
    assert np.array_equal(basis_a.components, basis_b.components)
    assert np.array_equal(points_a, points_b)


def test_covariance_is_symmetric_and_uses_n_minus_one():
    centered = np.array([[1.0, 2.0], [-1.0, -2.0]])
    cov = covariance_matrix(centered)
    assert np.allclose(cov, cov.T)
    assert np.allclose(cov, [[2.0, 4.0], [4.0, 8.0]])


def test_single_row_divides_by_one():
    matrix = normalize([[1.0, 2.0, 3.0]])
    basis, points = project(matrix, seed=0)
    assert points.tolist() == [[0.0, 0.0]]
    assert np.all(np.isfinite(basis.components))


def test_empty_matrix():
    basis, points = project(normalize([]))
    assert points.shape == (0, 2)
    assert basis.components.shape == (2, 0)


def test_one_dimensional_input_has_zero_second_axis():
    matrix = normalize([[1.0], [2.0], [4.0]])
    basis, points = project(matrix, seed=5)

    assert np.isclose(abs(basis.components[0][0]), 1.0)
    assert basis.components[1].tolist() == [0.0]
    assert np.all(points[:, 1] == 0.0)
    assert np.all(np.isfinite(points))


def test_identical_rows_fall_back_to_unit_axes():
    matrix = normalize([[2.0, 2.0, 2.0]] * 4)
    basis, points = project(matrix, seed=5)

    assert basis.components[0].tolist() == [1.0, 0.0, 0.0]
    assert basis.components[1].tolist() == [0.0, 1.0, 0.0]
    assert np.all(points == 0.0)


def test_zero_start_vector_is_replaced():
    cov = np.diag([3.0, 1.0])
    vector, eigenvalue = power_iteration(cov, SequenceRandom([0.0]), iterations=50)
    assert np.allclose(np.abs(vector), [1.0, 0.0])
    assert np.isclose(eigenvalue, 3.0)


def test_huge_finite_entries_stay_finite():
    matrix = normalize([[1e308, 1.0], [1e308, 2.0], [-1e308, 3.0]])
    basis, points = project(matrix, seed=1)

    assert np.all(np.isfinite(points))
    assert np.all(np.isfinite(basis.eigenvalues))
    assert np.all(np.isfinite(basis.mean))
    assert np.isclose(abs(basis.components[0][0]), 1.0)
    assert np.isclose(points[0, 0], points[1, 0])
    assert np.sign(points[0, 0]) == -np.sign(points[2, 0])
    assert np.all(np.isfinite(basis.transform(matrix.vectors)))


def test_rescaling_matches_unscaled_projection(three_blobs):
    small = project(normalize(three_blobs), random_source=XorShiftRandom(4))
    large = project(normalize(three_blobs * 2.0**900), random_source=XorShiftRandom(4))

    assert np.allclose(small[0].components, large[0].components)
    assert np.allclose(small[1] * 2.0**900, large[1])
