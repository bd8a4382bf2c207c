"""Two-component PCA projection by power iteration (replaces UMAP for the graph view)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .. import config
from .normalizer import NormalizedMatrix
from .random_source import NumpyRandom, RandomSource, random_vector

logger = logging.getLogger(__name__)

N_COMPONENTS = 2
_NORM_EPS = 1e-12
_FLOAT_MAX = float(np.finfo("float64").max)


@dataclass(frozen=True, eq=False)
class ProjectionBasis:
    """Centering mean plus the two principal directions of a matrix."""

    mean: np.ndarray
    components: np.ndarray  # (2, d), unit rows (or zero rows when d < 2)
    eigenvalues: Tuple[float, ...] = ()

    @property
    def dimension(self) -> int:
        return int(self.mean.shape[0])

    def transform(self, vectors: np.ndarray) -> np.ndarray:
        """Project raw (uncentered) vectors onto the basis."""
        vectors = np.asarray(vectors, dtype="float64")
        if vectors.size == 0:
            return np.zeros((0, N_COMPONENTS))
        with np.errstate(over="ignore", invalid="ignore"):
            return _finite((vectors - self.mean) @ self.components.T)


def _finite(values: np.ndarray) -> np.ndarray:
    """Clamp overflowed entries to the largest finite float; NaN becomes 0."""
    return np.nan_to_num(values, nan=0.0, posinf=_FLOAT_MAX, neginf=-_FLOAT_MAX)


def _power_of_two_scale(vectors: np.ndarray) -> float:
    """Power of two that brings every entry below 2 in magnitude (1 for an all-zero matrix).

    Dividing by a power of two is exact, so rescaling never changes the
    result for ordinary magnitudes.
    """
    max_abs = float(np.max(np.abs(vectors))) if vectors.size else 0.0
    if max_abs == 0.0:
        return 1.0
    _, exponent = np.frexp(max_abs)
    return float(np.ldexp(1.0, int(exponent) - 1))


def _empty_basis() -> ProjectionBasis:
    return ProjectionBasis(mean=np.zeros(0), components=np.zeros((N_COMPONENTS, 0)), eigenvalues=())


def covariance_matrix(centered: np.ndarray) -> np.ndarray:
    """Symmetric covariance of centered rows, divided by n - 1 (or 1 when n <= 1)."""
    n, d = centered.shape
    divisor = (n - 1) if n > 1 else 1
    upper = np.triu(centered.T @ centered) / divisor
    return upper + np.triu(upper, k=1).T


def _deflate(vector: np.ndarray, basis: Sequence[np.ndarray]) -> np.ndarray:
    for b in basis:
        vector = vector - np.dot(vector, b) * b
    return vector


def _fallback_unit(dimension: int, orthogonal_to: Sequence[np.ndarray]) -> np.ndarray:
    """First standard basis vector not spanned by `orthogonal_to`, or zeros if none is left."""
    for axis in range(dimension):
        candidate = np.zeros(dimension)
        candidate[axis] = 1.0
        candidate = _deflate(candidate, orthogonal_to)
        norm = np.linalg.norm(candidate)
        if norm > 1e-6:
            return candidate / norm
    return np.zeros(dimension)


def _safe_normalize(vector: np.ndarray, orthogonal_to: Sequence[np.ndarray]) -> np.ndarray:
    norm = np.linalg.norm(vector)
    if not np.isfinite(norm) or norm < _NORM_EPS:
        return _fallback_unit(vector.shape[0], orthogonal_to)
    return vector / norm


def power_iteration(
    matrix: np.ndarray,
    source: RandomSource,
    *,
    orthogonal_to: Sequence[np.ndarray] = (),
    iterations: int = 120,
) -> Tuple[np.ndarray, float]:
    """Dominant eigenvector of a symmetric matrix, restricted to the complement of `orthogonal_to`.

    Runs a fixed number of multiply / deflate / renormalize steps starting
    from a random vector drawn from `source`.

    Returns:
        Tuple of (unit eigenvector or zero vector, Rayleigh quotient).
    """
    dimension = matrix.shape[0]
    vector = _safe_normalize(_deflate(random_vector(source, dimension), orthogonal_to), orthogonal_to)

    for _ in range(iterations):
        nxt = _deflate(matrix @ vector, orthogonal_to)
        vector = _safe_normalize(nxt, orthogonal_to)

    eigenvalue = float(vector @ matrix @ vector)
    return vector, eigenvalue


def project(
    matrix: NormalizedMatrix,
    *,
    iterations: Optional[int] = None,
    seed: Optional[int] = None,
    random_source: Optional[RandomSource] = None,
) -> Tuple[ProjectionBasis, np.ndarray]:
    """Project every row of a normalized matrix onto its first two principal components.

    Args:
        matrix: Output of `normalize`.
        iterations: Power-iteration budget per component (default from config).
        seed: Seed for the start vectors when no random_source is given.
        random_source: Injected source for the start vectors.

    Returns:
        Tuple of (ProjectionBasis, points array of shape (n_rows, 2)).
    """
    if matrix.is_empty:
        return _empty_basis(), np.zeros((0, N_COMPONENTS))

    iterations = config.POWER_ITERATIONS if iterations is None else max(0, iterations)
    source = random_source if random_source is not None else NumpyRandom(seed)

    # Work on rescaled rows so huge finite entries cannot overflow the mean
    # or the covariance; results are scaled back and clamped at the end.
    scale = _power_of_two_scale(matrix.vectors)
    scaled = matrix.vectors / scale
    scaled_mean = scaled.mean(axis=0)
    centered = scaled - scaled_mean
    covariance = covariance_matrix(centered)

    components: List[np.ndarray] = []
    eigenvalues: List[float] = []
    for _ in range(N_COMPONENTS):
        vector, eigenvalue = power_iteration(
            covariance, source, orthogonal_to=components, iterations=iterations
        )
        components.append(vector)
        eigenvalues.append(eigenvalue)

    stacked = np.vstack(components)
    with np.errstate(over="ignore", invalid="ignore"):
        points = _finite((centered @ stacked.T) * scale)
        variances = _finite(np.array(eigenvalues) * scale * scale)
    eigenvalues = [float(v) for v in variances]
    logger.debug(
        "Projected %d x %d matrix, eigenvalues=%s", matrix.n_rows, matrix.dimension, eigenvalues
    )

    basis = ProjectionBasis(
        mean=scaled_mean * scale, components=stacked, eigenvalues=tuple(eigenvalues)
    )
    return basis, points
