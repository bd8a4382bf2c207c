"""K-Means clustering with seeded distinct-row initialization."""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .. import config
from ..models.cluster import ClusterAssignment
from .normalizer import NormalizedMatrix
from .random_source import RandomSource, XorShiftRandom, shuffled_indices

logger = logging.getLogger(__name__)

ALGORITHM = "kmeans"


def _squared_distances(vectors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """(n, k) matrix of squared Euclidean distances."""
    diff = vectors[:, np.newaxis, :] - centroids[np.newaxis, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def _initial_centroids(vectors: np.ndarray, k: int, source: RandomSource) -> np.ndarray:
    """Pick up to k rows with pairwise distinct vectors, in seeded random order."""
    chosen: List[np.ndarray] = []
    for idx in shuffled_indices(source, vectors.shape[0]):
        candidate = vectors[idx]
        if any(np.array_equal(candidate, c) for c in chosen):
            continue
        chosen.append(candidate.copy())
        if len(chosen) == k:
            break
    return np.array(chosen, dtype="float64")


def run_kmeans(
    matrix: NormalizedMatrix,
    k: int,
    *,
    max_iterations: Optional[int] = None,
    seed: Optional[int] = None,
    random_source: Optional[RandomSource] = None,
) -> ClusterAssignment:
    """Cluster matrix rows with Lloyd's K-Means.

    Args:
        matrix: Output of `normalize`.
        k: Requested cluster count, clamped to [1, n_rows]. Fewer distinct
           rows than k silently lowers the effective count.
        max_iterations: Cap on assignment passes (default from config).
        seed: Seed for the default xorshift source.
        random_source: Injected source for centroid selection.

    Returns:
        ClusterAssignment with labels, centroids, iterations, inertia and
        per-iteration inertia history.
    """
    if matrix.is_empty:
        return ClusterAssignment(algorithm=ALGORITHM, iterations=0, inertia=0.0)

    max_iterations = config.KMEANS_MAX_ITERATIONS if max_iterations is None else max(1, max_iterations)
    if random_source is None:
        random_source = XorShiftRandom(config.KMEANS_SEED if seed is None else seed)

    vectors = matrix.vectors
    n = vectors.shape[0]
    k = max(1, min(k, n))

    centroids = _initial_centroids(vectors, k, random_source)
    if centroids.shape[0] < k:
        logger.info("Only %d distinct rows available, reducing k from %d", centroids.shape[0], k)

    labels = np.full(n, -1, dtype=int)
    history: List[float] = []
    iterations = 0

    while iterations < max_iterations:
        iterations += 1
        distances = _squared_distances(vectors, centroids)
        # argmin returns the first minimum, which breaks ties toward the lower index
        new_labels = distances.argmin(axis=1)
        history.append(float(distances[np.arange(n), new_labels].sum()))

        if np.array_equal(new_labels, labels):
            break
        labels = new_labels

        for cluster in range(centroids.shape[0]):
            members = vectors[labels == cluster]
            if members.shape[0]:
                centroids[cluster] = members.mean(axis=0)

    inertia = float(_squared_distances(vectors, centroids)[np.arange(n), labels].sum())
    logger.debug("K-Means k=%d converged after %d iterations, inertia=%.4f", centroids.shape[0], iterations, inertia)

    return ClusterAssignment(
        algorithm=ALGORITHM,
        labels=labels.tolist(),
        centroids=centroids.tolist(),
        n_clusters=int(centroids.shape[0]),
        iterations=iterations,
        inertia=inertia,
        inertia_history=history,
        noise_count=0,
    )
