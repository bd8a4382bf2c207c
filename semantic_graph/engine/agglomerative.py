"""Average-linkage agglomerative clustering.

Brute force over an (m, m) linkage matrix, so this is meant for batches of
tens to a few hundred rows.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

from ..models.cluster import ClusterAssignment
from .normalizer import NormalizedMatrix

logger = logging.getLogger(__name__)

ALGORITHM = "agglomerative"


def pairwise_distances(vectors: np.ndarray) -> np.ndarray:
    """(n, n) Euclidean distance matrix, computed row by row to bound memory."""
    n = vectors.shape[0]
    distances = np.empty((n, n), dtype="float64")
    for i in range(n):
        distances[i] = np.linalg.norm(vectors - vectors[i], axis=1)
    return distances


def _closest_pair(linkage: np.ndarray) -> tuple[int, int]:
    """First (i, j) with i < j holding the smallest linkage, in row-major order.

    The matrix is symmetric with an infinite diagonal, so the first minimum in
    row-major order always lies above the diagonal.
    """
    flat = int(np.argmin(linkage))
    i, j = divmod(flat, linkage.shape[1])
    return (i, j) if i < j else (j, i)


def run_agglomerative(matrix: NormalizedMatrix, target: int) -> ClusterAssignment:
    """Merge singleton clusters by smallest average pairwise distance until `target` remain.

    The linkage matrix holds the mean pairwise distance between every pair of
    current clusters. Entries for clusters untouched by a merge carry over
    as-is; the merged row is the size-weighted average of the two old rows,
    which equals the mean over all member pairs.

    Args:
        matrix: Output of `normalize`.
        target: Desired cluster count, clamped to >= 1. When target >= n_rows
                every row stays its own cluster.

    Returns:
        ClusterAssignment with labels and member-mean centroids.
    """
    if matrix.is_empty:
        return ClusterAssignment(algorithm=ALGORITHM)

    vectors = matrix.vectors
    n = vectors.shape[0]
    target = max(1, target)

    clusters: List[List[int]] = [[i] for i in range(n)]

    if n > target:
        linkage = pairwise_distances(vectors)
        np.fill_diagonal(linkage, np.inf)
        sizes = np.ones(n)

        while len(clusters) > target:
            i, j = _closest_pair(linkage)

            merged_row = (sizes[i] * linkage[i] + sizes[j] * linkage[j]) / (sizes[i] + sizes[j])
            linkage[i, :] = merged_row
            linkage[:, i] = merged_row
            linkage[i, i] = np.inf
            sizes[i] += sizes[j]

            linkage = np.delete(np.delete(linkage, j, axis=0), j, axis=1)
            sizes = np.delete(sizes, j)
            clusters[i] = clusters[i] + clusters[j]
            del clusters[j]

        logger.debug("Agglomerative: %d merges down to %d clusters", n - len(clusters), len(clusters))

    labels = np.zeros(n, dtype=int)
    centroids = []
    for cluster_id, members in enumerate(clusters):
        labels[members] = cluster_id
        centroids.append(vectors[members].mean(axis=0).tolist())

    return ClusterAssignment(
        algorithm=ALGORITHM,
        labels=labels.tolist(),
        centroids=centroids,
        n_clusters=len(clusters),
        noise_count=0,
    )
