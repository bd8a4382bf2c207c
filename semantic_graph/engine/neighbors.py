"""Radius neighborhood queries for density clustering.

Small batches use a brute-force distance scan; larger ones switch to a
scikit-learn KDTree. Both return the same sorted index arrays, so the
clustering outcome does not depend on which backend ran.
"""

from __future__ import annotations

import numpy as np
from sklearn.neighbors import KDTree


class BruteForceIndex:
    """Linear scan over all rows."""

    def __init__(self, vectors: np.ndarray):
        self.vectors = vectors

    def query_radius(self, idx: int, eps: float) -> np.ndarray:
        distances = np.linalg.norm(self.vectors - self.vectors[idx], axis=1)
        return np.flatnonzero(distances <= eps)


class KDTreeIndex:
    """KD-tree backed queries for batches beyond the brute-force limit."""

    def __init__(self, vectors: np.ndarray, leaf_size: int = 40):
        self.vectors = vectors
        self._tree = KDTree(vectors, leaf_size=leaf_size)

    def query_radius(self, idx: int, eps: float) -> np.ndarray:
        found = self._tree.query_radius(self.vectors[idx : idx + 1], r=eps)[0]
        return np.sort(found)


def build_index(vectors: np.ndarray, brute_force_limit: int):
    """Pick a neighborhood backend for `vectors`."""
    if vectors.shape[0] > brute_force_limit:
        return KDTreeIndex(vectors)
    return BruteForceIndex(vectors)
