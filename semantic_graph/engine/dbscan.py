"""DBSCAN density clustering with seed-stack expansion."""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .. import config
from ..models.cluster import NOISE_LABEL, ClusterAssignment
from .neighbors import build_index
from .normalizer import NormalizedMatrix

logger = logging.getLogger(__name__)

ALGORITHM = "dbscan"


def run_dbscan(
    matrix: NormalizedMatrix,
    eps: float,
    min_pts: int,
    *,
    brute_force_limit: Optional[int] = None,
) -> ClusterAssignment:
    """Cluster matrix rows by density.

    A row is a core point when its eps-neighborhood (itself included) holds
    at least min_pts rows. Clusters grow from core points; rows reached only
    as neighbors become border members, and rows never reached stay noise.

    Args:
        matrix: Output of `normalize`.
        eps: Neighborhood radius. eps <= 0 yields all noise.
        min_pts: Minimum neighborhood size for a core point. min_pts <= 0 yields all noise.
        brute_force_limit: Row count above which a KD-tree answers the
            neighborhood queries (default from config).

    Returns:
        ClusterAssignment with labels (-1 = noise), one centroid per cluster
        and noise_count.
    """
    if matrix.is_empty:
        return ClusterAssignment(algorithm=ALGORITHM, noise_count=0)

    vectors = matrix.vectors
    n = vectors.shape[0]

    if eps <= 0 or min_pts <= 0:
        return ClusterAssignment(algorithm=ALGORITHM, labels=[NOISE_LABEL] * n, noise_count=n)

    limit = config.BRUTE_FORCE_LIMIT if brute_force_limit is None else brute_force_limit
    index = build_index(vectors, limit)

    labels = np.full(n, NOISE_LABEL, dtype=int)
    visited = np.zeros(n, dtype=bool)
    cluster_id = 0

    for i in range(n):
        if visited[i]:
            continue
        visited[i] = True

        neighbors = index.query_radius(i, eps)
        if neighbors.shape[0] < min_pts:
            continue

        labels[i] = cluster_id
        seeds: List[int] = neighbors.tolist()
        queued = set(seeds)

        while seeds:
            current = seeds.pop()
            queued.discard(current)

            if not visited[current]:
                visited[current] = True
                current_neighbors = index.query_radius(current, eps)
                if current_neighbors.shape[0] >= min_pts:
                    for neighbor in current_neighbors.tolist():
                        if neighbor not in queued:
                            seeds.append(neighbor)
                            queued.add(neighbor)

            if labels[current] == NOISE_LABEL:
                labels[current] = cluster_id

        cluster_id += 1

    centroids = [vectors[labels == c].mean(axis=0).tolist() for c in range(cluster_id)]
    noise_count = int(np.sum(labels == NOISE_LABEL))
    logger.debug("DBSCAN eps=%s min_pts=%s: %d clusters, %d noise", eps, min_pts, cluster_id, noise_count)

    return ClusterAssignment(
        algorithm=ALGORITHM,
        labels=labels.tolist(),
        centroids=centroids,
        n_clusters=cluster_id,
        noise_count=noise_count,
    )
