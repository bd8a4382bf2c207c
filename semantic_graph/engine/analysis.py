"""Full graph analysis: normalize, project, cluster, enrich and summarize a batch."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np

from ..models.cluster import NOISE_LABEL, ClusterAssignment, ClusterParams, ClusterResult, cluster_label
from ..models.record import EnrichedRecord, Record, coerce_records
from .aggregator import aggregate
from .clusterer import cluster
from .normalizer import NormalizedMatrix, normalize
from .projector import ProjectionBasis, project
from .random_source import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PreparedBatch:
    """A batch that has been normalized and projected once.

    Clustering parameters change far more often than the batch itself, so
    the projection is computed here and reused for every clustering run.
    """

    records: tuple
    matrix: NormalizedMatrix
    basis: ProjectionBasis
    points: np.ndarray


def prepare_batch(
    records: Iterable[Any],
    *,
    projection_seed: Optional[int] = None,
    power_iterations: Optional[int] = None,
    random_source: Optional[RandomSource] = None,
) -> PreparedBatch:
    """Normalize and project a batch of records or raw documents."""
    recs = tuple(coerce_records(records))
    matrix = normalize(recs)
    basis, points = project(
        matrix, iterations=power_iterations, seed=projection_seed, random_source=random_source
    )
    points.setflags(write=False)
    return PreparedBatch(records=recs, matrix=matrix, basis=basis, points=points)


def expand_labels(assignment: ClusterAssignment, matrix: NormalizedMatrix) -> List[int]:
    """Labels for every input record; records dropped by the normalizer get -1."""
    full = [NOISE_LABEL] * matrix.n_input
    for row, record_idx in enumerate(matrix.index_map):
        if row < len(assignment.labels):
            full[record_idx] = assignment.labels[row]
    return full


def _json_safe_metadata(metadata: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of `metadata` with NaN and infinite floats replaced by None."""
    return {
        key: None if isinstance(value, float) and not math.isfinite(value) else value
        for key, value in metadata.items()
    }


def enrich(
    records: Sequence[Record],
    matrix: NormalizedMatrix,
    points: np.ndarray,
    assignment: ClusterAssignment,
    *,
    include_embedding: bool = False,
) -> List[EnrichedRecord]:
    """Join every surviving record with its projected point and cluster label."""
    enriched: List[EnrichedRecord] = []
    for row, record_idx in enumerate(matrix.index_map):
        rec = records[record_idx]
        cid = assignment.labels[row] if row < len(assignment.labels) else NOISE_LABEL
        enriched.append(EnrichedRecord(
            id=rec.id,
            x=float(points[row, 0]),
            y=float(points[row, 1]),
            cluster_id=int(cid),
            cluster_label=cluster_label(int(cid)),
            metadata=_json_safe_metadata(rec.metadata),
            embedding=matrix.vectors[row].tolist() if include_embedding else None,
        ))
    return enriched


def analyze_prepared(
    batch: PreparedBatch,
    params: ClusterParams,
    *,
    random_source: Optional[RandomSource] = None,
    include_embedding: bool = False,
) -> ClusterResult:
    """Cluster an already prepared batch and build the full result."""
    assignment = cluster(batch.matrix, params, random_source=random_source)
    records = enrich(
        batch.records, batch.matrix, batch.points, assignment, include_embedding=include_embedding
    )
    insights = aggregate(records)

    logger.info(
        "%s: %d/%d records, %d clusters, %d noise",
        assignment.algorithm, batch.matrix.n_rows, batch.matrix.n_input,
        assignment.n_clusters, assignment.noise_count,
    )

    return ClusterResult(
        algorithm=assignment.algorithm,
        params=params.model_dump(),
        n_input=batch.matrix.n_input,
        n_dropped=batch.matrix.n_dropped,
        dimension=batch.matrix.dimension,
        n_clusters=len({cid for cid in assignment.labels if cid != NOISE_LABEL}),
        noise_count=assignment.noise_count,
        iterations=assignment.iterations,
        inertia=assignment.inertia,
        explained_variance=list(batch.basis.eigenvalues),
        records=records,
        insights=insights,
    )


def analyze(
    records: Iterable[Any],
    params: ClusterParams,
    *,
    projection_seed: Optional[int] = None,
    random_source: Optional[RandomSource] = None,
    include_embedding: bool = False,
) -> ClusterResult:
    """Run the whole pipeline on one batch.

    Args:
        records: Record objects, raw documents or bare vectors.
        params: Clustering parameters (see `build_params`).
        projection_seed: Seed for the power-iteration start vectors.
        random_source: Injected source for K-Means seeding.
        include_embedding: Echo normalized vectors into the enriched records.

    Returns:
        ClusterResult with enriched records and insights.
    """
    batch = prepare_batch(records, projection_seed=projection_seed)
    return analyze_prepared(
        batch, params, random_source=random_source, include_embedding=include_embedding
    )
