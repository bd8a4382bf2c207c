"""Vector analysis engine: normalization, PCA projection, clustering and cluster insights."""

from .random_source import NumpyRandom, RandomSource, SequenceRandom, XorShiftRandom
from .normalizer import NormalizedMatrix, normalize
from .projector import ProjectionBasis, project
from .kmeans import run_kmeans
from .agglomerative import run_agglomerative
from .dbscan import run_dbscan
from .clusterer import ClusterRegistry, cluster, default_registry
from .aggregator import aggregate
from .analysis import PreparedBatch, analyze, analyze_prepared, enrich, expand_labels, prepare_batch
from .export import export_records, records_to_frame, render_records

__all__ = [
    "RandomSource",
    "XorShiftRandom",
    "NumpyRandom",
    "SequenceRandom",
    "NormalizedMatrix",
    "normalize",
    "ProjectionBasis",
    "project",
    "run_kmeans",
    "run_agglomerative",
    "run_dbscan",
    "ClusterRegistry",
    "cluster",
    "default_registry",
    "aggregate",
    "PreparedBatch",
    "prepare_batch",
    "analyze",
    "analyze_prepared",
    "enrich",
    "expand_labels",
    "export_records",
    "records_to_frame",
    "render_records",
]
