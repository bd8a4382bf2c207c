"""Pydantic data models for Semantic Graph."""

from .record import Record, EnrichedRecord, coerce_records
from .cluster import (
    AgglomerativeParams,
    ClusterAssignment,
    ClusterInsight,
    ClusterParams,
    ClusterResult,
    DbscanParams,
    KMeansParams,
    build_params,
    cluster_label,
)

__all__ = [
    "Record",
    "EnrichedRecord",
    "coerce_records",
    "KMeansParams",
    "AgglomerativeParams",
    "DbscanParams",
    "ClusterParams",
    "ClusterAssignment",
    "ClusterInsight",
    "ClusterResult",
    "build_params",
    "cluster_label",
]
