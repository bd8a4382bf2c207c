"""Cluster data models: algorithm parameters, assignments and insights."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .. import config
from .record import EnrichedRecord

NOISE_LABEL = -1


class KMeansParams(BaseModel):
    """K-Means with seeded distinct-row initialization."""

    model_config = ConfigDict(frozen=True)

    algorithm: Literal["kmeans"] = "kmeans"
    k: int = config.DEFAULT_K
    max_iterations: int = Field(default=config.KMEANS_MAX_ITERATIONS, ge=1)
    seed: int = config.KMEANS_SEED


class AgglomerativeParams(BaseModel):
    """Average-linkage agglomerative clustering down to `target` clusters."""

    model_config = ConfigDict(frozen=True)

    algorithm: Literal["agglomerative"] = "agglomerative"
    target: int = config.DEFAULT_K


class DbscanParams(BaseModel):
    """Density clustering; min_pts counts the point itself."""

    model_config = ConfigDict(frozen=True)

    algorithm: Literal["dbscan"] = "dbscan"
    eps: float = config.DEFAULT_EPS
    min_pts: int = config.DEFAULT_MIN_PTS


ClusterParams = Annotated[
    Union[KMeansParams, AgglomerativeParams, DbscanParams],
    Field(discriminator="algorithm"),
]

_params_adapter: TypeAdapter = TypeAdapter(ClusterParams)


def build_params(algorithm: str, **values: Any) -> Union[KMeansParams, AgglomerativeParams, DbscanParams]:
    """Build typed clustering parameters from loose values.

    `k` doubles as the agglomerative target so a single cluster-count control
    drives both K-Means and agglomerative runs. None values fall back to the
    defaults and keys that do not apply to the algorithm are ignored.

    Raises:
        pydantic.ValidationError: Unknown algorithm or badly typed values.
    """
    payload = {key: value for key, value in values.items() if value is not None}
    if algorithm == "agglomerative" and "target" not in payload and "k" in payload:
        payload["target"] = payload.pop("k")
    payload["algorithm"] = algorithm
    return _params_adapter.validate_python(payload)


def cluster_label(cluster_id: int) -> str:
    """Display label for a cluster id; numbering shown to users starts at 1."""
    return "Noise" if cluster_id == NOISE_LABEL else f"Cluster {cluster_id + 1}"


class ClusterAssignment(BaseModel):
    """Cluster labels for every matrix row plus algorithm diagnostics."""

    model_config = ConfigDict(frozen=True)

    algorithm: str
    labels: List[int] = Field(default_factory=list)
    centroids: List[List[float]] = Field(default_factory=list)
    n_clusters: int = 0
    iterations: Optional[int] = None  # K-Means only
    inertia: Optional[float] = None  # K-Means only
    inertia_history: List[float] = Field(default_factory=list)
    noise_count: int = 0  # rows labelled -1


class ClusterInsight(BaseModel):
    """Summary statistics for one cluster (or the noise bucket)."""

    cluster_id: int
    label: str = ""
    size: int = 0
    averages: Dict[str, float] = Field(default_factory=dict)
    top_values: Dict[str, List[Any]] = Field(default_factory=dict)
    sample_ids: List[str] = Field(default_factory=list)


class ClusterResult(BaseModel):
    """Full analysis result for one batch and one parameter set."""

    algorithm: str
    params: Dict[str, Any] = Field(default_factory=dict)
    n_input: int = 0
    n_dropped: int = 0
    dimension: int = 0
    n_clusters: int = 0
    noise_count: int = 0
    iterations: Optional[int] = None
    inertia: Optional[float] = None
    explained_variance: List[float] = Field(default_factory=list)
    # Per-record data for the scatter plot
    records: List[EnrichedRecord] = Field(default_factory=list)
    insights: List[ClusterInsight] = Field(default_factory=list)
