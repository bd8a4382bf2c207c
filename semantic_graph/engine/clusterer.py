"""Algorithm registry: dispatch typed parameters to a clustering strategy."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from ..models.cluster import (
    AgglomerativeParams,
    ClusterAssignment,
    ClusterParams,
    DbscanParams,
    KMeansParams,
)
from .agglomerative import run_agglomerative
from .dbscan import run_dbscan
from .kmeans import run_kmeans
from .normalizer import NormalizedMatrix
from .random_source import RandomSource

# Signature every strategy adapter shares
Strategy = Callable[[NormalizedMatrix, BaseModel, Optional[RandomSource]], ClusterAssignment]


class ClusterRegistry:
    """Registry mapping parameter types to clustering strategies.

    Usage:
        registry = ClusterRegistry()
        registry.register(KMeansParams, kmeans_strategy)
        assignment = registry.run(matrix, KMeansParams(k=4))
    """

    def __init__(self):
        self._strategies: Dict[Type[BaseModel], Strategy] = {}

    def register(self, params_type: Type[BaseModel], strategy: Strategy) -> None:
        """Register the strategy that handles `params_type`."""
        self._strategies[params_type] = strategy

    def algorithms(self) -> List[str]:
        """Algorithm tags of all registered strategies."""
        return [t.model_fields["algorithm"].default for t in self._strategies]

    def run(
        self,
        matrix: NormalizedMatrix,
        params: BaseModel,
        random_source: Optional[RandomSource] = None,
    ) -> ClusterAssignment:
        """Run the strategy registered for type(params).

        Raises:
            TypeError: If no strategy handles this parameter type.
        """
        strategy = self._strategies.get(type(params))
        if strategy is None:
            raise TypeError(f"No clustering strategy registered for {type(params).__name__}")
        return strategy(matrix, params, random_source)


def _kmeans(matrix: NormalizedMatrix, params: KMeansParams, random_source: Optional[RandomSource]) -> ClusterAssignment:
    return run_kmeans(
        matrix,
        params.k,
        max_iterations=params.max_iterations,
        seed=params.seed,
        random_source=random_source,
    )


def _agglomerative(matrix: NormalizedMatrix, params: AgglomerativeParams, random_source: Optional[RandomSource]) -> ClusterAssignment:
    return run_agglomerative(matrix, params.target)


def _dbscan(matrix: NormalizedMatrix, params: DbscanParams, random_source: Optional[RandomSource]) -> ClusterAssignment:
    return run_dbscan(matrix, params.eps, params.min_pts)


default_registry = ClusterRegistry()
default_registry.register(KMeansParams, _kmeans)
default_registry.register(AgglomerativeParams, _agglomerative)
default_registry.register(DbscanParams, _dbscan)


def cluster(
    matrix: NormalizedMatrix,
    params: ClusterParams,
    *,
    random_source: Optional[RandomSource] = None,
) -> ClusterAssignment:
    """Cluster a normalized matrix with the algorithm selected by `params`.

    Args:
        matrix: Output of `normalize`.
        params: KMeansParams, AgglomerativeParams or DbscanParams.
        random_source: Optional injected source (used by K-Means seeding).

    Returns:
        ClusterAssignment with one label per matrix row.
    """
    return default_registry.run(matrix, params, random_source)
