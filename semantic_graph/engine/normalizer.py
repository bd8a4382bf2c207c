"""Validate and coerce a heterogeneous batch of embeddings into a dense matrix."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..models.record import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class NormalizedMatrix:
    """Dense, finite (n, d) matrix built from the valid records of a batch.

    index_map[row] is the position of the originating record in the input
    batch. The vectors array is read-only.
    """

    vectors: np.ndarray
    index_map: Tuple[int, ...] = ()
    n_input: int = 0
    dimension: int = field(init=False)

    def __post_init__(self):
        vectors = np.array(self.vectors, dtype="float64", copy=True)
        if vectors.ndim != 2 or vectors.shape[0] == 0:
            vectors = np.zeros((0, 0))
        vectors.setflags(write=False)
        object.__setattr__(self, "vectors", vectors)
        object.__setattr__(self, "index_map", tuple(int(i) for i in self.index_map))
        object.__setattr__(self, "dimension", int(vectors.shape[1]) if vectors.shape[0] else 0)

    @property
    def n_rows(self) -> int:
        return int(self.vectors.shape[0])

    @property
    def n_dropped(self) -> int:
        return self.n_input - self.n_rows

    @property
    def is_empty(self) -> bool:
        return self.n_rows == 0

    @classmethod
    def empty(cls, n_input: int = 0) -> "NormalizedMatrix":
        return cls(vectors=np.zeros((0, 0)), index_map=(), n_input=n_input)


def _extract_embedding(item: Any) -> Any:
    """Pull the embedding out of a Record, a raw mapping or a bare vector."""
    if isinstance(item, Record):
        return item.embedding
    if isinstance(item, Mapping):
        return item.get("embedding", item.get("vector"))
    return item


def _coerce_entry(value: Any) -> Tuple[float, bool]:
    """Return (finite float, was_numeric) for one embedding entry."""
    if isinstance(value, (Real, np.bool_)):
        raw: Any = value
    elif isinstance(value, str):
        raw = value.strip()
    else:
        return 0.0, False
    try:
        number = float(raw)
    except ValueError:
        return 0.0, False
    except OverflowError:
        return 0.0, True
    if not math.isfinite(number):
        return 0.0, True
    return number, True


def _coerce_vector(embedding: Any) -> Optional[List[float]]:
    """Coerce one embedding to a list of finite floats, or None if unusable."""
    if embedding is None or isinstance(embedding, (str, bytes, Mapping)):
        return None
    if isinstance(embedding, np.ndarray):
        if embedding.ndim != 1:
            return None
        embedding = embedding.tolist()
    if not isinstance(embedding, Sequence):
        return None
    if len(embedding) == 0:
        return None

    values: List[float] = []
    any_numeric = False
    for entry in embedding:
        number, numeric = _coerce_entry(entry)
        values.append(number)
        any_numeric = any_numeric or numeric
    if not any_numeric:
        return None
    return values


def normalize(records: Iterable[Any]) -> NormalizedMatrix:
    """Build a NormalizedMatrix from a batch of records.

    Records with a missing, empty or non-numeric embedding are dropped. The
    dimension is fixed by the first valid embedding; later embeddings are
    truncated or zero-padded to it. Non-finite entries become 0.

    Args:
        records: Record objects, mappings with an "embedding" key, bare vectors,
                 or an existing NormalizedMatrix (re-normalized row by row).

    Returns:
        NormalizedMatrix whose index_map points back into `records`.
    """
    if isinstance(records, NormalizedMatrix):
        records = records.vectors

    rows: List[List[float]] = []
    index_map: List[int] = []
    dimension = 0
    n_input = 0

    for idx, item in enumerate(records):
        n_input += 1
        values = _coerce_vector(_extract_embedding(item))
        if values is None:
            continue

        if dimension == 0:
            dimension = len(values)

        if len(values) != dimension:
            values = (values + [0.0] * dimension)[:dimension]

        if not all(math.isfinite(v) for v in values):
            continue

        rows.append(values)
        index_map.append(idx)

    if not rows:
        if n_input:
            logger.info("No valid embeddings in batch of %d records", n_input)
        return NormalizedMatrix.empty(n_input)

    matrix = NormalizedMatrix(
        vectors=np.asarray(rows, dtype="float64"),
        index_map=tuple(index_map),
        n_input=n_input,
    )
    if matrix.n_dropped:
        logger.info("Dropped %d of %d records with unusable embeddings", matrix.n_dropped, n_input)
    return matrix
