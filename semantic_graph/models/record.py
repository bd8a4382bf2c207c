"""Record data models."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

# Keys that never end up in metadata when building a Record from a raw document
_RESERVED_KEYS = {"embedding", "vector", "metadata"}


class Record(BaseModel):
    """A single input record: identifier, embedding and descriptive metadata.

    The embedding is deliberately untyped; the normalizer decides whether it
    is usable and drops the record otherwise.
    """

    id: str
    embedding: Any = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_raw(cls, doc: Dict[str, Any], index: int = 0) -> "Record":
        """Create a Record from a raw JSON document (flat or with a nested metadata dict)."""
        id_key = "id" if "id" in doc else "key"
        raw_id = doc.get(id_key)
        embedding = doc.get("embedding", doc.get("vector"))
        metadata = dict(doc.get("metadata") or {})
        for key, value in doc.items():
            if key != id_key and key not in _RESERVED_KEYS:
                metadata.setdefault(key, value)
        return cls(
            id=str(raw_id) if raw_id is not None else str(index),
            embedding=embedding,
            metadata=metadata,
        )


class EnrichedRecord(BaseModel):
    """A surviving record joined with its 2D coordinate and cluster label."""

    id: str
    x: float = 0.0
    y: float = 0.0
    cluster_id: int = -1
    cluster_label: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)
    # Normalized vector, only filled in when an export asks for it
    embedding: Optional[List[float]] = None


def coerce_records(items: Iterable[Any]) -> List[Record]:
    """Turn Records, raw documents or bare vectors into Records (ids default to position)."""
    out: List[Record] = []
    for idx, item in enumerate(items):
        if isinstance(item, Record):
            out.append(item)
        elif isinstance(item, Mapping):
            out.append(Record.from_raw(dict(item), idx))
        else:
            out.append(Record(id=str(idx), embedding=item))
    return out
