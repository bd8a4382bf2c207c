"""JSON / CSV export of enriched records via pandas."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import pandas as pd

from ..models.record import EnrichedRecord

EXPORT_FORMATS = ("json", "csv")

# Leading columns; metadata columns follow in first-seen order
BASE_COLUMNS = ["id", "cluster_id", "cluster_label", "x", "y"]


def _format_vector(values: Sequence[float], digits: int = 4) -> str:
    return "[" + ", ".join(str(round(float(v), digits)) for v in values) + "]"


def records_to_frame(records: Sequence[EnrichedRecord], *, include_embedding: bool = True) -> pd.DataFrame:
    """Flatten enriched records into a DataFrame.

    Columns: id, cluster_id, cluster_label, x, y, <metadata keys>, and an
    "embedding" column rendered as a bracketed string when vectors are present.
    Metadata keys that collide with a base column are prefixed with "meta_".
    """
    rows: List[Dict[str, Any]] = []
    meta_columns: List[str] = []
    for rec in records:
        row: Dict[str, Any] = {
            "id": rec.id,
            "cluster_id": rec.cluster_id,
            "cluster_label": rec.cluster_label,
            "x": round(rec.x, 3),
            "y": round(rec.y, 3),
        }
        for key, value in rec.metadata.items():
            column = f"meta_{key}" if key in BASE_COLUMNS or key == "embedding" else key
            if column not in meta_columns:
                meta_columns.append(column)
            row[column] = value
        if include_embedding and rec.embedding is not None:
            row["embedding"] = _format_vector(rec.embedding)
        rows.append(row)

    columns = BASE_COLUMNS + meta_columns
    if include_embedding and any(rec.embedding is not None for rec in records):
        columns.append("embedding")
    return pd.DataFrame(rows, columns=columns)


def export_records(
    records: Sequence[EnrichedRecord],
    path: Union[str, Path],
    fmt: str = "json",
) -> Path:
    """Write enriched records to a JSON or CSV file.

    Args:
        records: Enriched records to export.
        path: Output file path (parent directories are created).
        fmt: "json" (records orientation, indented) or "csv" (every field quoted).

    Returns:
        The written path.
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(render_records(records, fmt), encoding="utf-8")
    return out_path


def render_records(records: Sequence[EnrichedRecord], fmt: str = "json") -> str:
    """Serialize enriched records to a JSON or CSV string."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}. Choose one of {', '.join(EXPORT_FORMATS)}")

    df = records_to_frame(records)
    if fmt == "json":
        return df.to_json(orient="records", force_ascii=False, indent=2)
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL)
