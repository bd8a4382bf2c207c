"""Per-cluster summary statistics over enriched records."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Hashable
from numbers import Real
from typing import Any, Dict, List, Optional, Sequence

from .. import config
from ..models.cluster import ClusterInsight, cluster_label
from ..models.record import EnrichedRecord


def _is_numeric(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_finite_number(value: Any) -> bool:
    if not _is_numeric(value):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _is_categorical(value: Any) -> bool:
    return isinstance(value, (str, bool))


def infer_fields(records: Sequence[EnrichedRecord]) -> tuple[List[str], List[str]]:
    """Split metadata keys into numeric and categorical fields, in first-seen order.

    A key is numeric when every non-null value seen for it is a number, and
    categorical when every non-null value is a string or boolean. Mixed keys
    are left out.
    """
    kinds: Dict[str, set] = {}
    for rec in records:
        for key, value in rec.metadata.items():
            if value is None:
                continue
            kind = "numeric" if _is_numeric(value) else "categorical" if _is_categorical(value) else "other"
            kinds.setdefault(key, set()).add(kind)

    numeric = [key for key, seen in kinds.items() if seen == {"numeric"}]
    categorical = [key for key, seen in kinds.items() if seen == {"categorical"}]
    return numeric, categorical


def _summarize(
    cluster_id: int,
    members: List[EnrichedRecord],
    numeric_fields: Sequence[str],
    categorical_fields: Sequence[str],
    top_n: int,
    sample_size: int,
) -> ClusterInsight:
    averages: Dict[str, float] = {}
    for key in numeric_fields:
        values = [float(m.metadata[key]) for m in members if _is_finite_number(m.metadata.get(key))]
        if values:
            mean = sum(values) / len(values)
            if not math.isfinite(mean):
                mean = sum(v / len(values) for v in values)
            averages[key] = mean

    top_values: Dict[str, List[Any]] = {}
    for key in categorical_fields:
        # Counter.most_common keeps first-seen order among equal counts
        seen = [m.metadata.get(key) for m in members]
        counts = Counter(v for v in seen if v is not None and isinstance(v, Hashable))
        top_values[key] = [value for value, _ in counts.most_common(top_n)]

    return ClusterInsight(
        cluster_id=cluster_id,
        label=cluster_label(cluster_id),
        size=len(members),
        averages=averages,
        top_values=top_values,
        sample_ids=[m.id for m in members[:sample_size]],
    )


def aggregate(
    records: Sequence[EnrichedRecord],
    *,
    numeric_fields: Optional[Sequence[str]] = None,
    categorical_fields: Optional[Sequence[str]] = None,
    top_n: Optional[int] = None,
    sample_size: Optional[int] = None,
) -> List[ClusterInsight]:
    """Summarize each cluster label present in `records`.

    Args:
        records: Enriched records (noise rows carry cluster_id -1).
        numeric_fields: Metadata keys to average (inferred when None).
        categorical_fields: Metadata keys to rank by frequency (inferred when None).
        top_n: Values kept per categorical field.
        sample_size: Member ids kept per cluster, first encountered first.

    Returns:
        One ClusterInsight per label, largest cluster first.
    """
    if not records:
        return []

    top_n = config.INSIGHT_TOP_N if top_n is None else max(0, top_n)
    sample_size = config.INSIGHT_SAMPLE_SIZE if sample_size is None else max(0, sample_size)

    if numeric_fields is None or categorical_fields is None:
        inferred_numeric, inferred_categorical = infer_fields(records)
        numeric_fields = inferred_numeric if numeric_fields is None else numeric_fields
        categorical_fields = inferred_categorical if categorical_fields is None else categorical_fields

    grouped: Dict[int, List[EnrichedRecord]] = {}
    for rec in records:
        grouped.setdefault(rec.cluster_id, []).append(rec)

    insights = [
        _summarize(cid, members, numeric_fields, categorical_fields, top_n, sample_size)
        for cid, members in grouped.items()
    ]
    insights.sort(key=lambda insight: insight.size, reverse=True)
    return insights
