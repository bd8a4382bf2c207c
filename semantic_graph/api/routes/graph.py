"""Graph endpoints: project + cluster the loaded batch, analyze posted batches, export."""

from __future__ import annotations

import asyncio
import json
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field, ValidationError

from ... import config
from ...engine.analysis import PreparedBatch, analyze, analyze_prepared, prepare_batch
from ...engine.export import render_records
from ...models.cluster import ClusterParams, ClusterResult, KMeansParams, build_params

router = APIRouter(tags=["graph"])

_MEDIA_TYPES = {"json": "application/json", "csv": "text/csv"}


class AnalyzeRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    params: ClusterParams = Field(default_factory=KMeansParams)
    projection_seed: Optional[int] = None


class BatchRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)


def _require_batch(request: Request) -> PreparedBatch:
    batch = request.app.state.batch
    if batch is None:
        raise HTTPException(status_code=503, detail="No record batch loaded")
    return batch


def _params_or_422(algorithm: str, **values: Any):
    try:
        return build_params(algorithm, **values)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=json.loads(e.json()))


async def _run_in_executor(fn: Callable[[], Any]) -> Any:
    """Run a blocking engine call off the event loop, bounded by ANALYSIS_TIMEOUT."""
    loop = asyncio.get_event_loop()
    future = loop.run_in_executor(None, fn)
    if config.ANALYSIS_TIMEOUT is None:
        return await future
    try:
        return await asyncio.wait_for(future, timeout=config.ANALYSIS_TIMEOUT)
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Analysis timed out")


async def _analyze_loaded(
    request: Request,
    algorithm: str,
    k: int,
    eps: float,
    min_pts: int,
    seed: Optional[int],
    *,
    include_embedding: bool = False,
) -> ClusterResult:
    batch = _require_batch(request)
    params = _params_or_422(algorithm, k=k, eps=eps, min_pts=min_pts, seed=seed)
    return await _run_in_executor(
        partial(analyze_prepared, batch, params, include_embedding=include_embedding)
    )


@router.get("/graph")
async def get_graph(
    request: Request,
    algorithm: str = Query(config.DEFAULT_ALGORITHM),
    k: int = Query(config.DEFAULT_K, ge=2, le=24),
    eps: float = Query(config.DEFAULT_EPS, ge=0.2, le=4.0),
    min_pts: int = Query(config.DEFAULT_MIN_PTS, ge=3, le=30),
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """Project and cluster the loaded batch."""
    result = await _analyze_loaded(request, algorithm, k, eps, min_pts, seed)
    return result.model_dump()


@router.get("/graph/clusters/{cluster_id}")
async def get_cluster(
    request: Request,
    cluster_id: int,
    algorithm: str = Query(config.DEFAULT_ALGORITHM),
    k: int = Query(config.DEFAULT_K, ge=2, le=24),
    eps: float = Query(config.DEFAULT_EPS, ge=0.2, le=4.0),
    min_pts: int = Query(config.DEFAULT_MIN_PTS, ge=3, le=30),
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """Members and summary of one cluster (-1 for noise)."""
    result = await _analyze_loaded(request, algorithm, k, eps, min_pts, seed)
    insight = next((i for i in result.insights if i.cluster_id == cluster_id), None)
    if insight is None:
        raise HTTPException(status_code=404, detail=f"Cluster {cluster_id} not found")
    return {
        "cluster": insight.model_dump(),
        "records": [r.model_dump() for r in result.records if r.cluster_id == cluster_id],
    }


@router.get("/graph/export")
async def export_graph(
    request: Request,
    format: str = Query("json", pattern="^(json|csv)$"),
    algorithm: str = Query(config.DEFAULT_ALGORITHM),
    k: int = Query(config.DEFAULT_K, ge=2, le=24),
    eps: float = Query(config.DEFAULT_EPS, ge=0.2, le=4.0),
    min_pts: int = Query(config.DEFAULT_MIN_PTS, ge=3, le=30),
    seed: Optional[int] = None,
) -> Response:
    """Download the enriched records as JSON or CSV."""
    result = await _analyze_loaded(
        request, algorithm, k, eps, min_pts, seed, include_embedding=True
    )
    content = render_records(result.records, format)
    return Response(
        content=content,
        media_type=_MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="semantic-graph-export.{format}"'},
    )


@router.post("/graph/analyze")
async def analyze_batch(body: AnalyzeRequest) -> Dict[str, Any]:
    """Analyze a posted batch without touching the loaded one."""
    result = await _run_in_executor(
        partial(analyze, body.records, body.params, projection_seed=body.projection_seed)
    )
    return result.model_dump()


@router.put("/graph/batch")
async def replace_batch(request: Request, body: BatchRequest) -> Dict[str, Any]:
    """Replace the loaded batch; normalization and projection are redone once here."""
    batch = await _run_in_executor(
        partial(prepare_batch, body.records, projection_seed=config.PROJECTION_SEED)
    )
    request.app.state.batch = batch
    request.app.state.batch_source = "uploaded"
    return {
        "n_records": batch.matrix.n_input,
        "n_vectors": batch.matrix.n_rows,
        "n_dropped": batch.matrix.n_dropped,
        "dimension": batch.matrix.dimension,
    }
