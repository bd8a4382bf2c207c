"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__, config
from ..data import generate_records, load_records
from ..engine.analysis import prepare_batch
from ..models.record import Record


def _load_startup_batch(app: FastAPI, records: Optional[List[Record]]) -> None:
    """Normalize and project the batch served by the graph endpoints."""
    if records is not None:
        source = "provided"
    elif config.has_data_file():
        try:
            records = load_records(config.DATA_PATH)
            source = str(config.DATA_PATH)
        except Exception as e:
            print(f"Warning: Could not load records from {config.DATA_PATH}: {e}")
            records = None
    if records is None:
        records = generate_records(config.SAMPLE_SIZE, config.SAMPLE_SEED)
        source = "synthetic"

    app.state.batch = prepare_batch(records, projection_seed=config.PROJECTION_SEED)
    app.state.batch_source = source
    matrix = app.state.batch.matrix
    print(
        f"Loaded {matrix.n_rows} of {matrix.n_input} records ({source}), "
        f"dimension {matrix.dimension}"
    )


def create_app(records: Optional[List[Record]] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        records: Batch to serve instead of the configured data file or the
                 synthetic sample.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown lifecycle events."""
        _load_startup_batch(app, records)
        yield
        print("Shutting down Semantic Graph API.")

    app = FastAPI(
        title="Semantic Graph API",
        description="Embedding projection, clustering and cluster insights for the graph view.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.batch = None
    app.state.batch_source = ""

    # CORS - allow the dashboard dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routes import graph
    app.include_router(graph.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Semantic Graph API",
            "version": __version__,
            "status": "running",
            "docs": "/docs",
            "health": "/api/health",
            "endpoints": {
                "graph": "/api/graph",
                "analyze": "/api/graph/analyze",
                "batch": "/api/graph/batch",
                "cluster": "/api/graph/clusters/{cluster_id}",
                "export": "/api/graph/export",
            },
        }

    @app.get("/api/health")
    async def health():
        batch = app.state.batch
        return {
            "status": "ok",
            "batch_loaded": batch is not None,
            "batch_source": app.state.batch_source,
            "n_records": batch.matrix.n_input if batch else 0,
            "n_vectors": batch.matrix.n_rows if batch else 0,
        }

    return app


# For uvicorn direct run
app = create_app()
