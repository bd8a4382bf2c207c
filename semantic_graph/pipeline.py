"""
Semantic Graph - Main Entry Point

This module provides the command-line interface for:
- Projecting and clustering a batch of embedding records
- Exporting enriched records to JSON/CSV
- Writing a synthetic sample batch
- Running the FastAPI backend

Example usage:
    # Cluster the synthetic batch with K-Means (k=8)
    python -m semantic_graph.pipeline analyze

    # DBSCAN on your own records
    python -m semantic_graph.pipeline analyze --data data/records.json -a dbscan --eps 1.2 --min-pts 5

    # Export enriched records
    python -m semantic_graph.pipeline export --format csv --out artifacts/graph.csv

    # Start the FastAPI backend
    python -m semantic_graph.pipeline serve --port 8000
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .data import generate_records, load_records, save_records
from .engine.analysis import analyze
from .engine.export import export_records
from .models.cluster import ClusterResult, build_params
from .models.record import Record


def _load_batch(data_path: Optional[str]) -> List[Record]:
    """Records from a file, else the configured data file, else the synthetic batch."""
    if data_path:
        records = load_records(data_path)
        print(f"Loaded {len(records)} records from {data_path}")
        return records
    if config.has_data_file():
        records = load_records(config.DATA_PATH)
        print(f"Loaded {len(records)} records from {config.DATA_PATH}")
        return records
    records = generate_records(config.SAMPLE_SIZE, config.SAMPLE_SEED)
    print(f"Using synthetic batch of {len(records)} records")
    return records


def run_analysis(args: argparse.Namespace, *, include_embedding: bool = False) -> ClusterResult:
    """Build parameters from CLI args and run the full pipeline."""
    params = build_params(
        args.algorithm, k=args.k, eps=args.eps, min_pts=args.min_pts, seed=args.seed
    )
    records = _load_batch(args.data)
    return analyze(
        records,
        params,
        projection_seed=args.projection_seed,
        include_embedding=include_embedding,
    )


def print_summary(result: ClusterResult) -> None:
    """Print diagnostics and the insight table."""
    print(f"\nAlgorithm: {result.algorithm}  params: {result.params}")
    print(
        f"Records: {result.n_input} input, {result.n_dropped} dropped, "
        f"dimension {result.dimension}"
    )
    print(f"Clusters: {result.n_clusters}  noise: {result.noise_count}")
    if result.inertia is not None:
        print(f"Inertia: {result.inertia:.3f} after {result.iterations} iterations")
    if result.explained_variance:
        variances = ", ".join(f"{v:.3f}" for v in result.explained_variance)
        print(f"Component variance: {variances}")

    if not result.insights:
        print("\nNo clusters (empty batch).")
        return

    print()
    for insight in result.insights:
        averages = ", ".join(f"{k}={v:.3f}" for k, v in insight.averages.items())
        tops = "; ".join(
            f"{k}: {', '.join(str(v) for v in values)}" for k, values in insight.top_values.items()
        )
        print(f"[{insight.label}] size={insight.size}")
        if averages:
            print(f"  avg: {averages}")
        if tops:
            print(f"  top: {tops}")
        print(f"  sample: {', '.join(insight.sample_ids)}")


def serve(port: int = 8000, reload: bool = False) -> None:
    """Start the FastAPI backend with uvicorn."""
    import uvicorn

    print(f"Starting Semantic Graph API on http://localhost:{port}")
    print(f"API docs: http://localhost:{port}/docs")
    uvicorn.run(
        "semantic_graph.api.main:app",
        host="0.0.0.0",
        port=port,
        reload=reload,
    )


def _add_cluster_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--data", "-d", type=str, default=None,
        help="Path to JSON file with records (default: SEMANTIC_GRAPH_DATA or synthetic batch)",
    )
    parser.add_argument(
        "--algorithm", "-a", type=str, default=config.DEFAULT_ALGORITHM,
        choices=["kmeans", "agglomerative", "dbscan"],
        help=f"Clustering algorithm (default: {config.DEFAULT_ALGORITHM})",
    )
    parser.add_argument("--k", "-k", type=int, default=config.DEFAULT_K, help=f"Cluster count for kmeans/agglomerative (default: {config.DEFAULT_K})")
    parser.add_argument("--eps", type=float, default=config.DEFAULT_EPS, help=f"DBSCAN radius (default: {config.DEFAULT_EPS})")
    parser.add_argument("--min-pts", type=int, default=config.DEFAULT_MIN_PTS, help=f"DBSCAN core threshold (default: {config.DEFAULT_MIN_PTS})")
    parser.add_argument("--seed", type=int, default=None, help="K-Means initialization seed")
    parser.add_argument("--projection-seed", type=int, default=config.PROJECTION_SEED, help="PCA start-vector seed")


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Semantic Graph - embedding projection and clustering",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Cluster the synthetic batch
  python -m semantic_graph.pipeline analyze

  # Agglomerative clustering into 5 groups
  python -m semantic_graph.pipeline analyze -a agglomerative -k 5

  # Write a synthetic batch to disk
  python -m semantic_graph.pipeline sample --out data/records.json

  # Start FastAPI backend
  python -m semantic_graph.pipeline serve
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser("analyze", help="Project, cluster and summarize a batch")
    _add_cluster_args(analyze_parser)

    export_parser = subparsers.add_parser("export", help="Export enriched records to JSON or CSV")
    _add_cluster_args(export_parser)
    export_parser.add_argument("--format", "-f", type=str, default="json", choices=["json", "csv"], help="Output format (default: json)")
    export_parser.add_argument("--out", "-o", type=str, default=None, help="Output path (default: artifacts/semantic-graph-export.<format>)")

    sample_parser = subparsers.add_parser("sample", help="Write a synthetic record batch to JSON")
    sample_parser.add_argument("--count", "-n", type=int, default=config.SAMPLE_SIZE, help=f"Number of records (default: {config.SAMPLE_SIZE})")
    sample_parser.add_argument("--seed", type=int, default=config.SAMPLE_SEED, help=f"Generator seed (default: {config.SAMPLE_SEED})")
    sample_parser.add_argument("--out", "-o", type=str, default=str(config.DATA_PATH), help="Output path")

    serve_parser = subparsers.add_parser("serve", help="Start FastAPI backend")
    serve_parser.add_argument("--port", "-p", type=int, default=8000, help="Port (default: 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "analyze":
            print_summary(run_analysis(args))
        elif args.command == "export":
            result = run_analysis(args, include_embedding=True)
            out = Path(args.out) if args.out else config.ARTIFACTS_DIR / f"semantic-graph-export.{args.format}"
            path = export_records(result.records, out, args.format)
            print(f"Exported {len(result.records)} records to {path}")
        elif args.command == "sample":
            path = save_records(generate_records(args.count, args.seed), args.out)
            print(f"Wrote {args.count} synthetic records to {path}")
        elif args.command == "serve":
            serve(port=args.port, reload=args.reload)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
