"""
Configuration settings for Semantic Graph.

Every setting can be overridden through the environment or a .env file in the
project root. Nothing here is required: with no configuration the API serves
a synthetic batch and clustering runs with the graph view's defaults.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
# Look for .env file in project root (parent of semantic_graph/)
_project_root = Path(__file__).parent.parent
_env_path = _project_root / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=_env_path)


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


# ===================
# Project Paths
# ===================

PROJECT_ROOT = _project_root
DATA_DIR = PROJECT_ROOT / "data"
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"

# Records JSON served by the API (falls back to a synthetic batch)
DATA_PATH = Path(os.getenv("SEMANTIC_GRAPH_DATA", str(DATA_DIR / "records.json")))

# ===================
# Clustering Defaults
# ===================

DEFAULT_ALGORITHM = os.getenv("DEFAULT_ALGORITHM", "kmeans")
DEFAULT_K = _env_int("DEFAULT_K", 8)
DEFAULT_EPS = _env_float("DEFAULT_EPS", 1.6)
DEFAULT_MIN_PTS = _env_int("DEFAULT_MIN_PTS", 8)

KMEANS_MAX_ITERATIONS = _env_int("KMEANS_MAX_ITERATIONS", 40)
KMEANS_SEED = _env_int("KMEANS_SEED", 1993)

# Above this many rows DBSCAN switches to a KD-tree for neighborhood queries
BRUTE_FORCE_LIMIT = _env_int("BRUTE_FORCE_LIMIT", 512)

# ===================
# Projection
# ===================

POWER_ITERATIONS = _env_int("POWER_ITERATIONS", 120)
PROJECTION_SEED = _env_int("PROJECTION_SEED", None)

# ===================
# Insights
# ===================

INSIGHT_TOP_N = _env_int("INSIGHT_TOP_N", 2)
INSIGHT_SAMPLE_SIZE = _env_int("INSIGHT_SAMPLE_SIZE", 4)

# ===================
# Synthetic Batch
# ===================

SAMPLE_SIZE = _env_int("SAMPLE_SIZE", 300)
SAMPLE_SEED = _env_int("SAMPLE_SEED", 2025)

# ===================
# API
# ===================

# Seconds before an analysis request gives up (None = wait indefinitely)
ANALYSIS_TIMEOUT = _env_float("ANALYSIS_TIMEOUT", None)

CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000",
    ).split(",")
    if origin.strip()
]


def has_data_file() -> bool:
    """Check if a records JSON file is available to serve."""
    return DATA_PATH.exists()
