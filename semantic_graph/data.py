"""Record loading and the synthetic financial-semantics batch."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from . import config
from .engine.random_source import XorShiftRandom
from .models.record import Record, coerce_records

# Ten themes with 8-dimensional centers; members are scattered around the
# center with per-theme variance plus a small sinusoidal drift.
THEMES: List[Dict[str, Any]] = [
    {
        "name": "Macro Economy", "sector": "Macro Indicators", "region": "Global",
        "currency": "USD", "risk": "medium", "variance": 0.45,
        "center": [1.4, 0.8, -0.3, 0.2, 0.5, -1.2, 0.9, 0.4],
        "prefixes": ["macro:gdp", "macro:cpi", "macro:ppi"],
        "samples": ["Global GDP growth outlook", "Core CPI month-on-month", "US PPI year-on-year pressure"],
    },
    {
        "name": "Central Banks", "sector": "Central Bank Watch", "region": "North America",
        "currency": "USD", "risk": "medium", "variance": 0.4,
        "center": [-0.6, 1.8, 0.4, -0.9, 0.3, 1.5, -0.2, 0.6],
        "prefixes": ["policy:fed", "policy:rate", "policy:bop"],
        "samples": ["Fed rate decision preview", "Balance sheet expansion", "Reserve ratio expectations"],
    },
    {
        "name": "Fixed Income", "sector": "Fixed Income", "region": "Asia",
        "currency": "CNY", "risk": "low", "variance": 0.32,
        "center": [0.5, -1.2, 1.1, 0.8, -0.4, 0.3, -0.7, 1.2],
        "prefixes": ["bond:gov", "bond:credit", "bond:yld"],
        "samples": ["Yield curve inflection", "Credit spread moves", "Offshore yield volatility"],
    },
    {
        "name": "FX & Commodities", "sector": "FX & Commodities", "region": "Global",
        "currency": "MULTI", "risk": "high", "variance": 0.55,
        "center": [-1.1, -0.4, 1.8, -0.6, 1.1, 0.5, -1.4, 0.9],
        "prefixes": ["fx:usd", "fx:oil", "fx:metal"],
        "samples": ["Dollar index volatility rebound", "WTI crude inventories", "Precious metals safe-haven demand"],
    },
    {
        "name": "Equities", "sector": "Equity Pulse", "region": "Europe & US",
        "currency": "USD", "risk": "medium", "variance": 0.48,
        "center": [1.7, -0.2, -1.2, 0.6, 0.9, -0.5, 1.1, -0.7],
        "prefixes": ["eq:earnings", "eq:valuation", "eq:alpha"],
        "samples": ["Nasdaq growth premium", "Financials ROE shift", "Blue-chip fund flows"],
    },
    {
        "name": "Alternatives", "sector": "Alternatives", "region": "Europe",
        "currency": "EUR", "risk": "high", "variance": 0.6,
        "center": [-0.8, 1.3, -0.4, 1.6, -1.1, 0.8, -0.2, -0.6],
        "prefixes": ["alt:hedge", "alt:pe", "alt:reits"],
        "samples": ["Hedge fund net exposure", "Private equity fundraising", "European commercial real estate cap rates"],
    },
    {
        "name": "Risk Management", "sector": "Risk Signals", "region": "Global",
        "currency": "USD", "risk": "high", "variance": 0.5,
        "center": [0.9, 0.4, -1.5, 1.2, -0.3, -0.9, 0.7, -0.4],
        "prefixes": ["risk:stress", "risk:liquidity", "risk:credit"],
        "samples": ["Systemic risk heatmap", "Cross-market liquidity index", "Default probability alert"],
    },
    {
        "name": "ESG", "sector": "Sustainable Finance", "region": "Global",
        "currency": "MULTI", "risk": "low", "variance": 0.35,
        "center": [-0.3, 0.7, 1.3, -0.8, 1.5, 0.4, -0.5, 1.1],
        "prefixes": ["esg:score", "esg:impact", "esg:bond"],
        "samples": ["Green bond issuance momentum", "Carbon allowance price index", "ESG rating changes"],
    },
    {
        "name": "Supply Chain", "sector": "Supply Chain Intelligence", "region": "Asia",
        "currency": "JPY", "risk": "medium", "variance": 0.44,
        "center": [1.2, -1.1, 0.6, 1.4, -0.7, 0.3, 1.5, -1.2],
        "prefixes": ["chain:semi", "chain:auto", "chain:retail"],
        "samples": ["Semiconductor capacity utilization", "EV supply chain resilience", "Cross-border retail inventory turnover"],
    },
    {
        "name": "Wealth Management", "sector": "Wealth Advisory", "region": "Asia Pacific",
        "currency": "HKD", "risk": "low", "variance": 0.3,
        "center": [-1.3, 0.9, 0.5, -0.4, 1.6, -0.7, 0.4, 1.5],
        "prefixes": ["wm:portfolio", "wm:fundflow", "wm:client"],
        "samples": ["HNWI allocation preferences", "Wealth Connect fund flows", "Family office theme preferences"],
    },
]


def load_records(path: Optional[Union[str, Path]] = None) -> List[Record]:
    """Load records from a JSON file.

    Args:
        path: Path to JSON file. If None, uses the configured data path.

    Returns:
        List of Records (embeddings are not validated here).

    The JSON can be either:
    - A list of record documents directly
    - A dict with a 'records' key containing the list
    """
    json_path = Path(path) if path else config.DATA_PATH

    if not json_path.exists():
        raise FileNotFoundError(f"Records file not found: {json_path}")

    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, list):
        docs = data
    elif isinstance(data, dict) and "records" in data:
        docs = data["records"]
    else:
        raise ValueError("Unexpected JSON format. Expected a list of records or a dict with a 'records' key.")

    return coerce_records(docs)


def save_records(records: Iterable[Record], path: Union[str, Path]) -> Path:
    """Write records as a JSON list (flat documents with a nested metadata dict)."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    docs = [rec.model_dump() for rec in records]
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(docs, f, ensure_ascii=False, indent=2)
    return out_path


def _risk_level(theme_risk: str, draw: float) -> str:
    if theme_risk == "high" and draw > 0.6:
        return "high"
    if theme_risk == "low" and draw > 0.7:
        return "low"
    return "medium"


def generate_records(count: Optional[int] = None, seed: Optional[int] = None) -> List[Record]:
    """Generate a deterministic synthetic batch for demos and tests.

    Records are spread evenly across THEMES; the same (count, seed) always
    yields the same batch.
    """
    count = config.SAMPLE_SIZE if count is None else max(0, count)
    rand = XorShiftRandom(config.SAMPLE_SEED if seed is None else seed)
    per_theme = math.ceil(count / len(THEMES)) if count else 0

    records: List[Record] = []
    for theme_index, theme in enumerate(THEMES):
        for i in range(per_theme):
            if len(records) >= count:
                break
            prefix = theme["prefixes"][int(rand.random() * len(theme["prefixes"]))]
            sample = theme["samples"][int(rand.random() * len(theme["samples"]))]
            embedding = [
                round(
                    value
                    + (rand.random() - 0.5) * theme["variance"] * 2.4
                    + math.sin((theme_index + 1) * (dim + 1) * 0.37) * 0.08,
                    4,
                )
                for dim, value in enumerate(theme["center"])
            ]
            risk_level = _risk_level(theme["risk"], rand.random())
            volatility = round(0.25 + rand.random() * 0.65, 3)
            velocity = round(0.15 + rand.random() * 0.58, 3)
            month = int(rand.random() * 12) + 1
            day = int(rand.random() * 28) + 1

            records.append(Record(
                id=f"{prefix}-{i + 1:03d}",
                embedding=embedding,
                metadata={
                    "label": f"{theme['name']} · {sample}",
                    "sector": theme["sector"],
                    "region": theme["region"],
                    "currency": theme["currency"],
                    "risk_level": risk_level,
                    "volatility": volatility,
                    "velocity": velocity,
                    "summary": f"{sample} ({theme['sector']})",
                    "last_updated": f"2025-{month:02d}-{day:02d}",
                },
            ))

    return records
