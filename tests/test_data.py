"""Tests for record loading and the synthetic batch."""

import json

import pytest

from semantic_graph.data import THEMES, generate_records, load_records, save_records
from semantic_graph.models.record import Record


def test_generate_is_deterministic():
    a = generate_records(40, seed=7)
    b = generate_records(40, seed=7)
    assert [r.model_dump() for r in a] == [r.model_dump() for r in b]


def test_generate_differs_by_seed():
    a = generate_records(20, seed=1)
    b = generate_records(20, seed=2)
    assert [r.embedding for r in a] != [r.embedding for r in b]


def test_generate_shape():
    records = generate_records(25, seed=3)
    assert len(records) == 25
    assert len({r.id for r in records}) == 25
    assert all(len(r.embedding) == 8 for r in records)

    meta = records[0].metadata
    assert set(meta) == {
        "label", "sector", "region", "currency", "risk_level",
        "volatility", "velocity", "summary", "last_updated",
    }
    assert meta["sector"] == THEMES[0]["sector"]
    assert meta["risk_level"] in {"low", "medium", "high"}
    assert 0.25 <= meta["volatility"] <= 0.9
    assert 0.15 <= meta["velocity"] <= 0.73


def test_generate_spreads_across_themes():
    records = generate_records(30, seed=5)
    sectors = [r.metadata["sector"] for r in records]
    assert sectors == [t["sector"] for t in THEMES for _ in range(3)]


def test_generate_zero_count():
    assert generate_records(0) == []


def test_save_then_load(tmp_path):
    records = generate_records(12, seed=9)
    path = save_records(records, tmp_path / "out" / "records.json")
    loaded = load_records(path)
    assert [r.id for r in loaded] == [r.id for r in records]
    assert loaded[3].metadata == records[3].metadata
    assert loaded[3].embedding == records[3].embedding


def test_load_wrapped_list(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps({"records": [{"id": 1, "embedding": [1, 2], "tag": "a"}]}))
    (record,) = load_records(path)
    assert record == Record(id="1", embedding=[1, 2], metadata={"tag": "a"})


def test_load_rejects_other_shapes(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps({"items": []}))
    with pytest.raises(ValueError):
        load_records(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_records(tmp_path / "nope.json")
