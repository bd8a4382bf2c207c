"""Tests for JSON/CSV export."""

import csv
import io
import json

import pytest

pytest.importorskip("pandas")

from semantic_graph.engine.export import export_records, records_to_frame, render_records
from semantic_graph.models.record import EnrichedRecord


@pytest.fixture
def enriched():
    return [
        EnrichedRecord(
            id="macro:gdp-001", x=1.23456, y=-0.5, cluster_id=0, cluster_label="Cluster 1",
            metadata={"label": "Macro Economy · Global GDP growth outlook", "volatility": 0.42},
            embedding=[0.123456, 1.0],
        ),
        EnrichedRecord(
            id="fx:oil-002", x=0.0, y=2.0, cluster_id=-1, cluster_label="Noise",
            metadata={"region": "Global", "x": "shadowed"},
            embedding=[2.0, -1.5],
        ),
    ]


def test_frame_columns(enriched):
    df = records_to_frame(enriched)
    assert list(df.columns) == [
        "id", "cluster_id", "cluster_label", "x", "y",
        "label", "volatility", "region", "meta_x", "embedding",
    ]
    assert df.loc[0, "x"] == 1.235
    assert df.loc[0, "embedding"] == "[0.1235, 1.0]"
    assert df.loc[1, "meta_x"] == "shadowed"


def test_frame_without_embedding(enriched):
    df = records_to_frame(enriched, include_embedding=False)
    assert "embedding" not in df.columns


def test_render_json(enriched):
    docs = json.loads(render_records(enriched, "json"))
    assert [d["id"] for d in docs] == ["macro:gdp-001", "fx:oil-002"]
    assert docs[0]["label"] == "Macro Economy · Global GDP growth outlook"
    assert docs[0]["region"] is None
    assert docs[1]["cluster_label"] == "Noise"


def test_render_json_keeps_unicode(enriched):
    assert "·" in render_records(enriched, "json")


def test_render_csv_quotes_every_field(enriched):
    text = render_records(enriched, "csv")
    lines = text.strip().splitlines()
    assert lines[0].startswith('"id","cluster_id","cluster_label","x","y"')
    assert all(line.startswith('"') and line.endswith('"') for line in lines)

    rows = list(csv.DictReader(io.StringIO(text)))
    assert rows[1]["id"] == "fx:oil-002"
    assert rows[1]["cluster_id"] == "-1"
    assert rows[0]["embedding"] == "[0.1235, 1.0]"


def test_unknown_format(enriched):
    with pytest.raises(ValueError):
        render_records(enriched, "xml")


def test_export_writes_file(enriched, tmp_path):
    path = export_records(enriched, tmp_path / "nested" / "out.csv", "csv")
    assert path.exists()
    assert path.read_text(encoding="utf-8").startswith('"id"')


def test_empty_export():
    assert json.loads(render_records([], "json")) == []
