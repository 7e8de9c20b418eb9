from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from skills_server.catalog import Catalog
from skills_server.cli import load_queries, main, rank_batch, write_two_column_csv


def test_rank_batch_keeps_duplicates_in_order(sample_catalog: Catalog) -> None:
    preds = rank_batch(sample_catalog, ["security api", "react", "security api"], top_k=3)
    assert list(preds) == ["security api", "react"]
    assert preds["security api"] == ["b"]
    assert preds["react"] == ["a"]


def test_load_queries_and_write_csv(tmp_path: Path) -> None:
    src = tmp_path / "queries.csv"
    pd.DataFrame({"query": ["  secure   api ", None]}).to_csv(src, index=False)
    assert load_queries(src) == ["secure api", ""]

    out = tmp_path / "out" / "preds.csv"
    write_two_column_csv({"secure api": ["b", "c"], "": []}, out)
    df = pd.read_csv(out)
    assert list(df.columns) == ["Query", "Skill_id"]
    assert df["Skill_id"].tolist() == ["b", "c"]


def test_load_queries_requires_query_column(tmp_path: Path) -> None:
    src = tmp_path / "bad.csv"
    pd.DataFrame({"text": ["x"]}).to_csv(src, index=False)
    with pytest.raises(ValueError):
        load_queries(src)


def test_rank_command_prints_hits(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    index = tmp_path / "skills_index.json"
    index.write_text(json.dumps([
        {"id": "api-security", "name": "API Security", "category": "security"},
        {"id": "react-patterns", "name": "React Patterns", "category": "frontend"},
    ]), encoding="utf-8")

    assert main(["rank", "--index", str(index), "security"]) == 0
    out = capsys.readouterr().out
    assert "api-security" in out
    assert "react-patterns" not in out

    assert main(["rank", "--index", str(index), "xyzzy"]) == 0
    assert "No matching skills." in capsys.readouterr().out
