from __future__ import annotations

from skills_server.catalog import Catalog
from skills_server.config import SkillRecord
from skills_server.ranker import rank, score_record


def _skill(sid: str, name: str, category: str = "misc", description: str = "", path: str | None = None) -> SkillRecord:
    return SkillRecord(id=sid, name=name, category=category, description=description, path=path)


def test_security_api_scenario(sample_catalog: Catalog) -> None:
    got = rank("security api", sample_catalog, top_k=3)
    assert [(h.record.id, h.score) for h in got] == [("b", 13)]


def test_empty_and_short_queries_match_nothing(sample_catalog: Catalog) -> None:
    assert rank("", sample_catalog, top_k=5) == []
    assert rank("ab", sample_catalog, top_k=5) == []
    assert rank("  ?? a b  ", sample_catalog, top_k=5) == []


def test_name_hit_counts_once_regardless_of_repetition() -> None:
    rec = _skill("x", "Docker docker DOCKER", category="misc")
    got = rank("docker", [rec], top_k=1)
    assert got[0].score == 5


def test_each_field_weight() -> None:
    assert score_record(_skill("x", "zzz", category="kubernetes"), ["kubernetes"]) == 3
    assert score_record(_skill("x", "zzz", path="skills/kubernetes-deploy"), ["kubernetes"]) == 2
    assert score_record(_skill("x", "zzz", description="kubernetes helm"), ["kubernetes"]) == 1
    everywhere = _skill("x", "kube", category="kube", description="kube", path="kube")
    assert score_record(everywhere, ["kube"]) == 11


def test_stable_ties_and_top_k() -> None:
    records = [_skill(f"s{i}", f"Pricing helper {i}") for i in range(6)]
    got = rank("pricing", records, top_k=3)
    assert [h.record.id for h in got] == ["s0", "s1", "s2"]
    assert all(h.score == 5 for h in got)


def test_results_sorted_non_increasing() -> None:
    records = [
        _skill("low", "zzz", description="python"),
        _skill("high", "Python Pro", category="python"),
        _skill("mid", "Python Basics"),
    ]
    got = rank("python", records, top_k=10)
    assert [h.record.id for h in got] == ["high", "mid", "low"]
    scores = [h.score for h in got]
    assert scores == sorted(scores, reverse=True)


def test_token_order_does_not_change_scores(sample_catalog: Catalog) -> None:
    a = {h.record.id: h.score for h in rank("react api design", sample_catalog, top_k=10)}
    b = {h.record.id: h.score for h in rank("design api react", sample_catalog, top_k=10)}
    assert a == b


def test_compound_terms_keep_inner_hyphen() -> None:
    rec = _skill("tg", "Thought-Graph Reasoning")
    got = rank("use (thought-graph), please", [rec], top_k=1)
    assert got[0].score == 5


def test_top_k_larger_than_matches_returns_all(sample_catalog: Catalog) -> None:
    got = rank("patterns", sample_catalog, top_k=50)
    assert [h.record.id for h in got] == ["a", "c"]


def test_empty_catalog_and_zero_top_k(sample_catalog: Catalog) -> None:
    assert rank("security", Catalog(), top_k=3) == []
    assert rank("security", sample_catalog, top_k=0) == []


def test_path_hits_add_to_the_scenario_score(pathed_catalog: Catalog) -> None:
    got = rank("security api", pathed_catalog, top_k=3)
    assert [(h.record.id, h.score) for h in got] == [("b", 17)]
