from __future__ import annotations

import json
from pathlib import Path

import pytest

from skills_server import content, tools
from skills_server.catalog import Catalog
from skills_server.config import SkillRecord


@pytest.fixture
def skills_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    d = tmp_path / "skills" / "api-security"
    d.mkdir(parents=True)
    (d / "SKILL.md").write_text("# API Security\n\nAlways validate tokens.", encoding="utf-8")
    monkeypatch.setattr(content, "skill_root_candidates", lambda: [tmp_path])
    return tmp_path


def test_get_skill_known_and_unknown(pathed_catalog: Catalog) -> None:
    ok = tools.get_skill(pathed_catalog, "b")
    assert not ok.is_error
    detail = json.loads(ok.text)
    assert detail["id"] == "b"
    assert detail["sourceUrl"].endswith("skills/api-security")

    missing = tools.get_skill(pathed_catalog, "nope")
    assert missing.is_error
    assert 'Skill "nope" not found' in missing.text


def test_list_skills_truncates_descriptions() -> None:
    catalog = Catalog([SkillRecord(id="long", name="Long", category="dev", description="x" * 200)])
    payload = json.loads(tools.list_skills(catalog).text)
    assert payload["total"] == 1
    assert payload["returned"] == 1
    assert payload["offset"] == 0
    assert payload["skills"][0]["description"] == "x" * 150 + "..."


def test_search_and_categories(sample_catalog: Catalog) -> None:
    found = json.loads(tools.search_skills(sample_catalog, "patterns").text)
    assert found["count"] == 2
    assert [s["id"] for s in found["skills"]] == ["a", "c"]

    cats = json.loads(tools.get_categories(sample_catalog).text)
    assert cats["totalSkills"] == 4
    assert cats["totalCategories"] == 4


def test_suggest_workflow_payload() -> None:
    payload = json.loads(tools.suggest_workflow("").text)
    assert [s["skill"] for s in payload["workflow"]] == ["brainstorming", "testing-patterns"]
    assert payload["totalSteps"] == 2


def test_skill_content_reads_file_or_falls_back(pathed_catalog: Catalog, skills_root: Path) -> None:
    found = tools.get_skill_content(pathed_catalog, "b")
    assert not found.is_error
    assert "Always validate tokens." in found.text

    fallback = tools.get_skill_content(pathed_catalog, "c")
    assert not fallback.is_error
    assert "Skill file not found locally" in fallback.text

    missing = tools.get_skill_content(pathed_catalog, "zzz")
    assert missing.is_error


def test_auto_skill_injects_top_matches(pathed_catalog: Catalog, skills_root: Path) -> None:
    result = tools.auto_skill(pathed_catalog, "security api")
    assert not result.is_error
    assert 'Based on your task: "security api"' in result.text
    assert "## API Security" in result.text
    assert "**Risk Level:** high" in result.text
    assert "Always validate tokens." in result.text


def test_auto_skill_without_matches_is_not_an_error(sample_catalog: Catalog) -> None:
    for catalog in (sample_catalog, Catalog()):
        result = tools.auto_skill(catalog, "quantum knitting")
        assert not result.is_error
        assert "No Specific Skills Matched" in result.text


def test_plan_workflow(sample_catalog: Catalog) -> None:
    payload = json.loads(tools.plan_workflow(sample_catalog, "security patterns").text)
    assert [(m["id"], m["score"]) for m in payload["matches"]] == [("b", 8), ("a", 5), ("c", 5)]
    assert [s["action_verb"] for s in payload["workflow"]] == ["Audit & Secure", "Apply", "Verify"]
    assert payload["workflow"][0]["ordinal"] == 1


def test_unexpected_errors_become_error_results() -> None:
    class Broken:
        def page(self, **kwargs):
            raise RuntimeError("disk on fire")

    result = tools.list_skills(Broken())
    assert result.is_error
    assert "disk on fire" in result.text


def test_undecodable_skill_file_degrades_to_fallback(pathed_catalog: Catalog, skills_root: Path) -> None:
    (skills_root / "skills" / "api-security" / "SKILL.md").write_bytes(b"# API \xff\xfe Security\n")

    content_result = tools.get_skill_content(pathed_catalog, "b")
    assert not content_result.is_error
    assert "Skill file not found locally" in content_result.text

    auto = tools.auto_skill(pathed_catalog, "security api")
    assert not auto.is_error
    assert "## API Security" in auto.text
