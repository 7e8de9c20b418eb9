from __future__ import annotations

from skills_server.categories import (
    display_category,
    group_by_display_category,
    infer_category,
    normalize_category,
)
from skills_server.config import SkillRecord


def _skill(sid: str, category: str, name: str = "Zzz", description: str = "") -> SkillRecord:
    return SkillRecord(id=sid, name=name, category=category, description=description)


def test_normalize_category() -> None:
    assert normalize_category("Security") == "security"
    assert normalize_category(" AI-ML ") == "data-ai"
    assert normalize_category("devops") == "infrastructure"
    assert normalize_category("") == "uncategorized"
    assert normalize_category("something-new") is None


def test_infer_category_first_rule_wins() -> None:
    assert infer_category("pentest your kubernetes cluster") == "security"
    assert infer_category("Deploy to AWS") == "infrastructure"
    assert infer_category("quiet contemplation") is None


def test_display_category_policy() -> None:
    assert display_category(_skill("1", "qa")) == "testing"
    assert display_category(_skill("2", "something-new", name="Kubernetes Deploy Helper")) == "infrastructure"
    assert display_category(_skill("3", "", description="Unity level design")) == "game-development"
    assert display_category(_skill("4", "something-new")) == "uncategorized"


def test_display_category_is_a_view() -> None:
    rec = _skill("x", "legacy-thing", name="Terraform Modules")
    assert display_category(rec) == "infrastructure"
    assert rec.category == "legacy-thing"


def test_group_by_display_category_orders_by_size() -> None:
    groups = group_by_display_category([
        _skill("a", "sec"),
        _skill("b", "frontend"),
        _skill("c", "backend"),
    ])
    assert list(groups) == ["development", "security"]
    assert [r.id for r in groups["development"]] == ["b", "c"]


def test_inference_ignores_author_and_unicode() -> None:
    assert infer_category("notes for the author") is None
    assert infer_category("unicode decode tables") is None
    assert infer_category("OAuth login flow") == "security"
    assert infer_category("Authentication middleware") == "security"
    assert infer_category("coding conventions") == "development"
