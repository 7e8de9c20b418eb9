from __future__ import annotations

import pytest

from skills_server.catalog import Catalog
from skills_server.config import SkillRecord


@pytest.fixture
def sample_catalog() -> Catalog:
    return Catalog([
        SkillRecord(id="a", name="React Patterns", category="frontend", description="component design"),
        SkillRecord(id="b", name="API Security", category="security", description="auth review", risk="high"),
        SkillRecord(id="c", name="Testing Patterns", category="testing", description="unit and e2e tests", risk="low"),
        SkillRecord(id="d", name="Project Setup", category="", description="bootstrap a new repo"),
    ])


@pytest.fixture
def pathed_catalog(sample_catalog: Catalog) -> Catalog:
    """The sample records with upstream folders, for content lookups."""
    paths = {"b": "skills/api-security", "c": "skills/testing-patterns"}
    return Catalog([r.model_copy(update={"path": paths.get(r.id)}) for r in sample_catalog])
