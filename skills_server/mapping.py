from __future__ import annotations

"""
Mapping utilities for tool and API payloads.

This module converts :class:`~skills_server.config.SkillRecord` objects
into the plain dicts returned to clients, and renders the context block
injected by the ``auto_skill`` prompt.  All shaping of outgoing data is
kept here so ``tools.py`` and ``api.py`` stay thin.
"""

import json
from typing import Any, Dict, Iterable, List, Optional

from .config import LIST_DESCRIPTION_CHARS, SEARCH_DESCRIPTION_CHARS, SkillRecord
from .content import content_or_fallback, source_url
from .ranker import ScoredRecord


def to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _ellipsize(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def to_list_item(record: SkillRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "description": _ellipsize(record.description, LIST_DESCRIPTION_CHARS),
        "category": record.category,
        "risk": record.risk,
    }


def to_search_item(record: SkillRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "description": record.description[:SEARCH_DESCRIPTION_CHARS],
        "category": record.category,
    }


def to_detail(record: SkillRecord) -> Dict[str, Any]:
    """Full record as published in the index, plus the upstream link."""
    out = record.model_dump(by_alias=True, exclude_none=True)
    url = source_url(record)
    if url:
        out["sourceUrl"] = url
    return out


def to_scored_item(hit: ScoredRecord) -> Dict[str, Any]:
    item = to_search_item(hit.record)
    item["risk"] = hit.record.risk
    item["score"] = hit.score
    return item


def render_skill_section(record: SkillRecord, body: str) -> str:
    return (
        f"## {record.name}\n\n"
        f"**Category:** {record.category or 'uncategorized'}\n"
        f"**Risk Level:** {record.risk or 'unknown'}\n\n"
        f"{body.strip()}"
    )


def render_auto_skill_context(task: str, hits: Iterable[ScoredRecord], bodies: Optional[List[str]] = None) -> str:
    """
    Concatenate the extended content of the matched skills into one
    text block.  ``bodies`` overrides the content lookup (one per hit).
    """
    hits = list(hits)
    if bodies is None:
        bodies = [content_or_fallback(h.record) for h in hits]
    sections = [render_skill_section(h.record, b) for h, b in zip(hits, bodies)]
    return (
        "# Skills Activated\n\n"
        f'Based on your task: "{task}"\n\n'
        "Apply these expert skills:\n\n"
        + "\n\n---\n\n".join(sections)
    )


def render_no_match(task: str) -> str:
    return (
        "# No Specific Skills Matched\n\n"
        f'No catalog skill matched your task: "{task}".\n\n'
        "Proceed with general best practices, or call list_skills / "
        "search_skills to browse the catalog."
    )
