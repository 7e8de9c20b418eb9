from __future__ import annotations

"""
Tool handlers shared by the MCP server, the HTTP API and the CLI.

Every handler takes the catalog explicitly, returns a
:class:`~skills_server.config.ToolResult` (a single text payload plus an
error flag) and never raises: unknown ids come back as a not-found
result with ``is_error`` set, and anything unexpected is logged and
reported the same way.
"""

import functools
from typing import Callable, Optional

from loguru import logger

from .catalog import Catalog
from .config import (
    AUTO_SKILL_TOP_K,
    LIST_DEFAULT_LIMIT,
    SEARCH_DEFAULT_LIMIT,
    ToolResult,
)
from .content import content_or_fallback
from .mapping import (
    render_auto_skill_context,
    render_no_match,
    to_detail,
    to_json,
    to_list_item,
    to_scored_item,
    to_search_item,
)
from .ranker import rank
from .workflow import suggest, synthesize


def _guarded(fn: Callable[..., ToolResult]) -> Callable[..., ToolResult]:
    @functools.wraps(fn)
    def wrapper(*args, **kwargs) -> ToolResult:
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            logger.exception("Tool {} failed: {}", fn.__name__, e)
            return ToolResult(text=f"{fn.__name__} failed: {e}", is_error=True)
    return wrapper


def not_found(skill_id: str, hint: bool = True) -> ToolResult:
    text = f'Skill "{skill_id}" not found.'
    if hint:
        text += " Use list_skills to see available skills."
    return ToolResult(text=text, is_error=True)


@_guarded
def list_skills(
    catalog: Catalog,
    category: Optional[str] = None,
    limit: int = LIST_DEFAULT_LIMIT,
    offset: int = 0,
) -> ToolResult:
    total, page = catalog.page(category=category, limit=limit, offset=offset)
    return ToolResult(text=to_json({
        "total": total,
        "returned": len(page),
        "offset": offset,
        "skills": [to_list_item(r) for r in page],
    }))


@_guarded
def get_skill(catalog: Catalog, skill_id: str) -> ToolResult:
    record = catalog.get(skill_id)
    if record is None:
        return not_found(skill_id)
    return ToolResult(text=to_json(to_detail(record)))


@_guarded
def search_skills(catalog: Catalog, query: str, limit: int = SEARCH_DEFAULT_LIMIT) -> ToolResult:
    hits = catalog.search(query, limit=limit)
    return ToolResult(text=to_json({
        "query": query,
        "count": len(hits),
        "skills": [to_search_item(r) for r in hits],
    }))


@_guarded
def get_categories(catalog: Catalog) -> ToolResult:
    stats = catalog.category_stats()
    return ToolResult(text=to_json({
        "totalSkills": len(catalog),
        "totalCategories": len(stats),
        "categories": stats,
    }))


@_guarded
def suggest_workflow(goal: str) -> ToolResult:
    steps = suggest(goal)
    return ToolResult(text=to_json({
        "goal": goal,
        "workflow": [
            {"skill": s.skill_name, "action": s.action_verb, "reason": s.rationale}
            for s in steps
        ],
        "totalSteps": len(steps),
        "reasoning": (
            f'Based on your goal "{goal}", I suggest following these '
            f"{len(steps)} steps using the available skills."
        ),
    }))


@_guarded
def get_skill_content(catalog: Catalog, skill_id: str) -> ToolResult:
    record = catalog.get(skill_id)
    if record is None:
        return not_found(skill_id, hint=False)
    return ToolResult(text=content_or_fallback(record))


@_guarded
def auto_skill(catalog: Catalog, task: str, top_k: int = AUTO_SKILL_TOP_K) -> ToolResult:
    """Rank the whole catalog for ``task`` and inject the top matches."""
    hits = rank(task, catalog, top_k=top_k)
    logger.info("auto_skill matched {} skills for task {!r}", len(hits), task)
    if not hits:
        return ToolResult(text=render_no_match(task))
    return ToolResult(text=render_auto_skill_context(task, hits))


@_guarded
def plan_workflow(catalog: Catalog, goal: str, top_k: int = AUTO_SKILL_TOP_K) -> ToolResult:
    """Ranked matches for ``goal`` turned into step-by-step actions."""
    hits = rank(goal, catalog, top_k=top_k)
    steps = synthesize(goal, [h.record for h in hits])
    return ToolResult(text=to_json({
        "goal": goal,
        "matches": [to_scored_item(h) for h in hits],
        "workflow": [s.model_dump() for s in steps],
        "totalSteps": len(steps),
    }))
