"""
FastMCP stdio server exposing the skills catalog to agent clients.

Tools: list_skills, get_skill, search_skills, get_categories,
suggest_workflow, get_skill_content, plan_workflow.
Prompt: auto_skill (ranks the catalog for a task and injects the best
matching skills).
Resources: skill://catalog, skill://categories.

Run with ``skills-mcp-server serve`` or ``python -m skills_server.mcp_server``.
"""

from __future__ import annotations

from typing import Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from loguru import logger

from . import tools
from .catalog import get_catalog
from .config import LIST_DEFAULT_LIMIT, SEARCH_DEFAULT_LIMIT, SERVER_NAME, ToolResult
from .mapping import to_json

mcp = FastMCP(
    name=SERVER_NAME,
    instructions=(
        "Catalog of expert skills. Call auto_skill with your task to inject the "
        "most relevant skills, or browse with list_skills / search_skills."
    ),
)


def _unwrap(result: ToolResult) -> str:
    if result.is_error:
        raise ToolError(result.text)
    return result.text


@mcp.tool(
    name="list_skills",
    description="List available skills with optional filtering by category. Returns skill IDs, names, and descriptions.",
)
def list_skills(category: Optional[str] = None, limit: int = LIST_DEFAULT_LIMIT, offset: int = 0) -> str:
    return _unwrap(tools.list_skills(get_catalog(), category=category, limit=limit, offset=offset))


@mcp.tool(
    name="get_skill",
    description="Get full details about a specific skill including its path, source, and complete description.",
)
def get_skill(skillId: str) -> str:
    return _unwrap(tools.get_skill(get_catalog(), skillId))


@mcp.tool(
    name="search_skills",
    description="Search skills by name or description. Returns matching skills.",
)
def search_skills(query: str, limit: int = SEARCH_DEFAULT_LIMIT) -> str:
    return _unwrap(tools.search_skills(get_catalog(), query, limit=limit))


@mcp.tool(
    name="get_categories",
    description="Get all skill categories with counts and sample skills. Useful for exploring available capabilities.",
)
def get_categories() -> str:
    return _unwrap(tools.get_categories(get_catalog()))


@mcp.tool(
    name="suggest_workflow",
    description="Suggest a sequence of skills to accomplish a goal. Provides step-by-step guidance using relevant skills.",
)
def suggest_workflow(goal: str) -> str:
    return _unwrap(tools.suggest_workflow(goal))


@mcp.tool(
    name="get_skill_content",
    description="Read the full SKILL.md content for a specific skill. Returns the complete instructions and guidance.",
)
def get_skill_content(skillId: str) -> str:
    return _unwrap(tools.get_skill_content(get_catalog(), skillId))


@mcp.tool(
    name="plan_workflow",
    description="Rank the catalog for a goal and turn the best matches into ordered action steps.",
)
def plan_workflow(goal: str) -> str:
    return _unwrap(tools.plan_workflow(get_catalog(), goal))


@mcp.prompt(
    name="auto_skill",
    description="Auto-detect the skills relevant to a task and inject their full instructions.",
)
def auto_skill(task: str) -> str:
    return _unwrap(tools.auto_skill(get_catalog(), task))


@mcp.resource(
    "skill://catalog",
    name="catalog",
    description="Complete catalog of all available skills",
    mime_type="application/json",
)
def catalog_resource() -> str:
    catalog = get_catalog()
    return to_json({
        "totalSkills": len(catalog),
        "categories": catalog.category_stats(),
        "skills": [{"id": r.id, "name": r.name, "category": r.category} for r in catalog],
    })


@mcp.resource(
    "skill://categories",
    name="categories",
    description="Category breakdown with counts",
    mime_type="application/json",
)
def categories_resource() -> str:
    return to_json(get_catalog().category_stats())


def run() -> None:
    catalog = get_catalog()
    logger.info("{} MCP server running on stdio", SERVER_NAME)
    logger.info("Loaded {} skills", len(catalog))
    mcp.run()


if __name__ == "__main__":
    run()
