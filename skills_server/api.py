from __future__ import annotations

"""
FastAPI backend for the skills browsing site.

- /search runs the weighted ranker and the workflow synthesizer; the
  page calls it on every (debounced) keystroke
- /categories groups skills by derived display category
- /skills, /skills/{id}, /skills/{id}/content mirror the MCP tools
"""

import json

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from . import tools
from .catalog import Catalog, get_catalog
from .categories import group_by_display_category
from .config import (
    LIST_DEFAULT_LIMIT,
    SEARCH_TOP_K,
    SERVER_NAME,
    HealthResponse,
    ToolResult,
)
from .mapping import to_list_item, to_scored_item
from .ranker import rank
from .workflow import synthesize

app = FastAPI(title=SERVER_NAME)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def current_catalog() -> Catalog:
    return get_catalog()


@app.on_event("startup")
def startup_event() -> None:
    logger.info("Starting app warmup...")
    catalog = get_catalog()
    logger.info("Catalog ready with {} skills", len(catalog))


def _payload(result: ToolResult, status_code: int = 500):
    if result.is_error:
        raise HTTPException(status_code=status_code, detail=result.text)
    return json.loads(result.text)


@app.get("/health", response_model=HealthResponse)
def health(catalog: Catalog = Depends(current_catalog)) -> HealthResponse:
    return HealthResponse(status="healthy", skills=len(catalog))


@app.get("/skills")
def list_skills(
    category: str | None = None,
    limit: int = Query(LIST_DEFAULT_LIMIT, ge=0, le=1000),
    offset: int = Query(0, ge=0),
    catalog: Catalog = Depends(current_catalog),
):
    return _payload(tools.list_skills(catalog, category=category, limit=limit, offset=offset))


@app.get("/skills/{skill_id}")
def get_skill(skill_id: str, catalog: Catalog = Depends(current_catalog)):
    return _payload(tools.get_skill(catalog, skill_id), status_code=404)


@app.get("/skills/{skill_id}/content")
def get_skill_content(skill_id: str, catalog: Catalog = Depends(current_catalog)):
    result = tools.get_skill_content(catalog, skill_id)
    if result.is_error:
        raise HTTPException(status_code=404, detail=result.text)
    return {"id": skill_id, "content": result.text}


@app.get("/search")
def search(
    q: str = "",
    top_k: int = Query(SEARCH_TOP_K, ge=1, le=50),
    catalog: Catalog = Depends(current_catalog),
):
    hits = rank(q, catalog, top_k=top_k)
    steps = synthesize(q, [h.record for h in hits])
    return {
        "query": q,
        "results": [to_scored_item(h) for h in hits],
        "workflow": [s.model_dump() for s in steps],
    }


@app.get("/categories")
def categories(catalog: Catalog = Depends(current_catalog)):
    groups = group_by_display_category(catalog)
    return {
        "totalSkills": len(catalog),
        "categories": [
            {"name": name, "count": len(records), "skills": [to_list_item(r) for r in records]}
            for name, records in groups.items()
        ],
    }


class WorkflowRequest(BaseModel):
    goal: str = Field(default="", max_length=2000)


@app.post("/workflow/suggest")
def workflow_suggest(req: WorkflowRequest):
    return _payload(tools.suggest_workflow(req.goal.strip()))
