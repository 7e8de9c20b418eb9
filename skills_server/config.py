from __future__ import annotations
"""
Configuration for the skills MCP server.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Paths
PROJECT_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = PROJECT_ROOT / "data"
SKILLS_INDEX_PATH = DATA_DIR / "skills_index.json"
SKILLS_REPO_DIRNAME = "antigravity-awesome-skills"
SKILL_FILENAME = "SKILL.md"


def _env_path(name: str) -> Optional[Path]:
    raw = os.getenv(name, "").strip()
    return Path(raw).expanduser() if raw else None


def index_candidate_paths() -> List[Path]:
    """Ordered locations probed for the pre-built skills index."""
    cwd = Path.cwd()
    paths: List[Path] = []
    override = _env_path("SKILLS_INDEX_PATH")
    if override is not None:
        paths.append(override)
    paths += [
        SKILLS_INDEX_PATH,
        PROJECT_ROOT.parent / SKILLS_REPO_DIRNAME / "skills_index.json",
        cwd / "skills_index.json",
        cwd / SKILLS_REPO_DIRNAME / "skills_index.json",
    ]
    return paths


def skill_root_candidates() -> List[Path]:
    """Ordered roots under which ``<path>/SKILL.md`` is looked up."""
    cwd = Path.cwd()
    roots: List[Path] = []
    override = _env_path("SKILLS_ROOT")
    if override is not None:
        roots.append(override)
    roots += [
        PROJECT_ROOT.parent / SKILLS_REPO_DIRNAME,
        cwd / SKILLS_REPO_DIRNAME,
        cwd,
    ]
    return roots


# Server identity
SERVER_NAME = "antigravity-skills"
SERVER_VERSION = "1.0.0"
LOG_LEVEL = os.getenv("SKILLS_LOG_LEVEL", "INFO").upper()

# Upstream repository (source links + clone hint)
SKILLS_REPO_URL = "https://github.com/Abderraouf-yt/antigravity-awesome-skills"
SKILLS_REPO_BRANCH = "main"
SKILLS_RAW_BASE = "https://raw.githubusercontent.com/Abderraouf-yt/antigravity-awesome-skills"

# Remote content fetch is opt-in
REMOTE_FETCH_ENABLED = os.getenv("SKILLS_REMOTE_FETCH", "0") == "1"

# HTTP hardening
HTTP_CONNECT_TIMEOUT = 3.0
HTTP_READ_TIMEOUT = 7.0
HTTP_MAX_REDIRECTS = 2
HTTP_MAX_BYTES = 1_000_000
HTTP_USER_AGENT = "skills-mcp-server/1.0 (+https://github.com/Abderraouf-yt/skills-mcp-server)"

# Ranking
MIN_TOKEN_LENGTH = 3
NAME_WEIGHT = 5
CATEGORY_WEIGHT = 3
PATH_WEIGHT = 2
DESCRIPTION_WEIGHT = 1
AUTO_SKILL_TOP_K = 3
SEARCH_TOP_K = 3

# Listing / search limits
LIST_DEFAULT_LIMIT = 50
SEARCH_DEFAULT_LIMIT = 20
LIST_DESCRIPTION_CHARS = 150
SEARCH_DESCRIPTION_CHARS = 200
CATEGORY_PREVIEW_SIZE = 10
UNCATEGORIZED = "uncategorized"

# Text processing
MAX_INPUT_CHARS = 20_000

RISK_LEVELS = ("low", "medium", "high", "safe", "unknown")

# Workflow action verbs; first matching rule wins.
# (field, substring, verb)
ACTION_VERB_RULES: List[Tuple[str, str, str]] = [
    ("category", "security", "Audit & Secure"),
    ("category", "test", "Verify"),
    ("category", "arch", "Design"),
    ("name", "setup", "Configure"),
]
DEFAULT_ACTION_VERB = "Apply"

# Goal keyword table for cold-start workflow hints, scanned in order.
# (keywords, skill, action, reason)
WORKFLOW_KEYWORD_RULES: List[Tuple[Tuple[str, ...], str, str, str]] = [
    (("api", "backend"), "api-design-principles", "design", "Define API structure and endpoints"),
    (("web", "frontend"), "react-best-practices", "design", "Plan component architecture"),
    (("security", "secure"), "api-security-best-practices", "audit", "Security requirements analysis"),
    # no bare "ts": substring matching would hit "tests"
    (("typescript",), "typescript-expert", "implement", "TypeScript implementation patterns"),
    (("python",), "python-pro", "implement", "Python implementation patterns"),
    (("react",), "react-patterns", "implement", "React component patterns"),
    (("next", "nextjs"), "nextjs-best-practices", "implement", "Next.js app structure"),
    (("api",), "api-documentation-generator", "document", "Generate API docs"),
]
PLANNING_STEP = ("brainstorming", "plan", "Start with ideation and planning")
TESTING_STEP = ("testing-patterns", "test", "Unit and integration testing")

# Display categories
CANONICAL_CATEGORIES: List[str] = [
    "security",
    "general",
    "data-ai",
    "development",
    "infrastructure",
    "architecture",
    "business",
    "testing",
    "game-development",
    UNCATEGORIZED,
]

LEGACY_CATEGORY_MAP: Dict[str, str] = {
    "ai": "data-ai",
    "ai-ml": "data-ai",
    "ai/ml": "data-ai",
    "ml": "data-ai",
    "data": "data-ai",
    "data-science": "data-ai",
    "llm": "data-ai",
    "agents": "data-ai",
    "dev": "development",
    "coding": "development",
    "frontend": "development",
    "backend": "development",
    "web": "development",
    "web-development": "development",
    "mobile": "development",
    "devops": "infrastructure",
    "cloud": "infrastructure",
    "infra": "infrastructure",
    "ops": "infrastructure",
    "arch": "architecture",
    "design-patterns": "architecture",
    "system-design": "architecture",
    "sec": "security",
    "cybersecurity": "security",
    "offensive-security": "security",
    "test": "testing",
    "tests": "testing",
    "qa": "testing",
    "game": "game-development",
    "gamedev": "game-development",
    "game-dev": "game-development",
    "marketing": "business",
    "product": "business",
    "startup": "business",
    "misc": "general",
    "other": "general",
    "docs": "general",
    "": UNCATEGORIZED,
    "none": UNCATEGORIZED,
}

# Free text -> category, first match wins.
CATEGORY_INFERENCE_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("security", "pentest", "vulnerab", "owasp", "exploit", "authenticat", "oauth", "threat"), "security"),
    (("test", "qa ", "playwright", "jest", "cypress", "tdd"), "testing"),
    (("architect", "design pattern", "microservice", "domain-driven", "system design"), "architecture"),
    (("docker", "kubernetes", "terraform", "aws", "azure", "gcp", "deploy", "ci/cd", "devops", "cloud"), "infrastructure"),
    (("machine learning", "llm", "prompt", "embedding", "retrieval", "agent", "data", "neural", "analytics"), "data-ai"),
    (("game", "unity", "godot", "unreal"), "game-development"),
    (("marketing", "seo", "sales", "startup", "business", "pricing", "product manag"), "business"),
    (("react", "python", "typescript", "javascript", "frontend", "backend", "api", "rust", "golang", "coding"), "development"),
]
DEFAULT_DISPLAY_CATEGORY = UNCATEGORIZED

# Verified skills overlay (id -> (trust score, source))
TRUSTED_SKILLS: Dict[str, Tuple[float, str]] = {
    "frontend-design": (8.5, "anthropics/skills"),
    "vercel-react-best-practices": (9.6, "vercel-labs/agent-skills"),
    "skill-creator": (8.5, "anthropics/skills"),
    "pdf": (8.5, "anthropics/skills"),
    "senior-frontend": (8.9, "alirezarezvani/claude-skills"),
    "webapp-testing": (8.5, "anthropics/skills"),
    "web-artifacts-builder": (8.5, "anthropics/skills"),
    "mcp-builder": (8.5, "anthropics/skills"),
    "web-design-guidelines": (9.6, "vercel-labs/agent-skills"),
    "canvas-design": (8.5, "anthropics/skills"),
    "algorithmic-art": (8.5, "anthropics/skills"),
    "brand-guidelines": (8.5, "anthropics/skills"),
    "doc-coauthoring": (8.5, "anthropics/skills"),
    "docx": (8.5, "anthropics/skills"),
    "internal-comms": (8.5, "anthropics/skills"),
    "pptx": (8.5, "anthropics/skills"),
    "slack-gif-creator": (8.5, "anthropics/skills"),
    "theme-factory": (8.5, "anthropics/skills"),
    "xlsx": (8.5, "anthropics/skills"),
}

# Sandbox scenarios for `skills-mcp-server simulate`
SIMULATION_SCENARIOS: List[str] = [
    "I need to build a secure React frontend with authentication",
    "How do I optimize my Python backend API performance?",
    "Setup a CI/CD pipeline for a Next.js app on AWS",
]


# Pydantic schemas
class SkillRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    category: str = ""
    path: Optional[str] = None
    risk: str = "unknown"
    source: str = ""
    trust_score: Optional[float] = Field(default=None, alias="trustScore")

    @field_validator("risk", mode="before")
    @classmethod
    def _coerce_risk(cls, v):
        v = str(v or "").strip().lower()
        return v if v in RISK_LEVELS else "unknown"

    @field_validator("name", "description", "category", "source", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else str(v)

    @field_validator("path", mode="before")
    @classmethod
    def _blank_path_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class WorkflowStep(BaseModel):
    ordinal: int = Field(ge=1)
    action_verb: str
    record_name: str
    description: str
    rationale: str


class SuggestedStep(BaseModel):
    skill_name: str
    action_verb: str
    rationale: str


class ToolResult(BaseModel):
    text: str
    is_error: bool = False


class HealthResponse(BaseModel):
    status: str
    skills: int
