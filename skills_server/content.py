from __future__ import annotations

"""
Extended skill content (the full ``SKILL.md``) for a catalog record.

Content is looked up under each configured skills root as
``<root>/<record.path>/SKILL.md``.  When nothing is found locally and
``SKILLS_REMOTE_FETCH=1`` is set, the raw file is fetched from the
upstream repository with ``httpx``.  Callers that must always produce
text use :func:`content_or_fallback`, which falls back to a minimal
block synthesized from the record's own fields.
"""

import json
from pathlib import Path
from typing import Iterable, Optional

import httpx
from loguru import logger

from .config import (
    HTTP_CONNECT_TIMEOUT,
    HTTP_MAX_BYTES,
    HTTP_MAX_REDIRECTS,
    HTTP_READ_TIMEOUT,
    HTTP_USER_AGENT,
    REMOTE_FETCH_ENABLED,
    SKILL_FILENAME,
    SKILLS_RAW_BASE,
    SKILLS_REPO_BRANCH,
    SKILLS_REPO_URL,
    SkillRecord,
    skill_root_candidates,
)


def source_url(record: SkillRecord) -> Optional[str]:
    """Link to the skill folder in the upstream repository."""
    if not record.path:
        return None
    return f"{SKILLS_REPO_URL}/tree/{SKILLS_REPO_BRANCH}/{record.path.strip('/')}"


def _resolve_under(root: Path, rel: str) -> Optional[Path]:
    """``root/rel/SKILL.md`` if it stays inside ``root``."""
    try:
        root = root.resolve()
        candidate = (root / rel / SKILL_FILENAME).resolve()
    except OSError:
        return None
    if not candidate.is_relative_to(root):
        logger.warning("Rejecting skill path escaping {}: {}", root, rel)
        return None
    return candidate


def read_local_content(record: SkillRecord, roots: Optional[Iterable[Path]] = None) -> Optional[str]:
    if not record.path:
        return None
    for root in roots if roots is not None else skill_root_candidates():
        p = _resolve_under(Path(root), record.path)
        if p is None or not p.is_file():
            continue
        try:
            return p.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read {}: {}", p, e)
    return None


def fetch_remote_content(record: SkillRecord) -> Optional[str]:
    """
    Download the raw SKILL.md for ``record`` from the upstream repository.

    Uses timeouts, limited redirects and a size cap.  Any failure is
    logged and reported as ``None``.
    """
    if not record.path:
        return None
    url = f"{SKILLS_RAW_BASE}/{SKILLS_REPO_BRANCH}/{record.path.strip('/')}/{SKILL_FILENAME}"
    headers = {"User-Agent": HTTP_USER_AGENT}
    try:
        with httpx.Client(
            follow_redirects=True,
            timeout=httpx.Timeout(HTTP_READ_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT),
            max_redirects=HTTP_MAX_REDIRECTS,
        ) as client:
            r = client.get(url, headers=headers)
            if r.status_code >= 400:
                logger.warning("Skill fetch: HTTP {} for {}", r.status_code, url)
                return None
            if len(r.content) > HTTP_MAX_BYTES:
                logger.warning("Skill fetch aborted: {} bytes > {} limit", len(r.content), HTTP_MAX_BYTES)
                return None
            return r.text or None
    except httpx.TimeoutException:
        logger.warning("Skill fetch timeout for {}", url)
        return None
    except httpx.HTTPError as e:
        logger.warning("Skill fetch failed for {}: {}", url, e)
        return None


def read_skill_content(
    record: SkillRecord,
    roots: Optional[Iterable[Path]] = None,
    remote: bool = REMOTE_FETCH_ENABLED,
) -> Optional[str]:
    text = read_local_content(record, roots)
    if text is None and remote:
        text = fetch_remote_content(record)
    return text


def fallback_content(record: SkillRecord) -> str:
    info = json.dumps(record.model_dump(by_alias=True, exclude_none=True), indent=2, ensure_ascii=False)
    return (
        f"Skill file not found locally. Skill info:\n\n{info}\n\n"
        f"To get full content, clone the repository: git clone {SKILLS_REPO_URL}.git"
    )


def content_or_fallback(record: SkillRecord, roots: Optional[Iterable[Path]] = None) -> str:
    text = read_skill_content(record, roots)
    if text is None:
        logger.info("No SKILL.md for {}; using fallback block", record.id)
        return fallback_content(record)
    return text
