from __future__ import annotations

"""
The skills catalog: loading, lookup and the index builder.

At runtime the catalog is an immutable, in-memory sequence of
:class:`~skills_server.config.SkillRecord` loaded once from the
pre-built ``skills_index.json``.  If no index can be found the server
still starts with an empty catalog; every downstream operation then
returns empty results.

The builder half of this module walks a checkout of the skills
repository, reads the YAML front matter of every ``SKILL.md``, cleans
the fields and writes the JSON index the loader consumes.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import pandas as pd
import yaml
from loguru import logger
from pydantic import ValidationError

from .config import (
    CATEGORY_PREVIEW_SIZE,
    LIST_DEFAULT_LIMIT,
    SEARCH_DEFAULT_LIMIT,
    SKILL_FILENAME,
    SKILLS_INDEX_PATH,
    TRUSTED_SKILLS,
    UNCATEGORIZED,
    SkillRecord,
    index_candidate_paths,
)
from .normalize import basic_clean


class Catalog:
    """Read-only collection of skill records in index order."""

    def __init__(self, records: Iterable[SkillRecord] = ()):
        self._records: Tuple[SkillRecord, ...] = tuple(records)
        by_id: Dict[str, SkillRecord] = {}
        for r in self._records:
            by_id.setdefault(r.id, r)
        self._by_id = by_id

    def __iter__(self) -> Iterator[SkillRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    @property
    def records(self) -> Tuple[SkillRecord, ...]:
        return self._records

    def get(self, skill_id: str) -> Optional[SkillRecord]:
        """Exact id match first, then exact display-name match."""
        if not skill_id:
            return None
        hit = self._by_id.get(skill_id)
        if hit is not None:
            return hit
        for r in self._records:
            if r.name == skill_id:
                return r
        return None

    def page(
        self,
        category: Optional[str] = None,
        limit: int = LIST_DEFAULT_LIMIT,
        offset: int = 0,
    ) -> Tuple[int, List[SkillRecord]]:
        """Category substring filter then pagination; returns ``(total, page)``."""
        filtered: Sequence[SkillRecord] = self._records
        if category:
            needle = category.lower()
            filtered = [r for r in self._records if needle in r.category.lower()]
        offset = max(0, int(offset))
        limit = max(0, int(limit))
        return len(filtered), list(filtered[offset:offset + limit])

    def search(self, query: str, limit: int = SEARCH_DEFAULT_LIMIT) -> List[SkillRecord]:
        """Plain substring search over name, description and id.

        This is the simple listing filter, not the weighted ranker.
        """
        if not query:
            return []
        q = query.lower()
        hits = [
            r for r in self._records
            if q in r.name.lower() or q in r.description.lower() or q in r.id.lower()
        ]
        return hits[: max(0, int(limit))]

    def category_stats(self, preview: int = CATEGORY_PREVIEW_SIZE) -> List[dict]:
        """Raw categories with counts and the first few ids, largest first."""
        groups: Dict[str, List[str]] = {}
        for r in self._records:
            groups.setdefault(r.category or UNCATEGORIZED, []).append(r.id)
        stats = [
            {"name": name, "count": len(ids), "skills": ids[:preview]}
            for name, ids in groups.items()
        ]
        stats.sort(key=lambda s: -s["count"])
        return stats


# ---------------------------
# Loading
# ---------------------------

def _records_from_payload(payload, source: Path) -> List[SkillRecord]:
    if isinstance(payload, dict):
        payload = payload.get("skills", [])
    if not isinstance(payload, list):
        logger.warning("Skills index {} is not a list of records; ignoring", source)
        return []

    records: List[SkillRecord] = []
    seen: set[str] = set()
    for i, raw in enumerate(payload):
        try:
            rec = SkillRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning("Skipping invalid skill record #{} in {}: {}", i, source, e.errors()[:1])
            continue
        if rec.id in seen:
            logger.warning("Duplicate skill id {} in {}; keeping the first", rec.id, source)
            continue
        seen.add(rec.id)
        records.append(rec)
    return records


def load_catalog(path: Optional[Path] = None) -> Catalog:
    """
    Load the skills index into a :class:`Catalog`.

    With no explicit ``path`` the configured candidate locations are
    probed in order.  A missing or unreadable index yields an empty
    catalog and a warning; this never raises.
    """
    candidates = [Path(path)] if path is not None else index_candidate_paths()
    for p in candidates:
        if not p.is_file():
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read skills index {}: {}", p, e)
            continue
        records = _records_from_payload(payload, p)
        logger.info("Loaded {} skills from {}", len(records), p)
        return Catalog(records)

    logger.warning(
        "Skills data not found (looked in {}). Starting with an empty catalog.",
        ", ".join(str(c) for c in candidates),
    )
    return Catalog()


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Process-wide catalog, loaded on first use."""
    return load_catalog()


# ---------------------------
# Index building
# ---------------------------

INDEX_COLUMNS = ["id", "path", "category", "name", "description", "risk", "source", "trustScore"]


def parse_frontmatter(text: str) -> Tuple[dict, str]:
    """Split ``---`` delimited YAML front matter from the markdown body."""
    lines = text.splitlines()
    if len(lines) < 2 or lines[0].strip() != "---":
        return {}, text
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            try:
                meta = yaml.safe_load("\n".join(lines[1:i])) or {}
            except yaml.YAMLError as e:
                logger.warning("Bad front matter: {}", e)
                return {}, text
            if not isinstance(meta, dict):
                return {}, text
            return meta, "\n".join(lines[i + 1:]).strip()
    return {}, text


def read_skill_metadata(skill_file: Path, repo_root: Path) -> Optional[dict]:
    """One raw index row from a SKILL.md, or None when it has no front matter."""
    try:
        text = skill_file.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot read {}: {}", skill_file, e)
        return None
    meta, _body = parse_frontmatter(text)
    if not meta:
        logger.warning("No front matter in {}; skipping", skill_file)
        return None

    skill_dir = skill_file.parent
    skill_id = str(meta.get("id") or skill_dir.name).strip()
    return {
        "id": skill_id,
        "path": skill_dir.relative_to(repo_root).as_posix(),
        "category": str(meta.get("category") or UNCATEGORIZED),
        "name": str(meta.get("name") or skill_id),
        "description": str(meta.get("description") or ""),
        "risk": str(meta.get("risk") or "unknown"),
        "source": str(meta.get("source") or "community"),
    }


def apply_trust_overlay(df: pd.DataFrame) -> pd.DataFrame:
    """Mark verified skills safe and stamp their trust score and source."""
    df = df.copy()
    if "trustScore" not in df.columns:
        df["trustScore"] = None
    mask = df["id"].isin(list(TRUSTED_SKILLS))
    if mask.any():
        df.loc[mask, "risk"] = "safe"
        df.loc[mask, "source"] = df.loc[mask, "id"].map(lambda i: TRUSTED_SKILLS[i][1])
        df.loc[mask, "trustScore"] = df.loc[mask, "id"].map(lambda i: TRUSTED_SKILLS[i][0])
    logger.info("Trust overlay updated {} skills", int(mask.sum()))
    return df


def normalise_index_df(df_raw: pd.DataFrame) -> pd.DataFrame:
    """
    Clean a raw index frame into the canonical schema.

    - ids trimmed, blank ids dropped, duplicates dropped (first wins)
    - name / description cleaned with :func:`basic_clean`
    - category and risk lowercased
    - trust overlay applied
    """
    if df_raw.empty:
        return pd.DataFrame(columns=INDEX_COLUMNS)

    df = df_raw.copy()
    df["id"] = df["id"].astype(str).str.strip()
    df = df[df["id"] != ""]
    dupes = int(df["id"].duplicated().sum())
    if dupes:
        logger.warning("Dropping {} duplicate skill ids", dupes)
    df = df.drop_duplicates(subset=["id"]).reset_index(drop=True)

    df["name"] = df["name"].fillna("").astype(str).apply(basic_clean)
    df["description"] = df["description"].fillna("").astype(str).apply(basic_clean)
    df["category"] = df["category"].fillna("").astype(str).str.strip().str.lower()
    df["risk"] = df["risk"].fillna("unknown").astype(str).str.strip().str.lower()

    df = apply_trust_overlay(df)
    return df[INDEX_COLUMNS]


def build_index(repo_root: Path, output_path: Path = SKILLS_INDEX_PATH) -> Path:
    """
    End-to-end: scan ``**/SKILL.md`` under ``repo_root`` → normalise →
    write the JSON index.  Returns the output path.
    """
    repo_root = Path(repo_root).resolve()
    rows = []
    for skill_file in sorted(repo_root.rglob(SKILL_FILENAME)):
        row = read_skill_metadata(skill_file, repo_root)
        if row is not None:
            rows.append(row)
    logger.info("Scanned {} skills under {}", len(rows), repo_root)

    df = normalise_index_df(pd.DataFrame(rows, columns=INDEX_COLUMNS[:-1]))

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_json(output_path, orient="records", indent=2, force_ascii=False)
    logger.info("Skills index written to {} with {} records", output_path, len(df))
    return output_path
