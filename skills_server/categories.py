from __future__ import annotations

"""
Display categories for browsing.

The index carries whatever category string each skill was published
with, including legacy spellings ("ai-ml", "devops", "qa", ...).  For
grouping in the browsing UI we derive a canonical label per record:

1. a known canonical label is used as is;
2. a legacy spelling is collapsed through ``LEGACY_CATEGORY_MAP``;
3. anything else is inferred from the record text with the ordered
   ``CATEGORY_INFERENCE_RULES``;
4. if no rule matches, ``DEFAULT_DISPLAY_CATEGORY``.

This is a view only; the authoritative ``category`` field is never
touched.
"""

from typing import Dict, Iterable, List, Optional

from .config import (
    CANONICAL_CATEGORIES,
    CATEGORY_INFERENCE_RULES,
    DEFAULT_DISPLAY_CATEGORY,
    LEGACY_CATEGORY_MAP,
    UNCATEGORIZED,
    SkillRecord,
)


def normalize_category(raw: Optional[str]) -> Optional[str]:
    """Canonical label for a raw category, or None if it is unknown."""
    key = (raw or "").strip().lower()
    if key in CANONICAL_CATEGORIES:
        return key
    return LEGACY_CATEGORY_MAP.get(key)


def infer_category(text: str) -> Optional[str]:
    lowered = (text or "").lower()
    for keywords, label in CATEGORY_INFERENCE_RULES:
        if any(k in lowered for k in keywords):
            return label
    return None


def display_category(record: SkillRecord) -> str:
    label = normalize_category(record.category)
    # A blank or placeholder category still gets a chance at inference.
    if label is not None and label != UNCATEGORIZED:
        return label
    inferred = infer_category(" ".join([record.category, record.name, record.description]))
    return inferred or DEFAULT_DISPLAY_CATEGORY


def group_by_display_category(records: Iterable[SkillRecord]) -> Dict[str, List[SkillRecord]]:
    """Records bucketed by display label, biggest bucket first."""
    groups: Dict[str, List[SkillRecord]] = {}
    for r in records:
        groups.setdefault(display_category(r), []).append(r)
    ordered = sorted(groups.items(), key=lambda kv: -len(kv[1]))
    return dict(ordered)
