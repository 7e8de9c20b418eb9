from __future__ import annotations

"""
Relevance ranking for the skills catalog.

Despite the "semantic search" naming used by the clients, matching is
purely lexical: every query term is tested for substring containment in
the name, category, path and description of each record, and each field
that contains the term adds its weight once.  The scan is
O(terms x records x field length), which is fine for a catalog of a few
hundred static records.

Example::

    from skills_server.catalog import get_catalog
    from skills_server.ranker import rank
    for hit in rank("secure rest api", get_catalog(), top_k=3):
        print(hit.record.id, hit.score)

"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from loguru import logger

from .config import (
    CATEGORY_WEIGHT,
    DESCRIPTION_WEIGHT,
    NAME_WEIGHT,
    PATH_WEIGHT,
    SkillRecord,
)
from .normalize import tokenize_query


@dataclass(frozen=True)
class ScoredRecord:
    record: SkillRecord
    score: int


def _field_texts(record: SkillRecord) -> List[Tuple[str, int]]:
    """Lowercased (text, weight) pairs in scoring order; path may be empty."""
    return [
        (record.name.lower(), NAME_WEIGHT),
        (record.category.lower(), CATEGORY_WEIGHT),
        ((record.path or "").lower(), PATH_WEIGHT),
        (record.description.lower(), DESCRIPTION_WEIGHT),
    ]


def score_record(record: SkillRecord, terms: Sequence[str]) -> int:
    """Sum of field weights over all terms.

    Presence based: a field adds its weight at most once per term no
    matter how often the term repeats inside it.
    """
    fields = _field_texts(record)
    score = 0
    for term in terms:
        for text, weight in fields:
            if text and term in text:
                score += weight
    return score


def rank(query: str, catalog: Iterable[SkillRecord], top_k: int) -> List[ScoredRecord]:
    """Return up to ``top_k`` records with a positive score, best first.

    Ties keep catalog order (``list.sort`` is stable).  A query with no
    usable terms yields an empty list rather than an error.
    """
    terms = tokenize_query(query)
    if not terms or top_k <= 0:
        return []

    scored: List[ScoredRecord] = []
    for record in catalog:
        s = score_record(record, terms)
        if s > 0:
            scored.append(ScoredRecord(record=record, score=s))

    scored.sort(key=lambda x: -x.score)
    logger.debug("Ranked {} matches for terms {}", len(scored), terms)
    return scored[:top_k]


if __name__ == "__main__":
    from .catalog import get_catalog

    q = input("Enter task: ")
    for hit in rank(q, get_catalog(), top_k=10):
        print(f"{hit.score:>3}  {hit.record.id}  ({hit.record.category})")
