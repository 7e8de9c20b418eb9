from __future__ import annotations

"""
Workflow suggestions built on top of the ranker.

Two independent entry points live here:

* :func:`synthesize` turns an already ranked list of records into an
  ordered action plan, one step per record.  It only classifies and
  formats; order, duplicates and scores are left untouched.
* :func:`suggest` is the cold-start hint used when no ranked matches
  exist.  It scans the raw goal text against a static keyword table and
  always returns at least a planning or domain step plus a testing step.
"""

from typing import Iterable, List

from loguru import logger

from .config import (
    ACTION_VERB_RULES,
    DEFAULT_ACTION_VERB,
    PLANNING_STEP,
    TESTING_STEP,
    WORKFLOW_KEYWORD_RULES,
    SkillRecord,
    SuggestedStep,
    WorkflowStep,
)


def action_verb_for(record: SkillRecord) -> str:
    """First rule whose substring occurs in the named field wins."""
    for field, needle, verb in ACTION_VERB_RULES:
        if needle in str(getattr(record, field) or "").lower():
            return verb
    return DEFAULT_ACTION_VERB


def synthesize(goal: str, records: Iterable[SkillRecord]) -> List[WorkflowStep]:
    return [
        WorkflowStep(
            ordinal=i,
            action_verb=action_verb_for(record),
            record_name=record.name,
            description=record.description,
            rationale=f'Relevant for "{goal}"',
        )
        for i, record in enumerate(records, start=1)
    ]


def _step(entry) -> SuggestedStep:
    skill, action, reason = entry
    return SuggestedStep(skill_name=skill, action_verb=action, rationale=reason)


def suggest(goal: str) -> List[SuggestedStep]:
    """
    Map a free-text goal to a fixed sequence of skill names.

    Every keyword rule that matches contributes its step, in table order.
    A testing step is always appended; when no domain rule matched, a
    planning step is put in front so the result is never empty.

    Keywords match as plain substrings, so the TypeScript rule only keys
    on "typescript"; a bare "ts" would fire on "tests" or "results".
    """
    text = (goal or "").lower()
    steps: List[SuggestedStep] = []
    for keywords, *entry in WORKFLOW_KEYWORD_RULES:
        if any(k in text for k in keywords):
            steps.append(_step(entry))

    if not steps:
        steps.append(_step(PLANNING_STEP))
    steps.append(_step(TESTING_STEP))
    logger.debug("Suggested {} workflow steps for goal {!r}", len(steps), goal)
    return steps
