"""Per-item grading and the per-skill unit tally built from it."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from .config import WRITING_UNITS
from .heuristics import score_writing
from .scoring import item_units, match_answer
from .types import AnswerRecord, QuestionItem, SkillScore


@dataclass(frozen=True)
class GradedItem:
    item: QuestionItem
    submitted: AnswerRecord
    units: int
    credit: int
    correct: bool
    writing_score: Optional[int] = None


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def percent(correct: float, total: float) -> int:
    if total <= 0:
        return 0
    return round_half_up(correct / total * 100.0)


def submitted_value(item: QuestionItem, answers: Optional[Mapping[str, AnswerRecord]]) -> AnswerRecord:
    """Look up an item's answer; absent answers become "" (or () for blank items)."""

    value = (answers or {}).get(item.id)
    if value is None:
        return () if item.type == "multi_blank" else ""
    return value


def grade_item(item: QuestionItem, submitted: AnswerRecord) -> GradedItem:
    if item.is_writing:
        s = score_writing(submitted)
        return GradedItem(item, submitted, WRITING_UNITS, s, correct=False, writing_score=s)

    units = item_units(item)
    result = match_answer(item, submitted)
    if item.type == "multi_blank":
        credit = int(result.partial_credit or 0)
    else:
        credit = 1 if result.correct else 0
    return GradedItem(item, submitted, units, credit, correct=bool(result.correct))


def grade_items(
    items: Iterable[QuestionItem], answers: Optional[Mapping[str, AnswerRecord]]
) -> List[GradedItem]:
    return [grade_item(it, submitted_value(it, answers)) for it in items]


def tally(graded: Iterable[GradedItem]) -> Dict[str, SkillScore]:
    """Fold graded items into skill -> SkillScore, skills in first-seen order."""

    counts: Dict[str, List[int]] = {}
    for g in graded:
        row = counts.setdefault(g.item.skill, [0, 0])
        row[0] += g.credit
        row[1] += g.units
    return {
        skill: SkillScore(correct_units=c, total_units=t, percent=percent(c, t))
        for skill, (c, t) in counts.items()
    }


def aggregate(
    items: Iterable[QuestionItem], answers: Optional[Mapping[str, AnswerRecord]]
) -> Dict[str, SkillScore]:
    return tally(grade_items(items, answers))
