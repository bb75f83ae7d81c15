# placement_core/engine.py
from __future__ import annotations
from typing import Iterable, Mapping, Optional, Union
import logging

from . import config
from .aggregate import GradedItem, grade_items, tally
from .bands import estimate
from .heuristics import writing_level
from .mistakes import collect_mistakes
from .remediation import rank_review_topics, review_frequency
from .types import AnswerRecord, EvaluationResult, QuestionItem, QuestionSet, WritingScore


log = logging.getLogger(__name__)


def _emit_trace(**values: object) -> None:
    if not config.DEBUG_TRACE:
        return
    ordered = []
    for key in config.TRACE_FIELDS:
        if key in values:
            ordered.append(f"{key}={values[key]}")
    if ordered:
        log.info("trace %s", " ".join(str(val) for val in ordered))


def _items_of(question_set: Union[QuestionSet, Iterable[QuestionItem]]) -> list[QuestionItem]:
    if isinstance(question_set, QuestionSet):
        return list(question_set.items)
    return list(question_set)


def _trace_all(graded: Iterable[GradedItem]) -> None:
    for g in graded:
        _emit_trace(
            item_id=g.item.id,
            type=g.item.type,
            skill=g.item.skill,
            units=g.units,
            credit=g.credit,
            correct=g.correct,
        )


def evaluate(
    question_set: Union[QuestionSet, Iterable[QuestionItem]],
    answers: Optional[Mapping[str, AnswerRecord]],
    *,
    top_n: Optional[int] = None,
    library: Optional[Mapping[str, str]] = None,
) -> EvaluationResult:
    """
    Grade every item against the answer snapshot and fold the outcome into
    one fresh result. Pure: no I/O, nothing retained between calls.
    """

    snapshot = dict(answers or {})
    items = _items_of(question_set)
    graded = grade_items(items, snapshot)
    _trace_all(graded)

    breakdown = tally(graded)
    est = estimate(breakdown)
    frequency = review_frequency(graded)
    plan = rank_review_topics(frequency, top_n=top_n, library=library)
    mistakes = collect_mistakes(graded)
    writing = [
        WritingScore(item_id=g.item.id, score=g.writing_score, level=writing_level(g.writing_score))
        for g in graded
        if g.writing_score is not None
    ]

    log.debug(
        "evaluated %d items: overall=%d level=%s mistakes=%d topics=%d",
        len(items), est.overall_percent, est.predicted_level, len(mistakes), len(frequency),
    )
    return EvaluationResult(
        skill_breakdown=breakdown,
        overall_percent=est.overall_percent,
        predicted_level=est.predicted_level,
        review_frequency=frequency,
        mistakes=tuple(mistakes),
        review_plan=tuple(plan),
        writing=tuple(writing),
    )
