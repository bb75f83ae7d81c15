from __future__ import annotations
from functools import lru_cache
from typing import Optional, Pattern, Sequence
import re

from .config import NESTED_SEPARATOR, ANSWER_JOINER
from .normalize import normalize
from .types import (
    AcceptedAnswers, AnswerRecord, AnswerSpec, BlankAnswers, ExactAnswer,
    MatchResult, NestedAnswer, PatternAnswer, QuestionItem,
)

_MISS = MatchResult(correct=False)


@lru_cache(maxsize=256)
def _compiled(pattern: str) -> Optional[Pattern[str]]:
    try:
        return re.compile(pattern, re.I)
    except re.error:
        return None

def _as_sequence(value: AnswerRecord) -> Optional[Sequence[object]]:
    if isinstance(value, (list, tuple)):
        return value
    return None

def _in_set(value: object, accepted: Sequence[str]) -> bool:
    return normalize(value) in {normalize(a) for a in accepted}

def _match_blanks(spec: BlankAnswers, submitted: AnswerRecord) -> MatchResult:
    total = len(spec.blanks)
    values = _as_sequence(submitted)
    if values is None:
        values = ()
    if len(values) != total:
        return MatchResult(correct=False, partial_credit=0, total_blanks=total)
    hits = sum(1 for val, accepted in zip(values, spec.blanks) if _in_set(val, accepted))
    return MatchResult(correct=hits == total, partial_credit=hits, total_blanks=total)

def _match_pattern(spec: PatternAnswer, submitted: AnswerRecord) -> MatchResult:
    rx = _compiled(spec.pattern)
    if rx is None:
        return _MISS
    text = submitted.strip() if isinstance(submitted, str) else ""
    return MatchResult(correct=rx.search(text) is not None)

def split_parts(submitted: AnswerRecord) -> Sequence[object]:
    """Two-part answers arrive pre-split or as one string joined with the separator."""
    values = _as_sequence(submitted)
    if values is not None:
        return values
    text = submitted if isinstance(submitted, str) else ""
    return [s.strip() for s in text.split(NESTED_SEPARATOR)]

def _match_nested(spec: NestedAnswer, submitted: AnswerRecord) -> MatchResult:
    parts = split_parts(submitted)
    if len(parts) != len(spec.parts):
        return _MISS
    ok = all(_in_set(val, accepted) for val, accepted in zip(parts, spec.parts))
    return MatchResult(correct=ok)

def _match_accepted(spec: AcceptedAnswers, submitted: AnswerRecord) -> MatchResult:
    return MatchResult(correct=_in_set(submitted, spec.accepted))

def _match_exact(spec: ExactAnswer, submitted: AnswerRecord) -> MatchResult:
    return MatchResult(correct=normalize(submitted) == normalize(spec.expected))

def match_spec(spec: AnswerSpec, submitted: AnswerRecord) -> MatchResult:
    """
    Grade one submission against one answer key.
    Unrecognised keys grade as incorrect; this never raises.
    """
    if isinstance(spec, BlankAnswers):
        return _match_blanks(spec, submitted)
    if isinstance(spec, PatternAnswer):
        return _match_pattern(spec, submitted)
    if isinstance(spec, NestedAnswer):
        return _match_nested(spec, submitted)
    if isinstance(spec, AcceptedAnswers):
        return _match_accepted(spec, submitted)
    if isinstance(spec, ExactAnswer):
        return _match_exact(spec, submitted)
    return _MISS

def match_answer(item: QuestionItem, submitted: AnswerRecord) -> MatchResult:
    result = match_spec(item.answer_spec, submitted)
    if item.type == "multi_blank" and result.total_blanks is None:
        # malformed key on a blank item still weighs one unit per declared blank
        return MatchResult(correct=False, partial_credit=0, total_blanks=item_units(item))
    return result

def item_units(item: QuestionItem) -> int:
    """Unit weight of a non-writing item: one per blank for multi_blank, else 1."""
    if item.type != "multi_blank":
        return 1
    if isinstance(item.answer_spec, BlankAnswers):
        return len(item.answer_spec.blanks)
    return int(item.blank_count or 1)

def _first(options: Sequence[str]) -> str:
    return options[0] if options else ""

def canonical_answer(spec: AnswerSpec) -> str:
    """Human-readable rendering of one correct answer, same precedence as matching."""
    if isinstance(spec, BlankAnswers):
        return ANSWER_JOINER.join(_first(b) for b in spec.blanks)
    if isinstance(spec, PatternAnswer):
        return spec.display if spec.display else spec.pattern
    if isinstance(spec, NestedAnswer):
        return ANSWER_JOINER.join(_first(p) for p in spec.parts)
    if isinstance(spec, AcceptedAnswers):
        return _first(spec.accepted)
    if isinstance(spec, ExactAnswer):
        return spec.expected
    return ""
