from __future__ import annotations
from typing import Iterable, List, Optional

from .aggregate import GradedItem
from .config import ANSWER_JOINER, NO_ANSWER_TEXT
from .scoring import canonical_answer
from .types import AnswerRecord, Mistake, QuestionItem


def render_submitted(value: AnswerRecord) -> str:
    if isinstance(value, (list, tuple)):
        parts = [v.strip() if isinstance(v, str) else "" for v in value]
        if not any(parts):
            return NO_ANSWER_TEXT
        return ANSWER_JOINER.join(parts)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return NO_ANSWER_TEXT

def record_mistake(item: QuestionItem, submitted: AnswerRecord) -> Mistake:
    return Mistake(
        item_id=item.id,
        section=item.section or item.skill,
        level_hint=item.level_hint,
        prompt=item.prompt,
        your=render_submitted(submitted),
        correct=canonical_answer(item.answer_spec),
    )

def _missed(g: GradedItem) -> Optional[Mistake]:
    if g.writing_score is not None or g.correct:
        return None
    return record_mistake(g.item, g.submitted)

def collect_mistakes(graded: Iterable[GradedItem]) -> List[Mistake]:
    """One record per missed non-writing item, in question order."""
    return [m for m in (_missed(g) for g in graded) if m is not None]
