from __future__ import annotations

import json
import logging
from typing import Dict, List

from . import config
from .engine import evaluate
from .heuristics import word_count
from .question_bank import load_bank
from .scoring import canonical_answer
from .types import AnswerRecord, BlankAnswers, QuestionSet

log = logging.getLogger(__name__)

SAMPLE_ESSAY = (
    "Ten years ago the centre of my town was full of traffic, and most people drove even for short trips. "
    "The council decided to close the main square to cars and to plant trees along the old shopping street. "
    "At first many shop owners were angry, because they thought that customers would stop coming. "
    "However, the opposite happened. Families started to walk into town at the weekend, new cafes opened, "
    "and the market has grown every year since then. Moreover, the air is cleaner and the square is "
    "much quieter in the evenings. Some people are still unhappy, since parking is now more expensive "
    "and older residents have to walk further. In addition, rents have risen in the streets near the square. "
    "Therefore I think the change was mostly positive, although the council will need to improve buses "
    "for people who live outside the centre. If it does, I am sure that even more visitors will come "
    "and the town will keep its lively atmosphere for many years."
)


def _maybe_enable_trace() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    if config.DEBUG_TRACE:
        logging.getLogger("placement_core.engine").setLevel(logging.INFO)


def key_answers(qs: QuestionSet, essay: str = SAMPLE_ESSAY) -> Dict[str, AnswerRecord]:
    """An answer sheet that gives the first accepted answer for every item."""

    sheet: Dict[str, AnswerRecord] = {}
    for item in qs.items:
        if item.is_writing:
            sheet[item.id] = essay
        elif isinstance(item.answer_spec, BlankAnswers):
            sheet[item.id] = [b[0] if b else "" for b in item.answer_spec.blanks]
        else:
            sheet[item.id] = canonical_answer(item.answer_spec)
    return sheet


def run_smoke(qs: QuestionSet) -> List[str]:
    problems: List[str] = []

    full = evaluate(qs, key_answers(qs))
    log.info("key sheet: %s", json.dumps(full.to_dict()["skill_breakdown"]))
    if full.mistakes:
        problems.append(f"key sheet produced {len(full.mistakes)} mistakes")
    if full.overall_percent < config.LEVEL_BANDS[-1][1]:
        problems.append(f"key sheet scored {full.overall_percent}%")

    empty = evaluate(qs, {})
    log.info("empty sheet: overall=%d level=%s", empty.overall_percent, empty.predicted_level)
    graded = [it for it in qs.items if not it.is_writing]
    if len(empty.mistakes) != len(graded):
        problems.append(f"empty sheet recorded {len(empty.mistakes)} of {len(graded)} mistakes")
    if empty.predicted_level != config.LEVEL_BANDS[0][0]:
        problems.append(f"empty sheet predicted {empty.predicted_level}")

    log.info("sample essay: %d words", word_count(SAMPLE_ESSAY))
    return problems


def main() -> int:
    _maybe_enable_trace()
    qs = load_bank(config.load_config().get("QUESTION_SET_PATH"))
    problems = run_smoke(qs)
    for p in problems:
        log.error("smoke: %s", p)
    if not problems:
        log.info("smoke: ok (%d items)", len(qs.items))
    return 1 if problems else 0


if __name__ == "__main__":
    raise SystemExit(main())
