from __future__ import annotations
import json, logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from . import config
from .types import (
    AcceptedAnswers, AnswerSpec, BlankAnswers, ExactAnswer, NestedAnswer,
    PatternAnswer, QuestionItem, QuestionSet, Section, UnknownAnswer,
)
from .validators import QuestionSetError, canonical_type, section_problems, validate_items

log = logging.getLogger(__name__)

SKILLS = list(config.PRIMARY_SKILLS) + [config.WRITING_SKILL]


def _str_tuple(values: Any) -> tuple[str, ...]:
    return tuple(str(v) for v in values)

def _is_nested(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(v, list) for v in value)

def build_answer_spec(raw: Mapping[str, Any], item_type: str) -> AnswerSpec:
    """Pick the answer-key form once: blanks, pattern, nested, accepted list, exact."""
    if item_type == "multi_blank":
        sets = raw.get("answers")
        if isinstance(sets, list) and all(isinstance(s, list) for s in sets):
            return BlankAnswers(blanks=tuple(_str_tuple(s) for s in sets))
        return UnknownAnswer(raw=sets)
    answer = raw.get("answer")
    if raw.get("answer_regex") is not None:
        display = answer if isinstance(answer, str) and answer.strip() else None
        return PatternAnswer(pattern=str(raw["answer_regex"]), display=display)
    parts = raw.get("answer_parts")
    if _is_nested(parts):
        return NestedAnswer(parts=tuple(_str_tuple(p) for p in parts))
    if _is_nested(answer):
        return NestedAnswer(parts=tuple(_str_tuple(p) for p in answer))
    if isinstance(answer, list) and answer and all(isinstance(a, str) for a in answer):
        return AcceptedAnswers(accepted=_str_tuple(answer))
    if isinstance(answer, str):
        return ExactAnswer(expected=answer)
    return UnknownAnswer(raw=answer)

def parse_item(raw: Mapping[str, Any], section: str = "") -> QuestionItem:
    item_type = canonical_type(raw.get("type"))
    if item_type is None:
        raise QuestionSetError([f"item {raw.get('id')!r} has undefined type {raw.get('type')!r}"])
    spec: AnswerSpec = UnknownAnswer()
    if item_type != "extended_writing":
        spec = build_answer_spec(raw, item_type)
        if isinstance(spec, UnknownAnswer):
            log.warning("item %s has no usable answer key; it will grade as incorrect", raw.get("id"))
    blank_count = len(spec.blanks) if isinstance(spec, BlankAnswers) else None
    options = raw.get("options")
    return QuestionItem(
        id=str(raw["id"]),
        type=item_type,  # type: ignore[arg-type]
        skill=str(raw["skill"]).strip(),
        answer_spec=spec,
        level_hint=str(raw.get("level_hint") or ""),
        review_tags=_str_tuple(raw.get("review_tags") or ()),
        blank_count=blank_count,
        section=section,
        prompt=str(raw.get("prompt") or raw.get("question") or ""),
        passage=raw.get("passage"),
        options=_str_tuple(options) if isinstance(options, list) else None,
        tts_text=raw.get("tts_text"),
    )

def _raw_sections(data: Any) -> List[Any]:
    if isinstance(data, list):
        return [{"title": "Test", "items": data}]
    if isinstance(data, Mapping) and isinstance(data.get("sections"), list):
        return list(data["sections"])
    raise QuestionSetError(["question set must be a list of items or an object with 'sections'"])

def _section_items(sec: Mapping[str, Any]) -> List[Any]:
    items = sec.get("items")
    return items if isinstance(items, list) else []

def parse_question_set(data: Any) -> QuestionSet:
    """Validate the raw structure, then build the immutable question set."""
    sections = _raw_sections(data)
    problems = section_problems(sections)
    raw_items = [it for sec in sections if isinstance(sec, Mapping) for it in _section_items(sec)]
    validate_items(raw_items, problems)
    built = []
    for sec in sections:
        title = str(sec.get("title") or "")
        built.append(Section(title=title, items=tuple(parse_item(r, title) for r in _section_items(sec))))
    title = str(data.get("title") or "") if isinstance(data, Mapping) else ""
    return QuestionSet(sections=tuple(built), title=title)

def load_bank(path: Optional[str] = None) -> QuestionSet:
    p = Path(path or config.QUESTION_SET_PATH)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise QuestionSetError([f"cannot read {p}: {e}"]) from e
    qs = parse_question_set(raw)
    log.info("loaded question set %r: %d items from %s", qs.title, len(qs.items), p)
    return qs
