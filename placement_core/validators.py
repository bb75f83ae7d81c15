from __future__ import annotations
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .types import ITEM_TYPES

# legacy type names still found in older question files
TYPE_ALIASES: Dict[str, str] = {
    "mcq": "single_choice",
    "reading_mcq": "single_choice",
    "fill": "open_text",
    "short": "open_text",
    "reading_short": "open_text",
    "cloze": "multi_blank",
    "regex": "pattern_match",
    "listening_tts": "listening_prompt",
    "writing": "extended_writing",
}


class QuestionSetError(ValueError):
    """Structural problem in a question set, reported at load time."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("invalid question set: " + "; ".join(self.problems))


def canonical_type(raw_type: Any) -> Optional[str]:
    t = str(raw_type or "").strip().lower()
    t = TYPE_ALIASES.get(t, t)
    return t if t in ITEM_TYPES else None

def _is_str_list(x: Any) -> bool:
    return isinstance(x, list) and all(isinstance(v, str) for v in x)

def _blank_sets(raw: Mapping[str, Any]) -> Optional[List[Any]]:
    sets = raw.get("answers")
    if isinstance(sets, list) and sets and all(_is_str_list(s) for s in sets):
        return sets
    return None

def item_problems(raw: Mapping[str, Any], seen_ids: set[str]) -> List[str]:
    if not isinstance(raw, Mapping):
        return [f"item is not an object: {raw!r}"]
    iid = raw.get("id")
    label = f"item {iid!r}"
    out: List[str] = []
    if not isinstance(iid, str) or not iid.strip():
        out.append("item without id")
    elif iid in seen_ids:
        out.append(f"duplicate id {iid!r}")
    else:
        seen_ids.add(iid)

    t = canonical_type(raw.get("type"))
    if t is None:
        out.append(f"{label} has undefined type {raw.get('type')!r}")
    if not isinstance(raw.get("skill"), str) or not raw.get("skill", "").strip():
        out.append(f"{label} has no skill")

    tags = raw.get("review_tags", [])
    if tags is not None and not _is_str_list(tags):
        out.append(f"{label} review_tags must be a list of strings")

    if t == "multi_blank":
        sets = _blank_sets(raw)
        if sets is None:
            out.append(f"{label} needs per-blank answer lists")
        else:
            declared = raw.get("blanks")
            if declared is not None and declared != len(sets):
                out.append(f"{label} declares {declared} blanks but has {len(sets)} answer lists")

    rx = raw.get("answer_regex")
    if rx is not None:
        try:
            re.compile(str(rx), re.I)
        except re.error as e:
            out.append(f"{label} answer_regex does not compile: {e}")
    elif t == "pattern_match":
        out.append(f"{label} is pattern_match but has no answer_regex")
    return out

def section_problems(raw_sections: Iterable[Any]) -> List[str]:
    out: List[str] = []
    for sec in raw_sections:
        if not isinstance(sec, Mapping):
            out.append(f"section is not an object: {sec!r}")
            continue
        items = sec.get("items")
        if items is not None and not isinstance(items, list):
            out.append(f"section {sec.get('title')!r} items must be a list")
    return out

def validate_items(raw_items: Iterable[Mapping[str, Any]], problems: Optional[List[str]] = None) -> None:
    """Raise QuestionSetError listing every structural problem found, after any passed in."""
    seen: set[str] = set()
    problems = list(problems or [])
    for raw in raw_items:
        problems.extend(item_problems(raw, seen))
    if problems:
        raise QuestionSetError(problems)
