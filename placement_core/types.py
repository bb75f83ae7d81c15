from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Union

ItemType = Literal[
    "single_choice", "open_text", "multi_blank",
    "pattern_match", "listening_prompt", "extended_writing",
]
ITEM_TYPES: Tuple[str, ...] = (
    "single_choice", "open_text", "multi_blank",
    "pattern_match", "listening_prompt", "extended_writing",
)
WRITING_TYPE = "extended_writing"

# One recorded answer: a string, a sequence of strings, or absent.
AnswerRecord = Union[str, Sequence[str], None]


# ---- answer keys (one case per form, picked once at load time) ----
@dataclass(frozen=True)
class BlankAnswers:
    blanks: Tuple[Tuple[str, ...], ...]
    kind: str = field(default="blanks", init=False)

@dataclass(frozen=True)
class PatternAnswer:
    pattern: str
    display: Optional[str] = None
    kind: str = field(default="pattern", init=False)

@dataclass(frozen=True)
class NestedAnswer:
    parts: Tuple[Tuple[str, ...], ...]
    kind: str = field(default="nested", init=False)

@dataclass(frozen=True)
class AcceptedAnswers:
    accepted: Tuple[str, ...]
    kind: str = field(default="accepted", init=False)

@dataclass(frozen=True)
class ExactAnswer:
    expected: str
    kind: str = field(default="exact", init=False)

@dataclass(frozen=True)
class UnknownAnswer:
    raw: object = None
    kind: str = field(default="unknown", init=False)

AnswerSpec = Union[BlankAnswers, PatternAnswer, NestedAnswer, AcceptedAnswers, ExactAnswer, UnknownAnswer]


@dataclass(frozen=True)
class QuestionItem:
    id: str; type: ItemType; skill: str
    answer_spec: AnswerSpec = field(default_factory=UnknownAnswer)
    level_hint: str = ""
    review_tags: Tuple[str, ...] = ()
    blank_count: Optional[int] = None
    section: str = ""
    prompt: str = ""
    passage: Optional[str] = None
    options: Optional[Tuple[str, ...]] = None
    tts_text: Optional[str] = None

    @property
    def is_writing(self) -> bool:
        return self.type == WRITING_TYPE

@dataclass(frozen=True)
class Section:
    title: str
    items: Tuple[QuestionItem, ...] = ()

@dataclass(frozen=True)
class QuestionSet:
    sections: Tuple[Section, ...]
    title: str = ""

    @property
    def items(self) -> Tuple[QuestionItem, ...]:
        return tuple(it for sec in self.sections for it in sec.items)

    def item(self, item_id: str) -> Optional[QuestionItem]:
        return next((it for it in self.items if it.id == item_id), None)


# ---- results ----
@dataclass(frozen=True)
class MatchResult:
    correct: bool
    partial_credit: Optional[int] = None
    total_blanks: Optional[int] = None

@dataclass(frozen=True)
class SkillScore:
    correct_units: int
    total_units: int
    percent: int

@dataclass(frozen=True)
class Estimate:
    overall_percent: int
    predicted_level: str

@dataclass(frozen=True)
class WritingScore:
    item_id: str
    score: int
    level: str

@dataclass(frozen=True)
class ReviewEntry:
    topic: str
    count: int
    prescription: str

@dataclass(frozen=True)
class Mistake:
    item_id: str
    section: str
    level_hint: str
    prompt: str
    your: str
    correct: str

@dataclass(frozen=True)
class EvaluationResult:
    skill_breakdown: Mapping[str, SkillScore]
    overall_percent: int
    predicted_level: str
    review_frequency: Mapping[str, int]
    mistakes: Tuple[Mistake, ...] = ()
    review_plan: Tuple[ReviewEntry, ...] = ()
    writing: Tuple[WritingScore, ...] = ()

    def __post_init__(self) -> None:
        # freeze the mappings so consumers cannot mutate a shared result
        object.__setattr__(self, "skill_breakdown", MappingProxyType(dict(self.skill_breakdown)))
        object.__setattr__(self, "review_frequency", MappingProxyType(dict(self.review_frequency)))
        object.__setattr__(self, "mistakes", tuple(self.mistakes))
        object.__setattr__(self, "review_plan", tuple(self.review_plan))
        object.__setattr__(self, "writing", tuple(self.writing))

    def to_dict(self) -> Dict[str, object]:
        """JSON-friendly representation used by the API and exporters."""

        return {
            "skill_breakdown": {
                skill: {"correct": s.correct_units, "total": s.total_units, "pct": s.percent}
                for skill, s in self.skill_breakdown.items()
            },
            "overall_percent": self.overall_percent,
            "predicted_level": self.predicted_level,
            "review_frequency": dict(self.review_frequency),
            "review_plan": [
                {"topic": r.topic, "count": r.count, "prescription": r.prescription}
                for r in self.review_plan
            ],
            "mistakes": [_mistake_dict(m) for m in self.mistakes],
            "writing": [
                {"item_id": w.item_id, "score": w.score, "level": w.level} for w in self.writing
            ],
        }


def _mistake_dict(m: Mistake) -> Dict[str, str]:
    return {
        "item_id": m.item_id,
        "section": m.section,
        "level_hint": m.level_hint,
        "prompt": m.prompt,
        "your": m.your,
        "correct": m.correct,
    }


__all__: List[str] = [
    "ItemType", "ITEM_TYPES", "WRITING_TYPE", "AnswerRecord",
    "BlankAnswers", "PatternAnswer", "NestedAnswer", "AcceptedAnswers", "ExactAnswer",
    "UnknownAnswer", "AnswerSpec", "QuestionItem", "Section", "QuestionSet",
    "MatchResult", "SkillScore", "Estimate", "WritingScore", "ReviewEntry", "Mistake",
    "EvaluationResult",
]
