from __future__ import annotations

import pytest

from placement_core.question_bank import SKILLS
from placement_core.types import (
    AcceptedAnswers, BlankAnswers, ExactAnswer, QuestionItem, QuestionSet, Section,
)


def make_item(item_id: str, *, skill: str = "Grammar", type: str = "single_choice", spec=None,
              tags: tuple[str, ...] = (), level: str = "B1", prompt: str = "") -> QuestionItem:
    blank_count = len(spec.blanks) if isinstance(spec, BlankAnswers) else None
    return QuestionItem(
        id=item_id,
        type=type,  # type: ignore[arg-type]
        skill=skill,
        answer_spec=spec if spec is not None else ExactAnswer("x"),
        level_hint=level,
        review_tags=tags,
        blank_count=blank_count,
        section=skill,
        prompt=prompt or f"{skill} prompt {item_id}",
    )


def build_synthetic_set(
    *,
    skills: list[str] | None = None,
    per_skill: int = 3,
    include_blanks: bool = True,
    include_writing: bool = True,
) -> QuestionSet:
    """Create a deterministic synthetic question set for tests and smoke runs."""

    sections: list[Section] = []
    target = skills or [s for s in SKILLS if s != "Writing"]
    for skill in target:
        items: list[QuestionItem] = []
        for idx in range(per_skill):
            items.append(
                make_item(
                    f"{skill}_sc_{idx}",
                    skill=skill,
                    spec=AcceptedAnswers(("right", "correct")),
                    tags=(f"{skill}: topic {idx % 2}",),
                )
            )
        if include_blanks:
            items.append(
                make_item(
                    f"{skill}_mb",
                    skill=skill,
                    type="multi_blank",
                    spec=BlankAnswers((("a",), ("b",), ("c",))),
                    tags=(f"{skill}: blanks",),
                )
            )
        sections.append(Section(title=skill, items=tuple(items)))

    if include_writing:
        sections.append(
            Section(
                title="Writing",
                items=(make_item("w_1", skill="Writing", type="extended_writing", spec=None),),
            )
        )
    return QuestionSet(sections=tuple(sections), title="Synthetic")


def all_right(qs: QuestionSet, essay: str = "") -> dict[str, object]:
    sheet: dict[str, object] = {}
    for it in qs.items:
        if it.is_writing:
            sheet[it.id] = essay
        elif it.type == "multi_blank":
            sheet[it.id] = ["a", "b", "c"]
        else:
            sheet[it.id] = "right"
    return sheet


@pytest.fixture
def synthetic_set() -> QuestionSet:
    return build_synthetic_set()
