from __future__ import annotations

import pytest

from placement_core.normalize import normalize
from placement_core.scoring import canonical_answer, item_units, match_answer, match_spec
from placement_core.types import (
    AcceptedAnswers, BlankAnswers, ExactAnswer, NestedAnswer, PatternAnswer, UnknownAnswer,
)

from tests.conftest import make_item


@pytest.mark.parametrize("raw,expected", [(" Yes ", "yes"), ("PARIS\n", "paris"), (None, ""), (42, ""), ("", "")])
def test_normalize(raw, expected):
    assert normalize(raw) == expected


def test_accepted_answers_ignore_case_and_whitespace():
    item = make_item("q", spec=AcceptedAnswers(("yes", "Sure")))
    assert match_answer(item, " Yes ") == match_answer(item, "yes")
    assert match_answer(item, " Yes ").correct
    assert match_answer(item, "SURE").correct
    assert not match_answer(item, "no").correct


def test_exact_answer_and_missing_submission():
    item = make_item("q", spec=ExactAnswer("Paris"))
    assert match_answer(item, "paris ").correct
    assert not match_answer(item, "").correct
    assert not match_answer(item, None).correct


def test_multi_blank_partial_credit():
    item = make_item("mb", type="multi_blank", spec=BlankAnswers((("a",), ("b",), ("c",))))
    res = match_answer(item, ["A ", "b", "x"])
    assert res.partial_credit == 2
    assert res.total_blanks == 3
    assert res.correct is False

    full = match_answer(item, ["a", "b", "c"])
    assert full.correct and full.partial_credit == 3


def test_multi_blank_length_mismatch_gets_no_credit():
    item = make_item("mb", type="multi_blank", spec=BlankAnswers((("was",), ("were",))))
    for submitted in (["was"], ["was", "were", "extra"], "was | were", (), None):
        res = match_answer(item, submitted)
        assert res.correct is False
        assert res.partial_credit == 0
        assert res.total_blanks == 2


def test_nested_accepts_sequence_or_separator_string():
    spec = NestedAnswer((("had taken",), ("would live", "'d live")))
    item = make_item("n", spec=spec)
    as_string = match_answer(item, "Had Taken | would LIVE")
    as_list = match_answer(item, ["had taken", "would live"])
    assert as_string == as_list
    assert as_string.correct
    assert as_string.partial_credit is None

    assert not match_answer(item, "had taken").correct
    assert not match_answer(item, "had taken | would have lived").correct


def test_nested_separator_inside_answer_is_mis_split():
    spec = NestedAnswer((("either|or",), ("both",)))
    item = make_item("n", spec=spec)
    assert match_answer(item, ["either|or", "both"]).correct
    # the string form splits on every separator, giving three parts
    assert not match_answer(item, "either|or | both").correct


def test_pattern_is_case_insensitive_on_trimmed_text():
    item = make_item("p", type="pattern_match", spec=PatternAnswer(r"^colou?r$"))
    assert match_answer(item, "  COLOR ").correct
    assert match_answer(item, "colour").correct
    assert not match_answer(item, "colours").correct
    assert not match_answer(item, ["colour"]).correct


def test_broken_pattern_fails_closed():
    item = make_item("p", type="pattern_match", spec=PatternAnswer("(["))
    assert match_answer(item, "anything").correct is False


def test_unknown_specs_fail_closed():
    assert match_spec(UnknownAnswer(raw={"weird": 1}), "x").correct is False
    assert match_spec(object(), "x").correct is False  # type: ignore[arg-type]


def test_malformed_blank_item_keeps_unit_weight():
    item = make_item("mb", type="multi_blank", spec=UnknownAnswer())
    res = match_answer(item, ["a"])
    assert res.correct is False and res.partial_credit == 0
    assert item_units(item) == 1


def test_canonical_answer_follows_spec_form():
    assert canonical_answer(BlankAnswers((("was", "were"), ("were",)))) == "was | were"
    assert canonical_answer(NestedAnswer((("had taken",), ("would live",)))) == "had taken | would live"
    assert canonical_answer(AcceptedAnswers(("works", "is working"))) == "works"
    assert canonical_answer(ExactAnswer("Paris")) == "Paris"
    assert canonical_answer(PatternAnswer("^25$", display="25 minutes")) == "25 minutes"
    assert canonical_answer(PatternAnswer("^25$")) == "^25$"
    assert canonical_answer(UnknownAnswer()) == ""
