from __future__ import annotations

import pytest

from placement_core.heuristics import score_writing, word_count, writing_level, writing_topic


def _words(n: int) -> str:
    return " ".join(["word"] * n)


def test_empty_and_non_text_score_zero():
    assert score_writing("") == 0
    assert score_writing("   ") == 0
    assert score_writing(None) == 0
    assert score_writing(["a", "list"]) == 0


def test_length_thresholds():
    assert score_writing(_words(109)) == 0
    assert score_writing(_words(110)) == 2
    assert score_writing(_words(139)) == 2
    assert score_writing(_words(140)) == 3


def test_score_is_monotonic_in_word_count():
    prefix = "However, it was late. Therefore we were tired and it is fine. "
    scores = [score_writing(prefix + _words(n)) for n in range(0, 220, 5)]
    assert all(b >= a for a, b in zip(scores, scores[1:]))
    assert all(0 <= s <= 6 for s in scores)


def test_each_feature_counts_once():
    connectives = "however however however therefore"
    assert score_writing(connectives) == 1
    tenses = "i am here, you are there, it is late"
    assert score_writing(tenses) == 1
    assert score_writing("one sentence. Another one") == 1
    assert score_writing("no capital after. the boundary") == 0


def test_full_marks_are_capped_at_six():
    text = "However, it was late. Moreover we were tired and it is what we are. " + _words(200)
    assert score_writing(text) == 6


def test_word_count_splits_on_whitespace():
    assert word_count("a  b\tc\nd") == 4
    assert word_count(None) == 0


@pytest.mark.parametrize("score,level", [(0, "B1"), (2, "B1"), (3, "B2"), (4, "B2"), (5, "C1"), (6, "C2")])
def test_writing_bands(score, level):
    assert writing_level(score) == level
    assert writing_topic(score).startswith(level + ":")
