# placement_core/heuristics.py
from __future__ import annotations
import re

from .config import (
    CONNECTIVES, TENSE_MARKERS,
    WRITING_LONG_WORDS, WRITING_EXTRA_WORDS,
    WRITING_MIN_CONNECTIVES, WRITING_MIN_TENSES, WRITING_MAX_SCORE,
)

_SENTENCE_RX = re.compile(r'[.!?]\s+[A-Z]')

# band label -> the one review topic a writing item credits
WRITING_TOPICS = {
    "B1": "B1: paragraphing and basic coherence",
    "B2": "B2: range of tenses & linking devices",
    "C1": "C1: register control and cohesion",
    "C2": "C2: precision and nuance in argumentation",
}

def word_count(text: object) -> int:
    if not isinstance(text, str): return 0
    return len(text.split())

def score_writing(text: object) -> int:
    """Length + connectors + tense variety + sentence segmentation, out of 6."""
    if not isinstance(text, str): return 0
    t = text.strip()
    if not t: return 0

    low = text.lower()
    wc = word_count(t)
    c_hits = sum(1 for c in CONNECTIVES if c in low)
    t_hits = sum(1 for m in TENSE_MARKERS if m in low)

    score = 0
    if wc >= WRITING_LONG_WORDS:  score += 2
    if wc >= WRITING_EXTRA_WORDS: score += 1
    if c_hits >= WRITING_MIN_CONNECTIVES: score += 1
    if t_hits >= WRITING_MIN_TENSES:      score += 1
    if _SENTENCE_RX.search(t): score += 1

    return min(score, WRITING_MAX_SCORE)

def writing_level(score: int) -> str:
    s = int(score)
    if s <= 2: return "B1"
    if s <= 4: return "B2"
    if s == 5: return "C1"
    return "C2"

def writing_topic(score: int) -> str:
    return WRITING_TOPICS[writing_level(score)]
