from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from . import config as cfg_defaults
from .aggregate import GradedItem
from .heuristics import writing_topic
from .types import ReviewEntry

log = logging.getLogger(__name__)


FALLBACK_PRESCRIPTION = "Targeted practice for this micro-topic."
NO_REVIEW_MESSAGE = (
    "Excellent performance. Maintain your level with periodic reading/listening "
    "and targeted writing practice."
)

# topic -> ripasso prescription
PRESCRIPTIONS: Dict[str, str] = {
    "A1: family vocabulary in subject position": "Revise basic family nouns and subject pronouns (my/your/his/her). 10 quick sentences describing relatives.",
    "A1: 'be' + noun": "Short drills with 'be' (am/is/are) + noun/adjective. Focus on contractions and word order.",
    "A2: Present Simple 3rd person -s": "Conjugation grid; 20 sentences adding -s/-es; contrast with I/you forms.",
    "B1: Past Simple vs Present Perfect": "Signal words (yesterday/ago vs since/for/already). 15 contrast items + short timeline task.",
    "B2: Passive voice (past simple)": "Transform 20 active to passive sentences; include by-agent and time adverbials.",
    "C1: Mixed conditionals (3rd + 2nd)": "Build chains: past cause to present result. Write 10 mixed examples from prompts.",
    "C2: Inversion after negative adverbials": "Inversion starter set: Never/Rarely/Hardly/Only then/etc. Rewrite 12 sentences.",
    "A1: basic adjectives of weather": "Mini-picture prompts; choose an adjective; expand with 'It's... today.'",
    "B1: adjectives of character": "Collocate adjectives with nouns (reliable colleague, trustworthy friend). Make 10 collocations.",
    "C1: academic verbs / nuance": "Verb families (mitigate/alleviate). Build paraphrases in context; 12 sentence rewrites.",
    "B1: dependent prepositions": "Gap-fill with prepositions (look for, fed up with). 25 items + error-correction.",
    "B1: fixed expressions": "Chunks list: 'fed up with', 'in charge of', 'on time'. Make mini-dialogues.",
    "B2: word formation (suffixes)": "Suffix tables: -tion/-ment/-ity. Convert base to noun in 30 items.",
    "C1: collocations": "Verb-noun banks (commit a crime, pose a threat). Write 10 original sentences.",
    "A2: specific information (times)": "Listening for times. Practise: opening hours, timetables; answer with numbers.",
    "B2: announcements - extracting key detail": "Noting delay durations/platforms. Do 10 short audios; write key figures.",
    "B1: identify main idea": "Skim strategies; topic sentence recognition. Summarise paragraphs in 1 line.",
    "C1: cause-effect inference": "Connectors: although/therefore/however. Infer unintended outcomes from short texts.",
    "B1: paragraphing and basic coherence": "PEE (Point-Evidence-Explanation). Write 2x140-word narratives with clear paragraphs.",
    "B2: range of tenses & linking devices": "Vary tenses; use linking (however, therefore). Rewrite to increase variety.",
    "C1: register control and cohesion": "Reduce repetition; use referencing devices. Edit for cohesive flow.",
    "C2: precision and nuance in argumentation": "Strengthen hedging and stance (arguably, ostensibly). Mini-essay polishing.",
}


def build_library(extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Built-in prescriptions with configured entries layered on top."""

    library = dict(PRESCRIPTIONS)
    for topic, text in (extra or {}).items():
        if isinstance(topic, str) and isinstance(text, str) and text.strip():
            library[topic] = text.strip()
    return library


def prescription_for(topic: str, library: Optional[Mapping[str, str]] = None) -> str:
    table = PRESCRIPTIONS if library is None else library
    return table.get(topic, FALLBACK_PRESCRIPTION)


def credited_topics(graded: GradedItem) -> List[str]:
    """Topics one graded item credits: its band topic for writing, its tags when missed."""

    if graded.writing_score is not None:
        return [writing_topic(graded.writing_score)]
    if graded.correct:
        return []
    return list(graded.item.review_tags)


def review_frequency(graded: Iterable[GradedItem]) -> Dict[str, int]:
    hits: Dict[str, int] = {}
    for g in graded:
        for topic in credited_topics(g):
            hits[topic] = hits.get(topic, 0) + 1
    return hits


def rank_review_topics(
    frequency: Mapping[str, int],
    top_n: Optional[int] = None,
    library: Optional[Mapping[str, str]] = None,
) -> List[ReviewEntry]:
    """Most frequent topics first; equal counts keep first-encountered order."""

    n = cfg_defaults.REVIEW_TOP_N if top_n is None else int(top_n)
    ordered = sorted(frequency.items(), key=lambda kv: -kv[1])
    out = [
        ReviewEntry(topic=topic, count=count, prescription=prescription_for(topic, library))
        for topic, count in ordered[: max(n, 0)]
    ]
    missing = [e.topic for e in out if e.prescription == FALLBACK_PRESCRIPTION]
    if missing:
        log.debug("review topics without a prescription: %s", ", ".join(missing))
    return out
