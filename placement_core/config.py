from __future__ import annotations
import os, json, pathlib


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _top_n(value: object, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        n = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return default
    return max(1, n)


PRIMARY_SKILLS: tuple[str, ...] = ("Grammar", "Use of English", "Vocabulary", "Reading", "Listening")
WRITING_SKILL: str = "Writing"
WRITING_UNITS: int = 6

# (label, min, max) inclusive integer percent ranges, lowest first
LEVEL_BANDS: tuple[tuple[str, int, int], ...] = (
    ("A1", 0, 29),
    ("A2", 30, 44),
    ("B1", 45, 59),
    ("B2", 60, 74),
    ("C1", 75, 89),
    ("C2", 90, 100),
)

# (writing pct lower bound, points); first match wins, below all bounds -> WRITING_PENALTY
WRITING_ADJUSTMENTS: tuple[tuple[int, int], ...] = ((80, 3), (60, 1), (40, 0))
WRITING_PENALTY: int = -3

WRITING_LONG_WORDS: int = 110
WRITING_EXTRA_WORDS: int = 140
WRITING_MIN_CONNECTIVES: int = 2
WRITING_MIN_TENSES: int = 3
WRITING_MAX_SCORE: int = 6

CONNECTIVES: tuple[str, ...] = (
    "however", "therefore", "moreover", "in addition", "although",
    "whereas", "despite", "furthermore", "consequently", "on the other hand",
)
# trailing space keeps "will" from matching "willing"
TENSE_MARKERS: tuple[str, ...] = ("have ", "had ", "will ", "would ", "was ", "were ", "am ", "is ", "are ")

NESTED_SEPARATOR: str = "|"
ANSWER_JOINER: str = " | "
NO_ANSWER_TEXT: str = "(no answer)"

REVIEW_TOP_N: int = 18

QUESTION_SET_PATH: str = str(pathlib.Path(__file__).with_name("data") / "questions.json")

DEBUG_TRACE: bool = False
TRACE_FIELDS: tuple[str, ...] = (
    "item_id",
    "type",
    "skill",
    "units",
    "credit",
    "correct",
)
# // env overrides for staging/ops; defaults match the paper test.
REVIEW_TOP_N = max(1, _env_int("REVIEW_TOP_N", REVIEW_TOP_N))
QUESTION_SET_PATH = os.getenv("QUESTION_SET_PATH") or QUESTION_SET_PATH
DEBUG_TRACE = _env_bool("DEBUG_TRACE", False)


def load_config() -> dict:
    cfg = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError): cfg = {}
    if not isinstance(cfg, dict):
        cfg = {}
    e = os.environ
    if e.get("REVIEW_TOP_N"): cfg["REVIEW_TOP_N"] = _env_int("REVIEW_TOP_N", REVIEW_TOP_N)
    if e.get("QUESTION_SET_PATH"): cfg["QUESTION_SET_PATH"] = e.get("QUESTION_SET_PATH")
    cfg["REVIEW_TOP_N"] = _top_n(cfg.get("REVIEW_TOP_N"), REVIEW_TOP_N)
    cfg.setdefault("QUESTION_SET_PATH", QUESTION_SET_PATH)
    if not isinstance(cfg.get("PRESCRIPTIONS"), dict):
        cfg["PRESCRIPTIONS"] = {}
    return cfg
