"""Helpers to export review plans and mistake lists in JSON/CSV formats."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union
import csv
import io

from .types import EvaluationResult

MISTAKE_FIELDS: tuple[str, ...] = (
    "item_id",
    "section",
    "level_hint",
    "prompt",
    "your",
    "correct",
)
REVIEW_FIELDS: tuple[str, ...] = ("topic", "count", "prescription")

ResultLike = Union[EvaluationResult, Mapping[str, Any]]


def _as_dict(result: ResultLike) -> Dict[str, Any]:
    if isinstance(result, EvaluationResult):
        return result.to_dict()
    return dict(result or {})


def _normalize_row(row: Mapping[str, Any], fields: Sequence[str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in fields:
        val = row.get(key)
        if key == "count":
            try:
                out[key] = int(val)
            except (TypeError, ValueError):
                out[key] = 0
        else:
            out[key] = "" if val is None else str(val)
    return out


def _rows(result: ResultLike, key: str, fields: Sequence[str]) -> List[Dict[str, Any]]:
    raw = _as_dict(result).get(key) or []
    return [_normalize_row(r or {}, fields) for r in raw if isinstance(r, Mapping) or r is None]


def to_json(result: ResultLike) -> Dict[str, Any]:
    """Return the JSON-safe payload the export renderer consumes."""

    data = _as_dict(result)
    return {
        "overall_percent": data.get("overall_percent", 0),
        "predicted_level": data.get("predicted_level", ""),
        "skills": {
            skill: (row or {}).get("pct", 0)
            for skill, row in (data.get("skill_breakdown") or {}).items()
        },
        "review": _rows(data, "review_plan", REVIEW_FIELDS),
        "mistakes": _rows(data, "mistakes", MISTAKE_FIELDS),
    }


def _csv(rows: Iterable[Dict[str, Any]], fields: Sequence[str]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=list(fields))
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buf.getvalue()


def mistakes_csv(result: ResultLike) -> str:
    """Render mistake records as CSV with a fixed header."""

    return _csv(_rows(result, "mistakes", MISTAKE_FIELDS), MISTAKE_FIELDS)


def review_csv(result: ResultLike) -> str:
    return _csv(_rows(result, "review_plan", REVIEW_FIELDS), REVIEW_FIELDS)


__all__ = ["to_json", "mistakes_csv", "review_csv", "MISTAKE_FIELDS", "REVIEW_FIELDS"]
