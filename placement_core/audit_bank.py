from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Iterable, Mapping, Optional

from . import config
from .question_bank import load_bank
from .heuristics import WRITING_TOPICS
from .remediation import PRESCRIPTIONS, build_library
from .types import ITEM_TYPES, QuestionItem, UnknownAnswer


def _blank_skill() -> dict[str, object]:
    return {
        "types": {t: 0 for t in ITEM_TYPES},
        "units": 0,
        "missing_key": 0,
    }


def audit_items(
    items: Iterable[QuestionItem], library: Optional[Mapping[str, str]] = None
) -> dict[str, object]:
    table = PRESCRIPTIONS if library is None else library
    coverage: dict[str, dict[str, object]] = {}
    totals = {t: 0 for t in ITEM_TYPES}
    unresolved: dict[str, list[str]] = {}

    for item in items:
        skill_data = coverage.setdefault(item.skill, _blank_skill())
        skill_data["types"][item.type] += 1  # type: ignore[index]
        totals[item.type] += 1
        if item.is_writing:
            skill_data["units"] += config.WRITING_UNITS  # type: ignore[operator]
            continue
        skill_data["units"] += int(item.blank_count or 1)  # type: ignore[operator]
        if isinstance(item.answer_spec, UnknownAnswer):
            skill_data["missing_key"] += 1  # type: ignore[operator]
        for tag in item.review_tags:
            if tag not in table:
                unresolved.setdefault(tag, []).append(item.id)

    warnings: list[str] = []
    for skill in config.PRIMARY_SKILLS:
        if skill not in coverage:
            warnings.append(f"{skill} has no items and will be left out of the overall mean")
    for skill, data in coverage.items():
        missing = data["missing_key"]
        if missing:
            warnings.append(f"{skill} has {missing} item(s) without a usable answer key")
    for tag, ids in unresolved.items():
        warnings.append(f"review tag {tag!r} ({', '.join(ids)}) uses the generic prescription")
    for topic in WRITING_TOPICS.values():
        if topic not in table:
            warnings.append(f"writing topic {topic!r} uses the generic prescription")

    return {"coverage": coverage, "warnings": warnings, "totals": totals}


def print_report(summary: dict[str, object]) -> None:
    coverage: dict[str, dict[str, object]] = summary["coverage"]  # type: ignore[assignment]
    print("=== Question Set Coverage ===")
    for skill in sorted(coverage):
        data = coverage[skill]
        counts = data["types"]  # type: ignore[assignment]
        parts = [f"{t}:{n}" for t, n in counts.items() if n]  # type: ignore[union-attr]
        print(f"\nSkill: {skill}  units={data['units']}")
        print("  " + "  ".join(parts))

    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")

    print("\nTotals:", summary["totals"])


def write_summary(summary: dict[str, object], path: Path) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    cfg = config.load_config()
    qs = load_bank(args[0] if args else cfg.get("QUESTION_SET_PATH"))
    summary = audit_items(qs.items, build_library(cfg.get("PRESCRIPTIONS")))
    print_report(summary)
    if len(args) > 1:
        write_summary(summary, Path(args[1]))
    return 2 if summary["warnings"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
