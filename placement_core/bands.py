# placement_core/bands.py
from __future__ import annotations
from typing import Mapping, Optional

from . import config
from .aggregate import round_half_up
from .types import Estimate, SkillScore


def level_from_percent(pct: int) -> str:
    for label, lo, hi in config.LEVEL_BANDS:
        if lo <= pct <= hi:
            return label
    return config.LEVEL_BANDS[0][0]  # lowest

def _assessed(breakdown: Mapping[str, SkillScore], skill: str) -> Optional[SkillScore]:
    s = breakdown.get(skill)
    if s is None or s.total_units <= 0:
        return None
    return s

def primary_mean(breakdown: Mapping[str, SkillScore]) -> int:
    pcts = [s.percent for s in (_assessed(breakdown, k) for k in config.PRIMARY_SKILLS) if s is not None]
    if not pcts:
        return 0
    return round_half_up(sum(pcts) / len(pcts))

def writing_adjustment(writing_pct: int) -> int:
    for lo, points in config.WRITING_ADJUSTMENTS:
        if writing_pct >= lo:
            return points
    return config.WRITING_PENALTY

def estimate(breakdown: Mapping[str, SkillScore]) -> Estimate:
    """Primary-skill mean, nudged by writing quality, clamped and banded."""
    pct = primary_mean(breakdown)
    writing = _assessed(breakdown, config.WRITING_SKILL)
    if writing is not None:
        pct += writing_adjustment(writing.percent)
    pct = max(0, min(100, pct))
    return Estimate(overall_percent=pct, predicted_level=level_from_percent(pct))
