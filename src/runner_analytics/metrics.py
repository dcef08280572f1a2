"""
Run log metrics engine.

Aggregate, derived and per-person statistics over RunEntry sequences. Every
function here is pure and total: empty or degenerate input yields zeros or a
fixed fallback, never an exception or a NaN.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Sequence

import numpy as np

from runner_analytics.constants import (
    CONSISTENCY_MAX,
    CONSISTENCY_MIN,
    PACE_REFERENCE_MINUTES,
    TREND_THRESHOLD_PCT,
)
from runner_analytics.records import RunEntry, as_utc, entries_to_frame


class Trend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass(frozen=True)
class Metrics:
    count: int
    total: float
    average: float
    min: float
    max: float


@dataclass(frozen=True)
class AdvancedMetrics(Metrics):
    pace: float
    consistency: int
    trend: Trend
    weekly_average: float
    best_week: float
    worst_week: float


EMPTY_METRICS = Metrics(count=0, total=0.0, average=0.0, min=0.0, max=0.0)


def round_half_away(value: float, ndigits: int = 2) -> float:
    """
    Round on the scaled binary value, halves away from zero.

    1.005 is stored as 1.00499999..., so it rounds to 1.0. Non-finite input
    collapses to 0.0.
    """
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0

    factor = 10 ** ndigits
    rounded = math.floor(abs(value) * factor + 0.5) / factor
    if rounded == 0:
        return 0.0
    return math.copysign(rounded, value)


def chronological(entries: Iterable[RunEntry]) -> List[RunEntry]:
    """Stable sort by UTC instant; equal timestamps keep input order."""
    return sorted(entries, key=lambda entry: as_utc(entry.date))


def get_week_key(date: datetime) -> str:
    """ISO-8601 week key such as '2025-W01' (Thursday-anchored, UTC calendar)."""
    iso_year, iso_week, _ = as_utc(date).isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def calculate_metrics(entries: Sequence[RunEntry]) -> Metrics:
    if not entries:
        return EMPTY_METRICS

    miles = np.array([entry.miles for entry in entries], dtype=float)
    total = float(miles.sum())
    return Metrics(
        count=int(miles.size),
        total=round_half_away(total),
        average=round_half_away(total / miles.size),
        min=round_half_away(float(miles.min())),
        max=round_half_away(float(miles.max())),
    )


def calculate_consistency(entries: Sequence[RunEntry]) -> int:
    """
    100 - coefficient of variation (%), clamped to [0, 100].

    The mean is the displayed (2 dp) average, and the population standard
    deviation is taken around that same mean. Zero spread scores 100 (this
    covers an all-zero set); a non-positive mean with spread scores 0.
    """
    if not entries:
        return 0

    miles = np.array([entry.miles for entry in entries], dtype=float)
    mean = calculate_metrics(entries).average
    std_dev = float(np.sqrt(np.mean((miles - mean) ** 2)))

    if std_dev == 0:
        return CONSISTENCY_MAX
    if mean <= 0:
        return CONSISTENCY_MIN

    score = 100 - (std_dev / mean) * 100
    score = max(CONSISTENCY_MIN, min(CONSISTENCY_MAX, score))
    return int(round_half_away(score, 0))


def calculate_trend(entries: Sequence[RunEntry]) -> Trend:
    """
    Compare the mean of the later half against the earlier half.

    The split is at n // 2, so for odd n the earlier half is the smaller one.
    """
    ordered = chronological(entries)
    half = len(ordered) // 2
    first_half = ordered[:half]
    second_half = ordered[half:]

    if not first_half:
        return Trend.STABLE

    first_mean = sum(entry.miles for entry in first_half) / len(first_half)
    second_mean = sum(entry.miles for entry in second_half) / len(second_half)

    if first_mean == 0:
        return Trend.IMPROVING if second_mean > 0 else Trend.STABLE

    diff = ((second_mean - first_mean) / first_mean) * 100
    if diff > TREND_THRESHOLD_PCT:
        return Trend.IMPROVING
    if diff < -TREND_THRESHOLD_PCT:
        return Trend.DECLINING
    return Trend.STABLE


def calculate_weekly_totals(entries: Sequence[RunEntry]) -> Dict[str, float]:
    """Miles summed per ISO week key, in chronological order of first run."""
    if not entries:
        return {}

    ordered = chronological(entries)
    frame = entries_to_frame(ordered)
    frame['week'] = [get_week_key(entry.date) for entry in ordered]
    totals = frame.groupby('week', sort=False)['miles'].sum()
    return {str(week): float(miles) for week, miles in totals.items()}


def calculate_advanced_metrics(entries: Sequence[RunEntry]) -> AdvancedMetrics:
    basic = calculate_metrics(entries)

    if not entries:
        return AdvancedMetrics(
            **asdict(basic),
            pace=0.0,
            consistency=0,
            trend=Trend.STABLE,
            weekly_average=0.0,
            best_week=0.0,
            worst_week=0.0,
        )

    pace = PACE_REFERENCE_MINUTES / basic.average if basic.average > 0 else 0.0
    weekly = list(calculate_weekly_totals(entries).values())

    return AdvancedMetrics(
        **asdict(basic),
        pace=round_half_away(pace),
        consistency=calculate_consistency(entries),
        trend=calculate_trend(entries),
        weekly_average=round_half_away(sum(weekly) / len(weekly)),
        best_week=round_half_away(max(weekly)),
        worst_week=round_half_away(min(weekly)),
    )


def group_by_person(entries: Iterable[RunEntry]) -> Dict[str, List[RunEntry]]:
    """Partition by exact person string, first-seen order, input order within."""
    groups: Dict[str, List[RunEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.person, []).append(entry)
    return groups


def calculate_metrics_by_person(entries: Iterable[RunEntry]) -> Dict[str, Metrics]:
    return {
        person: calculate_metrics(runs)
        for person, runs in group_by_person(entries).items()
    }


def calculate_advanced_metrics_by_person(entries: Iterable[RunEntry]) -> Dict[str, AdvancedMetrics]:
    return {
        person: calculate_advanced_metrics(runs)
        for person, runs in group_by_person(entries).items()
    }
