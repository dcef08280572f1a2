"""
Chart-ready series for the dashboards.

These build the numbers the overall and per-person charts plot; drawing them
is left to whatever front end consumes the lists.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, List, Sequence

import pandas as pd

from runner_analytics.constants import (
    CONSISTENCY_LABELS,
    MONTHLY_CONFIDENCE_FACTOR,
    MOVING_AVERAGE_WINDOW,
)
from runner_analytics.metrics import (
    calculate_advanced_metrics_by_person,
    chronological,
    round_half_away,
)
from runner_analytics.records import RunEntry, as_utc, entries_to_frame

__all__ = [
    'comparison_rows',
    'consistency_label',
    'daily_totals',
    'entries_to_frame',
    'monthly_confidence',
    'moving_average_series',
    'people',
    'totals_by_person',
    'weekly_totals',
]


def daily_totals(entries: Sequence[RunEntry]) -> List[Dict[str, Any]]:
    """Total miles per UTC day across all runners, oldest day first."""
    if not entries:
        return []

    frame = entries_to_frame(entries)
    frame['day'] = [as_utc(entry.date).strftime('%Y-%m-%d') for entry in entries]
    totals = frame.groupby('day', sort=True)['miles'].sum()
    return [
        {'date': day, 'miles': round_half_away(miles)}
        for day, miles in totals.items()
    ]


def totals_by_person(entries: Sequence[RunEntry]) -> List[Dict[str, Any]]:
    """Total miles per person, highest first; ties keep first-seen order."""
    if not entries:
        return []

    frame = entries_to_frame(entries)
    totals = frame.groupby('person', sort=False)['miles'].sum()
    rows = [
        {'person': person, 'miles': round_half_away(miles)}
        for person, miles in totals.items()
    ]
    return sorted(rows, key=lambda row: -row['miles'])


def moving_average_series(entries: Sequence[RunEntry], window: int = MOVING_AVERAGE_WINDOW) -> List[Dict[str, Any]]:
    """Each run in date order with the trailing mean of up to ``window`` runs."""
    ordered = chronological(entries)
    if not ordered:
        return []

    miles = pd.Series([entry.miles for entry in ordered], dtype=float)
    trailing = miles.rolling(window=max(1, int(window)), min_periods=1).mean()

    return [
        {
            'date': as_utc(entry.date).strftime('%Y-%m-%d'),
            'miles': round_half_away(entry.miles),
            'moving_avg': round_half_away(avg),
        }
        for entry, avg in zip(ordered, trailing)
    ]


def weekly_totals(entries: Sequence[RunEntry]) -> List[Dict[str, Any]]:
    """Miles per Sunday-start calendar week, oldest week first."""
    if not entries:
        return []

    def _week_start(entry: RunEntry) -> str:
        day = as_utc(entry.date).date()
        # weekday(): Monday=0 .. Sunday=6
        start = day - timedelta(days=(day.weekday() + 1) % 7)
        return start.isoformat()

    frame = entries_to_frame(entries)
    frame['week_start'] = [_week_start(entry) for entry in entries]
    totals = frame.groupby('week_start', sort=True)['miles'].sum()
    return [
        {'week_start': week, 'miles': round_half_away(miles)}
        for week, miles in totals.items()
    ]


def comparison_rows(entries: Sequence[RunEntry]) -> List[Dict[str, Any]]:
    """Per-person total (1 dp) and average per run (2 dp), first-seen order."""
    return [
        {
            'person': person,
            'total_miles': round_half_away(metrics.total, 1),
            'avg_per_run': round_half_away(metrics.average, 2),
        }
        for person, metrics in calculate_advanced_metrics_by_person(entries).items()
    ]


def consistency_label(score) -> str:
    for threshold, label in CONSISTENCY_LABELS:
        if score >= threshold:
            return label
    return CONSISTENCY_LABELS[-1][1]


def monthly_confidence(confidence) -> int:
    """Month-ahead forecasts are shown with a discounted confidence."""
    return int(round_half_away(confidence * MONTHLY_CONFIDENCE_FACTOR, 0))


def people(entries: Sequence[RunEntry]) -> List[str]:
    return sorted({entry.person for entry in entries})
