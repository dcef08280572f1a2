"""Linear-trend forecast of upcoming run distances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from runner_analytics.constants import (
    FORECAST_MIN_ENTRIES,
    NEXT_MONTH_HORIZON,
    NEXT_WEEK_HORIZON,
)
from runner_analytics.metrics import (
    calculate_consistency,
    chronological,
    round_half_away,
)
from runner_analytics.records import RunEntry


@dataclass(frozen=True)
class PerformancePrediction:
    next_week_prediction: float
    next_month_prediction: float
    confidence: int


NO_PREDICTION = PerformancePrediction(
    next_week_prediction=0.0,
    next_month_prediction=0.0,
    confidence=0,
)


def linear_regression(xs: Sequence[float], ys: Sequence[float]) -> Tuple[float, float]:
    """
    Closed-form ordinary least squares for y ~ x.

    Returns (slope, intercept). When every x is identical the slope is
    undefined; the fit falls back to a flat line through mean(y).
    """
    n = min(len(xs), len(ys))
    if n == 0:
        return 0.0, 0.0

    xs = [float(x) for x in xs[:n]]
    ys = [float(y) for y in ys[:n]]
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return 0.0, sum_y / n

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def calculate_performance_prediction(entries: Sequence[RunEntry]) -> PerformancePrediction:
    """
    Extrapolate miles ~ rank to ranks n+7 and n+30.

    Ranks are 1..n in chronological order, regardless of the calendar spacing
    between runs. Confidence is the consistency score of the same entries.
    """
    if len(entries) < FORECAST_MIN_ENTRIES:
        return NO_PREDICTION

    ordered = chronological(entries)
    n = len(ordered)
    ranks = range(1, n + 1)
    slope, intercept = linear_regression(list(ranks), [entry.miles for entry in ordered])

    next_week = max(0.0, intercept + slope * (n + NEXT_WEEK_HORIZON))
    next_month = max(0.0, intercept + slope * (n + NEXT_MONTH_HORIZON))

    return PerformancePrediction(
        next_week_prediction=round_half_away(next_week),
        next_month_prediction=round_half_away(next_month),
        confidence=calculate_consistency(entries),
    )
