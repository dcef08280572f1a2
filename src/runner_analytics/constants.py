"""Shared thresholds, column names, and labels for runner analytics."""

from __future__ import annotations

from typing import Dict, Tuple

# --- CSV columns (header tokens are lowercased and trimmed) ---
DATE_COLUMN = 'date'
PERSON_COLUMN = 'person'
MILES_COLUMNS: Tuple[str, ...] = ('miles', 'mi')  # preference order

# --- Metrics heuristics ---
PACE_REFERENCE_MINUTES = 30.0   # assumed duration of every run
TREND_THRESHOLD_PCT = 10.0      # exclusive on both sides
CONSISTENCY_MAX = 100
CONSISTENCY_MIN = 0

# --- Forecast ---
FORECAST_MIN_ENTRIES = 3
NEXT_WEEK_HORIZON = 7
NEXT_MONTH_HORIZON = 30
MONTHLY_CONFIDENCE_FACTOR = 0.85

# --- Chart series ---
MOVING_AVERAGE_WINDOW = 3

CONSISTENCY_LABELS: Tuple[Tuple[int, str], ...] = (
    (80, 'Excellent'),
    (60, 'Good'),
    (0, 'Improving'),
)

TREND_ICONS: Dict[str, str] = {
    'improving': '📈',
    'declining': '📉',
    'stable': '➡️',
}
