"""
Runner Analytics
Metrics, trends and forecasts for a shared running log CSV.
"""

__version__ = "1.0.0"
__author__ = ""

from runner_analytics.csv_parser import FormatError, parse_csv
from runner_analytics.forecast import PerformancePrediction, calculate_performance_prediction
from runner_analytics.metrics import (
    AdvancedMetrics,
    Metrics,
    Trend,
    calculate_advanced_metrics,
    calculate_advanced_metrics_by_person,
    calculate_metrics,
    calculate_metrics_by_person,
)
from runner_analytics.records import RunEntry
from runner_analytics.validation import ValidationResult, validate_entries

__all__ = [
    "AdvancedMetrics",
    "FormatError",
    "Metrics",
    "PerformancePrediction",
    "RunEntry",
    "Trend",
    "ValidationResult",
    "calculate_advanced_metrics",
    "calculate_advanced_metrics_by_person",
    "calculate_metrics",
    "calculate_metrics_by_person",
    "calculate_performance_prediction",
    "parse_csv",
    "validate_entries",
]
