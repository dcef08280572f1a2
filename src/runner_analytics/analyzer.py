"""
Run Log Analyzer - Report Engine
Parses a run log CSV, gates it through validation, and emits a text report.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from runner_analytics.constants import TREND_ICONS
from runner_analytics.csv_parser import FormatError, parse_csv
from runner_analytics.forecast import PerformancePrediction, calculate_performance_prediction
from runner_analytics.metrics import (
    AdvancedMetrics,
    calculate_advanced_metrics,
    group_by_person,
)
from runner_analytics.records import RunEntry
from runner_analytics.series import consistency_label, monthly_confidence
from runner_analytics.validation import validate_entries


logger = logging.getLogger(__name__)


@dataclass
class AnalysisReport:
    entries: List[RunEntry]
    overall: AdvancedMetrics
    prediction: PerformancePrediction
    by_person: Dict[str, AdvancedMetrics] = field(default_factory=dict)
    predictions_by_person: Dict[str, PerformancePrediction] = field(default_factory=dict)


class RunLogAnalyzer:
    """Runs the parse -> validate -> metrics pipeline and reports the numbers."""

    def __init__(self, output_callback=None):
        """
        Initialize analyzer.

        Args:
            output_callback: Optional function to call with output lines
        """
        self.output_callback = output_callback or self._default_output

    def _default_output(self, text: str):
        print(text)

    def _emit(self, text: str):
        self.output_callback(text)

    def analyze_file(self, filename: str, person: Optional[str] = None) -> Optional[AnalysisReport]:
        """
        Analyze a single run log CSV file.

        Returns:
            AnalysisReport, or None when the file is unreadable or rejected
        """
        try:
            with open(filename, 'r', encoding='utf-8-sig') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            self._emit(f"❌ Error opening {filename}: {e}")
            return None

        self._emit(f"📂 {os.path.basename(filename)}")
        return self.analyze_text(text, person=person)

    def analyze_text(self, text: str, person: Optional[str] = None) -> Optional[AnalysisReport]:
        """Analyze CSV text; ``person`` limits the per-person section to one runner."""
        try:
            entries = parse_csv(text)
        except FormatError as e:
            self._emit(f"❌ {e}")
            return None

        validation = validate_entries(entries)
        if not validation.valid:
            self._emit(f"❌ {validation.error}")
            return None

        groups = group_by_person(entries)
        if person is not None and person not in groups:
            self._emit(f"❌ No runs found for {person!r}")
            return None

        report = AnalysisReport(
            entries=entries,
            overall=calculate_advanced_metrics(entries),
            prediction=calculate_performance_prediction(entries),
        )
        for name in sorted(groups):
            if person is not None and name != person:
                continue
            report.by_person[name] = calculate_advanced_metrics(groups[name])
            report.predictions_by_person[name] = calculate_performance_prediction(groups[name])

        logger.debug("Analyzed %d runs across %d people", len(entries), len(groups))

        self._emit_block("ALL RUNNERS", report.overall, report.prediction)
        for name, metrics in report.by_person.items():
            self._emit_block(name, metrics, report.predictions_by_person[name])
        return report

    def _emit_block(self, title: str, metrics: AdvancedMetrics, prediction: PerformancePrediction):
        trend = metrics.trend.value
        self._emit(f"\n🏃 REPORT: {title}")
        self._emit("-" * 50)
        self._emit(f"Runs:     {metrics.count}  |  Total: {metrics.total:.2f} mi  |  Avg: {metrics.average:.2f} mi")
        self._emit(f"Range:    {metrics.min:.1f} - {metrics.max:.1f} mi  |  Pace: {metrics.pace:.2f} min/mi")
        self._emit(f"Weekly:   Avg {metrics.weekly_average:.2f} mi  |  Best {metrics.best_week:.2f}  |  Worst {metrics.worst_week:.2f}")
        self._emit(f"Form:     Consistency {metrics.consistency}% ({consistency_label(metrics.consistency)})  |  Trend {TREND_ICONS[trend]} {trend}")

        if prediction.confidence or prediction.next_week_prediction or prediction.next_month_prediction:
            self._emit(
                f"Forecast: Next week {prediction.next_week_prediction:.2f} mi ({prediction.confidence}%)"
                f"  |  Next month {prediction.next_month_prediction:.2f} mi ({monthly_confidence(prediction.confidence)}%)"
            )
        else:
            self._emit("Forecast: ⚠️ Not enough runs (need 3+)")
