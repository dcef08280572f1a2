"""Session data lifecycle for the upload and dashboard views."""

from __future__ import annotations

import logging
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from runner_analytics import series
from runner_analytics.csv_parser import FormatError, parse_csv
from runner_analytics.forecast import calculate_performance_prediction
from runner_analytics.metrics import (
    calculate_advanced_metrics,
    calculate_advanced_metrics_by_person,
)
from runner_analytics.records import RunEntry, entries_to_frame
from runner_analytics.validation import validate_entries


logger = logging.getLogger(__name__)


class View(str, Enum):
    UPLOAD = "upload"
    OVERALL = "overall"
    PERSON = "person"


class DataManager:
    """Owns the loaded run log, the active view, and the last upload error."""

    def __init__(self):
        self.entries: Tuple[RunEntry, ...] = ()
        self.error: str = ""
        self.view = View.UPLOAD
        self.selected_person: Optional[str] = None
        self.df: Optional[pd.DataFrame] = None

    @property
    def has_data(self) -> bool:
        return bool(self.entries)

    def _rebuild_dataframe(self) -> None:
        self.df = entries_to_frame(self.entries) if self.entries else None

    def load_text(self, text: str) -> bool:
        """
        Parse and validate an uploaded CSV body.

        On failure the message is kept verbatim, any dataset is dropped and the
        session goes back to the upload view. Returns True when data was accepted.
        """
        self.error = ""

        try:
            parsed = parse_csv(text)
        except FormatError as exc:
            self._reject(str(exc))
            return False

        validation = validate_entries(parsed)
        if not validation.valid:
            self._reject(validation.error or "Invalid CSV format")
            return False

        self.entries = tuple(parsed)
        self._rebuild_dataframe()
        self.view = View.OVERALL
        people = self.people()
        self.selected_person = people[0] if people else None
        logger.info("Loaded %d runs for %d people", len(self.entries), len(people))
        return True

    def _reject(self, message: str) -> None:
        logger.info("Upload rejected: %s", message)
        self.entries = ()
        self._rebuild_dataframe()
        self.selected_person = None
        self.view = View.UPLOAD
        self.error = message

    def reset(self) -> None:
        """Discard the dataset and return to the upload view."""
        self.entries = ()
        self._rebuild_dataframe()
        self.error = ""
        self.selected_person = None
        self.view = View.UPLOAD

    def set_view(self, view) -> View:
        view = View(view)
        if view is not View.UPLOAD and not self.has_data:
            raise ValueError("No data loaded; upload a CSV first")
        self.view = view
        return self.view

    def people(self) -> List[str]:
        if self.df is None:
            return []
        return sorted(self.df['person'].unique())

    def select_person(self, person: str) -> str:
        if person not in self.people():
            raise ValueError(f"Unknown person: {person!r}")
        self.selected_person = person
        return person

    def entries_for(self, person: str) -> List[RunEntry]:
        """Runs for one person in upload order, selected through the DataFrame cache."""
        if self.df is None:
            return []
        positions = self.df.index[self.df['person'] == person]
        return [self.entries[i] for i in positions]

    def overall_summary(self) -> Dict[str, Any]:
        """Numbers for the overall dashboard: all runners together."""
        metrics = calculate_advanced_metrics(self.entries)
        prediction = calculate_performance_prediction(self.entries)
        return {
            'metrics': asdict(metrics),
            'prediction': asdict(prediction),
            'consistency_label': series.consistency_label(metrics.consistency),
            'daily_totals': series.daily_totals(self.entries),
            'totals_by_person': series.totals_by_person(self.entries),
            'comparison': series.comparison_rows(self.entries),
        }

    def person_summary(self, person: Optional[str] = None) -> Dict[str, Any]:
        """Numbers for the per-person dashboard; defaults to the selected person."""
        person = person or self.selected_person
        if person is None:
            raise ValueError("No person selected")

        metrics_by_person = calculate_advanced_metrics_by_person(self.entries)
        if person not in metrics_by_person:
            raise ValueError(f"Unknown person: {person!r}")

        runs = self.entries_for(person)
        metrics = metrics_by_person[person]
        prediction = calculate_performance_prediction(runs)
        return {
            'person': person,
            'metrics': asdict(metrics),
            'prediction': asdict(prediction),
            'monthly_confidence': series.monthly_confidence(prediction.confidence),
            'consistency_label': series.consistency_label(metrics.consistency),
            'moving_average': series.moving_average_series(runs),
            'weekly_totals': series.weekly_totals(runs),
        }
