"""Canonical run record and its date policy."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

import pandas as pd
from dateutil import parser as date_parser


RELATIVE_DATE_WORDS = frozenset({'now', 'today', 'tomorrow', 'yesterday'})

# fields missing from a free-form date are filled from here, never from the clock
FREE_FORM_DEFAULT = datetime(2001, 1, 1)


@dataclass(frozen=True)
class RunEntry:
    """One run: when, who, and how far (miles)."""

    date: datetime
    person: str
    miles: float

    @property
    def day(self) -> str:
        """UTC calendar day as YYYY-MM-DD."""
        return self.date.strftime('%Y-%m-%d')


def parse_run_date(value) -> datetime:
    """
    Resolve a date cell to a timezone-aware UTC datetime.

    Strings without an offset are read as UTC, so a bare YYYY-MM-DD becomes UTC
    midnight. Raises ValueError when the value is not a calendar date.
    """
    text = str(value or '').strip()
    if not text:
        raise ValueError('empty date')
    if text.lower() in RELATIVE_DATE_WORDS:
        raise ValueError(f'relative date {text!r}')

    try:
        stamp = pd.to_datetime(text, utc=True, format='ISO8601')
    except (ValueError, TypeError, OverflowError):
        return _parse_free_form_date(text)

    # pandas accepts 'NaT', 'nan', 'null' and friends without raising
    if pd.isna(stamp):
        raise ValueError(f'unparseable date {text!r}')

    return stamp.to_pydatetime()


def _parse_free_form_date(text: str) -> datetime:
    """Non-ISO spellings such as 'Jan 5, 2024' or '01/05/2024'."""
    try:
        parsed = date_parser.parse(text, default=FREE_FORM_DEFAULT)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f'unparseable date {text!r}') from exc
    return as_utc(parsed)


def is_valid_date(value) -> bool:
    """True for a real, non-NaT datetime instance."""
    if not isinstance(value, datetime):
        return False
    return not pd.isna(value)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def entries_to_frame(entries: Iterable[RunEntry]) -> pd.DataFrame:
    """Tabular view of entries with columns date, person, miles."""
    rows = [
        {'date': entry.date, 'person': entry.person, 'miles': entry.miles}
        for entry in entries
    ]
    return pd.DataFrame(rows, columns=['date', 'person', 'miles'])
