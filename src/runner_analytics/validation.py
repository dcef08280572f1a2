"""Structural gate applied to parsed entries before they are accepted."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Iterable, Optional

from runner_analytics.records import is_valid_date


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None


def _valid_miles(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and value >= 0


def validate_entries(entries: Iterable) -> ValidationResult:
    """
    Re-check every entry; stops at the first violation.

    Works on anything with ``date``, ``person`` and ``miles`` attributes so that
    entries built outside the parser get the same scrutiny.
    """
    count = 0
    for position, entry in enumerate(entries, start=1):
        count = position

        if not is_valid_date(getattr(entry, 'date', None)):
            return ValidationResult(False, f"Invalid date in row {position}")

        person = getattr(entry, 'person', None)
        if not isinstance(person, str) or not person:
            return ValidationResult(False, f"Invalid person name in row {position}")

        if not _valid_miles(getattr(entry, 'miles', None)):
            return ValidationResult(False, f"Invalid miles value in row {position}")

    if count == 0:
        return ValidationResult(False, "No valid data rows found")
    return ValidationResult(True)
