"""
Run log CSV ingestion.

Turns one complete CSV text blob into RunEntry records. The first violation
aborts the parse; no partial results are returned.
"""

from __future__ import annotations

import logging
import math
import re
from typing import List, Optional, Sequence, Tuple

from runner_analytics.constants import DATE_COLUMN, MILES_COLUMNS, PERSON_COLUMN
from runner_analytics.records import RunEntry, parse_run_date


logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class FormatError(ValueError):
    """Malformed CSV input. ``row`` is the 1-based line number (header is row 1)."""

    def __init__(self, message: str, row: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.row = row


def _fail(message: str, row: Optional[int] = None) -> FormatError:
    logger.warning("CSV rejected: %s", message)
    return FormatError(message, row=row)


def _split(line: str) -> List[str]:
    return [cell.strip() for cell in line.split(',')]


def resolve_columns(header: Sequence[str]) -> Tuple[int, int, int]:
    """Return (date, person, miles) column indexes; 'miles' wins over 'mi'."""
    tokens = [h.strip().lower() for h in header]
    date_idx = tokens.index(DATE_COLUMN) if DATE_COLUMN in tokens else -1
    person_idx = tokens.index(PERSON_COLUMN) if PERSON_COLUMN in tokens else -1

    miles_idx = -1
    for name in MILES_COLUMNS:
        if name in tokens:
            miles_idx = tokens.index(name)
            break

    if date_idx == -1 or person_idx == -1 or miles_idx == -1:
        raise _fail("Missing required columns: date, person, miles (or mi)")
    return date_idx, person_idx, miles_idx


def parse_miles(value: str) -> float:
    """Non-negative finite float, or ValueError."""
    if not NUMBER_PATTERN.fullmatch(value):
        raise ValueError(f"not a number: {value!r}")
    miles = float(value)
    if not math.isfinite(miles) or miles < 0:
        raise ValueError(f"miles out of range: {value!r}")
    return miles


def parse_csv(text: str) -> List[RunEntry]:
    """
    Parse run log text into entries, in input row order.

    Raises:
        FormatError: empty input, missing columns, or the first bad row.
    """
    lines = (text or '').strip().splitlines()
    non_empty = [line for line in lines if line.strip()]
    if len(non_empty) < 2:
        raise _fail("CSV file is empty or has no data rows")

    header = _split(lines[0].lower())
    date_idx, person_idx, miles_idx = resolve_columns(header)

    entries: List[RunEntry] = []
    for i in range(1, len(lines)):
        line = lines[i].strip()
        if not line:
            continue
        row = i + 1
        values = _split(line)

        if len(values) != len(header):
            raise _fail(f"Row {row}: Column count mismatch", row=row)

        date_str = values[date_idx]
        person = values[person_idx]
        miles_str = values[miles_idx]

        try:
            date = parse_run_date(date_str)
        except ValueError:
            raise _fail(f'Row {row}: Invalid date format "{date_str}"', row=row) from None

        try:
            miles = parse_miles(miles_str)
        except ValueError:
            raise _fail(f'Row {row}: Invalid miles value "{miles_str}"', row=row) from None

        if not person:
            raise _fail(f"Row {row}: Person name is required", row=row)

        entries.append(RunEntry(date=date, person=person, miles=miles))

    logger.debug("Parsed %d run entries from %d lines", len(entries), len(lines))
    return entries
