"""Read living and total covered area from a floor-area schedule.

The schedule is a printed grid of text cells.  Column 0 holds the row label
and the last column holds the area value, e.g.::

    Living          |            <- single story: value sits on this row
    First Floor     | 1400 SF       multi story: per-floor rows follow,
    Second Floor    | 800 SF
                    | 2200 SF    <- blank label = subtotal for "Living"
    Garage          | 480 SF
    Total Covered   | 2906 SF

Depending on the story count the subtotal may sit on the label row itself or
on a blank-label row further down, so no fixed row offset is assumed.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from planquery.config import (
    AREA_UNIT_SUFFIX,
    FLOOR_AREA_REPORT_PREFIX,
    FLOOR_SECTION_MARKER,
    LIVING_LABEL,
    TOTAL_COVERED_LABEL,
)
from planquery.models.plan import Report

logger = logging.getLogger(__name__)

Row = Sequence[str]

# Areas are whole, non-negative square feet.
_DIGITS = re.compile(r"\d+", re.ASCII)


def _label(row: Row) -> str:
    return row[0].strip() if row else ""


def _value(row: Row) -> str:
    # A single-cell row has no separate value column.
    if len(row) < 2:
        return ""
    return row[-1].strip()


def parse_area_value(text: str | None) -> int:
    """Parse ``"2,206 SF"`` -> 2206.  Anything unparseable yields 0."""
    if not text:
        return 0
    cleaned = text.replace(AREA_UNIT_SUFFIX, "").replace(",", "").strip()
    if not _DIGITS.fullmatch(cleaned):
        return 0
    return int(cleaned)


def extract_subtotal(
    rows: Sequence[Row],
    label: str,
    *,
    scan_forward: bool = True,
) -> int:
    """Return the area subtotal for the row labelled *label*.

    Parameters
    ----------
    rows:
        Report grid, top to bottom.
    label:
        Row label to look for; compared trimmed and case-insensitively.
    scan_forward:
        When the labelled row has no value of its own, look further down for
        a blank-label subtotal row.  Scanning stops at the first row that
        starts an unrelated section (a non-empty label without "Floor").
    """
    wanted = label.strip().lower()

    for index, row in enumerate(rows):
        if _label(row).lower() != wanted:
            continue

        own_value = _value(row)
        if own_value or not scan_forward:
            return parse_area_value(own_value)

        for following in rows[index + 1:]:
            follow_label = _label(following)
            follow_value = _value(following)
            if not follow_label and follow_value:
                return parse_area_value(follow_value)
            if follow_label and FLOOR_SECTION_MARKER.lower() not in follow_label.lower():
                logger.debug(
                    "Subtotal for %r not found before section %r", label, follow_label,
                )
                return 0
        return 0

    return 0


def extract_living_area(rows: Sequence[Row]) -> int:
    """Living area, single- or multi-story layout."""
    return extract_subtotal(rows, LIVING_LABEL)


def extract_total_area(rows: Sequence[Row]) -> int:
    """Value of the first "Total Covered" row, or 0."""
    return extract_subtotal(rows, TOTAL_COVERED_LABEL, scan_forward=False)


def _has_area_values(report: Report) -> bool:
    return any(parse_area_value(_value(row)) > 0 for row in report.rows)


def find_floor_area_report(reports: Sequence[Report]) -> Report | None:
    """Return the first "Floor Areas..." report that holds real area values.

    Projects often carry template copies of the schedule that were never
    populated; those are skipped.
    """
    prefix = FLOOR_AREA_REPORT_PREFIX.lower()
    for report in reports:
        if not report.title.lower().startswith(prefix):
            continue
        if _has_area_values(report):
            logger.debug("Using floor area report %r", report.title)
            return report
        logger.debug("Skipping empty floor area report %r", report.title)
    return None
