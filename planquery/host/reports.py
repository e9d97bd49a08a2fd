"""Load schedules exported from the host as CSV."""

from __future__ import annotations

import csv
from pathlib import Path

from planquery.config import FLOOR_AREA_REPORT_PREFIX
from planquery.models.plan import Report


def load_report_csv(path: str | Path, title: str | None = None) -> Report:
    """Read a CSV grid into a Report.

    The title defaults to the file stem, or "Floor Areas" when the stem does
    not already say what the schedule is.
    """
    path = Path(path)
    with path.open(newline="", encoding="utf-8-sig") as fh:
        rows = [list(row) for row in csv.reader(fh)]
    if title is None:
        title = path.stem
        if not title.lower().startswith(FLOOR_AREA_REPORT_PREFIX.lower()):
            title = FLOOR_AREA_REPORT_PREFIX
    return Report(title=title, rows=rows)
