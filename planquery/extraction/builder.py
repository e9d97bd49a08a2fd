"""PlanRecordBuilder — assemble a PlanRecord from a ModelSource.

Usage::

    from planquery.extraction import build_plan_record

    record = build_plan_record(SnapshotModelSource.load("aspen.json"))
    if record.missing_fields():
        ...
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Iterable

from planquery.config import (
    ATTR_BUILDING_NAME,
    ATTR_CLIENT,
    ATTR_DIVISION,
    ATTR_GARAGE_LOADING,
    ATTR_PLAN_NAME,
    ATTR_SPEC_LEVEL,
    ATTR_SUBDIVISION,
    MODEL_FILE_EXTENSIONS,
    NON_STORY_LEVEL_KEYWORDS,
)
from planquery.extraction.areas import (
    extract_living_area,
    extract_total_area,
    find_floor_area_report,
)
from planquery.extraction.dimensions import format_dimension
from planquery.extraction.rooms import classify, count_garage_doors, room_area_totals
from planquery.host.base import ModelSource
from planquery.models.plan import ZERO_DIMENSION, BoundingBox, Level, PlanRecord

logger = logging.getLogger(__name__)


def overall_dimensions(walls: Iterable[BoundingBox]) -> tuple[str, str]:
    """Formatted (width, depth) of the envelope around every wall."""
    boxes = list(walls)
    if not boxes:
        return ZERO_DIMENSION, ZERO_DIMENSION
    envelope = reduce(BoundingBox.union, boxes)
    return format_dimension(envelope.width), format_dimension(envelope.depth)


def count_stories(levels: Iterable[Level]) -> int:
    """Levels that are not roofs, foundations, bases or plates."""
    return sum(
        1
        for level in levels
        if not any(k in level.name.lower() for k in NON_STORY_LEVEL_KEYWORDS)
    )


def _strip_extension(title: str) -> str:
    for ext in MODEL_FILE_EXTENSIONS:
        if title.lower().endswith(ext):
            return title[: -len(ext)]
    return title


class PlanRecordBuilder:
    """Build PlanRecords from a model.

    Parameters
    ----------
    area_fallback:
        When the model has no populated floor-area schedule, sum room areas
        instead of reporting zero.
    """

    def __init__(self, *, area_fallback: bool = False) -> None:
        self.area_fallback = area_fallback

    def _attribute(self, model: ModelSource, name: str) -> str:
        return (model.get_attribute(name) or "").strip()

    def _plan_name(self, model: ModelSource) -> str:
        for name in (ATTR_PLAN_NAME, ATTR_BUILDING_NAME):
            value = self._attribute(model, name)
            if value:
                return value
        return _strip_extension(model.title.strip())

    def _areas(self, model: ModelSource) -> tuple[int, int]:
        report = find_floor_area_report(model.reports())
        if report is not None:
            return extract_living_area(report.rows), extract_total_area(report.rows)
        if self.area_fallback:
            logger.info("No floor area schedule; summing room areas")
            return room_area_totals(model.regions())
        logger.warning("No populated floor area schedule found")
        return 0, 0

    def build(self, model: ModelSource) -> PlanRecord:
        """Extract a fresh PlanRecord from *model*."""
        width, depth = overall_dimensions(model.walls())
        counts = classify(model.regions())
        if counts.garage_bays == 0:
            counts.garage_bays = count_garage_doors(model.doors())
            if counts.garage_bays:
                logger.debug("Garage bays counted from %d garage doors", counts.garage_bays)
        living_area, total_area = self._areas(model)

        record = PlanRecord(
            plan_name=self._plan_name(model),
            spec_level=self._attribute(model, ATTR_SPEC_LEVEL),
            client=self._attribute(model, ATTR_CLIENT),
            division=self._attribute(model, ATTR_DIVISION),
            subdivision=self._attribute(model, ATTR_SUBDIVISION),
            garage_loading=self._attribute(model, ATTR_GARAGE_LOADING),
            overall_width=width,
            overall_depth=depth,
            stories=count_stories(model.levels()),
            bedrooms=counts.bedrooms,
            bathrooms=counts.bathrooms,
            garage_bays=counts.garage_bays,
            living_area=living_area,
            total_area=total_area,
        )
        logger.info("Extracted plan record: %s", record)
        return record


def build_plan_record(model: ModelSource, *, area_fallback: bool = False) -> PlanRecord:
    """Shortcut for ``PlanRecordBuilder(area_fallback=...).build(model)``."""
    return PlanRecordBuilder(area_fallback=area_fallback).build(model)
