"""Plan data extraction: dimensions, area schedules, room classification."""

from planquery.extraction.areas import (
    extract_living_area,
    extract_subtotal,
    extract_total_area,
    find_floor_area_report,
    parse_area_value,
)
from planquery.extraction.builder import PlanRecordBuilder, build_plan_record
from planquery.extraction.dimensions import format_dimension
from planquery.extraction.rooms import RoomCounts, classify, count_garage_doors

__all__ = [
    "PlanRecordBuilder",
    "RoomCounts",
    "build_plan_record",
    "classify",
    "count_garage_doors",
    "extract_living_area",
    "extract_subtotal",
    "extract_total_area",
    "find_floor_area_report",
    "format_dimension",
    "parse_area_value",
]
