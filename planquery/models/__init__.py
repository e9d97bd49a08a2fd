"""Plain data types shared across extraction and synchronization."""

from planquery.models.plan import (
    BoundingBox,
    Level,
    NaturalKey,
    PlanRecord,
    Report,
    SpatialRegion,
)

__all__ = [
    "BoundingBox",
    "Level",
    "NaturalKey",
    "PlanRecord",
    "Report",
    "SpatialRegion",
]
