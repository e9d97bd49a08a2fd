"""PlanRecord — the synchronizable description of one house plan variant.

A PlanRecord is built fresh from live model state on every run, sent to the
plan store as a single row, then discarded.  The plain-data types the model
collaborator hands back (bounding boxes, levels, regions, reports) live here
too so the extraction code never touches a host object.
"""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, Field

ZERO_DIMENSION = "0'-0\""

# Required string fields and the labels shown to the user when blank.
REQUIRED_FIELDS: dict[str, str] = {
    "plan_name": "Plan Name",
    "spec_level": "Spec Level",
    "client": "Client",
    "division": "Division",
    "subdivision": "Subdivision",
}


class BoundingBox(BaseModel):
    """Axis-aligned bounding box, in feet."""

    min_x: float = 0.0
    min_y: float = 0.0
    min_z: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    max_z: float = 0.0

    def union(self, other: BoundingBox) -> BoundingBox:
        """Return the component-wise min/max envelope of both boxes."""
        return BoundingBox(
            min_x=min(self.min_x, other.min_x),
            min_y=min(self.min_y, other.min_y),
            min_z=min(self.min_z, other.min_z),
            max_x=max(self.max_x, other.max_x),
            max_y=max(self.max_y, other.max_y),
            max_z=max(self.max_z, other.max_z),
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def depth(self) -> float:
        return self.max_y - self.min_y


class Level(BaseModel):
    """A named level (story, roof, foundation, plate...)."""

    name: str = ""
    elevation: float | None = None


class SpatialRegion(BaseModel):
    """A room-like region.  Area is in square feet; <= 0 means unplaced."""

    name: str = ""
    area: float = 0.0


class Report(BaseModel):
    """A printed tabular schedule: a title and a grid of text cells."""

    title: str = ""
    rows: list[list[str]] = Field(default_factory=list)


class NaturalKey(NamedTuple):
    """Fields that identify a plan row in the store."""

    plan_name: str
    spec_level: str
    subdivision: str


class PlanRecord(BaseModel):
    """House plan data extracted from a model.

    The triple (plan_name, spec_level, subdivision) is the natural key.
    """

    plan_name: str = ""
    spec_level: str = ""
    client: str = ""
    division: str = ""
    subdivision: str = ""
    garage_loading: str = ""

    overall_width: str = ZERO_DIMENSION
    overall_depth: str = ZERO_DIMENSION
    stories: int = Field(default=0, ge=0)
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: float = Field(default=0.0, ge=0)
    garage_bays: int = Field(default=0, ge=0)
    living_area: int = Field(default=0, ge=0)
    total_area: int = Field(default=0, ge=0)

    @property
    def natural_key(self) -> NaturalKey:
        return NaturalKey(self.plan_name, self.spec_level, self.subdivision)

    def missing_fields(self) -> list[str]:
        """Return labels of required fields that are blank."""
        return [
            label
            for attr, label in REQUIRED_FIELDS.items()
            if not getattr(self, attr).strip()
        ]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def non_key_fields(self) -> dict[str, object]:
        """All fields except the natural key, as a plain dict."""
        return self.model_dump(exclude=set(NaturalKey._fields))

    def __str__(self) -> str:
        return (
            f"{self.plan_name} - {self.spec_level} | {self.living_area} SF | "
            f"{self.bedrooms}BR/{_fmt_baths(self.bathrooms)}BA | {self.stories} Story"
        )

    def to_detailed_string(self) -> str:
        """Multi-line description used in confirmation prompts."""
        lines = [
            f"Plan Name: {self.plan_name}",
            f"Spec Level: {self.spec_level}",
            f"Client: {self.client or 'N/A'}",
            f"Division: {self.division or 'N/A'}",
            f"Subdivision: {self.subdivision or 'N/A'}",
            f"Garage Loading: {self.garage_loading or 'N/A'}",
            "",
            f"Dimensions: {self.overall_width} W x {self.overall_depth} D",
            f"Total Area: {self.total_area:,} SF",
            f"Living Area: {self.living_area:,} SF",
            f"Bedrooms: {self.bedrooms}",
            f"Bathrooms: {_fmt_baths(self.bathrooms)}",
            f"Stories: {self.stories}",
            f"Garage Bays: {self.garage_bays}",
        ]
        return "\n".join(lines)


def _fmt_baths(value: float) -> str:
    """2.0 -> '2', 2.5 -> '2.5'."""
    return f"{value:g}"
