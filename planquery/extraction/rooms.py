"""Classify rooms by name into bedrooms, baths and garage bays.

Room names are free text typed by designers ("Primary Bedroom", "Powder
Bath", "3 Car Garage"), so classification is a keyword heuristic.  The
heuristics live in two ordered rule tables so each rule can be tested and
extended on its own:

- ``ROOM_RULES``: keyword -> room category.  Rules sharing a ``group`` are
  exclusive (first match wins); rules in different groups are independent,
  so "Bed/Bath Suite" counts as a bedroom and a full bath.
- ``GARAGE_BAY_RULES``: whole-word keyword -> bay count for garage rooms.
  First match wins; bay counts are summed across all garage rooms.

When no garage room yields a bay count, each door whose type name mentions
a garage counts as one bay instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from planquery.config import NON_LIVING_ROOM_KEYWORDS
from planquery.models.plan import SpatialRegion

logger = logging.getLogger(__name__)

BEDROOM = "bedroom"
FULL_BATH = "full_bath"
HALF_BATH = "half_bath"
GARAGE = "garage"


@dataclass(frozen=True)
class RoomRule:
    """Match when the name contains any of *keywords* and, if given, any of
    *qualifiers*."""

    group: str
    category: str
    keywords: tuple[str, ...]
    qualifiers: tuple[str, ...] = ()

    def matches(self, name: str) -> bool:
        if not any(k in name for k in self.keywords):
            return False
        if self.qualifiers and not any(q in name for q in self.qualifiers):
            return False
        return True


@dataclass(frozen=True)
class GarageBayRule:
    pattern: re.Pattern[str]
    bays: int

    def matches(self, name: str) -> bool:
        return self.pattern.search(name) is not None


ROOM_RULES: tuple[RoomRule, ...] = (
    RoomRule("bedroom", BEDROOM, ("bedroom", "bed")),
    RoomRule("bath", HALF_BATH, ("bath",), ("powder", "half")),
    RoomRule("bath", FULL_BATH, ("bath",)),
    RoomRule("garage", GARAGE, ("garage",)),
)

GARAGE_BAY_RULES: tuple[GarageBayRule, ...] = (
    GarageBayRule(re.compile(r"\b(three|3)\b"), 3),
    GarageBayRule(re.compile(r"\b(two|2)\b"), 2),
    GarageBayRule(re.compile(r"\b(one|1)\b"), 1),
)


@dataclass
class RoomCounts:
    bedrooms: int = 0
    full_baths: int = 0
    half_baths: int = 0
    garage_bays: int = 0

    @property
    def bathrooms(self) -> float:
        """Full baths plus half a bath per powder/half bath."""
        return self.full_baths + 0.5 * self.half_baths


def classify_room(name: str) -> list[str]:
    """Return the categories matched by a room *name*, in rule order."""
    lowered = name.lower()
    matched_groups: set[str] = set()
    categories: list[str] = []
    for rule in ROOM_RULES:
        if rule.group in matched_groups:
            continue
        if rule.matches(lowered):
            matched_groups.add(rule.group)
            categories.append(rule.category)
    return categories


def garage_bays(name: str) -> int:
    """Bay count implied by a garage room name; 0 when no keyword matches."""
    lowered = name.lower()
    for rule in GARAGE_BAY_RULES:
        if rule.matches(lowered):
            return rule.bays
    return 0


def classify(regions: Iterable[SpatialRegion]) -> RoomCounts:
    """Count bedrooms, baths and garage bays over placed regions."""
    counts = RoomCounts()
    for region in regions:
        if region.area <= 0:
            continue
        for category in classify_room(region.name):
            if category == BEDROOM:
                counts.bedrooms += 1
            elif category == FULL_BATH:
                counts.full_baths += 1
            elif category == HALF_BATH:
                counts.half_baths += 1
            elif category == GARAGE:
                bays = garage_bays(region.name)
                if bays == 0:
                    logger.warning(
                        "Garage %r has no recognisable bay count", region.name,
                    )
                counts.garage_bays += bays
    return counts


def room_area_totals(regions: Iterable[SpatialRegion]) -> tuple[int, int]:
    """Return (living, total) square footage summed from region areas.

    Used when a model has no populated floor-area schedule.  Garages,
    porches, patios, decks, attics and crawl spaces count toward the total
    only.
    """
    living = 0.0
    total = 0.0
    for region in regions:
        if region.area <= 0:
            continue
        total += region.area
        lowered = region.name.lower()
        if not any(k in lowered for k in NON_LIVING_ROOM_KEYWORDS):
            living += region.area
    return round(living), round(total)


def count_garage_doors(door_types: Iterable[str]) -> int:
    """One bay per door whose type name mentions a garage.

    Used when no garage room gives a bay count.
    """
    return sum(1 for name in door_types if GARAGE in name.lower())
