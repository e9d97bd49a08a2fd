"""SnapshotModelSource — a model exported by the host as one JSON file.

Snapshot layout::

    {
      "title": "Aspen.rvt",
      "attributes": {"Project Name": "Aspen", "Spec Level": "Premium", ...},
      "walls":   [{"min_x": 0, "min_y": 0, "max_x": 65.7, "max_y": 48.0}, ...],
      "levels":  [{"name": "Level 1"}, {"name": "Roof"}],
      "regions": [{"name": "Primary Bedroom", "area": 210.5}, ...],
      "doors":   ["Garage Door 16x7", "Single Flush 36x80"],
      "reports": [{"title": "Floor Areas", "rows": [["Living", "1800 SF"]]}]
    }

Every section is optional.  An attribute key that is present with a null
value counts as defined but unset.  "Project Name" and "Building Name" are
always defined, as in every host model. ``doors`` lists the type name of
each door instance.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from planquery.config import BUILT_IN_ATTRIBUTES
from planquery.host.base import AttributeNotDefinedError, ModelSource
from planquery.models.plan import BoundingBox, Level, Report, SpatialRegion

logger = logging.getLogger(__name__)


class ModelSnapshot(BaseModel):
    title: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)
    walls: list[BoundingBox] = Field(default_factory=list)
    levels: list[Level] = Field(default_factory=list)
    regions: list[SpatialRegion] = Field(default_factory=list)
    doors: list[str] = Field(default_factory=list)
    reports: list[Report] = Field(default_factory=list)


class SnapshotModelSource(ModelSource):
    """ModelSource over an in-memory :class:`ModelSnapshot`.

    Parameters
    ----------
    snapshot:
        The model data.
    path:
        File the snapshot was loaded from; :meth:`save` writes back here.
    """

    def __init__(self, snapshot: ModelSnapshot, path: str | Path | None = None) -> None:
        self.snapshot = snapshot
        self.path = Path(path) if path is not None else None

    @classmethod
    def load(cls, path: str | Path) -> SnapshotModelSource:
        """Read a snapshot JSON file."""
        path = Path(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        snapshot = ModelSnapshot.model_validate(data)
        if not snapshot.title:
            snapshot.title = path.name
        logger.info(
            "Loaded snapshot %s: %d walls, %d levels, %d regions, %d reports",
            path, len(snapshot.walls), len(snapshot.levels),
            len(snapshot.regions), len(snapshot.reports),
        )
        return cls(snapshot, path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotModelSource:
        return cls(ModelSnapshot.model_validate(data))

    def save(self) -> None:
        """Write the snapshot back to the file it was loaded from."""
        if self.path is None:
            return
        self.path.write_text(
            json.dumps(self.snapshot.model_dump(mode="json"), indent=2),
            encoding="utf-8",
        )

    # -- ModelSource ----------------------------------------------------------

    @property
    def title(self) -> str:
        return self.snapshot.title

    def get_attribute(self, name: str) -> str | None:
        value = self.snapshot.attributes.get(name)
        if value is None:
            return None
        return str(value)

    def has_attribute(self, name: str) -> bool:
        return name in BUILT_IN_ATTRIBUTES or name in self.snapshot.attributes

    def define_attribute(self, name: str) -> None:
        self.snapshot.attributes.setdefault(name, None)

    def set_attribute(self, name: str, value: str) -> None:
        if not self.has_attribute(name):
            raise AttributeNotDefinedError(name)
        self.snapshot.attributes[name] = value

    def walls(self) -> list[BoundingBox]:
        return list(self.snapshot.walls)

    def levels(self) -> list[Level]:
        return list(self.snapshot.levels)

    def regions(self) -> list[SpatialRegion]:
        return list(self.snapshot.regions)

    def reports(self) -> list[Report]:
        return list(self.snapshot.reports)

    def doors(self) -> list[str]:
        return list(self.snapshot.doors)
