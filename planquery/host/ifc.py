"""IfcModelSource — read plan data from an IFC2x3 / IFC4 model.

Mapping onto the ModelSource surface:

- walls: ``IfcWall`` instances, bounding box from the triangulated shape
  when the geometry kernel is available
- levels: ``IfcBuildingStorey``
- doors: ``IfcDoor`` type names (``IfcDoorType``, else ``ObjectType``)
- regions: ``IfcSpace`` (``LongName`` falling back to ``Name``) with area
  from ``Qto_SpaceBaseQuantities``
- attributes: "Project Name" is ``IfcProject.Name``, "Building Name" is the
  first ``IfcBuilding.Name``; everything else lives in the
  ``PlanQuery_ProjectInformation`` property set on the project

IFC has no printed schedules, so reports come from the caller (typically a
floor-area schedule exported to CSV alongside the model).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import ifcopenshell
import ifcopenshell.api
import ifcopenshell.util.element
import ifcopenshell.util.unit

from planquery.config import (
    ATTR_BUILDING_NAME,
    ATTR_PLAN_NAME,
    BUILT_IN_ATTRIBUTES,
    IFC_PROJECT_PSET,
)
from planquery.host.base import AttributeNotDefinedError, ModelSource
from planquery.models.plan import BoundingBox, Level, Report, SpatialRegion

logger = logging.getLogger(__name__)

# Not every environment has the OCC geometry bindings.
try:
    import ifcopenshell.geom

    _HAS_GEOM = True
except ImportError:
    _HAS_GEOM = False

FEET_PER_METRE = 1 / 0.3048
SQFT_PER_SQM = FEET_PER_METRE**2

_SPACE_QTO = "Qto_SpaceBaseQuantities"
_AREA_QUANTITIES = ("NetFloorArea", "GrossFloorArea")


def _settings() -> Any:
    settings = ifcopenshell.geom.settings()
    settings.set("use-world-coords", True)
    return settings


def _wall_box(wall: ifcopenshell.entity_instance) -> BoundingBox | None:
    """World-space bounding box of *wall* in feet, or None without geometry.

    The geometry kernel always reports vertices in metres.
    """
    if not _HAS_GEOM or wall.Representation is None:
        return None
    try:
        shape = ifcopenshell.geom.create_shape(_settings(), wall)
        verts = shape.geometry.verts
    except Exception:
        logger.debug("Geometry failed for wall %s", wall.GlobalId, exc_info=True)
        return None
    if not verts:
        return None

    xs = verts[0::3]
    ys = verts[1::3]
    zs = verts[2::3]
    return BoundingBox(
        min_x=min(xs) * FEET_PER_METRE,
        min_y=min(ys) * FEET_PER_METRE,
        min_z=min(zs) * FEET_PER_METRE,
        max_x=max(xs) * FEET_PER_METRE,
        max_y=max(ys) * FEET_PER_METRE,
        max_z=max(zs) * FEET_PER_METRE,
    )


class IfcModelSource(ModelSource):
    """ModelSource over an open ifcopenshell file.

    Parameters
    ----------
    ifc_file:
        The model.
    path:
        Where the model was read from; :meth:`save` writes back here.
    reports:
        Schedules to expose through :meth:`reports`.
    """

    def __init__(
        self,
        ifc_file: ifcopenshell.file,
        path: str | Path | None = None,
        *,
        reports: list[Report] | None = None,
    ) -> None:
        self.ifc_file = ifc_file
        self.path = Path(path) if path is not None else None
        self._reports = list(reports or [])
        self._length_scale = ifcopenshell.util.unit.calculate_unit_scale(ifc_file)
        self._area_scale = ifcopenshell.util.unit.calculate_unit_scale(
            ifc_file, unit_type="AREAUNIT",
        )

    @classmethod
    def open(
        cls,
        path: str | Path,
        *,
        reports: list[Report] | None = None,
    ) -> IfcModelSource:
        path = Path(path)
        logger.info("Opening %s", path)
        return cls(ifcopenshell.open(str(path)), path, reports=reports)

    def save(self) -> None:
        if self.path is not None:
            self.ifc_file.write(str(self.path))

    # -- helpers --------------------------------------------------------------

    def _project(self) -> ifcopenshell.entity_instance | None:
        projects = self.ifc_file.by_type("IfcProject")
        return projects[0] if projects else None

    def _building(self) -> ifcopenshell.entity_instance | None:
        buildings = self.ifc_file.by_type("IfcBuilding")
        return buildings[0] if buildings else None

    def _project_pset(self) -> dict[str, Any] | None:
        project = self._project()
        if project is None:
            return None
        return ifcopenshell.util.element.get_psets(project).get(IFC_PROJECT_PSET)

    def _edit_project_pset(self, properties: dict[str, Any]) -> None:
        project = self._project()
        if project is None:
            raise AttributeNotDefinedError("IfcProject")
        pset_data = self._project_pset()
        if pset_data is None:
            pset = ifcopenshell.api.run(
                "pset.add_pset", self.ifc_file, product=project, name=IFC_PROJECT_PSET,
            )
        else:
            pset = self.ifc_file.by_id(pset_data["id"])
        ifcopenshell.api.run(
            "pset.edit_pset", self.ifc_file, pset=pset, properties=properties,
        )

    # -- ModelSource ----------------------------------------------------------

    @property
    def title(self) -> str:
        return self.path.name if self.path is not None else ""

    def get_attribute(self, name: str) -> str | None:
        if name == ATTR_PLAN_NAME:
            project = self._project()
            return project.Name if project is not None else None
        if name == ATTR_BUILDING_NAME:
            building = self._building()
            return building.Name if building is not None else None

        pset = self._project_pset() or {}
        value = pset.get(name)
        if value is None:
            return None
        return str(value)

    def has_attribute(self, name: str) -> bool:
        if name in BUILT_IN_ATTRIBUTES:
            return True
        pset = self._project_pset() or {}
        return name != "id" and name in pset

    def define_attribute(self, name: str) -> None:
        if self.has_attribute(name):
            return
        self._edit_project_pset({name: ""})

    def set_attribute(self, name: str, value: str) -> None:
        if name == ATTR_PLAN_NAME:
            project = self._project()
            if project is None:
                raise AttributeNotDefinedError(name)
            project.Name = value
            return
        if name == ATTR_BUILDING_NAME:
            building = self._building()
            if building is None:
                raise AttributeNotDefinedError(name)
            building.Name = value
            return
        if not self.has_attribute(name):
            raise AttributeNotDefinedError(name)
        self._edit_project_pset({name: value})

    def walls(self) -> list[BoundingBox]:
        boxes: list[BoundingBox] = []
        for wall in self.ifc_file.by_type("IfcWall"):
            box = _wall_box(wall)
            if box is None:
                logger.debug("Wall %s has no usable geometry", wall.GlobalId)
                continue
            boxes.append(box)
        return boxes

    def levels(self) -> list[Level]:
        levels: list[Level] = []
        for storey in self.ifc_file.by_type("IfcBuildingStorey"):
            elevation = storey.Elevation
            if elevation is not None:
                elevation = elevation * self._length_scale * FEET_PER_METRE
            levels.append(Level(name=storey.Name or "", elevation=elevation))
        return levels

    def regions(self) -> list[SpatialRegion]:
        regions: list[SpatialRegion] = []
        for space in self.ifc_file.by_type("IfcSpace"):
            name = getattr(space, "LongName", None) or space.Name or ""
            qtos = ifcopenshell.util.element.get_psets(space, qtos_only=True)
            quantities = qtos.get(_SPACE_QTO, {})
            area = 0.0
            for key in _AREA_QUANTITIES:
                if quantities.get(key):
                    area = float(quantities[key]) * self._area_scale * SQFT_PER_SQM
                    break
            regions.append(SpatialRegion(name=name, area=area))
        return regions

    def reports(self) -> list[Report]:
        return list(self._reports)

    def doors(self) -> list[str]:
        names: list[str] = []
        for door in self.ifc_file.by_type("IfcDoor"):
            door_type = ifcopenshell.util.element.get_type(door)
            name = door_type.Name if door_type is not None else None
            names.append(name or door.ObjectType or door.Name or "")
        return names
