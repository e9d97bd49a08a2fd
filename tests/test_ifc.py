"""Tests for IfcModelSource over synthetic IFC files.

Files are built in memory with ifcopenshell's API, in metres and square
metres so the conversions to feet are easy to check.
"""

from __future__ import annotations

from pathlib import Path

import ifcopenshell
import ifcopenshell.api
import ifcopenshell.util.element
import pytest

from planquery.commands import add_required_attributes, edit_project_attributes
from planquery.config import IFC_PROJECT_PSET, REQUIRED_ATTRIBUTES
from planquery.extraction.builder import build_plan_record
from planquery.forms import ProjectInfoForm
from planquery.host.base import AttributeNotDefinedError
from planquery.host.ifc import IfcModelSource
from planquery.models.plan import Report
from planquery.notifications import ConsoleNotifier


# ---------------------------------------------------------------------------
# Fixtures: synthetic IFC files
# ---------------------------------------------------------------------------


def _add_space(f: ifcopenshell.file, storey, long_name: str, area: float | None) -> None:
    space = ifcopenshell.api.run("root.create_entity", f, ifc_class="IfcSpace", name="S")
    space.LongName = long_name
    ifcopenshell.api.run("aggregate.assign_object", f, products=[space], relating_object=storey)
    if area is not None:
        qto = ifcopenshell.api.run(
            "pset.add_qto", f, product=space, name="Qto_SpaceBaseQuantities",
        )
        ifcopenshell.api.run(
            "pset.edit_qto", f, qto=qto, properties={"NetFloorArea": area},
        )


def _build_house_ifc() -> ifcopenshell.file:
    """Return an IFC4 house: two storeys plus a roof level, five spaces, two
    doors and one wall.

    One door is typed as a garage door, the other only has an ``ObjectType``.
    The wall has no body representation.
    """
    f = ifcopenshell.file(schema="IFC4")

    proj = ifcopenshell.api.run(
        "root.create_entity", f, ifc_class="IfcProject", name="Aspen"
    )
    length = ifcopenshell.api.run("unit.add_si_unit", f, unit_type="LENGTHUNIT")
    area = ifcopenshell.api.run("unit.add_si_unit", f, unit_type="AREAUNIT")
    ifcopenshell.api.run("unit.assign_unit", f, units=[length, area])

    site = ifcopenshell.api.run("root.create_entity", f, ifc_class="IfcSite", name="Lot 12")
    building = ifcopenshell.api.run(
        "root.create_entity", f, ifc_class="IfcBuilding", name="Aspen Building"
    )
    ifcopenshell.api.run("aggregate.assign_object", f, products=[site], relating_object=proj)
    ifcopenshell.api.run(
        "aggregate.assign_object", f, products=[building], relating_object=site
    )

    storeys = []
    for name, elevation in (("Level 1", 0.0), ("Level 2", 3.048), ("Roof", 6.096)):
        storey = ifcopenshell.api.run(
            "root.create_entity", f, ifc_class="IfcBuildingStorey", name=name
        )
        storey.Elevation = elevation
        ifcopenshell.api.run(
            "aggregate.assign_object", f, products=[storey], relating_object=building
        )
        storeys.append(storey)

    _add_space(f, storeys[0], "Great Room", 40.0)
    _add_space(f, storeys[0], "2 Car Garage", 40.0)
    _add_space(f, storeys[1], "Primary Bedroom", 20.0)
    _add_space(f, storeys[1], "Primary Bath", 10.0)
    _add_space(f, storeys[1], "Bedroom 2", None)

    garage_door_type = ifcopenshell.api.run(
        "root.create_entity", f, ifc_class="IfcDoorType", name="Garage Door 16x7"
    )
    garage_door = ifcopenshell.api.run("root.create_entity", f, ifc_class="IfcDoor", name="D1")
    ifcopenshell.api.run(
        "type.assign_type", f, related_objects=[garage_door], relating_type=garage_door_type
    )
    entry_door = ifcopenshell.api.run("root.create_entity", f, ifc_class="IfcDoor", name="D2")
    entry_door.ObjectType = "Single Flush 36x80"
    ifcopenshell.api.run(
        "spatial.assign_container", f, products=[garage_door, entry_door],
        relating_structure=storeys[0],
    )

    wall = ifcopenshell.api.run("root.create_entity", f, ifc_class="IfcWall", name="W1")
    ifcopenshell.api.run(
        "spatial.assign_container", f, products=[wall], relating_structure=storeys[0]
    )
    return f


@pytest.fixture()
def source() -> IfcModelSource:
    return IfcModelSource(_build_house_ifc())


@pytest.fixture()
def synthetic_ifc(tmp_path: Path) -> Path:
    """Write the synthetic house to a temp file and return its path."""
    p = tmp_path / "Aspen.ifc"
    _build_house_ifc().write(str(p))
    return p


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestIfcGeometry:
    def test_levels_in_feet(self, source):
        levels = source.levels()
        assert [lv.name for lv in levels] == ["Level 1", "Level 2", "Roof"]
        assert levels[1].elevation == pytest.approx(10.0)

    def test_regions_use_long_name_and_sqft(self, source):
        regions = {r.name: r.area for r in source.regions()}
        assert regions["Primary Bedroom"] == pytest.approx(215.278, abs=0.01)
        assert regions["Bedroom 2"] == 0.0

    def test_door_type_names(self, source):
        assert sorted(source.doors()) == ["Garage Door 16x7", "Single Flush 36x80"]

    def test_walls_without_body_are_skipped(self, source):
        assert source.walls() == []

    def test_reports_come_from_caller(self):
        report = Report(title="Floor Areas", rows=[["Living", "1400 SF"]])
        src = IfcModelSource(_build_house_ifc(), reports=[report])
        assert src.reports() == [report]


class TestIfcAttributes:
    def test_project_and_building_names(self, source):
        assert source.get_attribute("Project Name") == "Aspen"
        assert source.get_attribute("Building Name") == "Aspen Building"
        assert source.has_attribute("Project Name")

    def test_undefined_attribute(self, source):
        assert not source.has_attribute("Spec Level")
        assert source.get_attribute("Spec Level") is None
        with pytest.raises(AttributeNotDefinedError):
            source.set_attribute("Spec Level", "Premium")

    def test_define_then_set(self, source):
        source.define_attribute("Spec Level")
        assert source.has_attribute("Spec Level")
        source.set_attribute("Spec Level", "Premium")
        assert source.get_attribute("Spec Level") == "Premium"

        psets = ifcopenshell.util.element.get_psets(source.ifc_file.by_type("IfcProject")[0])
        assert psets[IFC_PROJECT_PSET]["Spec Level"] == "Premium"

    def test_pset_id_is_not_an_attribute(self, source):
        source.define_attribute("Spec Level")
        assert not source.has_attribute("id")

    def test_set_project_name(self, source):
        source.set_attribute("Project Name", "Birch")
        assert source.ifc_file.by_type("IfcProject")[0].Name == "Birch"


# ---------------------------------------------------------------------------
# Commands over IFC
# ---------------------------------------------------------------------------


class TestIfcCommands:
    def test_add_edit_and_save(self, synthetic_ifc: Path):
        model = IfcModelSource.open(synthetic_ifc)
        add_required_attributes(model, notifier=ConsoleNotifier())
        form = ProjectInfoForm(
            plan_name="Aspen",
            spec_level="Premium",
            client_name="Client A",
            client_division="Division 1",
            client_subdivision="Oak Hollow",
        )
        result = edit_project_attributes(model, form, notifier=ConsoleNotifier())
        assert result.ok

        reopened = IfcModelSource.open(synthetic_ifc)
        for name in REQUIRED_ATTRIBUTES:
            assert reopened.has_attribute(name)
        assert reopened.get_attribute("Client Subdivision") == "Oak Hollow"

    def test_build_plan_record(self, source):
        for name, value in (
            ("Spec Level", "Premium"),
            ("Client Name", "Client A"),
            ("Client Division", "Division 1"),
            ("Client Subdivision", "Oak Hollow"),
        ):
            source.define_attribute(name)
            source.set_attribute(name, value)

        record = build_plan_record(source)

        assert record.plan_name == "Aspen"
        assert record.subdivision == "Oak Hollow"
        assert record.stories == 2
        assert record.bedrooms == 1
        assert record.bathrooms == 1
        assert record.garage_bays == 2
        assert record.overall_width == "0'-0\""
        assert record.is_complete()
