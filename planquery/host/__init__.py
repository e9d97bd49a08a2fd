"""Host model adapters.

``IfcModelSource`` needs ifcopenshell and is imported from
``planquery.host.ifc`` directly.
"""

from planquery.host.base import AttributeNotDefinedError, ModelSource
from planquery.host.reports import load_report_csv
from planquery.host.snapshot import ModelSnapshot, SnapshotModelSource

__all__ = [
    "AttributeNotDefinedError",
    "ModelSnapshot",
    "ModelSource",
    "SnapshotModelSource",
    "load_report_csv",
]
