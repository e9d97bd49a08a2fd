"""Abstract ModelSource interface — the only view of a host design model."""

from __future__ import annotations

import abc

from planquery.models.plan import BoundingBox, Level, Report, SpatialRegion


class AttributeNotDefinedError(KeyError):
    """Raised when writing an attribute the model does not define."""


class ModelSource(abc.ABC):
    """Read-mostly access to a design model as plain data.

    Lengths are decimal feet and areas square feet, whatever the host's
    native units.
    """

    @property
    @abc.abstractmethod
    def title(self) -> str:
        """Document title (usually the model file name)."""

    @abc.abstractmethod
    def get_attribute(self, name: str) -> str | None:
        """Return a project attribute as text, or None when unset."""

    @abc.abstractmethod
    def has_attribute(self, name: str) -> bool:
        """Return True if the model defines attribute *name*."""

    @abc.abstractmethod
    def define_attribute(self, name: str) -> None:
        """Add an (empty) project attribute definition."""

    @abc.abstractmethod
    def set_attribute(self, name: str, value: str) -> None:
        """Write a project attribute.

        Raises :class:`AttributeNotDefinedError` if *name* is not defined.
        """

    @abc.abstractmethod
    def walls(self) -> list[BoundingBox]:
        """Bounding boxes of every wall instance."""

    @abc.abstractmethod
    def levels(self) -> list[Level]:
        """All levels."""

    @abc.abstractmethod
    def regions(self) -> list[SpatialRegion]:
        """All rooms/spaces, placed or not."""

    @abc.abstractmethod
    def reports(self) -> list[Report]:
        """All tabular schedules."""

    @abc.abstractmethod
    def doors(self) -> list[str]:
        """Type name of every door instance."""

    def save(self) -> None:
        """Persist attribute changes, if the source is file-backed."""
