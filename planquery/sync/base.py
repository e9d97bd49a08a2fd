"""PlanStore interface and the lookup -> insert | confirm -> update flow."""

from __future__ import annotations

import abc
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable

from planquery.models.plan import NaturalKey, PlanRecord

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised for any failure talking to a plan store.

    Connectivity, authentication, malformed responses and constraint
    violations all surface as this; the original exception is chained.
    """


class IncompleteRecordError(ValueError):
    """Raised when a record with blank required fields reaches a store."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required fields: {', '.join(self.missing)}")


class PlanStore(abc.ABC):
    """A table of plan rows keyed by (plan name, spec level, subdivision)."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Backend name, for messages."""

    @abc.abstractmethod
    def find(self, key: NaturalKey) -> list[Any]:
        """Return the ids of every row matching *key* exactly."""

    @abc.abstractmethod
    def insert(self, record: PlanRecord) -> Any:
        """Create a row holding every field of *record*; return its id."""

    @abc.abstractmethod
    def update(self, row_id: Any, record: PlanRecord) -> None:
        """Overwrite the non-key fields of row *row_id*."""

    def close(self) -> None:
        """Release the client handle."""


class SyncOutcome(str, enum.Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    CANCELLED = "cancelled"


@dataclass
class SyncResult:
    outcome: SyncOutcome
    key: NaturalKey
    row_id: Any = None

    @property
    def changed(self) -> bool:
        return self.outcome is not SyncOutcome.CANCELLED


# Called with the record about to overwrite an existing row; False cancels.
ConfirmUpdate = Callable[[PlanRecord], bool]


def _always(record: PlanRecord) -> bool:
    return True


class PlanSynchronizer:
    """Insert or update one PlanRecord in a PlanStore.

    Parameters
    ----------
    store:
        Target store.
    confirm_update:
        Asked before an existing row is overwritten.  Defaults to always
        accepting.

    The lookup and the mutation are separate statements with no lock held
    in between; two writers racing on the same key can both see "no match".
    """

    def __init__(
        self,
        store: PlanStore,
        confirm_update: ConfirmUpdate | None = None,
    ) -> None:
        self.store = store
        self.confirm_update = confirm_update or _always

    def synchronize(self, record: PlanRecord) -> SyncResult:
        """Run one lookup and at most one mutation for *record*.

        Raises
        ------
        IncompleteRecordError
            If a required field is blank; nothing is sent to the store.
        StoreError
            On any store failure, or when the key already matches more than
            one row.
        """
        missing = record.missing_fields()
        if missing:
            raise IncompleteRecordError(missing)

        key = record.natural_key
        matches = self.store.find(key)

        if not matches:
            row_id = self.store.insert(record)
            logger.info("Inserted %s into %s", key, self.store.name)
            return SyncResult(SyncOutcome.INSERTED, key, row_id)

        if len(matches) > 1:
            raise StoreError(
                f"{len(matches)} rows in {self.store.name} share key "
                f"{key.plan_name!r}/{key.spec_level!r}/{key.subdivision!r}; "
                f"refusing to update"
            )

        row_id = matches[0]
        if not self.confirm_update(record):
            logger.info("Update of %s cancelled", key)
            return SyncResult(SyncOutcome.CANCELLED, key, row_id)

        self.store.update(row_id, record)
        logger.info("Updated %s (row %s) in %s", key, row_id, self.store.name)
        return SyncResult(SyncOutcome.UPDATED, key, row_id)
