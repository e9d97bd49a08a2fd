"""Plan store synchronization: one state machine, SQL and REST backends."""

from planquery.sync.base import (
    IncompleteRecordError,
    PlanStore,
    PlanSynchronizer,
    StoreError,
    SyncOutcome,
    SyncResult,
)
from planquery.sync.rest import RestPlanStore
from planquery.sync.sql import SqlPlanStore

__all__ = [
    "IncompleteRecordError",
    "PlanStore",
    "PlanSynchronizer",
    "RestPlanStore",
    "SqlPlanStore",
    "StoreError",
    "SyncOutcome",
    "SyncResult",
]
