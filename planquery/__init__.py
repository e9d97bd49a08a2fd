"""PlanQuery — extract house plan data from design models and sync it to a plan database."""

__version__ = "1.0.0"

from planquery.commands import (
    CommandResult,
    Outcome,
    add_required_attributes,
    edit_project_attributes,
    extract_and_sync,
)
from planquery.extraction import (
    PlanRecordBuilder,
    build_plan_record,
    classify,
    extract_living_area,
    extract_total_area,
    format_dimension,
)
from planquery.forms import FormOptions, ProjectInfoForm
from planquery.host import ModelSource, SnapshotModelSource
from planquery.models.plan import NaturalKey, PlanRecord
from planquery.notifications import ConsoleNotifier, Notifier, WebhookNotifier
from planquery.settings import Settings, create_store
from planquery.sync import (
    PlanStore,
    PlanSynchronizer,
    RestPlanStore,
    SqlPlanStore,
    StoreError,
    SyncOutcome,
)

__all__ = [
    "__version__",
    # Extraction
    "PlanRecordBuilder",
    "build_plan_record",
    "classify",
    "extract_living_area",
    "extract_total_area",
    "format_dimension",
    # Models
    "ModelSource",
    "NaturalKey",
    "PlanRecord",
    "SnapshotModelSource",
    # Sync
    "PlanStore",
    "PlanSynchronizer",
    "RestPlanStore",
    "SqlPlanStore",
    "StoreError",
    "SyncOutcome",
    # Commands
    "CommandResult",
    "ConsoleNotifier",
    "FormOptions",
    "Notifier",
    "Outcome",
    "ProjectInfoForm",
    "Settings",
    "WebhookNotifier",
    "add_required_attributes",
    "create_store",
    "edit_project_attributes",
    "extract_and_sync",
]
