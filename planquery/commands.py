"""User-facing actions: extract and sync, add attributes, edit attributes.

Each action returns a :class:`CommandResult` and emits exactly one
notification describing how it ended.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable

from planquery.config import REQUIRED_ATTRIBUTES
from planquery.extraction.builder import PlanRecordBuilder
from planquery.forms import FormOptions, FormValidationError, ProjectInfoForm
from planquery.host.base import ModelSource
from planquery.models.plan import PlanRecord
from planquery.notifications import ERROR, INFO, WARNING, ConsoleNotifier, Notifier
from planquery.sync.base import PlanStore, PlanSynchronizer, StoreError, SyncOutcome

logger = logging.getLogger(__name__)

# (title, message) -> accepted?
Confirm = Callable[[str, str], bool]


class Outcome(str, enum.Enum):
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class CommandResult:
    outcome: Outcome
    title: str
    message: str
    record: PlanRecord | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCEEDED


def _accept_all(title: str, message: str) -> bool:
    return True


def _finish(
    notifier: Notifier,
    level: str,
    outcome: Outcome,
    title: str,
    message: str,
    record: PlanRecord | None = None,
) -> CommandResult:
    notifier.notify(level, title, message)
    return CommandResult(outcome, title, message, record)


def _bullets(items: list[str]) -> str:
    return "\n".join(f"  - {item}" for item in items)


# ---------------------------------------------------------------------------
# Extract and sync
# ---------------------------------------------------------------------------


def extract_and_sync(
    model: ModelSource,
    store: PlanStore,
    *,
    confirm: Confirm | None = None,
    notifier: Notifier | None = None,
    builder: PlanRecordBuilder | None = None,
) -> CommandResult:
    """Extract a PlanRecord from *model* and insert or update it in *store*.

    *confirm* is asked twice at most: once to accept the extracted values
    and, if the plan already exists, once more before overwriting it.
    Declining either ends the command as cancelled with nothing written.
    """
    confirm = confirm or _accept_all
    notifier = notifier or ConsoleNotifier()
    builder = builder or PlanRecordBuilder()

    try:
        record = builder.build(model)
    except Exception as exc:
        logger.exception("Plan extraction failed")
        return _finish(
            notifier, ERROR, Outcome.FAILED, "Error",
            f"Unable to extract plan data from the model:\n{exc}",
        )

    missing = record.missing_fields()
    if missing:
        return _finish(
            notifier, WARNING, Outcome.FAILED, "Missing Information",
            "All of the following fields are required:\n\n"
            f"{_bullets(missing)}\n\n"
            "Please set these in Project Information.",
            record,
        )

    prompt = (
        "Ready to save this plan to the database:\n\n"
        f"{record.to_detailed_string()}\n\n"
        "Do you want to proceed?"
    )
    if not confirm("Confirm Plan Data", prompt):
        return _finish(
            notifier, INFO, Outcome.CANCELLED, "Cancelled",
            f"Plan '{record.plan_name}' was not saved.", record,
        )

    def confirm_update(existing: PlanRecord) -> bool:
        return confirm(
            "Plan Exists",
            f"Plan '{existing.plan_name}' with spec '{existing.spec_level}' in "
            f"subdivision '{existing.subdivision}' already exists.\n\n"
            "Do you want to update it?",
        )

    try:
        result = PlanSynchronizer(store, confirm_update).synchronize(record)
    except StoreError as exc:
        logger.error("Synchronization failed: %s", exc)
        return _finish(
            notifier, ERROR, Outcome.FAILED, "Error",
            f"An error occurred:\n{exc}", record,
        )

    if result.outcome is SyncOutcome.CANCELLED:
        return _finish(
            notifier, INFO, Outcome.CANCELLED, "Cancelled",
            f"Existing plan '{record.plan_name}' was left unchanged.", record,
        )
    if result.outcome is SyncOutcome.UPDATED:
        message = f"Updated plan '{record.plan_name}' in database."
    else:
        message = f"Added plan '{record.plan_name}' to database."
    return _finish(
        notifier, INFO, Outcome.SUCCEEDED, "Success",
        f"{message}\n\n{record.to_detailed_string()}", record,
    )


# ---------------------------------------------------------------------------
# Add required attributes
# ---------------------------------------------------------------------------


def add_required_attributes(
    model: ModelSource,
    *,
    names: tuple[str, ...] = REQUIRED_ATTRIBUTES,
    notifier: Notifier | None = None,
) -> CommandResult:
    """Define any of the plan attributes the model does not have yet."""
    notifier = notifier or ConsoleNotifier()

    existing = [n for n in names if model.has_attribute(n)]
    to_add = [n for n in names if n not in existing]

    if not to_add:
        return _finish(
            notifier, INFO, Outcome.SUCCEEDED, "Parameters Exist",
            f"All parameters already exist in the project:\n{_bullets(existing)}",
        )

    try:
        for name in to_add:
            model.define_attribute(name)
        model.save()
    except Exception as exc:
        logger.exception("Adding attributes failed")
        return _finish(
            notifier, ERROR, Outcome.FAILED, "Error", f"An error occurred:\n{exc}",
        )

    message = f"Added {len(to_add)} parameter(s):\n{_bullets(to_add)}"
    if existing:
        message += (
            f"\n\n{len(existing)} parameter(s) already exist in the project "
            f"and were not added:\n{_bullets(existing)}"
        )
    return _finish(notifier, INFO, Outcome.SUCCEEDED, "Parameters Added", message)


# ---------------------------------------------------------------------------
# Edit project attributes
# ---------------------------------------------------------------------------


def edit_project_attributes(
    model: ModelSource,
    form: ProjectInfoForm,
    *,
    options: FormOptions | None = None,
    notifier: Notifier | None = None,
) -> CommandResult:
    """Write the form's values to the model's project attributes.

    Attributes the model does not define are skipped and listed in the
    result; run :func:`add_required_attributes` first to create them.
    """
    notifier = notifier or ConsoleNotifier()
    options = options or FormOptions()

    try:
        form.validate_required()
    except FormValidationError as exc:
        return _finish(
            notifier, WARNING, Outcome.FAILED, "Missing Information",
            f"The following fields are required:\n\n{_bullets(exc.missing)}",
        )

    written: list[str] = []
    skipped: list[str] = []
    try:
        for name, value in form.attribute_values().items():
            if not model.has_attribute(name):
                skipped.append(name)
                continue
            model.set_attribute(name, value)
            written.append(name)
        model.save()
    except Exception as exc:
        logger.exception("Writing project attributes failed")
        return _finish(
            notifier, ERROR, Outcome.FAILED, "Error",
            f"An error occurred while saving:\n\n{exc}",
        )

    message = f"Updated {len(written)} project attribute(s):\n{_bullets(written)}"
    if skipped:
        message += (
            "\n\nNot defined in the model (add the required parameters first):\n"
            f"{_bullets(skipped)}"
        )
    unlisted = form.unlisted_values(options)
    if unlisted:
        message += f"\n\nCustom values outside the standard choices:\n{_bullets(unlisted)}"
    level = WARNING if skipped else INFO
    return _finish(notifier, level, Outcome.SUCCEEDED, "Project Information", message)
