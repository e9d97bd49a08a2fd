"""Command line entry point: ``planquery sync|add-params|edit``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from planquery.commands import (
    CommandResult,
    Outcome,
    add_required_attributes,
    edit_project_attributes,
    extract_and_sync,
)
from planquery.extraction.builder import PlanRecordBuilder
from planquery.forms import FormOptions, ProjectInfoForm
from planquery.host.base import ModelSource
from planquery.host.reports import load_report_csv
from planquery.host.snapshot import SnapshotModelSource
from planquery.notifications import ERROR, MultiNotifier, Notifier, WebhookNotifier
from planquery.settings import Settings, create_store

logger = logging.getLogger(__name__)

EXIT_CODES = {Outcome.SUCCEEDED: 0, Outcome.FAILED: 1, Outcome.CANCELLED: 3}


class StdoutNotifier(Notifier):
    def notify(self, level: str, title: str, message: str) -> bool:
        sys.stdout.write(f"{title}\n{message}\n")
        return True


def _open_model(path: Path, report_paths: list[str]) -> ModelSource:
    if path.suffix.lower() == ".ifc":
        from planquery.host.ifc import IfcModelSource

        reports = [load_report_csv(p) for p in report_paths]
        return IfcModelSource.open(path, reports=reports)

    model = SnapshotModelSource.load(path)
    for p in report_paths:
        model.snapshot.reports.append(load_report_csv(p))
    return model


def _prompt(title: str, message: str) -> bool:
    sys.stdout.write(f"\n{title}\n{message}\n")
    try:
        answer = input("[y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _notifier(settings: Settings) -> Notifier:
    notifiers: list[Notifier] = [StdoutNotifier()]
    if settings.notify_webhook:
        notifiers.append(WebhookNotifier(settings.notify_webhook))
    return MultiNotifier(notifiers)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="planquery",
        description="Extract house plan data from a design model and save it to the plan database.",
    )
    p.add_argument(
        "--project",
        default=".",
        help="Folder holding .env / .planquery configuration (default: current directory).",
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("sync", help="Extract plan data and insert or update it in the plan store.")
    sp.add_argument("model", help="Model snapshot (.json) or IFC file (.ifc).")
    sp.add_argument(
        "--report",
        action="append",
        default=[],
        help="Floor area schedule exported as CSV (repeatable).",
    )
    sp.add_argument("--yes", action="store_true", help="Answer yes to every confirmation.")

    sa = sub.add_parser("add-params", help="Add the plan attributes the model is missing.")
    sa.add_argument("model", help="Model snapshot (.json) or IFC file (.ifc).")

    se = sub.add_parser("edit", help="Set the project attributes used for plan records.")
    se.add_argument("model", help="Model snapshot (.json) or IFC file (.ifc).")
    se.add_argument("--plan-name")
    se.add_argument("--spec-level")
    se.add_argument("--client-name")
    se.add_argument("--client-division")
    se.add_argument("--client-subdivision")
    se.add_argument("--garage-loading")
    return p


def _run_edit(args: argparse.Namespace, model: ModelSource, notifier: Notifier) -> CommandResult:
    form = ProjectInfoForm.from_model(model)
    overrides = {
        field: getattr(args, field)
        for field in ProjectInfoForm.model_fields
        if getattr(args, field, None) is not None
    }
    form = form.model_copy(update=overrides)
    options = FormOptions.load(args.project)
    return edit_project_attributes(model, form, options=options, notifier=notifier)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    notifier: Notifier = StdoutNotifier()

    try:
        settings = Settings.load(args.project)
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    except ValueError as exc:
        notifier.notify(ERROR, "Configuration Error", str(exc))
        return EXIT_CODES[Outcome.FAILED]
    notifier = _notifier(settings)

    report_paths = getattr(args, "report", [])
    try:
        model = _open_model(Path(args.model), report_paths)
        store = create_store(settings) if args.cmd == "sync" else None
    except (OSError, ValueError) as exc:
        logger.debug("Startup failed", exc_info=True)
        notifier.notify(ERROR, "Error", str(exc))
        return EXIT_CODES[Outcome.FAILED]

    if store is not None:
        try:
            result = extract_and_sync(
                model,
                store,
                confirm=None if args.yes else _prompt,
                notifier=notifier,
                builder=PlanRecordBuilder(area_fallback=settings.area_fallback),
            )
        finally:
            store.close()
    elif args.cmd == "add-params":
        result = add_required_attributes(model, notifier=notifier)
    elif args.cmd == "edit":
        result = _run_edit(args, model, notifier)
    else:
        raise SystemExit(f"Unknown command: {args.cmd}")

    return EXIT_CODES[result.outcome]


if __name__ == "__main__":
    raise SystemExit(main())
