"""Tests for the planquery command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from planquery.cli import build_parser, main
from planquery.host.snapshot import SnapshotModelSource
from planquery.models.plan import NaturalKey
from planquery.sync.sql import SqlPlanStore


@pytest.fixture()
def project(tmp_path: Path, monkeypatch) -> Path:
    for key in (
        "PLANQUERY_BACKEND",
        "PLANQUERY_DB_PATH",
        "PLANQUERY_TIMEOUT",
        "PLANQUERY_NOTIFY_WEBHOOK",
    ):
        monkeypatch.delenv(key, raising=False)
    (tmp_path / ".env").write_text(
        f"PLANQUERY_DB_PATH={tmp_path / 'plans.db'}\n", encoding="utf-8",
    )
    return tmp_path


def _write_snapshot(path: Path, **attributes: str | None) -> Path:
    data = {
        "title": "Aspen.rvt",
        "attributes": {
            "Project Name": "Aspen",
            "Spec Level": "Premium",
            "Client Name": "Client A",
            "Client Division": "Division 1",
            "Client Subdivision": "Oak Hollow",
            **attributes,
        },
        "walls": [{"min_x": 0, "min_y": 0, "max_x": 50, "max_y": 40}],
        "levels": [{"name": "Level 1"}],
        "regions": [{"name": "Bedroom", "area": 120}],
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestParser:
    def test_sync_reports_are_repeatable(self):
        args = build_parser().parse_args(
            ["sync", "m.json", "--report", "a.csv", "--report", "b.csv", "--yes"],
        )
        assert args.report == ["a.csv", "b.csv"]
        assert args.yes

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    def test_sync_inserts(self, project: Path, capsys):
        model = _write_snapshot(project / "aspen.json")
        report = project / "Floor Areas.csv"
        report.write_text("Living,1800 SF\nTotal Covered,2200 SF\n", encoding="utf-8")

        code = main([
            "--project", str(project), "sync", str(model), "--report", str(report), "--yes",
        ])

        assert code == 0
        assert "Added plan 'Aspen' to database." in capsys.readouterr().out
        store = SqlPlanStore(project / "plans.db")
        row_id = store.find(NaturalKey("Aspen", "Premium", "Oak Hollow"))[0]
        assert store.get(row_id)["living_area"] == 1800
        store.close()

    def test_missing_information_fails(self, project: Path, capsys):
        model = _write_snapshot(project / "aspen.json", **{"Client Division": ""})
        code = main(["--project", str(project), "sync", str(model), "--yes"])
        assert code == 1
        assert "Missing Information" in capsys.readouterr().out

    def test_declined_prompt_cancels(self, project: Path, monkeypatch):
        model = _write_snapshot(project / "aspen.json")
        monkeypatch.setattr("builtins.input", lambda prompt="": "n")
        assert main(["--project", str(project), "sync", str(model)]) == 3

    def test_missing_model_file(self, project: Path, capsys):
        code = main(["--project", str(project), "sync", str(project / "nope.json")])
        assert code == 1
        assert "Error" in capsys.readouterr().out

    def test_add_params_then_edit(self, project: Path):
        model = project / "birch.json"
        model.write_text(json.dumps({"attributes": {"Project Name": "Birch"}}), encoding="utf-8")

        assert main(["--project", str(project), "add-params", str(model)]) == 0
        code = main([
            "--project", str(project), "edit", str(model),
            "--spec-level", "Luxury",
            "--client-name", "Client B",
            "--client-division", "Division 3",
            "--client-subdivision", "Pine Ridge",
        ])

        assert code == 0
        saved = SnapshotModelSource.load(model)
        assert saved.get_attribute("Project Name") == "Birch"
        assert saved.get_attribute("Spec Level") == "Luxury"
        assert saved.get_attribute("Client Subdivision") == "Pine Ridge"

    @pytest.mark.parametrize(
        "key, value",
        [("PLANQUERY_BACKEND", "postgres"), ("PLANQUERY_TIMEOUT", "thirty")],
    )
    def test_bad_configuration_fails_cleanly(self, project: Path, monkeypatch, capsys, key, value):
        model = _write_snapshot(project / "aspen.json")
        monkeypatch.setenv(key, value)

        code = main(["--project", str(project), "add-params", str(model)])

        assert code == 1
        out = capsys.readouterr().out
        assert out.count("Configuration Error") == 1
        assert key.split("_", 1)[1].lower() in out

    def test_edit_sets_plan_name_on_fresh_snapshot(self, project: Path):
        model = project / "aspen.json"
        model.write_text(json.dumps({"title": "Aspen.rvt"}), encoding="utf-8")

        main(["--project", str(project), "add-params", str(model)])
        code = main([
            "--project", str(project), "edit", str(model),
            "--plan-name", "Aspen II",
            "--spec-level", "Premium",
            "--client-name", "Client A",
            "--client-division", "Division 1",
            "--client-subdivision", "Oak Hollow",
        ])

        assert code == 0
        assert SnapshotModelSource.load(model).get_attribute("Project Name") == "Aspen II"
