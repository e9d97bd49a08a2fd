"""Tests for layered settings, store selection and notifiers."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from planquery.notifications import (
    ERROR,
    INFO,
    ConsoleNotifier,
    MultiNotifier,
    WebhookNotifier,
)
from planquery.settings import Settings, create_store
from planquery.sync.rest import RestPlanStore
from planquery.sync.sql import SqlPlanStore

_KEYS = (
    "PLANQUERY_BACKEND",
    "PLANQUERY_DB_PATH",
    "PLANQUERY_TABLE",
    "PLANQUERY_REST_URL",
    "PLANQUERY_REST_TOKEN",
    "PLANQUERY_REST_TABLE",
    "PLANQUERY_TIMEOUT",
    "PLANQUERY_AREA_FALLBACK",
    "PLANQUERY_LOG_LEVEL",
    "PLANQUERY_NOTIFY_WEBHOOK",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Config layering
# ---------------------------------------------------------------------------


class TestSettingsLoad:
    def test_defaults(self, tmp_path: Path):
        settings = Settings.load(tmp_path)
        assert settings.backend == "sql"
        assert settings.db_path == "HousePlans.db"
        assert settings.table == "HousePlans"
        assert settings.timeout == 30.0
        assert settings.area_fallback is False

    def test_config_json_overrides_defaults(self, tmp_path: Path):
        folder = tmp_path / ".planquery"
        folder.mkdir()
        (folder / "config.json").write_text(
            json.dumps({"PLANQUERY_DB_PATH": "plans.db", "PLANQUERY_TIMEOUT": 5}),
            encoding="utf-8",
        )
        settings = Settings.load(tmp_path)
        assert settings.db_path == "plans.db"
        assert settings.timeout == 5.0

    def test_env_file_overrides_config_json(self, tmp_path: Path):
        folder = tmp_path / ".planquery"
        folder.mkdir()
        (folder / "config.json").write_text(
            json.dumps({"PLANQUERY_DB_PATH": "plans.db"}), encoding="utf-8",
        )
        (tmp_path / ".env").write_text(
            "# local\nPLANQUERY_DB_PATH = other.db\n\nPLANQUERY_AREA_FALLBACK=yes\n",
            encoding="utf-8",
        )
        settings = Settings.load(tmp_path)
        assert settings.db_path == "other.db"
        assert settings.area_fallback is True

    def test_environment_wins(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".env").write_text("PLANQUERY_BACKEND=sql\n", encoding="utf-8")
        monkeypatch.setenv("PLANQUERY_BACKEND", "REST")
        monkeypatch.setenv("PLANQUERY_REST_URL", "https://plans.example.com/rest/v1")
        settings = Settings.load(tmp_path)
        assert settings.backend == "rest"
        assert settings.rest_url == "https://plans.example.com/rest/v1"

    def test_broken_config_json_is_ignored(self, tmp_path: Path):
        folder = tmp_path / ".planquery"
        folder.mkdir()
        (folder / "config.json").write_text("{not json", encoding="utf-8")
        assert Settings.load(tmp_path).backend == "sql"

    def test_unknown_backend_rejected(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PLANQUERY_BACKEND", "mongo")
        with pytest.raises(ValueError):
            Settings.load(tmp_path)

    def test_env_template(self, tmp_path: Path):
        path = Settings.write_env_template(tmp_path)
        text = path.read_text(encoding="utf-8")
        assert path.name == ".env.example"
        for key in _KEYS:
            assert f"{key}=" in text
        assert "PLANQUERY_AREA_FALLBACK=false" in text
        assert "PLANQUERY_TABLE=HousePlans" in text

    def test_non_numeric_timeout_rejected(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PLANQUERY_TIMEOUT", "thirty")
        with pytest.raises(ValueError):
            Settings.load(tmp_path)

    def test_key_names(self):
        assert Settings.key("db_path") == "PLANQUERY_DB_PATH"
        assert set(_KEYS) == {Settings.key(f) for f in Settings.model_fields}


class TestCreateStore:
    def test_sql(self, tmp_path: Path):
        store = create_store(Settings(db_path=str(tmp_path / "plans.db"), table="Plans"))
        assert isinstance(store, SqlPlanStore)
        assert store.table == "Plans"
        store.close()

    def test_rest(self):
        store = create_store(Settings(
            backend="rest", rest_url="https://plans.example.com/rest/v1",
            rest_token="t", timeout=5,
        ))
        assert isinstance(store, RestPlanStore)
        assert store.url == "https://plans.example.com/rest/v1/house_plans"
        assert store.timeout == 5
        store.close()

    def test_rest_without_url(self):
        with pytest.raises(ValueError):
            create_store(Settings(backend="rest"))


# ---------------------------------------------------------------------------
# Notifiers
# ---------------------------------------------------------------------------


class TestNotifiers:
    def test_console_keeps_log(self):
        notifier = ConsoleNotifier()
        assert notifier.notify(INFO, "Success", "Added plan")
        assert notifier.log == [{"level": INFO, "title": "Success", "message": "Added plan"}]

    def test_webhook_posts_text(self):
        with patch("planquery.notifications.requests.post") as post:
            post.return_value = MagicMock(status_code=200)
            ok = WebhookNotifier("https://hooks.example.com/x").notify(ERROR, "Error", "boom")

        assert ok
        payload = post.call_args.kwargs["json"]
        assert payload["text"] == "PlanQuery ERROR: Error\nboom"

    def test_webhook_failure_is_not_raised(self):
        with patch("planquery.notifications.requests.post") as post:
            post.side_effect = requests.ConnectionError("down")
            ok = WebhookNotifier("https://hooks.example.com/x").notify(INFO, "t", "m")
        assert ok is False

    def test_multi_fans_out(self):
        first, second = ConsoleNotifier(), ConsoleNotifier()
        MultiNotifier([first, second]).notify(INFO, "t", "m")
        assert len(first.log) == 1
        assert len(second.log) == 1
