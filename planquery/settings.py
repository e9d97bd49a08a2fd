"""Settings — layered configuration and plan store selection.

Every field of :class:`Settings` is read from a ``PLANQUERY_<FIELD>`` key.
Later sources override earlier ones::

    field default -> .planquery/config.json -> .env -> environment

Values are validated by pydantic, so a bad backend name or a non-numeric
timeout raises ``pydantic.ValidationError`` (a ``ValueError``).
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field, field_validator

from planquery.config import DEFAULT_REST_TABLE, DEFAULT_SQL_TABLE
from planquery.sync.base import PlanStore

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLANQUERY_"


class Settings(BaseModel):
    backend: Literal["sql", "rest"] = Field("sql", description="Plan store backend: sql or rest")
    db_path: str = Field("HousePlans.db", description="SQLite database path")
    table: str = Field(DEFAULT_SQL_TABLE, description="SQL table name")
    rest_url: str = Field("", description="REST API base URL")
    rest_token: str = Field("", description="REST API bearer token (secret)")
    rest_table: str = Field(DEFAULT_REST_TABLE, description="REST table name")
    timeout: float = Field(30.0, gt=0, description="REST request timeout (seconds)")
    area_fallback: bool = Field(
        False, description="Sum room areas when no floor area schedule exists",
    )
    log_level: str = Field("INFO", description="Logging level")
    notify_webhook: str = Field("", description="Chat webhook URL (secret)")

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @staticmethod
    def key(field: str) -> str:
        """Configuration key for *field*, e.g. ``db_path`` -> ``PLANQUERY_DB_PATH``."""
        return f"{ENV_PREFIX}{field.upper()}"

    @classmethod
    def load(cls, project_path: str | Path = ".") -> Settings:
        """Merge every configuration source for *project_path* and validate."""
        root = Path(project_path)
        sources: list[Mapping[str, Any]] = [
            _read_config_json(root / ".planquery" / "config.json"),
            _read_env_file(root / ".env"),
            os.environ,
        ]
        values: dict[str, Any] = {}
        for source in sources:
            for field in cls.model_fields:
                key = cls.key(field)
                if key in source:
                    values[field] = source[key]
        return cls.model_validate(values)

    @classmethod
    def write_env_template(cls, project_path: str | Path) -> Path:
        """Write ``.env.example`` listing every key with its default."""
        env_path = Path(project_path) / ".env.example"

        lines = ["# PlanQuery configuration", "# Copy to .env and fill in values", ""]
        for field, info in cls.model_fields.items():
            default = info.default
            if isinstance(default, bool):
                default = str(default).lower()
            lines.append(f"# {info.description}")
            lines.append(f"{cls.key(field)}={default}")
            lines.append("")

        env_path.write_text("\n".join(lines), encoding="utf-8")
        return env_path


def _read_config_json(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not read %s", path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", path)
        return {}
    return data


def _read_env_file(path: Path) -> dict[str, str]:
    """``KEY=value`` lines; blank lines and ``#`` comments are skipped."""
    if not path.is_file():
        return {}
    values: dict[str, str] = {}
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        logger.warning("Could not read %s", path, exc_info=True)
        return {}
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, v = line.split("=", 1)
        values[k.strip()] = v.strip()
    return values


def create_store(settings: Settings) -> PlanStore:
    """Instantiate the plan store selected by *settings*."""
    if settings.backend == "rest":
        from planquery.sync.rest import RestPlanStore

        return RestPlanStore(
            settings.rest_url,
            settings.rest_token,
            settings.rest_table,
            timeout=settings.timeout,
        )

    from planquery.sync.sql import SqlPlanStore

    return SqlPlanStore(settings.db_path, settings.table)
