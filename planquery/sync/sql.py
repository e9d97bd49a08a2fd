"""SqlPlanStore — plan rows in a SQLite table.

Uses stdlib sqlite3 only.  All statements are parameterized; only the table
name is interpolated, and it is checked to be a plain identifier.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from pathlib import Path
from typing import Any

from planquery.config import DEFAULT_SQL_TABLE
from planquery.models.plan import NaturalKey, PlanRecord
from planquery.sync.base import PlanStore, StoreError

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# PlanRecord field -> column
COLUMNS: dict[str, str] = {
    "plan_name": "PlanName",
    "spec_level": "SpecLevel",
    "client": "Client",
    "division": "Division",
    "subdivision": "Subdivision",
    "garage_loading": "GarageLoading",
    "overall_width": "OverallWidth",
    "overall_depth": "OverallDepth",
    "stories": "Stories",
    "bedrooms": "Bedrooms",
    "bathrooms": "Bathrooms",
    "garage_bays": "GarageBays",
    "living_area": "LivingArea",
    "total_area": "TotalArea",
}

KEY_COLUMNS = tuple(COLUMNS[f] for f in NaturalKey._fields)

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS {table} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    PlanName TEXT NOT NULL,
    SpecLevel TEXT NOT NULL,
    Client TEXT NOT NULL,
    Division TEXT NOT NULL,
    Subdivision TEXT NOT NULL,
    GarageLoading TEXT NOT NULL DEFAULT '',
    OverallWidth TEXT NOT NULL DEFAULT '',
    OverallDepth TEXT NOT NULL DEFAULT '',
    Stories INTEGER NOT NULL DEFAULT 0,
    Bedrooms INTEGER NOT NULL DEFAULT 0,
    Bathrooms REAL NOT NULL DEFAULT 0,
    GarageBays INTEGER NOT NULL DEFAULT 0,
    LivingArea INTEGER NOT NULL DEFAULT 0,
    TotalArea INTEGER NOT NULL DEFAULT 0,
    UNIQUE (PlanName, SpecLevel, Subdivision)
);
"""


class SqlPlanStore(PlanStore):
    """SQLite-backed plan table.

    Parameters
    ----------
    db_path:
        Path to the database file.  Use ``':memory:'`` for tests.
    table:
        Table name.
    create:
        Create the table (with its UNIQUE natural-key constraint) if it does
        not exist yet.
    """

    def __init__(
        self,
        db_path: str | Path = ":memory:",
        table: str = DEFAULT_SQL_TABLE,
        *,
        create: bool = True,
    ) -> None:
        if not _IDENTIFIER.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self._db_path = str(db_path)
        self.table = table
        self._create = create
        self._conn: sqlite3.Connection | None = None

    @property
    def name(self) -> str:
        return f"sql:{self.table}"

    @property
    def conn(self) -> sqlite3.Connection:
        """Lazy-initialise and return the database connection."""
        if self._conn is None:
            try:
                self._conn = sqlite3.connect(self._db_path)
                self._conn.row_factory = sqlite3.Row
                if self._create:
                    self._conn.executescript(_SCHEMA_SQL.format(table=self.table))
                    self._conn.commit()
            except sqlite3.Error as exc:
                self._conn = None
                raise StoreError(f"Cannot open plan database {self._db_path}: {exc}") from exc
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _execute(self, sql: str, params: tuple[Any, ...]) -> sqlite3.Cursor:
        try:
            cur = self.conn.execute(sql, params)
            self.conn.commit()
        except sqlite3.Error as exc:
            self.conn.rollback()
            raise StoreError(f"{self.name}: {exc}") from exc
        return cur

    # -- PlanStore ------------------------------------------------------------

    def find(self, key: NaturalKey) -> list[int]:
        where = " AND ".join(f"{c} = ?" for c in KEY_COLUMNS)
        cur = self._execute(f"SELECT id FROM {self.table} WHERE {where}", tuple(key))
        return [row[0] for row in cur.fetchall()]

    def count(self, key: NaturalKey) -> int:
        """Number of rows matching *key*."""
        where = " AND ".join(f"{c} = ?" for c in KEY_COLUMNS)
        cur = self._execute(f"SELECT COUNT(*) FROM {self.table} WHERE {where}", tuple(key))
        return cur.fetchone()[0]

    def insert(self, record: PlanRecord) -> int:
        values = record.model_dump()
        columns = ", ".join(COLUMNS.values())
        placeholders = ", ".join("?" for _ in COLUMNS)
        cur = self._execute(
            f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
            tuple(values[f] for f in COLUMNS),
        )
        return cur.lastrowid  # type: ignore[return-value]

    def update(self, row_id: int, record: PlanRecord) -> None:
        values = record.non_key_fields()
        fields = [f for f in COLUMNS if f in values]
        sets = ", ".join(f"{COLUMNS[f]} = ?" for f in fields)
        cur = self._execute(
            f"UPDATE {self.table} SET {sets} WHERE id = ?",
            (*(values[f] for f in fields), row_id),
        )
        if cur.rowcount != 1:
            raise StoreError(f"{self.name}: row {row_id} vanished before update")

    def get(self, row_id: int) -> dict[str, Any] | None:
        """Fetch one row as a field-name keyed dict."""
        cur = self._execute(f"SELECT * FROM {self.table} WHERE id = ?", (row_id,))
        row = cur.fetchone()
        if row is None:
            return None
        return {field: row[column] for field, column in COLUMNS.items()}
