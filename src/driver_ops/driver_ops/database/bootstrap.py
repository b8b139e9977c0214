from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    "drivers",
    "vehicles",
    "schools",
    "households",
    "students",
    "routes",
    "route_stops",
    "driver_route_assignments",
    "inspections",
    "driver_time_intervals",
    "attendance_records",
    "driver_route_completions",
)


def split_statements(script: str) -> Iterator[str]:
    """Yield the statements of a SQL script.

    Splits on ';' outside quotes and backticks. `-- ` line comments are
    dropped, as are CREATE DATABASE / USE lines so the script installs
    into whatever database the settings name.
    """

    current: list[str] = []
    quote: str | None = None
    i = 0
    while i < len(script):
        ch = script[i]
        if quote:
            current.append(ch)
            if ch == "\\" and quote != "`" and i + 1 < len(script):
                current.append(script[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
            current.append(ch)
        elif script.startswith("--", i):
            newline = script.find("\n", i)
            i = len(script) if newline < 0 else newline
            continue
        elif ch == ";":
            yield from _keep("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    yield from _keep("".join(current))


def _keep(statement: str) -> Iterator[str]:
    statement = statement.strip()
    if not statement:
        return
    words = [w.upper() for w in statement.split(None, 2)[:2]]
    if words[0] == "USE" or words == ["CREATE", "DATABASE"]:
        return
    yield statement


class SchemaInstaller:
    """Creates the database (if needed) and applies schema.sql; idempotent."""

    def __init__(self, config: DBConfig):
        self._factory = DatabaseConnection(config)
        self._config = config

    def ensure_database(self) -> None:
        conn = self._factory.connect(with_database=False)
        try:
            cur = conn.cursor()
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{self._config.database}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
            conn.commit()
        finally:
            conn.close()

    def apply(self, schema_path: str | Path) -> int:
        self.ensure_database()
        statements = list(split_statements(Path(schema_path).read_text(encoding="utf-8")))

        conn = self._factory.connect()
        try:
            cur = conn.cursor()
            for statement in statements:
                cur.execute(statement)
            conn.commit()
        finally:
            conn.close()

        logger.info("[Schema] Applied %s statements to %s", len(statements), self._config.describe())
        return len(statements)

    def tables(self) -> list[str]:
        conn = self._factory.connect()
        try:
            cur = conn.cursor()
            cur.execute("SHOW TABLES")
            return sorted(str(row[0]) for row in cur.fetchall())
        finally:
            conn.close()

    def missing_tables(self) -> list[str]:
        present = set(self.tables())
        return [t for t in REQUIRED_TABLES if t not in present]
