"""Schema bootstrap for the punch, attendance and devices tables."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from .connection import DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

# schema.sql may carry its own CREATE DATABASE / USE lines for manual runs;
# the configured database name always wins here.
_DB_SELECTION_RE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")


def split_sql_statements(sql: str) -> Iterator[str]:
    """Yield statements of a schema file, ignoring ``--`` comment lines.

    Semicolons inside single-quoted literals (COMMENT '...') do not end a
    statement.
    """
    sql = _DB_SELECTION_RE.sub("", sql)
    statement: list[str] = []
    quoted = False

    for line in sql.splitlines():
        if not quoted and line.lstrip().startswith("--"):
            continue
        for ch in line + "\n":
            if ch == "'":
                quoted = not quoted
            elif ch == ";" and not quoted:
                text = "".join(statement).strip()
                statement = []
                if text:
                    yield text
                continue
            statement.append(ch)

    text = "".join(statement).strip()
    if text:
        yield text


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    with db_cursor(conn_factory, dictionary=False, with_database=False) as (_, cur):
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> int:
    ensure_database_exists(conn_factory)
    statements = list(split_sql_statements(Path(schema_path).read_text(encoding="utf-8")))

    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)

    logger.info("Applied %d schema statements to %s", len(statements), conn_factory.config.database)
    return len(statements)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
