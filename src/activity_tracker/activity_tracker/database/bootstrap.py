from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterable, Mapping

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_SETUP_DEFAULTS = {"host": "localhost", "user": "root", "database": "activity_db"}


def _target(db_config: Mapping) -> DBConfig:
    return DBConfig.from_mapping({**_SETUP_DEFAULTS, **db_config})


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = {"host": target.host, "port": target.port, "user": target.user, "password": target.password}
    # Creating the database itself needs a server-level connection.
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(use_pure=True, **kwargs)


_DB_SELECTION = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")


def _drop_db_selection(sql: str) -> str:
    # The target database comes from settings, not from the file.
    return _DB_SELECTION.sub("", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema file on ';' outside of quotes and ``--`` line comments."""
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False
    escape = False
    prev = ""

    for ch in sql:
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            prev = ch
            continue

        if escape:
            buf.append(ch)
            escape = False
            prev = ch
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            prev = ch
            continue

        if ch == "-" and prev == "-" and not in_single and not in_double:
            buf.pop()
            in_comment = True
            prev = ""
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            prev = ch
            if stmt:
                yield stmt
            continue

        buf.append(ch)
        prev = ch

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: Mapping) -> None:
    target = _target(db_config)
    with closing(_connect(target, with_database=False)) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        conn.commit()


def apply_sql_file(db_config: Mapping, *, sql_path: str | Path) -> int:
    """Run every statement of ``sql_path`` in one transaction; returns the statement count."""
    sql_path = Path(sql_path)
    statements = list(iter_sql_statements(_drop_db_selection(sql_path.read_text(encoding="utf-8"))))

    with closing(_connect(_target(db_config))) as conn:
        with closing(conn.cursor()) as cur:
            for stmt in statements:
                cur.execute(stmt)
        conn.commit()

    logger.info("applied %d statements from %s", len(statements), sql_path.name, extra={"action": "apply_sql"})
    return len(statements)


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> int:
    ensure_database_exists(db_config)
    return apply_sql_file(db_config, sql_path=schema_path)


def list_tables(db_config: Mapping) -> list[str]:
    with closing(_connect(_target(db_config))) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute("SHOW TABLES")
            return [row[0] for row in cur.fetchall()]
