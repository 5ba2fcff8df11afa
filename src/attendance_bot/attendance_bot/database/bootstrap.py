from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


_DELIMITER_LINE = re.compile(r"[ \t]*DELIMITER[ \t]+(\S+)[ \t]*(?:\r?\n|$)", re.IGNORECASE)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files: handles ';' inside quotes and
    # mysql-client style "DELIMITER $$" lines around procedure bodies.
    buf: list[str] = []
    delimiter = ";"
    in_single = False
    in_double = False
    escape = False
    line_start = True
    i = 0

    while i < len(sql):
        if line_start and not (in_single or in_double):
            directive = _DELIMITER_LINE.match(sql, i)
            if directive:
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                delimiter = directive.group(1)
                i = directive.end()
                continue

        ch = sql[i]
        line_start = ch == "\n"

        if escape:
            buf.append(ch)
            escape = False
        elif ch == "\\":
            buf.append(ch)
            escape = True
        elif ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
        elif ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
        elif not in_single and not in_double and sql.startswith(delimiter, i):
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            i += len(delimiter)
            continue
        else:
            buf.append(ch)
        i += 1

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Apply schema.sql (CREATE TABLE IF NOT EXISTS, DROP+CREATE PROCEDURE; safe to re-run).

    Returns the number of statements executed.
    """

    ensure_database_exists(db_config)
    target = DBConfig.from_dict(db_config)

    sql = _strip_line_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(target)
    count = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()

    logger.info("Applied %d schema statements to %s", count, target.database)
    return count


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
