"""Schema and demo data setup, used at startup and by scripts/."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_USERS = (
    # (email, full name, password, role)
    ("admin@pointage.local", "Administrateur RH", "admin123", "admin"),
    ("rh@pointage.local", "Agent RH", "user123", "user"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the SQL file.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""

    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


@contextmanager
def _connection(db_config: Mapping[str, Any], *, with_database: bool = True) -> Iterator[Any]:
    config = DBConfig.from_mapping(db_config)
    params = dict(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        connection_timeout=config.connect_timeout,
        use_pure=True,
    )
    if with_database:
        params["database"] = config.database
    conn = mysql.connector.connect(**params)
    try:
        yield conn
    finally:
        conn.close()


def _run_script(db_config: Mapping[str, Any], path: str | Path) -> int:
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    count = 0
    with _connection(db_config) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    return count


def ensure_database_exists(db_config: Mapping[str, Any]) -> None:
    database = DBConfig.from_mapping(db_config).database
    with _connection(db_config, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: Mapping[str, Any], *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.debug("Applied %d schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: Mapping[str, Any], *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.debug("Applied %d seed statements from %s", count, seed_path)


def ensure_demo_users(db_config: Mapping[str, Any]) -> None:
    """Create or reset the demo accounts (passwords are re-hashed each time)."""

    with _connection(db_config) as conn:
        cur = conn.cursor()
        for email, full_name, password, role in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO users (email, full_name, password_hash, role, is_active)
                VALUES (%s, %s, %s, %s, 1)
                ON DUPLICATE KEY UPDATE
                    full_name=VALUES(full_name), password_hash=VALUES(password_hash),
                    role=VALUES(role), is_active=1
                """,
                (email, full_name, generate_password_hash(password), role),
            )
        conn.commit()
    logger.info("Demo users ready: %s", ", ".join(u[0] for u in DEMO_USERS))


def list_tables(db_config: Mapping[str, Any]) -> list[str]:
    with _connection(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
