"""Schema/seed helpers used by ``create_app`` (AUTO_INIT_DB/AUTO_SEED_DB) and ``scripts/``."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DemoUser:
    user_id: str
    email: str
    name: str
    password: str
    role: str
    dept_id: str
    manager_id: str | None = None


DEMO_USERS = (
    DemoUser("demo-admin", "admin@example.com", "Admin Demo", "Admin1234", "admin", "dept-dev"),
    DemoUser("demo-manager", "manager@example.com", "Manager Demo", "Manager1234", "manager", "dept-dev"),
    DemoUser(
        "demo-employee", "employee@example.com", "Employee Demo", "Employee1234", "employee", "dept-dev", "demo-manager"
    ),
)


def _connect(config: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(**config.connect_kwargs(with_database=with_database))


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a SQL script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote: str | None = None
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
        elif ch in {"'", '"'}:
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(DBConfig.from_settings(db_config))
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_settings(db_config)
    conn = _connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)
    logger.info("schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)
    logger.info("seed data applied from %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert one admin, one manager and one employee reporting to the manager."""
    conn = _connect(DBConfig.from_settings(db_config))
    try:
        cur = conn.cursor()
        now = datetime.now()
        for u in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO users (user_id, email, name, password_hash, role, dept_id, manager_id,
                                   is_active, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, 1, %s, %s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name), password_hash=VALUES(password_hash), role=VALUES(role),
                    dept_id=VALUES(dept_id), manager_id=VALUES(manager_id), is_active=1, updated_at=VALUES(updated_at)
                """,
                (u.user_id, u.email, u.name, generate_password_hash(u.password), u.role, u.dept_id, u.manager_id, now, now),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_settings(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
