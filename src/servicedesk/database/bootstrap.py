from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Iterator, List

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..profiles.model import WorkDays
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchone

logger = logging.getLogger(__name__)

# Shipped as package data next to this module.
SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


# Quoted literals win over "--" and ";" found inside them.
_SQL_TOKEN = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|--[^\n]*|;", re.S)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from settings, not from the file.
    return re.sub(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a schema file on ';' outside quotes, dropping '--' comments."""
    start = 0
    pieces: List[str] = []
    for match in _SQL_TOKEN.finditer(sql):
        token = match.group(0)
        if token.startswith("--"):
            pieces.append(sql[start : match.start()])
            start = match.end()
        elif token == ";":
            pieces.append(sql[start : match.start()])
            start = match.end()
            stmt = "".join(pieces).strip()
            pieces = []
            if stmt:
                yield stmt
    pieces.append(sql[start:])
    tail = "".join(pieces).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> int:
    """Apply schema.sql (idempotent CREATE IF NOT EXISTS). Returns statement count."""
    ensure_database_exists(conn_factory)
    statements = list(_iter_sql_statements(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))))

    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)

    logger.info("Schema applied from %s (%d statements)", schema_path, len(statements))
    return len(statements)


DEMO_USERS = (
    ("lead@example.com", "lead123", "Demo Lead", Role.LEAD),
    ("analyst@example.com", "analyst123", "Demo Analyst", Role.ANALYST),
)


def ensure_demo_users(conn_factory: DatabaseConnection, *, area: str = "Service Desk") -> None:
    """Create the demo accounts, or reset their password and role if they exist."""
    work_days = json.dumps(WorkDays.default().to_dict())

    with db_cursor(conn_factory) as (_, cur):
        for email, password, name, role in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            row = fetchone(cur)

            if row:
                user_id = int(row["user_id"])
                cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))
                cur.execute(
                    "UPDATE profiles SET name=%s, role=%s, area=%s WHERE user_id=%s",
                    (name, role.value, area, user_id),
                )
                continue

            cur.execute("INSERT INTO users(email, password_hash) VALUES(%s,%s)", (email, password_hash))
            cur.execute(
                "INSERT INTO profiles(user_id, name, role, area, work_days) VALUES(%s,%s,%s,%s,%s)",
                (int(cur.lastrowid), name, role.value, area, work_days),
            )

    logger.info("Demo users ready: %s", ", ".join(email for email, *_ in DEMO_USERS))
