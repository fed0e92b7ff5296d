from __future__ import annotations

from datetime import time, timedelta
from pathlib import Path

import pytest

import servicedesk
from servicedesk.database.bootstrap import SCHEMA_PATH, _iter_sql_statements, _strip_create_db_and_use
from servicedesk.database.mysql_base import normalize_mysql_time


def test_statements_split_outside_quotes_and_comments():
    sql = """
    -- tables; with a semicolon in the comment
    CREATE TABLE a (x VARCHAR(10) DEFAULT 'a;b');
    INSERT INTO a VALUES ('it\\'s; fine')
    """

    statements = list(_iter_sql_statements(sql))

    assert statements == [
        "CREATE TABLE a (x VARCHAR(10) DEFAULT 'a;b')",
        "INSERT INTO a VALUES ('it\\'s; fine')",
    ]


def test_create_database_and_use_lines_are_removed():
    sql = "CREATE DATABASE IF NOT EXISTS foo;\nUSE foo;\nCREATE TABLE t (id INT);\n"
    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]


def test_schema_is_shipped_inside_the_package():
    package_dir = Path(servicedesk.__file__).resolve().parent

    assert SCHEMA_PATH.is_file()
    assert package_dir in SCHEMA_PATH.parents

    pyproject = (package_dir.parents[1] / "pyproject.toml").read_text(encoding="utf-8")
    assert 'servicedesk = ["database/schema.sql"]' in pyproject


def test_bundled_schema_creates_every_table():
    statements = list(_iter_sql_statements(SCHEMA_PATH.read_text(encoding="utf-8")))
    created = " ".join(statements)

    for table in ("users", "profiles", "absence_requests", "tasks"):
        assert f"CREATE TABLE IF NOT EXISTS {table}" in created


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        (time(9, 30), time(9, 30)),
        (timedelta(hours=18), time(18, 0)),
        (timedelta(hours=10, minutes=15, seconds=5), time(10, 15, 5)),
        ("08:30", time(8, 30)),
        ("08:30:00", time(8, 30)),
    ],
)
def test_normalize_mysql_time(raw, expected):
    assert normalize_mysql_time(raw) == expected


def test_normalize_mysql_time_rejects_garbage():
    with pytest.raises(ValueError):
        normalize_mysql_time("9")
