from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import BackendUnavailable
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) for one unit of work.

    Commits when the block exits cleanly and rolls back otherwise. Driver
    errors surface as BackendUnavailable so services and controllers only
    deal with domain exceptions.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("Database connection failed: %s", e)
        raise BackendUnavailable("Database is unavailable") from e

    cur = None
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield conn, cur
        conn.commit()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.exception("Database query failed")
        raise BackendUnavailable("Database query failed") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        if cur is not None:
            cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column to datetime.time.

    Depending on the connector build the value arrives as time, as a
    timedelta since midnight, or as an "HH:MM[:SS]" string.
    """
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        minutes, seconds = divmod(int(value.total_seconds()) % 86400, 60)
        return time(*divmod(minutes, 60), seconds)
    if isinstance(value, str):
        fields = [int(part) for part in value.strip().split(":") if part]
        if len(fields) not in (2, 3):
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*fields)
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
