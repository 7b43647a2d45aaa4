from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import datetime, time, timedelta
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector

from ..core.exceptions import StoreReadFailure, StoreWriteFailure, ValidationError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def store_write(action: str) -> Iterator[None]:
    """Turn driver errors raised by a write into ``StoreWriteFailure``."""
    try:
        yield
    except mysql.connector.Error as e:
        logger.warning("store rejected %s: %s", action, e)
        raise StoreWriteFailure(f"{action} failed: {e}") from e


@contextmanager
def store_read(action: str) -> Iterator[None]:
    """Turn driver errors raised by a read into ``StoreReadFailure``."""
    try:
        yield
    except mysql.connector.Error as e:
        logger.warning("store unavailable for %s: %s", action, e)
        raise StoreReadFailure(f"{action} failed: {e}") from e

def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values) -> str:
    return ", ".join(["%s"] * len(values))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize TIME-like values (time, timedelta or 'HH:MM[:SS]' string)."""

    if value is None or value == "":
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        return time(hour=total_seconds // 3600, minute=(total_seconds % 3600) // 60, second=total_seconds % 60)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def load_json_column(value: Any, *, column: str, expected: type) -> Any:
    """Decode a JSON column (str/bytes or already-decoded) and check its shape."""
    if value is None or value == "" or value == b"":
        return expected()
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValidationError(f"{column}: invalid JSON ({e.msg})") from e
    if not isinstance(value, expected):
        raise ValidationError(f"{column}: expected {expected.__name__}, got {type(value).__name__}")
    return value


def decode_session_logs(value: Any) -> dict[str, datetime]:
    raw = load_json_column(value, column="logs", expected=dict)
    logs: dict[str, datetime] = {}
    for session_id, stamp in raw.items():
        if not isinstance(stamp, str):
            raise ValidationError(f"logs[{session_id}]: expected ISO timestamp")
        try:
            # Stored naive local time; older rows may carry a trailing 'Z'.
            parsed = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValidationError(f"logs[{session_id}]: {e}") from e
        logs[str(session_id)] = parsed
    return logs


def encode_session_logs(logs: dict[str, datetime]) -> str:
    return json.dumps({k: v.isoformat() for k, v in sorted(logs.items())})
