# src/storage/repo.py
from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from typing import Any, Callable

import pandas as pd


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def log_event(conn: sqlite3.Connection, event_type: str, payload: dict | None = None) -> None:
    conn.execute(
        "INSERT INTO events (ts_utc, event_type, payload) VALUES (?, ?, ?)",
        (utc_now_iso(), event_type, json.dumps(payload, default=str) if payload is not None else None),
    )
    conn.commit()


def journal_for(conn: sqlite3.Connection) -> Callable[[str, dict[str, Any]], None]:
    """Adaptateur (event_type, payload) -> table events, branché sur SyncEngine."""
    def _write(event_type: str, payload: dict[str, Any]) -> None:
        log_event(conn, event_type, payload)
    return _write


def get_events(conn: sqlite3.Connection, limit: int = 300, event_type: str | None = None) -> pd.DataFrame:
    """Derniers événements, du plus récent au plus ancien."""
    q = "SELECT ts_utc, event_type, payload FROM events"
    params: list[object] = []
    if event_type is not None:
        q += " WHERE event_type = ?"
        params.append(event_type)
    q += " ORDER BY id DESC LIMIT ?"
    params.append(int(limit))
    return pd.read_sql_query(q, conn, params=params)
