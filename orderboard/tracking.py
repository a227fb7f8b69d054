"""SQLite store for tracked counter tickets (pickup and walk-in dine-in)."""

from __future__ import annotations

import logging
import sqlite3
import time
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Iterable
from uuid import uuid4

from orderboard.config import TRACKING_DB_PATH
from orderboard.constant import SOURCE_CODE_PREFIXES
from orderboard.models import OrderSource, TicketStatus, TrackingLine, TrackingSnapshot, UnifiedStatus

logger = logging.getLogger(__name__)

_COUNTER_SOURCES = frozenset({OrderSource.PICKUP, OrderSource.DINE_IN_NO_TABLE})

_TICKET_STATUS_FOR_FLOW: dict[UnifiedStatus, TicketStatus] = {
    UnifiedStatus.SENT: TicketStatus.SENT,
    UnifiedStatus.PREPARING: TicketStatus.PREPARING,
    UnifiedStatus.READY: TicketStatus.READY,
    UnifiedStatus.SERVED: TicketStatus.PICKED_UP,
}


def _connect() -> sqlite3.Connection:
    db_file = Path(TRACKING_DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def bootstrap_schema() -> None:
    """Create the tracking schema if it does not already exist."""
    with _connect() as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS tracking_tickets (
                token TEXT PRIMARY KEY,
                code TEXT NOT NULL,
                service_type TEXT NOT NULL,
                status TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                customer_name TEXT NOT NULL DEFAULT '',
                order_note TEXT NOT NULL DEFAULT ''
            );

            CREATE TABLE IF NOT EXISTS tracking_lines (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                token TEXT NOT NULL,
                line_index INTEGER NOT NULL,
                line_id TEXT NOT NULL,
                name TEXT NOT NULL,
                qty INTEGER NOT NULL,
                status TEXT NOT NULL,
                unit_price REAL NOT NULL DEFAULT 0,
                FOREIGN KEY(token) REFERENCES tracking_tickets(token) ON DELETE CASCADE
            );

            CREATE INDEX IF NOT EXISTS idx_tracking_lines_token_line
                ON tracking_lines(token, line_index);
            """
        )


def create_tracking_token(now: datetime) -> str:
    millis = int(now.timestamp() * 1000)
    return f"trk_{millis:x}_{uuid4().hex[:8]}"


def upsert_snapshot(snapshot: TrackingSnapshot) -> None:
    """Insert or replace a ticket and all of its lines."""
    if not snapshot.token:
        raise ValueError("Tracking snapshot needs a token")
    service_type = OrderSource(snapshot.service_type)
    if service_type not in _COUNTER_SOURCES:
        raise ValueError(f"Not a counter service type: {service_type.value}")
    status = TicketStatus(snapshot.status)

    with _connect() as conn:
        with conn:
            conn.execute(
                """
                INSERT INTO tracking_tickets
                    (token, code, service_type, status, created_at, updated_at, customer_name, order_note)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(token) DO UPDATE SET
                    code = excluded.code,
                    service_type = excluded.service_type,
                    status = excluded.status,
                    created_at = excluded.created_at,
                    updated_at = excluded.updated_at,
                    customer_name = excluded.customer_name,
                    order_note = excluded.order_note
                """,
                (
                    snapshot.token,
                    snapshot.code,
                    service_type.value,
                    status.value,
                    snapshot.created_at.isoformat(),
                    snapshot.updated_at.isoformat(),
                    snapshot.customer_name,
                    snapshot.order_note,
                ),
            )
            conn.execute("DELETE FROM tracking_lines WHERE token = ?", (snapshot.token,))
            for idx, line in enumerate(snapshot.items):
                conn.execute(
                    """
                    INSERT INTO tracking_lines (token, line_index, line_id, name, qty, status, unit_price)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (snapshot.token, idx, line.id, line.name, line.qty, line.status, line.unit_price),
                )
    logger.debug("upsert_snapshot token=%s status=%s", snapshot.token, status.value)


def _lines_by_token(conn: sqlite3.Connection, token: str | None = None) -> dict[str, list[TrackingLine]]:
    lines: dict[str, list[TrackingLine]] = {}
    query = "SELECT token, line_id, name, qty, status, unit_price FROM tracking_lines"
    if token is None:
        rows = conn.execute(f"{query} ORDER BY token, line_index")
    else:
        rows = conn.execute(f"{query} WHERE token = ? ORDER BY line_index", (token,))
    for line_token, line_id, name, qty, status, unit_price in rows:
        lines.setdefault(line_token, []).append(
            TrackingLine(id=line_id, name=name, qty=int(qty), status=status, unit_price=float(unit_price))
        )
    return lines


def _row_to_snapshot(row: tuple, lines: Iterable[TrackingLine]) -> TrackingSnapshot:
    token, code, service_type, status, created_at, updated_at, customer_name, order_note = row
    return TrackingSnapshot(
        token=token,
        code=code,
        service_type=OrderSource(service_type),
        status=TicketStatus(status),
        created_at=datetime.fromisoformat(created_at),
        updated_at=datetime.fromisoformat(updated_at),
        customer_name=customer_name,
        order_note=order_note,
        items=tuple(lines),
    )


_SELECT_TICKETS = """
    SELECT token, code, service_type, status, created_at, updated_at, customer_name, order_note
    FROM tracking_tickets
"""


def get_snapshot(token: str) -> TrackingSnapshot | None:
    with _connect() as conn:
        row = conn.execute(f"{_SELECT_TICKETS} WHERE token = ?", (token,)).fetchone()
        if row is None:
            return None
        lines = _lines_by_token(conn, token).get(token, [])
    return _row_to_snapshot(row, lines)


def all_snapshots() -> list[TrackingSnapshot]:
    """All tracked tickets, most recently updated first."""
    with _connect() as conn:
        rows = conn.execute(f"{_SELECT_TICKETS} ORDER BY updated_at DESC").fetchall()
        lines = _lines_by_token(conn)
    return [_row_to_snapshot(row, lines.get(row[0], [])) for row in rows]


def load_snapshots_safely() -> list[TrackingSnapshot]:
    """Poll the store; an unreachable or unreadable store reads as empty."""
    started = time.monotonic()
    try:
        snapshots = all_snapshots()
    except (sqlite3.Error, OSError, ValueError) as exc:
        logger.warning("tracking store unavailable: %r", exc)
        return []
    logger.debug("poll snapshots=%s elapsed_ms=%.1f", len(snapshots), (time.monotonic() - started) * 1000)
    return snapshots


def open_ticket(
    service_type: OrderSource,
    number: int,
    lines: Iterable[TrackingLine],
    now: datetime,
    customer_name: str = "",
    order_note: str = "",
) -> TrackingSnapshot:
    """Open and persist a new counter ticket in the sent state."""
    service_type = OrderSource(service_type)
    if service_type not in _COUNTER_SOURCES:
        raise ValueError(f"Not a counter service type: {service_type.value}")
    snapshot = TrackingSnapshot(
        token=create_tracking_token(now),
        code=f"{SOURCE_CODE_PREFIXES[service_type.value]}-{number}",
        service_type=service_type,
        status=TicketStatus.SENT,
        created_at=now,
        updated_at=now,
        customer_name=customer_name,
        order_note=order_note,
        items=tuple(lines),
    )
    upsert_snapshot(snapshot)
    return snapshot


def advance_ticket(snapshot: TrackingSnapshot, next_status: UnifiedStatus, now: datetime) -> TrackingSnapshot:
    """Move a ticket along the counter flow; served is stored as picked up."""
    ticket_status = _TICKET_STATUS_FOR_FLOW.get(next_status)
    if ticket_status is None:
        return snapshot
    return replace(snapshot, status=ticket_status, updated_at=now)
