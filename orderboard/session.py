"""In-memory state of one board session.

The session is the only writer of floor tables, demo status overrides and
wave overrides. Counter tickets are re-read from the tracking store on every
poll; writes to them go through the store first and then replace the cached
snapshot.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Callable, Iterable

from orderboard import tracking
from orderboard.aggregator import (
    COUNTER_ORDER_PREFIX,
    TABLE_ORDER_PREFIX,
    build_counter_orders,
    build_table_orders,
    counter_flow_index,
    fire_order_wave,
    merge_orders,
)
from orderboard.board import (
    BoardFilter,
    can_fire_next_wave,
    can_mark_served,
    filter_orders,
    group_orders,
    source_counts,
    status_counts,
)
from orderboard.constant import COUNTER_STATUS_FLOW
from orderboard.data import build_demo_orders
from orderboard.models import (
    BoardCounts,
    OrderSource,
    Refusal,
    Table,
    TrackingSnapshot,
    UnifiedOrder,
    UnifiedStatus,
    WaveOverrides,
)
from orderboard.waves import fire_next_wave

logger = logging.getLogger(__name__)

TableEdit = Callable[[Table], "Table | tuple[Table, Refusal | None]"]


def next_counter_status(order: UnifiedOrder) -> UnifiedStatus | None:
    """Next step of a counter order on sent -> preparing -> ready -> served."""
    if order.source == OrderSource.TABLE:
        return None
    idx = counter_flow_index(order.status)
    if order.status not in COUNTER_STATUS_FLOW or idx >= len(COUNTER_STATUS_FLOW) - 1:
        return None
    return UnifiedStatus(COUNTER_STATUS_FLOW[idx + 1])


class ServiceSession:
    def __init__(self, tables: Iterable[Table] = ()) -> None:
        self.tables: dict[str, Table] = {table.id: table for table in tables}
        self.snapshots: list[TrackingSnapshot] = []
        self.demo_status_overrides: dict[str, UnifiedStatus] = {}
        self.wave_overrides: WaveOverrides = {}

    def bootstrap(self) -> bool:
        """Prepare the tracking store and load it; False when it is unreachable."""
        try:
            tracking.bootstrap_schema()
        except (sqlite3.Error, OSError) as exc:
            logger.warning("tracking store bootstrap failed: %r", exc)
            self.snapshots = []
            return False
        self.poll()
        return True

    def poll(self) -> list[TrackingSnapshot]:
        self.snapshots = tracking.load_snapshots_safely()
        return self.snapshots

    def orders(self, now: datetime) -> list[UnifiedOrder]:
        """Full pipeline: tables, tracked tickets, seed orders, overrides.

        Seed orders only fill an empty store, so a live kitchen never sees
        illustrative tickets next to real ones.
        """
        table_orders = build_table_orders(self.tables.values(), now)
        counter_orders = build_counter_orders(self.snapshots)
        seed_orders = [] if self.snapshots else build_demo_orders(now, self.demo_status_overrides)
        return merge_orders(table_orders, counter_orders, seed_orders, self.wave_overrides)

    def find_order(self, order_id: str, now: datetime) -> UnifiedOrder | None:
        return next((order for order in self.orders(now) if order.id == order_id), None)

    def board(
        self, board_filter: BoardFilter, now: datetime
    ) -> tuple[list[tuple[UnifiedStatus, list[UnifiedOrder]]], BoardCounts]:
        board_filter = board_filter.normalized()
        orders = self.orders(now)
        groups = group_orders(filter_orders(orders, board_filter), board_filter.mode)
        counts = BoardCounts(
            by_source=source_counts(orders, board_filter),
            by_status=status_counts(orders, board_filter),
        )
        return groups, counts

    def fire_next_wave(self, order_id: str, now: datetime) -> bool:
        """Fire the next held wave of a served table order."""
        order = self.find_order(order_id, now)
        if order is None or not can_fire_next_wave(order):
            return False

        table_id = order_id[len(TABLE_ORDER_PREFIX):] if order_id.startswith(TABLE_ORDER_PREFIX) else None
        if table_id in self.tables:
            table = self.tables[table_id]
            fired = fire_next_wave(table)
            if fired == table:
                return False
            self.tables[table_id] = fired
        else:
            self.wave_overrides = fire_order_wave(order, self.wave_overrides)
        return True

    def advance_counter(self, order_id: str, status: UnifiedStatus, now: datetime) -> bool:
        """Move a pickup or dine-in order to ``status``.

        Tracked tickets are written back to the store; seed orders only keep
        an in-session override.
        """
        order = self.find_order(order_id, now)
        if order is None or order.source == OrderSource.TABLE:
            return False
        status = UnifiedStatus(status)

        if order_id.startswith(COUNTER_ORDER_PREFIX) and order.track_token:
            snapshot = next((entry for entry in self.snapshots if entry.token == order.track_token), None)
            if snapshot is None:
                return False
            updated = tracking.advance_ticket(snapshot, status, now)
            if updated is snapshot:
                return False
            tracking.upsert_snapshot(updated)
            self.snapshots = [updated if entry.token == updated.token else entry for entry in self.snapshots]
        else:
            self.demo_status_overrides[order_id] = status

        logger.info("advance_counter order=%s status=%s", order_id, status.value)
        return True

    def mark_served(self, order_id: str, now: datetime) -> bool:
        order = self.find_order(order_id, now)
        if order is None or not can_mark_served(order):
            return False
        return self.advance_counter(order_id, UnifiedStatus.SERVED, now)

    def update_table(self, table_id: str, fn: TableEdit) -> Refusal | None:
        """Apply a wave-engine edit to a held table.

        ``fn`` returns either the new table or a ``(table, refusal)`` pair, as
        the seat and wave deletions do.
        """
        table = self.tables.get(table_id)
        if table is None:
            return None
        result = fn(table)
        refusal = None
        if isinstance(result, tuple):
            result, refusal = result
        self.tables[table_id] = result
        return refusal

    def add_table(self, table: Table) -> None:
        self.tables[table.id] = table
