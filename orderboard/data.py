"""Seed orders and floor tables built from the static records in constant.py."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Mapping

from orderboard.constant import DEMO_FLOOR_TABLES, DEMO_ORDER_RECORDS
from orderboard.models import (
    Item,
    ItemStatus,
    OrderLine,
    OrderSource,
    PaymentMethod,
    PaymentState,
    Seat,
    Table,
    TableState,
    UnifiedOrder,
    UnifiedStatus,
    Wave,
    WaveStatus,
)


def _demo_order(record: dict, now: datetime) -> UnifiedOrder:
    payment_state, payment_method = record["payment"]
    return UnifiedOrder(
        id=record["id"],
        source=OrderSource(record["source"]),
        label=record["label"],
        section_label=record["section"],
        guest_label=record["guest"],
        status=UnifiedStatus(record["status"]),
        created_at=now - timedelta(minutes=record["created_ago"]),
        updated_at=now - timedelta(minutes=record["updated_ago"]),
        total=float(record["total"]),
        item_count=int(record["item_count"]),
        items=tuple(OrderLine(id=line_id, name=name, qty=qty, status=status) for line_id, name, qty, status in record["items"]),
        waves=tuple(Wave(number, WaveStatus(status)) for number, status in record["waves"]),
        track_token=record.get("token"),
        note=record["note"],
        payment_state=PaymentState(payment_state),
        payment_method=PaymentMethod(payment_method) if payment_method is not None else None,
    )


def build_demo_orders(now: datetime, status_overrides: Mapping[str, UnifiedStatus] | None = None) -> list[UnifiedOrder]:
    """Seed orders, with any staff-applied status override stamped at ``now``."""
    status_overrides = status_overrides or {}
    orders = []
    for record in DEMO_ORDER_RECORDS:
        order = _demo_order(record, now)
        override = status_overrides.get(order.id)
        if override is not None:
            order = replace(order, status=UnifiedStatus(override), updated_at=now)
        orders.append(order)
    return orders


def demo_floor_tables(now: datetime) -> list[Table]:
    """Occupied floor tables used to start a session with something to fire."""
    tables = []
    for table_id, number, section, seated_minutes, guests, lines in DEMO_FLOOR_TABLES:
        by_seat: dict[int, list[Item]] = {}
        for seat_number, item_id, name, price, status, wave_number in lines:
            by_seat.setdefault(seat_number, []).append(
                Item(id=item_id, name=name, price=price, status=ItemStatus(status), wave_number=wave_number)
            )
        tables.append(
            Table(
                id=table_id,
                number=number,
                section_label=section,
                state=TableState.ORDERING.value,
                guest_count=guests,
                seated_at=now - timedelta(minutes=seated_minutes),
                seats=tuple(Seat(number=n, items=tuple(by_seat.get(n, []))) for n in range(1, guests + 1)),
                shared_items=tuple(by_seat.get(0, [])),
                wave_count=max(item.wave_number for items in by_seat.values() for item in items),
            )
        )
    return tables
