"""Merge table, counter and seed orders into one board list."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Sequence

from orderboard.constant import COUNTER_STATUS_FLOW, SOURCE_LABELS
from orderboard.models import (
    ItemStatus,
    OrderLine,
    OrderSource,
    PaymentState,
    Seat,
    Table,
    TableState,
    TicketStatus,
    TrackingSnapshot,
    UnifiedOrder,
    UnifiedStatus,
    Wave,
    WaveOverrides,
    WaveStatus,
)
from orderboard.status import (
    build_waves,
    derive_order_status,
    map_ticket_status,
    next_fireable_wave_number,
    normalize_new_table_waves,
)
from orderboard.waves import table_total

logger = logging.getLogger(__name__)

TABLE_ORDER_PREFIX = "table-"
COUNTER_ORDER_PREFIX = "counter-"

_PAID_TICKET_STATUSES = frozenset({TicketStatus.PICKED_UP, TicketStatus.CLOSED, TicketStatus.REFUNDED})
# Terminal table orders keep their status; overrides only repaint waves.
_FROZEN_TABLE_STATUSES = frozenset({UnifiedStatus.VOIDED, UnifiedStatus.REFUNDED})


def _guest_label(count: int) -> str:
    return f"{count} guest{'' if count == 1 else 's'}"


def _fallback_seats(table: Table) -> tuple[Seat, ...]:
    capacity = max(table.guest_count, 2)
    return tuple(Seat(number=number) for number in range(1, capacity + 1))


def build_table_orders(tables: Iterable[Table], now: datetime) -> list[UnifiedOrder]:
    """One unified order per occupied table."""
    orders: list[UnifiedOrder] = []
    for table in tables:
        if table.state == TableState.AVAILABLE:
            continue

        seats = table.seats or _fallback_seats(table)
        lines = [
            OrderLine(id=f"{table.id}-s{seat.number}-{idx}", name=item.name, qty=item.quantity, status=item.status.value)
            for seat in seats
            for idx, item in enumerate(seat.items)
        ]
        lines.extend(
            OrderLine(id=f"{table.id}-s0-{idx}", name=item.name, qty=item.quantity, status=item.status.value)
            for idx, item in enumerate(table.shared_items)
        )
        waves = build_waves(table.all_items(), include_empty=False)
        created_at = table.seated_at or now

        orders.append(
            UnifiedOrder(
                id=f"{TABLE_ORDER_PREFIX}{table.id}",
                source=OrderSource.TABLE,
                label=f"T{table.number}",
                section_label=table.section_label,
                guest_label=_guest_label(table.guest_count),
                status=derive_order_status(waves, table.state),
                created_at=created_at,
                updated_at=created_at,
                total=table_total(table),
                item_count=sum(line.qty for line in lines if line.status != ItemStatus.VOID),
                items=tuple(lines),
                waves=tuple(waves),
                note=table.notes[0] if table.notes else "",
            )
        )
    return orders


def build_counter_orders(snapshots: Iterable[TrackingSnapshot]) -> list[UnifiedOrder]:
    orders: list[UnifiedOrder] = []
    for entry in snapshots:
        active = [line for line in entry.items if line.status != "voided"]
        payment_state = PaymentState.PAID if entry.status in _PAID_TICKET_STATUSES else PaymentState.UNPAID
        orders.append(
            UnifiedOrder(
                id=f"{COUNTER_ORDER_PREFIX}{entry.token}",
                source=OrderSource(entry.service_type),
                label=entry.code,
                section_label=SOURCE_LABELS[OrderSource(entry.service_type).value],
                guest_label=entry.customer_name or "Guest",
                status=map_ticket_status(entry.status),
                created_at=entry.created_at,
                updated_at=entry.updated_at,
                total=sum(line.qty * line.unit_price for line in active),
                item_count=sum(line.qty for line in active),
                items=tuple(OrderLine(id=line.id, name=line.name, qty=line.qty, status=line.status) for line in entry.items),
                waves=(),
                track_token=entry.token,
                note=entry.order_note or "",
                payment_state=payment_state,
            )
        )
    return orders


def apply_wave_overrides(order: UnifiedOrder, wave_overrides: WaveOverrides) -> UnifiedOrder:
    """Patch an order's waves and, for table orders, re-derive its status."""
    order_overrides = wave_overrides.get(order.id) or {}
    waves = [Wave(wave.number, WaveStatus(order_overrides.get(wave.number, wave.status))) for wave in order.waves]

    if order.source != OrderSource.TABLE or order.status in _FROZEN_TABLE_STATUSES:
        return replace(order, waves=tuple(waves)) if order_overrides else order

    table_state = TableState.BILLING if order.status == UnifiedStatus.CLOSED else None
    derived = derive_order_status(waves, table_state)
    normalized = normalize_new_table_waves(waves, derived)
    return replace(order, waves=tuple(normalized), status=derive_order_status(normalized, table_state))


def merge_orders(
    table_orders: Sequence[UnifiedOrder],
    counter_orders: Sequence[UnifiedOrder],
    seed_orders: Sequence[UnifiedOrder],
    wave_overrides: WaveOverrides | None = None,
) -> list[UnifiedOrder]:
    """Union all sources, apply live overrides, sort oldest first."""
    wave_overrides = wave_overrides or {}
    merged = [
        apply_wave_overrides(order, wave_overrides)
        for order in (*table_orders, *counter_orders, *seed_orders)
    ]
    return sorted(merged, key=lambda order: order.created_at)


def fire_order_wave(order: UnifiedOrder, wave_overrides: WaveOverrides) -> WaveOverrides:
    """Record the next fireable wave of a table order as fired."""
    wave_number = next_fireable_wave_number(order)
    if wave_number is None:
        return wave_overrides
    logger.info("fire_order_wave order=%s wave=%s", order.id, wave_number)
    return {
        **wave_overrides,
        order.id: {**wave_overrides.get(order.id, {}), wave_number: WaveStatus.FIRED},
    }


def counter_flow_index(status: UnifiedStatus) -> int:
    """Position of a counter order on the sent -> served progress track."""
    if status in COUNTER_STATUS_FLOW:
        return COUNTER_STATUS_FLOW.index(status)
    if status in (UnifiedStatus.CLOSED, UnifiedStatus.REFUNDED, UnifiedStatus.VOIDED):
        return len(COUNTER_STATUS_FLOW) - 1
    return 0
