"""Status derivation for items, waves and orders.

Nothing here stores a status. Every value is recomputed from the items or
waves it summarizes, so callers re-run these after each change.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from orderboard.models import (
    HELD_WAVE_STATUSES,
    Item,
    ItemStatus,
    OrderSource,
    TableState,
    TicketStatus,
    UnifiedOrder,
    UnifiedStatus,
    Wave,
    WaveStatus,
)


def wave_status_from_items(items: Iterable[Item]) -> WaveStatus:
    """Summarize one wave's non-void items.

    Precedence is ready > cooking > fired > served > held, so the most urgent
    sub-state wins. An empty wave is held.
    """
    statuses = {item.status for item in items if item.status != ItemStatus.VOID}
    if ItemStatus.READY in statuses:
        return WaveStatus.READY
    if ItemStatus.COOKING in statuses:
        return WaveStatus.COOKING
    if ItemStatus.SENT in statuses:
        return WaveStatus.FIRED
    if ItemStatus.SERVED in statuses:
        return WaveStatus.SERVED
    return WaveStatus.HELD


def build_waves(items: Iterable[Item], wave_count: int = 1, include_empty: bool = True) -> list[Wave]:
    """Group non-void items by wave number into waves 1..N with derived status.

    Waves without a live item read as held. Pass ``include_empty=False`` to
    leave them out, so an emptied course never blocks closing or firing.
    """
    grouped: dict[int, list[Item]] = {}
    for item in items:
        if item.status == ItemStatus.VOID or item.wave_number < 1:
            continue
        grouped.setdefault(item.wave_number, []).append(item)

    if not grouped:
        return []

    if not include_empty:
        return [Wave(number, wave_status_from_items(grouped[number])) for number in sorted(grouped)]

    total = max(1, wave_count, max(grouped))
    return [Wave(number, wave_status_from_items(grouped.get(number, []))) for number in range(1, total + 1)]


def next_fireable_wave(items: Iterable[Item]) -> int | None:
    """Lowest wave number that still has a held item."""
    held = [item.wave_number for item in items if item.status == ItemStatus.HELD]
    if not held:
        return None
    return min(held)


def derive_order_status(waves: Sequence[Wave], table_state: str | None = None) -> UnifiedStatus:
    """Derive a table order's status from its waves.

    ready > preparing > sent (fired) > served > sent (held only). A mix of
    served and held waves reads as served while guests are mid-meal; all
    waves served reads as closed once the table is billing.
    """
    statuses = {wave.status for wave in waves}
    billing = table_state == TableState.BILLING

    if WaveStatus.READY in statuses:
        return UnifiedStatus.READY
    if WaveStatus.COOKING in statuses:
        return UnifiedStatus.PREPARING
    if WaveStatus.FIRED in statuses:
        return UnifiedStatus.SENT

    has_held = bool(statuses & HELD_WAVE_STATUSES)
    if WaveStatus.SERVED in statuses:
        if not has_held:
            return UnifiedStatus.CLOSED if billing else UnifiedStatus.SERVED
        return UnifiedStatus.SERVED

    if has_held:
        return UnifiedStatus.SENT
    return UnifiedStatus.CLOSED if billing else UnifiedStatus.SENT


def normalize_new_table_waves(waves: Sequence[Wave], status: UnifiedStatus) -> list[Wave]:
    """Show the first held wave as fired on an order nobody has fired yet.

    The kitchen starts on the first wave as soon as a table is submitted, so
    "fire next wave" only ever applies from the second wave on.
    """
    waves = list(waves)
    if status != UnifiedStatus.SENT:
        return waves
    if any(wave.status == WaveStatus.FIRED for wave in waves):
        return waves

    first_held = next((wave for wave in waves if wave.status in HELD_WAVE_STATUSES), None)
    if first_held is None:
        return waves
    return [
        Wave(wave.number, WaveStatus.FIRED) if wave.number == first_held.number else wave
        for wave in waves
    ]


def map_ticket_status(status: TicketStatus) -> UnifiedStatus:
    if status == TicketStatus.PICKED_UP:
        return UnifiedStatus.SERVED
    return UnifiedStatus(TicketStatus(status).value)


def next_fireable_wave_number(order: UnifiedOrder) -> int | None:
    """First held wave of a table order; counter orders have none."""
    if order.source != OrderSource.TABLE:
        return None
    for wave in order.waves:
        if wave.status in HELD_WAVE_STATUSES:
            return wave.number
    return None
