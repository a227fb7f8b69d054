"""Wave and item transitions for a seated table.

Every function reads a ``Table`` snapshot and returns a new one. Bad targets
(unknown ids, waves with nothing to fire) give back the input unchanged; only
deleting a seat or wave that still holds items is reported, as a ``Refusal``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable

from orderboard.constant import COURSE_WAVE_FALLBACK
from orderboard.models import DraftItem, Item, ItemStatus, Refusal, Seat, Table, TableState
from orderboard.status import next_fireable_wave

logger = logging.getLogger(__name__)

_WAVE_TAG_RE = re.compile(r"\bWave\s+(\d+)\b", re.IGNORECASE)
_EDGE_SEPARATORS_RE = re.compile(r"^[\s·|,-]+|[\s·|,-]+$")

_ADVANCE_FROM: dict[ItemStatus, frozenset[ItemStatus]] = {
    ItemStatus.COOKING: frozenset({ItemStatus.SENT}),
    ItemStatus.READY: frozenset({ItemStatus.COOKING}),
    ItemStatus.SERVED: frozenset({ItemStatus.SENT, ItemStatus.COOKING, ItemStatus.READY}),
}


def _map_items(table: Table, fn: Callable[[Item], Item]) -> Table:
    seats = tuple(replace(seat, items=tuple(fn(item) for item in seat.items)) for seat in table.seats)
    shared = tuple(fn(item) for item in table.shared_items)
    return replace(table, seats=seats, shared_items=shared)


def table_total(table: Table) -> float:
    """Check total over non-void items."""
    return sum(item.price * item.quantity for item in table.all_items() if item.status != ItemStatus.VOID)


def fire_wave(table: Table, wave_number: int) -> Table:
    """Send every held item of ``wave_number`` to the kitchen."""

    def fire_item(item: Item) -> Item:
        if item.status != ItemStatus.HELD or item.wave_number != wave_number:
            return item
        return replace(item, status=ItemStatus.SENT)

    return _map_items(table, fire_item)


def fire_next_wave(table: Table) -> Table:
    wave_number = next_fireable_wave(table.all_items())
    if wave_number is None:
        logger.debug("fire_next_wave table=%s nothing held", table.id)
        return table
    logger.info("fire_wave table=%s wave=%s", table.id, wave_number)
    return fire_wave(table, wave_number)


def advance_wave(table: Table, wave_number: int, target: ItemStatus) -> Table:
    """Move a wave's items one guarded step toward ``target``.

    sent->cooking, cooking->ready, and sent/cooking/ready->served. Anything
    else, void items included, is left alone.
    """
    allowed_from = _ADVANCE_FROM.get(target)
    if allowed_from is None:
        logger.debug("advance_wave table=%s unsupported target=%s", table.id, target)
        return table

    def advance_item(item: Item) -> Item:
        if item.wave_number != wave_number or item.status not in allowed_from:
            return item
        return replace(item, status=ItemStatus(target))

    return _map_items(table, advance_item)


def mark_item_served(table: Table, item_id: str) -> Table:
    """Serve one item that the kitchen already has."""
    servable = _ADVANCE_FROM[ItemStatus.SERVED]

    def serve(item: Item) -> Item:
        if item.id != item_id or item.status not in servable:
            return item
        return replace(item, status=ItemStatus.SERVED)

    return _map_items(table, serve)


def void_item(table: Table, item_id: str) -> Table:
    def void(item: Item) -> Item:
        if item.id != item_id or item.status == ItemStatus.VOID:
            return item
        return replace(item, status=ItemStatus.VOID)

    return _map_items(table, void)


def draft_wave_number(draft: DraftItem) -> int:
    """Resolve the wave a draft line is sent into.

    Explicit selection first, then a "Wave N" tag in the notes, then the
    course default.
    """
    if draft.wave_number is not None and draft.wave_number > 0:
        return draft.wave_number
    match = _WAVE_TAG_RE.search(draft.notes or "")
    if match and int(match.group(1)) > 0:
        return int(match.group(1))
    return COURSE_WAVE_FALLBACK.get(draft.course, 1)


def strip_wave_tag(notes: str) -> str:
    without_tag = _WAVE_TAG_RE.sub("", notes or "")
    return _EDGE_SEPARATORS_RE.sub("", without_tag).strip()


def _items_from_draft(draft: DraftItem) -> list[Item]:
    visible_note = strip_wave_tag(draft.notes)
    mods = (*draft.options, *(f"+ {extra}" for extra in draft.extras), *((visible_note,) if visible_note else ()))
    wave_number = draft_wave_number(draft)
    count = max(1, draft.quantity)
    ids = [draft.id] if count == 1 else [f"{draft.id}-{index}" for index in range(1, count + 1)]
    return [
        Item(id=item_id, name=draft.name, price=draft.price, status=ItemStatus.HELD, wave_number=wave_number, mods=mods)
        for item_id in ids
    ]


def send_draft_order(table: Table) -> Table:
    """Commit all drafts as held items, then fire the lowest held wave.

    The lowest wave is taken across existing and newly added items, so adding
    to an open check and sending the course that is due is one action.
    """
    if not table.drafts and next_fireable_wave(table.all_items()) is None:
        return table

    seat_numbers = {seat.number for seat in table.seats}
    by_seat: dict[int, list[Item]] = {}
    shared: list[Item] = []
    for draft in table.drafts:
        items = _items_from_draft(draft)
        # Lines for a seat that no longer exists go to the table.
        if draft.seat in seat_numbers:
            by_seat.setdefault(draft.seat, []).extend(items)
        else:
            shared.extend(items)

    seats = tuple(replace(seat, items=seat.items + tuple(by_seat.get(seat.number, []))) for seat in table.seats)
    state = TableState.ORDERING.value if table.state == TableState.SEATED else table.state
    committed = replace(
        table,
        seats=seats,
        shared_items=table.shared_items + tuple(shared),
        drafts=(),
        state=state,
    )

    logger.info("send_draft_order table=%s drafts=%s", table.id, len(table.drafts))
    return fire_next_wave(committed)


def add_draft_item(table: Table, draft: DraftItem) -> Table:
    return replace(table, drafts=table.drafts + (draft,))


def remove_draft_item(table: Table, draft_id: str) -> Table:
    return replace(table, drafts=tuple(draft for draft in table.drafts if draft.id != draft_id))


def change_draft_quantity(table: Table, draft_id: str, delta: int) -> Table:
    drafts = tuple(
        replace(draft, quantity=max(1, draft.quantity + delta)) if draft.id == draft_id else draft
        for draft in table.drafts
    )
    return replace(table, drafts=drafts)


def seat_party(table: Table, party_size: int, now: datetime, notes: Iterable[str] = ()) -> Table:
    """Seat a party: fresh empty seats, no drafts, wave selection reset."""
    if party_size < 1:
        return table
    return replace(
        table,
        state=TableState.SEATED.value,
        guest_count=party_size,
        seated_at=now,
        seats=tuple(Seat(number=number) for number in range(1, party_size + 1)),
        shared_items=(),
        drafts=(),
        wave_count=1,
        notes=table.notes + tuple(notes),
    )


def complete_payment(table: Table) -> Table:
    """Close the check and return the table to the floor as available."""
    logger.info("complete_payment table=%s total=%.2f", table.id, table_total(table))
    return replace(
        table,
        state=TableState.AVAILABLE.value,
        guest_count=0,
        seated_at=None,
        seats=(),
        shared_items=(),
        drafts=(),
        wave_count=1,
        notes=(),
    )


def request_bill(table: Table) -> Table:
    if table.state == TableState.AVAILABLE or table_total(table) <= 0:
        return table
    return replace(table, state=TableState.BILLING.value)


def add_seat(table: Table) -> Table:
    next_number = max((seat.number for seat in table.seats), default=0) + 1
    return replace(table, seats=table.seats + (Seat(number=next_number),), guest_count=table.guest_count + 1)


def delete_seat(table: Table, seat_number: int) -> tuple[Table, Refusal | None]:
    seat = next((seat for seat in table.seats if seat.number == seat_number), None)
    if seat is None or len(table.seats) <= 1:
        return table, None

    has_items = any(item.status != ItemStatus.VOID for item in seat.items)
    has_drafts = any(draft.seat == seat_number for draft in table.drafts)
    if has_items or has_drafts:
        logger.info("delete_seat refused table=%s seat=%s", table.id, seat_number)
        return table, Refusal(
            reason="seat_has_items",
            title="Cannot delete seat",
            description=f"Seat {seat_number} has items. Move or remove them first.",
        )

    return (
        replace(
            table,
            seats=tuple(s for s in table.seats if s.number != seat_number),
            guest_count=max(0, table.guest_count - 1),
        ),
        None,
    )


def add_wave(table: Table) -> Table:
    return replace(table, wave_count=table.wave_count + 1)


def delete_wave(table: Table, wave_number: int) -> tuple[Table, Refusal | None]:
    """Remove an empty wave slot; later waves shift down to keep numbering contiguous."""
    if table.wave_count <= 1 or not (1 <= wave_number <= table.wave_count):
        return table, None

    has_items = any(
        item.wave_number == wave_number and item.status != ItemStatus.VOID for item in table.all_items()
    )
    has_drafts = any(draft_wave_number(draft) == wave_number for draft in table.drafts)
    if has_items or has_drafts:
        logger.info("delete_wave refused table=%s wave=%s", table.id, wave_number)
        return table, Refusal(
            reason="wave_has_items",
            title="Cannot delete wave",
            description=f"Wave {wave_number} has items. Move or remove them first.",
        )

    def shift_item(item: Item) -> Item:
        if item.wave_number > wave_number:
            return replace(item, wave_number=item.wave_number - 1)
        return item

    # Voided lines of the removed wave would otherwise land in the next course.
    def kept(item: Item) -> bool:
        return item.wave_number != wave_number

    pruned = replace(
        table,
        seats=tuple(replace(seat, items=tuple(filter(kept, seat.items))) for seat in table.seats),
        shared_items=tuple(filter(kept, table.shared_items)),
    )
    shifted = _map_items(pruned, shift_item)
    drafts = tuple(
        replace(draft, wave_number=draft_wave_number(draft) - 1)
        if draft_wave_number(draft) > wave_number
        else draft
        for draft in table.drafts
    )
    return replace(shifted, drafts=drafts, wave_count=table.wave_count - 1), None
