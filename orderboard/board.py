"""Live/history board queries: visibility, filters, facet counts and grouping."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from orderboard.constant import HISTORY_STATUS_ORDER, LIVE_STATUS_FILTER_ORDER, LIVE_STATUS_ORDER
from orderboard.models import BoardMode, OrderSource, UnifiedOrder, UnifiedStatus
from orderboard.status import next_fireable_wave_number

_LIVE_ACTIVE = frozenset({UnifiedStatus.SENT, UnifiedStatus.PREPARING, UnifiedStatus.READY})
_HISTORY_TERMINAL = frozenset({UnifiedStatus.CLOSED, UnifiedStatus.VOIDED, UnifiedStatus.REFUNDED})


def is_visible(order: UnifiedOrder, mode: BoardMode) -> bool:
    """Served table orders stay live (guests are still seated); served counter tickets are history."""
    if mode == BoardMode.LIVE:
        if order.status == UnifiedStatus.SERVED:
            return order.source == OrderSource.TABLE
        return order.status in _LIVE_ACTIVE
    if order.status == UnifiedStatus.SERVED:
        return order.source != OrderSource.TABLE
    return order.status in _HISTORY_TERMINAL


def matches_query(order: UnifiedOrder, query: str) -> bool:
    q = query.strip().lower()
    if not q:
        return True
    return (
        q in order.label.lower()
        or q in order.section_label.lower()
        or q in order.guest_label.lower()
        or any(q in item.name.lower() for item in order.items)
    )


def visible_statuses(mode: BoardMode) -> list[UnifiedStatus]:
    """Status buckets in display order."""
    order = LIVE_STATUS_ORDER if mode == BoardMode.LIVE else HISTORY_STATUS_ORDER
    return [UnifiedStatus(status) for status in order]


def status_filter_options(mode: BoardMode) -> list[UnifiedStatus]:
    """Status chips in filter-bar order."""
    order = LIVE_STATUS_FILTER_ORDER if mode == BoardMode.LIVE else HISTORY_STATUS_ORDER
    return [UnifiedStatus(status) for status in order]


@dataclass(frozen=True)
class BoardFilter:
    mode: BoardMode = BoardMode.LIVE
    source: OrderSource | None = None
    status: UnifiedStatus | None = None
    query: str = ""

    def normalized(self) -> BoardFilter:
        """Drop a status filter that the current board mode cannot show."""
        if self.status is not None and self.status not in visible_statuses(self.mode):
            return replace(self, status=None)
        return self


def _base(orders: Iterable[UnifiedOrder], board_filter: BoardFilter) -> list[UnifiedOrder]:
    return [
        order
        for order in orders
        if is_visible(order, board_filter.mode) and matches_query(order, board_filter.query)
    ]


def filter_orders(orders: Iterable[UnifiedOrder], board_filter: BoardFilter) -> list[UnifiedOrder]:
    """Orders passing mode, source, status and search, in input order."""
    board_filter = board_filter.normalized()
    return [
        order
        for order in _base(orders, board_filter)
        if (board_filter.source is None or order.source == board_filter.source)
        and (board_filter.status is None or order.status == board_filter.status)
    ]


def source_counts(orders: Iterable[UnifiedOrder], board_filter: BoardFilter) -> dict[str, int]:
    """Per-source chip counts; ignores the source and status filters."""
    base = _base(orders, board_filter)
    counts = {"all": len(base)}
    for source in OrderSource:
        counts[source.value] = sum(1 for order in base if order.source == source)
    return counts


def status_counts(orders: Iterable[UnifiedOrder], board_filter: BoardFilter) -> dict[UnifiedStatus, int]:
    """Per-status chip counts; respects the source filter, ignores the status filter."""
    counts = {status: 0 for status in UnifiedStatus}
    for order in _base(orders, board_filter):
        if board_filter.source is not None and order.source != board_filter.source:
            continue
        counts[UnifiedStatus(order.status)] += 1
    return counts


def group_orders(filtered: Sequence[UnifiedOrder], mode: BoardMode) -> list[tuple[UnifiedStatus, list[UnifiedOrder]]]:
    """Partition into the mode's fixed buckets. Empty buckets are kept."""
    return [(status, [order for order in filtered if order.status == status]) for status in visible_statuses(mode)]


def can_fire_next_wave(order: UnifiedOrder) -> bool:
    return (
        order.source == OrderSource.TABLE
        and order.status == UnifiedStatus.SERVED
        and next_fireable_wave_number(order) is not None
    )


def can_mark_served(order: UnifiedOrder) -> bool:
    return order.status == UnifiedStatus.READY and order.source != OrderSource.TABLE
