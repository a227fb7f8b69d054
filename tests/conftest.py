"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from orderboard import tracking
from orderboard.models import (
    Item,
    ItemStatus,
    OrderLine,
    OrderSource,
    Seat,
    Table,
    TableState,
    UnifiedOrder,
    UnifiedStatus,
    Wave,
    WaveStatus,
)

NOW = datetime(2026, 3, 14, 19, 30, tzinfo=timezone.utc)


def make_item(item_id, status=ItemStatus.HELD, wave=1, price=10.0, quantity=1, name=None):
    return Item(
        id=item_id,
        name=name or item_id.title(),
        price=price,
        status=ItemStatus(status),
        wave_number=wave,
        quantity=quantity,
    )


def make_table(*seat_items, table_id="t1", number=1, state=TableState.ORDERING, shared=(), wave_count=1, drafts=()):
    """Build a table where each positional argument is the item list of one seat."""
    seats = tuple(Seat(number=idx, items=tuple(items)) for idx, items in enumerate(seat_items, start=1))
    return Table(
        id=table_id,
        number=number,
        section_label="Main Hall",
        state=TableState(state).value,
        guest_count=len(seats),
        seated_at=NOW - timedelta(minutes=30),
        seats=seats,
        shared_items=tuple(shared),
        drafts=tuple(drafts),
        wave_count=wave_count,
    )


def make_order(
    order_id,
    source=OrderSource.TABLE,
    status=UnifiedStatus.SENT,
    waves=(),
    label=None,
    minutes_ago=10,
    items=(),
    section="Main Hall",
    guest="2 guests",
):
    return UnifiedOrder(
        id=order_id,
        source=OrderSource(source),
        label=label or order_id.upper(),
        section_label=section,
        guest_label=guest,
        status=UnifiedStatus(status),
        created_at=NOW - timedelta(minutes=minutes_ago),
        updated_at=NOW - timedelta(minutes=minutes_ago),
        total=0.0,
        item_count=len(items),
        items=tuple(OrderLine(id=f"{order_id}-{idx}", name=name, qty=1, status="sent") for idx, name in enumerate(items)),
        waves=tuple(Wave(number, WaveStatus(status)) for number, status in waves),
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture(scope="function")
def tracking_db(tmp_path, monkeypatch):
    """Point the tracking store at a fresh SQLite file."""
    db_path = tmp_path / "tracking.db"
    monkeypatch.setattr(tracking, "TRACKING_DB_PATH", str(db_path))
    tracking.bootstrap_schema()
    yield db_path
