"""Tests for the board session: polling, seed fallback and staff actions."""

import pytest

from conftest import NOW, make_item, make_table
from orderboard import tracking
from orderboard.board import BoardFilter
from orderboard.data import demo_floor_tables
from orderboard.models import (
    BoardMode,
    ItemStatus,
    OrderSource,
    TicketStatus,
    TrackingLine,
    UnifiedStatus,
    WaveStatus,
)
from orderboard.session import ServiceSession, next_counter_status
from orderboard.waves import add_seat, advance_wave, delete_seat, void_item


@pytest.fixture
def session(tracking_db):
    session = ServiceSession(demo_floor_tables(NOW))
    session.bootstrap()
    return session


def _ids(orders):
    return {order.id for order in orders}


class TestOrders:
    def test_seed_orders_fill_an_empty_store(self, session):
        ids = _ids(session.orders(NOW))
        assert "demo-pickup-240" in ids
        assert {"table-t5", "table-t8", "table-t12"} <= ids

    def test_tracked_tickets_replace_seed_orders(self, session):
        ticket = tracking.open_ticket(OrderSource.PICKUP, 300, [TrackingLine("l1", "Kimbap", 1)], NOW)
        session.poll()
        ids = _ids(session.orders(NOW))
        assert f"counter-{ticket.token}" in ids
        assert not any(order_id.startswith("demo-") for order_id in ids)

    def test_board_groups_and_counts(self, session):
        groups, counts = session.board(BoardFilter(mode=BoardMode.LIVE), NOW)
        shown = sum(len(bucket) for _, bucket in groups)
        assert counts.by_source["all"] == shown
        assert counts.by_status[UnifiedStatus.READY] == len(dict(groups)[UnifiedStatus.READY])

    def test_board_mode_toggle_keeps_every_order(self, session):
        orders = session.orders(NOW)
        live, _ = session.board(BoardFilter(mode=BoardMode.LIVE), NOW)
        history, _ = session.board(BoardFilter(mode=BoardMode.HISTORY), NOW)
        live_ids = [order.id for _, bucket in live for order in bucket]
        history_ids = [order.id for _, bucket in history for order in bucket]
        assert sorted(live_ids + history_ids) == sorted(order.id for order in orders)


class TestBootstrap:
    def test_unreachable_store_falls_back_to_seed_orders(self, tmp_path, monkeypatch):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        monkeypatch.setattr(tracking, "TRACKING_DB_PATH", str(blocker / "sub" / "tracking.db"))
        session = ServiceSession(demo_floor_tables(NOW))
        assert not session.bootstrap()
        assert session.snapshots == []
        assert "demo-pickup-240" in _ids(session.orders(NOW))

    def test_reachable_store(self, tracking_db):
        assert ServiceSession().bootstrap()


class TestFireNextWave:
    def test_fires_held_wave_on_floor_table(self, session):
        assert session.fire_next_wave("table-t8", NOW)
        statuses = {item.id: item.status for item in session.tables["t8"].all_items()}
        assert statuses["t8-3"] == ItemStatus.SENT
        assert session.find_order("table-t8", NOW).status == UnifiedStatus.SENT

    def test_fires_seed_order_through_overrides(self, session):
        assert session.fire_next_wave("demo-table-fire-31", NOW)
        assert session.wave_overrides == {"demo-table-fire-31": {2: WaveStatus.FIRED}}
        assert session.find_order("demo-table-fire-31", NOW).status == UnifiedStatus.SENT

    def test_refuses_order_that_is_not_served(self, session):
        assert not session.fire_next_wave("demo-table-23", NOW)
        assert session.wave_overrides == {}

    def test_unknown_order(self, session):
        assert not session.fire_next_wave("table-nope", NOW)

    def test_voided_middle_wave_leaves_nothing_to_fire(self, session):
        table = make_table(
            [make_item("a", "served", wave=1), make_item("b", "held", wave=2), make_item("c", "served", wave=3)],
            table_id="t41",
            number=41,
        )
        session.add_table(void_item(table, "b"))
        before = session.tables["t41"]
        assert session.find_order("table-t41", NOW).status == UnifiedStatus.SERVED
        assert not session.fire_next_wave("table-t41", NOW)
        assert session.tables["t41"] == before


class TestCounterActions:
    def test_advance_tracked_ticket_persists(self, session):
        ticket = tracking.open_ticket(OrderSource.DINE_IN_NO_TABLE, 12, [TrackingLine("l1", "Kimbap", 1)], NOW)
        session.poll()
        order_id = f"counter-{ticket.token}"

        for expected in (UnifiedStatus.PREPARING, UnifiedStatus.READY):
            order = session.find_order(order_id, NOW)
            assert next_counter_status(order) == expected
            assert session.advance_counter(order_id, expected, NOW)

        assert session.mark_served(order_id, NOW)
        assert tracking.get_snapshot(ticket.token).status == TicketStatus.PICKED_UP
        session.poll()
        order = session.find_order(order_id, NOW)
        assert order.status == UnifiedStatus.SERVED
        assert next_counter_status(order) is None

    def test_mark_served_on_seed_order_is_an_override(self, session):
        assert session.mark_served("demo-pickup-240", NOW)
        assert session.demo_status_overrides == {"demo-pickup-240": UnifiedStatus.SERVED}
        order = session.find_order("demo-pickup-240", NOW)
        assert order.status == UnifiedStatus.SERVED
        live, _ = session.board(BoardFilter(), NOW)
        assert "demo-pickup-240" not in {o.id for _, bucket in live for o in bucket}

    def test_mark_served_needs_ready(self, session):
        assert not session.mark_served("demo-pickup-241", NOW)
        assert session.demo_status_overrides == {}

    def test_table_orders_are_not_counter_advanced(self, session):
        assert not session.advance_counter("table-t5", UnifiedStatus.SERVED, NOW)


class TestUpdateTable:
    def test_applies_plain_edit(self, session):
        assert session.update_table("t5", lambda table: advance_wave(table, 2, ItemStatus.SERVED)) is None
        assert session.find_order("table-t5", NOW).status == UnifiedStatus.SERVED

    def test_returns_refusal_and_keeps_table(self, session):
        before = session.tables["t8"]
        refusal = session.update_table("t8", lambda table: delete_seat(table, 1))
        assert refusal is not None
        assert refusal.title == "Cannot delete seat"
        assert session.tables["t8"] == before

    def test_unknown_table(self, session):
        assert session.update_table("missing", add_seat) is None

    def test_add_table(self, session):
        session.add_table(make_table([make_item("x", "ready")], table_id="t40", number=40))
        assert session.find_order("table-t40", NOW).status == UnifiedStatus.READY
