"""Tests for board visibility, filtering, counts and grouping."""

import pytest

from conftest import NOW, make_order
from orderboard.board import (
    BoardFilter,
    can_fire_next_wave,
    can_mark_served,
    filter_orders,
    group_orders,
    is_visible,
    matches_query,
    source_counts,
    status_counts,
)
from orderboard.data import build_demo_orders
from orderboard.models import BoardMode, OrderSource, UnifiedStatus


@pytest.fixture
def orders():
    return build_demo_orders(NOW)


class TestVisibility:
    def test_partition_is_total_and_disjoint(self, orders):
        live = {order.id for order in orders if is_visible(order, BoardMode.LIVE)}
        history = {order.id for order in orders if is_visible(order, BoardMode.HISTORY)}
        assert live.isdisjoint(history)
        assert live | history == {order.id for order in orders}

    @pytest.mark.parametrize("source", list(OrderSource))
    @pytest.mark.parametrize("status", list(UnifiedStatus))
    def test_every_status_lands_in_exactly_one_mode(self, source, status):
        order = make_order("o", source=source, status=status)
        assert is_visible(order, BoardMode.LIVE) != is_visible(order, BoardMode.HISTORY)

    def test_served_table_stays_live(self):
        order = make_order("t", source=OrderSource.TABLE, status=UnifiedStatus.SERVED)
        assert is_visible(order, BoardMode.LIVE)

    def test_served_pickup_is_history(self):
        order = make_order("p", source=OrderSource.PICKUP, status=UnifiedStatus.SERVED)
        assert is_visible(order, BoardMode.HISTORY)
        assert not is_visible(order, BoardMode.LIVE)


class TestSearch:
    def test_matches_label_section_guest_and_items(self):
        order = make_order("pu-7", label="PU-7", section="Pickup", guest="Alex", items=["Chicken Bowl"])
        assert matches_query(order, "pu-7")
        assert matches_query(order, "PICKUP")
        assert matches_query(order, "alex")
        assert matches_query(order, "bowl")
        assert not matches_query(order, "ramen")

    def test_blank_query_matches_everything(self):
        assert matches_query(make_order("x"), "   ")


class TestFilters:
    def test_source_filter_toggle_restores_list(self, orders):
        unfiltered = filter_orders(orders, BoardFilter())
        pickup_only = filter_orders(orders, BoardFilter(source=OrderSource.PICKUP))
        assert pickup_only
        assert all(order.source == OrderSource.PICKUP for order in pickup_only)
        assert filter_orders(orders, BoardFilter(source=None)) == unfiltered

    def test_order_is_preserved(self, orders):
        ids = [order.id for order in orders]
        filtered = filter_orders(orders, BoardFilter(status=UnifiedStatus.READY))
        positions = [ids.index(order.id) for order in filtered]
        assert positions == sorted(positions)

    def test_status_outside_mode_is_dropped(self, orders):
        board_filter = BoardFilter(mode=BoardMode.LIVE, status=UnifiedStatus.REFUNDED)
        assert board_filter.normalized().status is None
        assert filter_orders(orders, board_filter) == filter_orders(orders, BoardFilter())

    def test_history_board(self, orders):
        history = filter_orders(orders, BoardFilter(mode=BoardMode.HISTORY))
        assert {order.id for order in history} == {
            "demo-pickup-243",
            "demo-dine-413",
            "demo-history-1",
            "demo-history-2",
            "demo-history-3",
        }


class TestCounts:
    def test_source_counts_ignore_source_and_status_filters(self, orders):
        base = source_counts(orders, BoardFilter())
        narrowed = source_counts(orders, BoardFilter(source=OrderSource.PICKUP, status=UnifiedStatus.READY))
        assert base == narrowed
        assert base["all"] == base["table"] + base["pickup"] + base["dine_in_no_table"]

    def test_status_counts_respect_source_filter(self, orders):
        counts = status_counts(orders, BoardFilter(source=OrderSource.PICKUP, status=UnifiedStatus.SENT))
        assert counts[UnifiedStatus.READY] == 1
        assert counts[UnifiedStatus.PREPARING] == 1
        assert counts[UnifiedStatus.SENT] == 1
        assert counts[UnifiedStatus.SERVED] == 0

    def test_counts_follow_search(self, orders):
        counts = source_counts(orders, BoardFilter(query="walk-in"))
        assert counts["all"] == counts["dine_in_no_table"] == 2


class TestGrouping:
    def test_live_buckets_in_display_order(self, orders):
        groups = group_orders(filter_orders(orders, BoardFilter()), BoardMode.LIVE)
        assert [status for status, _ in groups] == [
            UnifiedStatus.READY,
            UnifiedStatus.PREPARING,
            UnifiedStatus.SENT,
            UnifiedStatus.SERVED,
        ]
        for status, bucket in groups:
            assert all(order.status == status for order in bucket)

    def test_empty_buckets_are_kept(self):
        groups = group_orders([], BoardMode.HISTORY)
        assert [status for status, _ in groups] == [
            UnifiedStatus.SERVED,
            UnifiedStatus.CLOSED,
            UnifiedStatus.VOIDED,
            UnifiedStatus.REFUNDED,
        ]
        assert all(bucket == [] for _, bucket in groups)


class TestActions:
    def test_fire_needs_served_table_with_held_wave(self):
        assert can_fire_next_wave(make_order("t", status=UnifiedStatus.SERVED, waves=[(1, "served"), (2, "held")]))
        assert not can_fire_next_wave(make_order("t", status=UnifiedStatus.SENT, waves=[(1, "fired"), (2, "held")]))
        assert not can_fire_next_wave(make_order("t", status=UnifiedStatus.SERVED, waves=[(1, "served")]))
        assert not can_fire_next_wave(
            make_order("p", source=OrderSource.PICKUP, status=UnifiedStatus.SERVED, waves=[(1, "held")])
        )

    def test_mark_served_needs_ready_counter_order(self):
        assert can_mark_served(make_order("p", source=OrderSource.PICKUP, status=UnifiedStatus.READY))
        assert can_mark_served(make_order("d", source=OrderSource.DINE_IN_NO_TABLE, status=UnifiedStatus.READY))
        assert not can_mark_served(make_order("t", source=OrderSource.TABLE, status=UnifiedStatus.READY))
        assert not can_mark_served(make_order("p", source=OrderSource.PICKUP, status=UnifiedStatus.PREPARING))
