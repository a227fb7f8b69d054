"""Tests for item, wave and order status derivation."""

import pytest

from conftest import make_item, make_order
from orderboard.models import ItemStatus, OrderSource, TableState, TicketStatus, UnifiedStatus, Wave, WaveStatus
from orderboard.status import (
    build_waves,
    derive_order_status,
    map_ticket_status,
    next_fireable_wave,
    next_fireable_wave_number,
    normalize_new_table_waves,
    wave_status_from_items,
)


def _items(*statuses):
    return [make_item(f"i{idx}", status=status) for idx, status in enumerate(statuses)]


class TestWaveStatusFromItems:
    """Fixed precedence: ready > cooking > fired > served > held."""

    @pytest.mark.parametrize(
        "statuses, expected",
        [
            (("ready", "served"), WaveStatus.READY),
            (("sent", "served"), WaveStatus.FIRED),
            (("served", "served"), WaveStatus.SERVED),
            ((), WaveStatus.HELD),
            (("cooking", "sent", "held"), WaveStatus.COOKING),
            (("ready", "cooking"), WaveStatus.READY),
            (("held", "served"), WaveStatus.SERVED),
            (("held", "held"), WaveStatus.HELD),
        ],
    )
    def test_precedence(self, statuses, expected):
        assert wave_status_from_items(_items(*statuses)) == expected

    def test_void_items_are_ignored(self):
        assert wave_status_from_items(_items("void", "void")) == WaveStatus.HELD
        assert wave_status_from_items(_items("void", "served")) == WaveStatus.SERVED


class TestBuildWaves:
    def test_no_items_gives_no_waves(self):
        assert build_waves([]) == []

    def test_groups_by_wave_number(self):
        items = [
            make_item("a", "served", wave=1),
            make_item("b", "held", wave=2),
            make_item("c", "sent", wave=2),
        ]
        assert build_waves(items) == [Wave(1, WaveStatus.SERVED), Wave(2, WaveStatus.FIRED)]

    def test_gaps_and_wave_count_fill_with_held(self):
        items = [make_item("a", "sent", wave=1), make_item("b", "held", wave=3)]
        waves = build_waves(items, wave_count=4)
        assert [wave.number for wave in waves] == [1, 2, 3, 4]
        assert waves[1].status == WaveStatus.HELD
        assert waves[3].status == WaveStatus.HELD

    def test_void_only_wave_is_dropped(self):
        assert build_waves([make_item("a", "void", wave=1)]) == []

    def test_empty_waves_can_be_left_out(self):
        items = [
            make_item("a", "served", wave=1),
            make_item("b", "void", wave=2),
            make_item("c", "served", wave=3),
        ]
        assert build_waves(items, wave_count=4, include_empty=False) == [
            Wave(1, WaveStatus.SERVED),
            Wave(3, WaveStatus.SERVED),
        ]


class TestNextFireableWave:
    def test_lowest_held_wave_wins(self):
        items = [make_item("a", "held", wave=5), make_item("b", "held", wave=3), make_item("c", "sent", wave=1)]
        assert next_fireable_wave(items) == 3

    def test_nothing_held(self):
        assert next_fireable_wave([make_item("a", "served", wave=1)]) is None

    def test_order_level_skips_counter_orders(self):
        order = make_order("pu", source=OrderSource.PICKUP, waves=[(1, "held")])
        assert next_fireable_wave_number(order) is None

    def test_order_level_picks_first_held_wave(self):
        order = make_order("t", waves=[(1, "served"), (2, "fired"), (3, "held"), (5, "not_started")])
        assert next_fireable_wave_number(order) == 3


class TestDeriveOrderStatus:
    def _waves(self, *statuses):
        return [Wave(idx, WaveStatus(status)) for idx, status in enumerate(statuses, start=1)]

    @pytest.mark.parametrize(
        "statuses, expected",
        [
            (("ready", "held"), UnifiedStatus.READY),
            (("cooking", "served"), UnifiedStatus.PREPARING),
            (("served", "fired"), UnifiedStatus.SENT),
            (("served", "held"), UnifiedStatus.SERVED),
            (("served", "served"), UnifiedStatus.SERVED),
            (("held", "held"), UnifiedStatus.SENT),
            ((), UnifiedStatus.SENT),
        ],
    )
    def test_precedence(self, statuses, expected):
        assert derive_order_status(self._waves(*statuses)) == expected

    def test_all_served_while_billing_is_closed(self):
        assert derive_order_status(self._waves("served", "served"), TableState.BILLING) == UnifiedStatus.CLOSED

    def test_billing_does_not_close_an_active_table(self):
        assert derive_order_status(self._waves("served", "cooking"), TableState.BILLING) == UnifiedStatus.PREPARING

    def test_served_and_held_is_not_closed_while_billing(self):
        assert derive_order_status(self._waves("served", "held"), TableState.BILLING) == UnifiedStatus.SERVED


class TestNormalizeNewTableWaves:
    def test_first_held_wave_shows_fired(self):
        waves = [Wave(1, WaveStatus.HELD), Wave(2, WaveStatus.HELD)]
        assert normalize_new_table_waves(waves, UnifiedStatus.SENT) == [
            Wave(1, WaveStatus.FIRED),
            Wave(2, WaveStatus.HELD),
        ]

    def test_leaves_already_fired_orders_alone(self):
        waves = [Wave(1, WaveStatus.FIRED), Wave(2, WaveStatus.HELD)]
        assert normalize_new_table_waves(waves, UnifiedStatus.SENT) == waves

    def test_only_applies_to_sent(self):
        waves = [Wave(1, WaveStatus.SERVED), Wave(2, WaveStatus.HELD)]
        assert normalize_new_table_waves(waves, UnifiedStatus.SERVED) == waves


class TestTicketStatusMapping:
    def test_picked_up_is_served(self):
        assert map_ticket_status(TicketStatus.PICKED_UP) == UnifiedStatus.SERVED

    @pytest.mark.parametrize("status", [s for s in TicketStatus if s != TicketStatus.PICKED_UP])
    def test_other_statuses_map_by_name(self, status):
        assert map_ticket_status(status).value == status.value

    def test_accepts_raw_strings(self):
        assert map_ticket_status("ready") == UnifiedStatus.READY
