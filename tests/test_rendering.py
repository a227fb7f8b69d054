"""Tests for board row rendering helpers."""

from datetime import timedelta

from conftest import NOW, make_order
from orderboard.models import OrderSource, UnifiedStatus
from orderboard.rendering import format_minutes_compact, format_order_row, format_wave_strip, minutes_ago


def test_minutes_ago_never_negative():
    assert minutes_ago(NOW + timedelta(minutes=3), NOW) == 0
    assert minutes_ago(NOW - timedelta(minutes=42, seconds=59), NOW) == 42


def test_format_minutes_compact():
    assert format_minutes_compact(45) == "45m"
    assert format_minutes_compact(60) == "1h"
    assert format_minutes_compact(75) == "1h 15m"


def test_wave_strip():
    order = make_order("t", waves=[(1, "served"), (2, "fired"), (3, "held")])
    assert format_wave_strip(order.waves).plain == "W1 Served · W2 Fired · W3 Held"


def test_order_row_plain_text():
    order = make_order("pu", source=OrderSource.PICKUP, status=UnifiedStatus.READY, label="PU-240", guest="Alex", minutes_ago=12)
    row = format_order_row(order, NOW).plain
    assert "Pickup" in row
    assert "PU-240" in row
    assert "Alex" in row
    assert "12m" in row
    assert "\n" not in row
