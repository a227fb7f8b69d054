"""Main Textual app class."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from orderboard.board import BoardFilter, can_fire_next_wave, can_mark_served, status_filter_options
from orderboard.config import TRACKING_POLL_SECONDS
from orderboard.constant import SOURCE_LABELS
from orderboard.models import BoardCounts, BoardMode, OrderSource, UnifiedOrder, UnifiedStatus
from orderboard.order_detail_modal import OrderDetailModal
from orderboard.rendering import format_chip, format_group_header, format_order_row, status_chip_label
from orderboard.session import ServiceSession, next_counter_status

logger = logging.getLogger(__name__)

_SOURCE_CYCLE: list[OrderSource | None] = [None, *OrderSource]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OrderBoardApp(App):
    """A Textual app for watching and driving the kitchen order board."""

    TITLE = "Order Board"
    SUB_TITLE = "Tables / Pickup / Dine-In"

    CSS = """
    Screen {
        layout: vertical;
    }

    #filter-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 5;
    }

    #board-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #board-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #status-bar {
        height: 1;
        padding: 0 1;
        color: #dddddd;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    selected_index = reactive(None)

    BINDINGS = [
        ("enter", "open_detail", "Order detail"),
        ("backspace", "backspace_query", "Delete query char"),
        ("escape", "cancel_search", "Exit search"),
        ("ctrl+c", "cancel_search", "Exit search"),
        Binding("ctrl+r", "poll_now", "Refresh", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, session: ServiceSession) -> None:
        super().__init__()
        self.session = session
        self.board_filter = BoardFilter()
        self.rows: list[UnifiedOrder] = []
        self.counts = BoardCounts()
        self.system_status = ""
        logger.debug("app_init tables=%s", len(session.tables))

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="filter-bar")
        with Vertical(id="board-pane"):
            yield Static("Orders", classes="pane-title", id="board-title")
            yield Static("(no orders)", id="board-list")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        if not self.session.bootstrap():
            self.system_status = "Tracking store unavailable, showing demo orders"
        self.set_interval(TRACKING_POLL_SECONDS, self._poll_tracking)
        logger.debug("on_mount snapshots=%s", len(self.session.snapshots))
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, OrderDetailModal):
            return

        if self.input_state == "search":
            if event.is_printable and event.character:
                self._set_query(self.board_filter.query + event.character)
                event.stop()
            return

        if event.character == "/":
            self.input_state = "search"
            self._refresh_filter_bar()
            event.stop()
            return

        if not event.is_printable or not event.character or not event.character.isalnum():
            return

        key = event.character.lower()
        handler = {
            "h": self._toggle_mode,
            "s": self._cycle_source,
            "f": self._cycle_status,
            "j": lambda: self._move_selection(1),
            "k": lambda: self._move_selection(-1),
            "x": self._fire_selected,
            "m": self._serve_selected,
            "a": self._advance_selected,
        }.get(key)
        if handler is None:
            return
        logger.debug("on_key key=%r state=%r", key, self.input_state)
        handler()
        event.stop()

    def action_open_detail(self) -> None:
        if isinstance(self.screen, OrderDetailModal):
            return
        if self.input_state == "search":
            self.input_state = "normal"
            self._refresh_filter_bar()
            return

        order = self._selected_order()
        if order is None:
            return
        self.push_screen(OrderDetailModal(order, on_fire=self._fire_from_modal, on_served=self._serve_from_modal))

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, OrderDetailModal):
            return
        if self.input_state != "search" or not self.board_filter.query:
            return
        self._set_query(self.board_filter.query[:-1])

    def action_cancel_search(self) -> None:
        if isinstance(self.screen, OrderDetailModal):
            return
        if self.input_state == "normal":
            return
        self.input_state = "normal"
        self._set_query("")

    def action_poll_now(self) -> None:
        self._poll_tracking()

    def _poll_tracking(self) -> None:
        self.session.poll()
        self._refresh_all()

    def _set_query(self, query: str) -> None:
        self.board_filter = BoardFilter(self.board_filter.mode, self.board_filter.source, self.board_filter.status, query)
        self.selected_index = None
        self._refresh_all()

    def _toggle_mode(self) -> None:
        mode = BoardMode.HISTORY if self.board_filter.mode == BoardMode.LIVE else BoardMode.LIVE
        self.board_filter = BoardFilter(mode, self.board_filter.source, self.board_filter.status, self.board_filter.query).normalized()
        self.selected_index = None
        self._refresh_all()

    def _cycle_source(self) -> None:
        idx = _SOURCE_CYCLE.index(self.board_filter.source)
        source = _SOURCE_CYCLE[(idx + 1) % len(_SOURCE_CYCLE)]
        self.board_filter = BoardFilter(self.board_filter.mode, source, self.board_filter.status, self.board_filter.query)
        self.selected_index = None
        self._refresh_all()

    def _cycle_status(self) -> None:
        options: list[UnifiedStatus | None] = [None, *status_filter_options(self.board_filter.mode)]
        current = self.board_filter.status if self.board_filter.status in options else None
        status = options[(options.index(current) + 1) % len(options)]
        self.board_filter = BoardFilter(self.board_filter.mode, self.board_filter.source, status, self.board_filter.query)
        self.selected_index = None
        self._refresh_all()

    def _move_selection(self, delta: int) -> None:
        if not self.rows:
            return

        if self.selected_index is None:
            self.selected_index = 0 if delta > 0 else len(self.rows) - 1
        else:
            self.selected_index = (self.selected_index + delta) % len(self.rows)
        self._refresh_board()

    def _selected_order(self) -> UnifiedOrder | None:
        if self.selected_index is None:
            return None
        if not (0 <= self.selected_index < len(self.rows)):
            return None
        return self.rows[self.selected_index]

    def _fire_selected(self) -> None:
        order = self._selected_order()
        if order is None or not can_fire_next_wave(order):
            self.system_status = "Nothing to fire"
            self._refresh_status_bar()
            return
        self._fire(order.id)

    def _fire(self, order_id: str) -> bool:
        fired = self.session.fire_next_wave(order_id, _now())
        self.system_status = f"Fired next wave: {order_id}" if fired else "Nothing to fire"
        logger.debug("fire order=%s fired=%s", order_id, fired)
        self._refresh_all()
        return fired

    def _serve_selected(self) -> None:
        order = self._selected_order()
        if order is None or not can_mark_served(order):
            self.system_status = "Only ready pickup or dine-in orders can be marked served"
            self._refresh_status_bar()
            return
        self._serve(order.id)

    def _serve(self, order_id: str) -> bool:
        try:
            served = self.session.mark_served(order_id, _now())
        except (sqlite3.Error, OSError) as exc:
            self.system_status = f"Could not save {order_id}: {exc}"
            logger.warning("mark_served_failed order=%s error=%r", order_id, exc)
            self._refresh_status_bar()
            return False
        self.system_status = f"Served: {order_id}" if served else "Not served"
        self._refresh_all()
        return served

    def _advance_selected(self) -> None:
        order = self._selected_order()
        next_status = next_counter_status(order) if order is not None else None
        if order is None or next_status is None:
            self.system_status = "Nothing to advance"
            self._refresh_status_bar()
            return
        try:
            advanced = self.session.advance_counter(order.id, next_status, _now())
        except (sqlite3.Error, OSError) as exc:
            self.system_status = f"Could not save {order.label}: {exc}"
            logger.warning("advance_failed order=%s error=%r", order.id, exc)
            self._refresh_status_bar()
            return
        if advanced:
            self.system_status = f"{order.label} -> {status_chip_label(next_status)}"
        self._refresh_all()

    def _fire_from_modal(self, order_id: str) -> UnifiedOrder | None:
        self._fire(order_id)
        return self.session.find_order(order_id, _now())

    def _serve_from_modal(self, order_id: str) -> UnifiedOrder | None:
        self._serve(order_id)
        return self.session.find_order(order_id, _now())

    def _refresh_all(self) -> None:
        self._refresh_board()
        self._refresh_filter_bar()
        self._refresh_status_bar()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        # Rows with a wave strip take two lines, plus group headers.
        return max(1, height // 2)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_board(self) -> None:
        try:
            board_widget = self.query_one("#board-list", Static)
        except NoMatches:
            return

        now = _now()
        groups, self.counts = self.session.board(self.board_filter, now)
        self.rows = [order for _, orders in groups for order in orders]
        group_of = {order.id: status for status, orders in groups for order in orders}

        if not self.rows:
            self.selected_index = None
            board_widget.update("(no orders)")
            return

        if self.selected_index is not None and self.selected_index >= len(self.rows):
            self.selected_index = len(self.rows) - 1

        start, end = self._window_bounds(len(self.rows), self._visible_rows(board_widget), self.selected_index)
        sizes = {status: len(orders) for status, orders in groups}

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        previous_group = None
        for idx in range(start, end):
            order = self.rows[idx]
            group = group_of[order.id]
            if group != previous_group:
                if idx > start:
                    lines.append("\n")
                lines.append_text(format_group_header(group, sizes[group]))
                previous_group = group
            lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(pointer)
            lines.append_text(format_order_row(order, now))

        if end < len(self.rows):
            lines.append("\n⋮", style="dim")

        board_widget.update(lines)

    def _refresh_filter_bar(self) -> None:
        try:
            bar = self.query_one("#filter-bar", Static)
        except NoMatches:
            return

        board_filter = self.board_filter.normalized()
        text = Text()
        text.append(" LIVE " if board_filter.mode == BoardMode.LIVE else " HISTORY ", style="bold reverse")
        text.append("  ")
        text.append_text(format_chip("All", self.counts.by_source.get("all", 0), board_filter.source is None))
        for source in OrderSource:
            text.append(" ")
            text.append_text(
                format_chip(SOURCE_LABELS[source.value], self.counts.by_source.get(source.value, 0), board_filter.source == source)
            )

        text.append("\n")
        for idx, status in enumerate(status_filter_options(board_filter.mode)):
            if idx > 0:
                text.append(" ")
            text.append_text(
                format_chip(status_chip_label(status), self.counts.by_status.get(status, 0), board_filter.status == status)
            )

        text.append("\n")
        if self.input_state == "search":
            text.append(f"/{board_filter.query}|", style="bold")
        elif board_filter.query:
            text.append(f"/{board_filter.query}", style="dim")
        else:
            text.append("H live/history  S source  F status  / search  X fire  M served  A advance", style="dim")
        bar.update(text)

    def _refresh_status_bar(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        bar.update(self.system_status or "Ready")
