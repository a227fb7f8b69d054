"""Order detail modal screen."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from orderboard.board import can_fire_next_wave, can_mark_served
from orderboard.models import UnifiedOrder
from orderboard.rendering import format_order_row, format_wave_strip, status_chip_label, status_style


class OrderDetailModal(ModalScreen[None]):
    """Centered modal listing one order's lines, waves and payment."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("x", "fire_next_wave", "Fire next wave"),
        ("m", "mark_served", "Mark served"),
    ]

    CSS = """
    OrderDetailModal {
        align: center middle;
        background: $background 60%;
    }

    #detail-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #detail-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #detail-body {
        margin-bottom: 1;
        color: white;
    }

    #detail-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(
        self,
        order: UnifiedOrder,
        on_fire: Callable[[str], UnifiedOrder | None],
        on_served: Callable[[str], UnifiedOrder | None],
    ) -> None:
        super().__init__()
        self.order = order
        self.on_fire = on_fire
        self.on_served = on_served

    def compose(self) -> ComposeResult:
        with Container(id="detail-dialog"):
            yield Static(id="detail-title")
            yield Static(id="detail-body")
            yield Static(id="detail-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss()

    def action_move_cursor(self, delta: int) -> None:
        if not self.order.items:
            return
        self.cursor_index = (self.cursor_index + delta) % len(self.order.items)
        self._refresh_content()

    def action_fire_next_wave(self) -> None:
        if not can_fire_next_wave(self.order):
            return
        self._replace_order(self.on_fire(self.order.id))

    def action_mark_served(self) -> None:
        if not can_mark_served(self.order):
            return
        self._replace_order(self.on_served(self.order.id))

    def _replace_order(self, order: UnifiedOrder | None) -> None:
        if order is None:
            return
        self.order = order
        self._refresh_content()

    def _refresh_content(self) -> None:
        title = self.query_one("#detail-title", Static)
        body = self.query_one("#detail-body", Static)
        help_text = self.query_one("#detail-help", Static)

        heading = Text()
        heading.append(f" {status_chip_label(self.order.status)} ", style=status_style(self.order.status))
        heading.append(" ")
        heading.append_text(format_order_row(self.order, datetime.now(timezone.utc)))
        title.update(heading)

        content = Text(style="white")
        if self.cursor_index >= len(self.order.items):
            self.cursor_index = max(0, len(self.order.items) - 1)
        if not self.order.items:
            content.append("(no items)", style="dim")
        for idx, line in enumerate(self.order.items):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            line_style = "dim strike" if line.status in ("void", "voided") else "white"
            content.append(f"{pointer}{line.qty}x {line.name}", style=line_style)
            content.append(f"  {line.status}", style="dim")

        if self.order.waves:
            content.append("\n\nWaves  ")
            content.append_text(format_wave_strip(self.order.waves))
        if self.order.note:
            content.append(f"\n\nNote: {self.order.note}", style="italic")
        if self.order.payment_state is not None:
            payment = self.order.payment_state.value
            if self.order.payment_method is not None:
                payment = f"{payment} ({self.order.payment_method.value})"
            content.append(f"\nPayment: {payment}", style="dim")
        body.update(content)

        hints = ["J/K/↑/↓ move"]
        if can_fire_next_wave(self.order):
            hints.append("X fire next wave")
        if can_mark_served(self.order):
            hints.append("M mark served")
        hints.append("Esc/q close")
        help_text.update(", ".join(hints))
