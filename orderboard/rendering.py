"""Rendering helpers for board rows, chips and wave strips."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from orderboard.constant import ETA_TARGET_MINUTES, GROUP_LABELS, SOURCE_LABELS, STATUS_CHIP_LABELS, WAVE_STATUS_LABELS
from orderboard.models import OrderSource, UnifiedOrder, UnifiedStatus, Wave, WaveStatus

_STATUS_STYLES = {
    UnifiedStatus.READY: "bold #0b1f0f on #5fbf72",
    UnifiedStatus.PREPARING: "bold #1f1600 on #e0b03f",
    UnifiedStatus.SENT: "bold #ffffff on #2f6db5",
    UnifiedStatus.SERVED: "bold #ffffff on #5b6270",
    UnifiedStatus.CLOSED: "bold #ffffff on #3d4450",
    UnifiedStatus.VOIDED: "bold #ffffff on #b23a48",
    UnifiedStatus.REFUNDED: "bold #ffffff on #7a4bb2",
}

_WAVE_STYLES = {
    WaveStatus.SERVED: "dim",
    WaveStatus.READY: "bold #5fbf72",
    WaveStatus.COOKING: "bold #e0b03f",
    WaveStatus.FIRED: "bold #6fa8ff",
    WaveStatus.HELD: "#aaaaaa",
    WaveStatus.NOT_STARTED: "#aaaaaa",
}


def badge_style(source: OrderSource) -> str:
    """Return a consistent badge style for source tags."""
    if source == OrderSource.PICKUP:
        return "bold #ffffff on #b23a48"
    if source == OrderSource.DINE_IN_NO_TABLE:
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def status_style(status: UnifiedStatus) -> str:
    return _STATUS_STYLES.get(status, "bold")


def minutes_ago(then: datetime, now: datetime) -> int:
    return max(0, int((now - then).total_seconds() // 60))


def format_minutes_compact(minutes: int) -> str:
    """45 -> "45m", 75 -> "1h 15m"."""
    if minutes < 60:
        return f"{minutes}m"
    hours, rest = divmod(minutes, 60)
    return f"{hours}h" if rest == 0 else f"{hours}h {rest}m"


def format_wave_strip(waves: tuple[Wave, ...] | list[Wave]) -> Text:
    """W1 served · W2 fired · W3 held."""
    text = Text()
    for idx, wave in enumerate(waves):
        if idx > 0:
            text.append(" · ", style="dim")
        label = WAVE_STATUS_LABELS.get(wave.status, str(wave.status))
        text.append(f"W{wave.number} {label}", style=_WAVE_STYLES.get(wave.status, ""))
    return text


def format_order_row(order: UnifiedOrder, now: datetime) -> Text:
    """Render one board row: source tag, label, guest, age and total."""
    text = Text()
    text.append(f" {SOURCE_LABELS[order.source.value]} ", style=badge_style(order.source))
    text.append(f" {order.label}", style="bold")
    text.append(f"  {order.section_label} · {order.guest_label}")

    age = minutes_ago(order.created_at, now)
    eta = ETA_TARGET_MINUTES.get(order.source.value)
    age_style = "bold #ff6b6b" if eta is not None and age > eta and order.status in (
        UnifiedStatus.SENT,
        UnifiedStatus.PREPARING,
    ) else "dim"
    text.append(f"  {format_minutes_compact(age)}", style=age_style)
    text.append(f"  {order.item_count} item{'' if order.item_count == 1 else 's'}", style="dim")
    if order.total > 0:
        text.append(f"  ${order.total:.2f}")
    if order.waves:
        text.append("\n      ")
        text.append_text(format_wave_strip(order.waves))
    return text


def format_group_header(status: UnifiedStatus, count: int) -> Text:
    text = Text()
    text.append(f" {GROUP_LABELS[status.value]} ", style=status_style(status))
    text.append(f" {count}", style="bold")
    return text


def format_chip(label: str, count: int, active: bool) -> Text:
    style = "bold reverse" if active else "white"
    return Text(f"[{label} {count}]", style=style)


def status_chip_label(status: UnifiedStatus) -> str:
    return STATUS_CHIP_LABELS[status.value]
