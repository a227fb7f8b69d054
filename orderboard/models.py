"""Domain models for the order board."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime


class ItemStatus(str, enum.Enum):
    HELD = "held"
    SENT = "sent"
    COOKING = "cooking"
    READY = "ready"
    SERVED = "served"
    VOID = "void"


class WaveStatus(str, enum.Enum):
    HELD = "held"
    NOT_STARTED = "not_started"
    FIRED = "fired"
    COOKING = "cooking"
    READY = "ready"
    SERVED = "served"


class OrderSource(str, enum.Enum):
    TABLE = "table"
    PICKUP = "pickup"
    DINE_IN_NO_TABLE = "dine_in_no_table"


class UnifiedStatus(str, enum.Enum):
    SENT = "sent"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    CLOSED = "closed"
    VOIDED = "voided"
    REFUNDED = "refunded"


class TicketStatus(str, enum.Enum):
    SENT = "sent"
    PREPARING = "preparing"
    READY = "ready"
    PICKED_UP = "picked_up"
    CLOSED = "closed"
    VOIDED = "voided"
    REFUNDED = "refunded"


class TableState(str, enum.Enum):
    AVAILABLE = "available"
    SEATED = "seated"
    ORDERING = "ordering"
    BILLING = "billing"


class PaymentState(str, enum.Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class PaymentMethod(str, enum.Enum):
    CARD = "card"
    CASH = "cash"
    OTHER = "other"


class BoardMode(str, enum.Enum):
    LIVE = "live"
    HISTORY = "history"


class Course(str, enum.Enum):
    DRINKS = "drinks"
    FOOD = "food"
    DESSERT = "dessert"


HELD_WAVE_STATUSES = frozenset({WaveStatus.HELD, WaveStatus.NOT_STARTED})


@dataclass(frozen=True)
class Item:
    """A menu item instance committed to a table's check."""

    id: str
    name: str
    price: float
    status: ItemStatus
    wave_number: int
    quantity: int = 1
    mods: tuple[str, ...] = ()


@dataclass(frozen=True)
class Seat:
    number: int
    items: tuple[Item, ...] = ()
    dietary: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()


@dataclass(frozen=True)
class DraftItem:
    """A line being composed for a table, not yet sent to the kitchen."""

    id: str
    name: str
    price: float
    seat: int
    quantity: int = 1
    wave_number: int | None = None
    notes: str = ""
    course: Course = Course.FOOD
    options: tuple[str, ...] = ()
    extras: tuple[str, ...] = ()


@dataclass(frozen=True)
class Table:
    """Snapshot of one floor table and everything ordered on it.

    Seat 0 is never stored; shared items live in ``shared_items``.
    """

    id: str
    number: int
    section_label: str
    state: str
    guest_count: int = 0
    seated_at: datetime | None = None
    seats: tuple[Seat, ...] = ()
    shared_items: tuple[Item, ...] = ()
    drafts: tuple[DraftItem, ...] = ()
    wave_count: int = 1
    notes: tuple[str, ...] = ()

    def all_items(self) -> list[Item]:
        items = [item for seat in self.seats for item in seat.items]
        items.extend(self.shared_items)
        return items


@dataclass(frozen=True)
class Wave:
    number: int
    status: WaveStatus


@dataclass(frozen=True)
class TrackingLine:
    id: str
    name: str
    qty: int
    status: str = "active"
    unit_price: float = 0.0


@dataclass(frozen=True)
class TrackingSnapshot:
    """A counter ticket as kept by the tracking store."""

    token: str
    code: str
    service_type: OrderSource
    status: TicketStatus
    created_at: datetime
    updated_at: datetime
    customer_name: str = ""
    order_note: str = ""
    items: tuple[TrackingLine, ...] = ()


@dataclass(frozen=True)
class OrderLine:
    id: str
    name: str
    qty: int
    status: str


@dataclass(frozen=True)
class UnifiedOrder:
    """Source-agnostic order row shown on the live and history boards."""

    id: str
    source: OrderSource
    label: str
    section_label: str
    guest_label: str
    status: UnifiedStatus
    created_at: datetime
    updated_at: datetime
    total: float
    item_count: int
    items: tuple[OrderLine, ...] = ()
    waves: tuple[Wave, ...] = ()
    track_token: str | None = None
    note: str = ""
    payment_state: PaymentState | None = None
    payment_method: PaymentMethod | None = None


@dataclass(frozen=True)
class Refusal:
    """Why an edit could not be completed, worded for staff."""

    reason: str
    title: str
    description: str


WaveOverrides = dict[str, dict[int, WaveStatus]]


@dataclass
class BoardCounts:
    by_source: dict[str, int] = field(default_factory=dict)
    by_status: dict[UnifiedStatus, int] = field(default_factory=dict)
