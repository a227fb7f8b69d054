"""Editable static board configuration."""

from __future__ import annotations

SOURCE_LABELS: dict[str, str] = {
    "table": "Table",
    "pickup": "Pickup",
    "dine_in_no_table": "Dine-In",
}

SOURCE_CODE_PREFIXES: dict[str, str] = {
    "pickup": "PU",
    "dine_in_no_table": "DI",
}

# Display order of status buckets per board mode.
LIVE_STATUS_ORDER: list[str] = ["ready", "preparing", "sent", "served"]
LIVE_STATUS_FILTER_ORDER: list[str] = ["sent", "preparing", "ready", "served"]
HISTORY_STATUS_ORDER: list[str] = ["served", "closed", "voided", "refunded"]

STATUS_CHIP_LABELS: dict[str, str] = {
    "sent": "New",
    "preparing": "Preparing",
    "ready": "Ready",
    "served": "Served",
    "closed": "Closed",
    "voided": "Voided",
    "refunded": "Refunded",
}

GROUP_LABELS: dict[str, str] = {
    "ready": "URGENT",
    "preparing": "PREPARING",
    "sent": "NEW",
    "served": "SERVED",
    "closed": "CLOSED",
    "voided": "VOIDED",
    "refunded": "REFUNDED",
}

WAVE_STATUS_LABELS: dict[str, str] = {
    "served": "Served",
    "ready": "Ready",
    "cooking": "Cooking",
    "fired": "Fired",
    "held": "Held",
    "not_started": "Not started",
}

# Happy-path flow of a counter ticket, in unified status names.
COUNTER_STATUS_FLOW: list[str] = ["sent", "preparing", "ready", "served"]

# Target minutes from open to handoff, per source.
ETA_TARGET_MINUTES: dict[str, int] = {
    "table": 20,
    "pickup": 18,
    "dine_in_no_table": 14,
}

# Wave a draft lands in when neither a selection nor a "Wave N" tag says otherwise.
COURSE_WAVE_FALLBACK: dict[str, int] = {
    "drinks": 1,
    "food": 2,
    "dessert": 3,
}

# Illustrative orders shown when no counter tickets are tracked. Times are
# minutes before "now"; data.py wraps these into UnifiedOrder instances.
DEMO_ORDER_RECORDS: list[dict] = [
    {"id": "demo-table-21", "source": "table", "label": "T21", "section": "Patio", "guest": "4 guests",
     "status": "ready", "created_ago": 72, "updated_ago": 10, "total": 84.0, "item_count": 5,
     "items": [("d-1", "Mojito", 2, "ready"), ("d-2", "Bruschetta", 1, "ready")],
     "waves": [(1, "ready")], "note": "Allergy: no nuts", "payment": ("unpaid", None)},
    {"id": "demo-table-22", "source": "table", "label": "T22", "section": "Main Hall", "guest": "2 guests",
     "status": "preparing", "created_ago": 63, "updated_ago": 8, "total": 52.0, "item_count": 3,
     "items": [("d-3", "Pasta Alfredo", 2, "cooking")],
     "waves": [(1, "cooking")], "note": "", "payment": ("unpaid", None)},
    {"id": "demo-table-23", "source": "table", "label": "T23", "section": "Lounge", "guest": "3 guests",
     "status": "sent", "created_ago": 58, "updated_ago": 7, "total": 66.0, "item_count": 4,
     "items": [("d-4", "Club Sandwich", 3, "sent")],
     "waves": [(1, "fired"), (2, "held")], "note": "No onions", "payment": ("unpaid", None)},
    {"id": "demo-table-24", "source": "table", "label": "T24", "section": "Window", "guest": "2 guests",
     "status": "served", "created_ago": 41, "updated_ago": 3, "total": 47.0, "item_count": 2,
     "items": [("d-5", "Soup of the day", 2, "served")],
     "waves": [(1, "served")], "note": "", "payment": ("paid", "card")},
    {"id": "demo-table-fire-30", "source": "table", "label": "T30", "section": "Chef Counter", "guest": "4 guests",
     "status": "sent", "created_ago": 34, "updated_ago": 2, "total": 112.0, "item_count": 6,
     "items": [("d-fire-1", "Sparkling Water", 2, "served"), ("d-fire-2", "Burrata", 2, "held"),
               ("d-fire-3", "Ribeye", 2, "held")],
     "waves": [(1, "served"), (2, "fired"), (3, "held")],
     "note": "Wave 1 served, Wave 2 fired, Wave 3 held.", "payment": ("unpaid", None)},
    {"id": "demo-table-fire-31", "source": "table", "label": "T31", "section": "Main Hall", "guest": "3 guests",
     "status": "served", "created_ago": 28, "updated_ago": 1, "total": 78.0, "item_count": 5,
     "items": [("d-fire-31-1", "Mineral Water", 2, "served"), ("d-fire-31-2", "Risotto", 2, "held"),
               ("d-fire-31-3", "Tiramisu", 1, "held")],
     "waves": [(1, "served"), (2, "held"), (3, "held")],
     "note": "Ready for next course.", "payment": ("unpaid", None)},
    {"id": "demo-pickup-240", "source": "pickup", "label": "PU-240", "section": "Pickup", "guest": "Alex",
     "status": "ready", "created_ago": 55, "updated_ago": 2, "total": 0.0, "item_count": 3,
     "items": [("d-6", "Caesar Salad", 1, "ready")], "waves": [], "token": "demo-pu-240",
     "note": "", "payment": ("paid", "card")},
    {"id": "demo-pickup-241", "source": "pickup", "label": "PU-241", "section": "Pickup", "guest": "Mia",
     "status": "preparing", "created_ago": 46, "updated_ago": 6, "total": 0.0, "item_count": 2,
     "items": [("d-7", "Chicken Bowl", 2, "preparing")], "waves": [], "token": "demo-pu-241",
     "note": "", "payment": ("unpaid", None)},
    {"id": "demo-pickup-242", "source": "pickup", "label": "PU-242", "section": "Pickup", "guest": "Noah",
     "status": "sent", "created_ago": 30, "updated_ago": 5, "total": 0.0, "item_count": 1,
     "items": [("d-8", "Sparkling Water", 1, "sent")], "waves": [], "token": "demo-pu-242",
     "note": "", "payment": ("unpaid", None)},
    {"id": "demo-pickup-243", "source": "pickup", "label": "PU-243", "section": "Pickup", "guest": "Liam",
     "status": "served", "created_ago": 24, "updated_ago": 2, "total": 0.0, "item_count": 2,
     "items": [("d-9", "Matcha Latte", 2, "served")], "waves": [], "token": "demo-pu-243",
     "note": "", "payment": ("paid", "cash")},
    {"id": "demo-dine-410", "source": "dine_in_no_table", "label": "DI-410", "section": "Dine-In", "guest": "Walk-in 2",
     "status": "ready", "created_ago": 36, "updated_ago": 1, "total": 0.0, "item_count": 3,
     "items": [("d-10", "Burger Combo", 2, "ready")], "waves": [], "token": "demo-di-410",
     "note": "", "payment": ("unpaid", None)},
    {"id": "demo-dine-411", "source": "dine_in_no_table", "label": "DI-411", "section": "Dine-In", "guest": "Walk-in 1",
     "status": "preparing", "created_ago": 22, "updated_ago": 5, "total": 0.0, "item_count": 2,
     "items": [("d-11", "Avocado Toast", 1, "preparing")], "waves": [], "token": "demo-di-411",
     "note": "", "payment": ("unpaid", None)},
    {"id": "demo-dine-413", "source": "dine_in_no_table", "label": "DI-413", "section": "Dine-In", "guest": "Walk-in 2",
     "status": "served", "created_ago": 12, "updated_ago": 1, "total": 0.0, "item_count": 1,
     "items": [("d-13", "Cheesecake", 1, "served")], "waves": [], "token": "demo-di-413",
     "note": "", "payment": ("paid", "card")},
    {"id": "demo-history-1", "source": "pickup", "label": "PU-190", "section": "Pickup", "guest": "Ethan",
     "status": "closed", "created_ago": 120, "updated_ago": 40, "total": 0.0, "item_count": 2,
     "items": [("d-14", "Flat White", 2, "served")], "waves": [], "token": "demo-pu-190",
     "note": "", "payment": ("paid", "other")},
    {"id": "demo-history-2", "source": "table", "label": "T19", "section": "Main Hall", "guest": "2 guests",
     "status": "voided", "created_ago": 140, "updated_ago": 60, "total": 0.0, "item_count": 1,
     "items": [("d-15", "Steak Frites", 1, "voided")], "waves": [(1, "held")],
     "note": "Voided by manager", "payment": ("unpaid", None)},
    {"id": "demo-history-3", "source": "dine_in_no_table", "label": "DI-389", "section": "Dine-In", "guest": "Walk-in",
     "status": "refunded", "created_ago": 160, "updated_ago": 80, "total": 0.0, "item_count": 2,
     "items": [("d-16", "Iced Tea", 2, "served")], "waves": [], "token": "demo-di-389",
     "note": "Customer complaint", "payment": ("paid", "other")},
]

# Floor tables seated at startup: (id, number, section, minutes seated, guests,
# [(seat, item id, name, price, status, wave)]). Seat 0 is shared.
DEMO_FLOOR_TABLES: list[tuple] = [
    ("t5", 5, "Patio", 75, 4, [
        (1, "t5-1", "Caesar Salad", 14.5, "ready", 2),
        (1, "t5-2", "Glass of Pinot Grigio", 12.0, "served", 1),
        (2, "t5-3", "Pasta Carbonara", 22.0, "ready", 2),
        (3, "t5-4", "Salmon", 28.0, "cooking", 2),
        (4, "t5-5", "Tiramisu", 9.0, "held", 3),
    ]),
    ("t8", 8, "Main Hall", 40, 2, [
        (1, "t8-1", "Espresso Martini", 13.0, "served", 1),
        (2, "t8-2", "Negroni", 12.0, "served", 1),
        (1, "t8-3", "Ribeye", 38.0, "held", 2),
        (2, "t8-4", "Risotto", 24.0, "held", 2),
    ]),
    ("t12", 12, "Window", 6, 3, [
        (0, "t12-1", "Still Water", 6.0, "held", 1),
        (1, "t12-2", "Burrata", 16.0, "held", 2),
    ]),
]
