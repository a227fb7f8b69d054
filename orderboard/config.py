"""Runtime configuration defaults for the tracking store and the board."""

from __future__ import annotations

import os

_TRACKING_DB_ENV = "ORDERBOARD_TRACKING_DB"
_DEBUG_LOG_ENV = "ORDERBOARD_DEBUG_LOG"

TRACKING_DB_PATH = os.environ.get(_TRACKING_DB_ENV, "").strip() or "data/tracking.db"
DEBUG_LOG_PATH = os.environ.get(_DEBUG_LOG_ENV, "").strip() or "/tmp/orderboard-debug.log"

# Counter tickets are pulled on this cadence, never pushed.
TRACKING_POLL_SECONDS = 2.5
