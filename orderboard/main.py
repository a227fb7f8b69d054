"""Entry point for the order board Textual app."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from orderboard.board_app import OrderBoardApp
from orderboard.config import DEBUG_LOG_PATH
from orderboard.data import demo_floor_tables
from orderboard.session import ServiceSession


def configure_logging(path: str = DEBUG_LOG_PATH) -> None:
    """Send debug logs to a file; the terminal belongs to the app."""
    log_file = Path(path)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        # Logging must never interfere with app flow.
        return
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root = logging.getLogger("orderboard")
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    session = ServiceSession(demo_floor_tables(datetime.now(timezone.utc)))
    OrderBoardApp(session).run()


if __name__ == "__main__":
    main()
