"""habitdeck: main entry point.

Opens the SQLite-backed habit store and logs today's overview.
"""

import logging

from habitdeck.config import LOG_LEVEL, STORE_KEY
from habitdeck.db import init_db
from habitdeck.overview import habits_overview
from habitdeck.persistence import KeyValueRepository
from habitdeck.store import HabitStore

log = logging.getLogger("habitdeck")


def configure_logging() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def open_store(key: str = STORE_KEY) -> HabitStore:
    """Initialize the database and return a store persisting under `key`."""
    init_db()
    return HabitStore(KeyValueRepository(key))


def main() -> None:
    configure_logging()
    store = open_store()
    overview = habits_overview(store)
    if not overview:
        log.info("No habits yet")
        return
    log.info("%s", overview["summary"])
    for name in overview.get("due_today", []):
        log.info("Due: %s", name)


if __name__ == "__main__":
    main()
