"""
Database Connection
===================

Thin wrapper around the MongoDB driver.

WHAT IT DOES:
------------
1. Opens ONE MongoClient per process (it keeps its own connection pool)
2. Hands out the configured database to the services
3. Turns every driver failure into a StoreError so the API answers 500
   with a clean message instead of leaking a traceback

The driver connects lazily, so creating the client never blocks startup even
when the database is down. ``ping()`` is what /health uses to find out.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from iot_dashboard.exceptions import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Run a block of driver calls, converting driver errors to StoreError.

    Args:
        operation: Short description used in the log line and error message
    """
    try:
        yield
    except PyMongoError as e:
        logger.error(f"Store failure during {operation}: {e}")
        raise StoreError(f"Database error during {operation}") from e


class MongoStore:
    """
    Owns the MongoClient and the selected database.

    HOW TO USE:
    ----------
    store = MongoStore("mongodb://localhost:27017", "iot_dashboard")
    users = store.database["users"]
    ...
    store.close()
    """

    def __init__(
        self,
        url: str,
        database_name: str,
        client: Optional[MongoClient] = None,
        server_selection_timeout_ms: int = 5000,
    ):
        self.url = url
        self.database_name = database_name
        self.client = client or MongoClient(
            url, serverSelectionTimeoutMS=server_selection_timeout_ms
        )

    @property
    def database(self) -> Database:
        return self.client[self.database_name]

    def ping(self) -> bool:
        """True if the server answered a ping, False otherwise."""
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def close(self):
        self.client.close()
