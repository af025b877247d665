"""
View Loader
===========

Runs one view fetch in the background and holds its result for a screen.

A screen opens a ``ViewLoader``, starts a fetch, and reads ``data`` /
``error`` once ``loading`` is False. When the screen goes away it calls
``close()``: the fetch still in flight is cancelled, and anything it would
have produced is dropped instead of landing on a screen nobody is looking at.

    loader = ViewLoader(lambda: fetch_sensor_locations(api))
    loader.start()
    await loader.wait()
    if loader.error:
        show(loader.error)
    ...
    await loader.close()
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from iot_dashboard.client.api_client import ClientError

logger = logging.getLogger(__name__)


class ViewLoader:
    """
    Args:
        fetch: Zero-argument callable returning the awaitable that loads the view
        name: Label used in log messages
    """

    def __init__(self, fetch: Callable[[], Awaitable[Any]], name: str = "view"):
        self.fetch = fetch
        self.name = name
        self.data: Any = None
        self.error: Optional[str] = None
        self.loading = False
        self.closed = False
        self._task: Optional[asyncio.Task] = None

    def start(self) -> asyncio.Task:
        """
        Start (or restart) the fetch. Must be called from a running event loop.

        A fetch already in flight is cancelled first, so only the newest one
        can publish.
        """
        if self.closed:
            raise RuntimeError(f"Loader for {self.name} is closed")
        if self._task is not None and not self._task.done():
            self._task.cancel()

        self.loading = True
        self.error = None
        self._task = asyncio.create_task(self._run())
        return self._task

    async def _run(self):
        try:
            result = await self.fetch()
        except asyncio.CancelledError:
            logger.debug(f"Fetch for {self.name} cancelled")
            raise
        except ClientError as e:
            logger.warning(f"Loading {self.name} failed: {e.message}")
            self._publish_error(e.message)
            return
        except Exception:
            logger.exception(f"Unexpected error while loading {self.name}")
            self._publish_error(f"Could not load {self.name}")
            return

        if self.closed:
            logger.debug(f"Dropping result for {self.name}, loader closed")
            return
        self.data = result
        self.loading = False

    def _publish_error(self, message: str):
        if not self.closed:
            self.error = message
            self.loading = False

    async def wait(self):
        """Wait for the current fetch to finish (cancelled counts as finished)."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def close(self):
        """Stop publishing and cancel whatever is still running."""
        self.closed = True
        self.loading = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await self.wait()
