"""Clock synchronization against the venue server time.

Signed requests are stamped with ``local_ms - offset``. The offset stays at
its configured default unless ``resync`` is called, which only happens when
time adjustment is enabled. Concurrent resyncs simply overwrite the offset
with the fresher value.
"""

import time
from collections.abc import Awaitable, Callable

from bybit_connector.infrastructure.observability import get_ingestion_logger

logger = get_ingestion_logger("clock-sync", exchange="bybit")


def milliseconds() -> int:
    return int(time.time() * 1000)


def seconds() -> int:
    return int(time.time())


class ClockSynchronizer:
    def __init__(self, offset: int = 0, clock: Callable[[], int] = milliseconds):
        """
        Args:
            offset: Initial offset (local - venue) in ms
            clock: Local millisecond clock
        """
        self._offset = offset
        self._clock = clock

    def current_offset_millis(self) -> int:
        return self._offset

    def nonce(self) -> int:
        """Venue-adjusted timestamp for the next signed request."""
        return self._clock() - self._offset

    async def resync(self, fetch_server_time: Callable[[], Awaitable[int]]) -> int:
        """Fetch venue time and store ``local_after_call - server_time``.

        Args:
            fetch_server_time: Coroutine function returning venue time in ms

        Errors from the time fetch propagate unchanged.
        """
        server_time = await fetch_server_time()
        after = self._clock()
        self._offset = after - server_time
        logger.info("clock_resynced", offset_ms=self._offset)
        return self._offset
