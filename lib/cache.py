# =============================================================================
# lib/cache.py - Process-local TTL Value
# =============================================================================
# Holds one value for a fixed number of seconds. There is no invalidation
# beyond expiry and no cross-process sharing: every API worker keeps its own
# copy.
#
# Usage:
#   devices_cache = TTLValue(ttl_seconds=86400)
#   cached = devices_cache.get()
#   if cached is None:
#       devices_cache.set(load())
# =============================================================================

import logging
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)


class TTLValue:
    """A single cached value that expires `ttl_seconds` after it was stored."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Any = None
        self._stored_at: float | None = None

    def get(self) -> Any:
        """Return the cached value, or None if empty or expired."""
        if self._stored_at is None:
            return None
        if self._clock() - self._stored_at >= self.ttl_seconds:
            logger.debug("TTL cache expired")
            return None
        return self._value

    def set(self, value: Any) -> None:
        self._value = value
        self._stored_at = self._clock()

    def clear(self) -> None:
        self._value = None
        self._stored_at = None
