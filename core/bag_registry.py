"""
Bag registry - bounded in-memory store of one bag per browser session
"""
import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BagRegistry(Generic[T]):
    """Keeps at most ``max_bags`` bags, least recently used first out.

    Bags untouched for ``idle_seconds`` are dropped the next time the
    registry is accessed.
    """

    def __init__(self, factory: Callable[[], T], max_bags: int = 1000,
                 idle_seconds: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        if max_bags < 1:
            raise ValueError(f"max_bags must be at least 1, got {max_bags}")
        self.factory = factory
        self.max_bags = max_bags
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._bags: "OrderedDict[str, tuple]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> T:
        # Return the session's bag, creating it if missing or expired
        with self._lock:
            now = self._clock()
            self._expire(now)

            entry = self._bags.pop(session_id, None)
            bag = entry[0] if entry else self.factory()
            self._bags[session_id] = (bag, now)

            while len(self._bags) > self.max_bags:
                evicted, _ = self._bags.popitem(last=False)
                logger.debug("Evicted bag for session %s", evicted)
            return bag

    def discard(self, session_id: str):
        with self._lock:
            self._bags.pop(session_id, None)

    def _expire(self, now: float):
        # Entries are ordered by last access, so stop at the first fresh one
        while self._bags:
            session_id, (_, last_seen) = next(iter(self._bags.items()))
            if now - last_seen <= self.idle_seconds:
                break
            del self._bags[session_id]
            logger.debug("Expired idle bag for session %s", session_id)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._bags

    def __len__(self) -> int:
        with self._lock:
            return len(self._bags)
