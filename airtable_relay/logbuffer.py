"""Bounded in-memory log buffer.

The relay keeps the most recent log lines in memory so they can be served
from ``GET /logs``.  Entries are ``"<ISO timestamp>: <message>"`` strings,
oldest first.  Appends may come from concurrent requests; a lock guards the
deque so the buffer never exceeds its capacity and only the oldest entries
are evicted.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque

from airtable_relay.time_utils import utc_now_iso

MAX_ENTRIES = 100
RECENT_LIMIT = 50


class LogBuffer:
    """Capped, insertion-ordered sequence of timestamped log lines."""

    def __init__(self, capacity: int = MAX_ENTRIES) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._entries: Deque[str] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def append(self, message: str) -> str:
        """Timestamp *message*, store it, and return the stored entry."""
        entry = f"{utc_now_iso()}: {message}"
        with self._lock:
            self._entries.append(entry)
        return entry

    def recent(self, limit: int = RECENT_LIMIT) -> list[str]:
        """Return up to *limit* newest entries, oldest first."""
        with self._lock:
            entries = list(self._entries)
        if limit <= 0:
            return []
        return entries[-limit:]

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
