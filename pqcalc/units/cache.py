"""
Time-limited cache for advertised unit lists.

Looking up compatible units walks the whole catalog, so callers describing
many calculations can keep one cache and pass it in explicitly. Entries
expire after a fixed TTL.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from pqcalc.config import EngineSettings


@dataclass
class _Entry:
    units: list[str]
    expires_at: float


class UnitsCache:
    """Map of key (usually a category id) to unit lists, with expiry."""

    def __init__(self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be non-negative")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    @classmethod
    def from_settings(cls, settings: Optional[EngineSettings] = None) -> "UnitsCache":
        """Cache with the TTL configured for the engine."""
        settings = settings or EngineSettings.from_env()
        return cls(ttl_seconds=settings.units_cache_ttl_seconds)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[list[str]]:
        """Cached units for key, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return list(entry.units)

    def set(self, key: str, units: list[str]) -> None:
        self._entries[key] = _Entry(list(units), self._clock() + self.ttl_seconds)

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
