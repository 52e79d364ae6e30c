"""
Caller-owned cache of resolved open windows.
"""

from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from ..domain.models import Interval

CacheKey = Tuple[Optional[str], date]


class WindowCache:
    """
    Maps (resource, date) to the resolved open windows of that day.

    Entries must be invalidated whenever operating hours or constraints change
    for the key; the engine itself never consults this cache.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, Tuple[Interval, ...]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def get(self, resource_id: Optional[str], day: date) -> Optional[Tuple[Interval, ...]]:
        return self._entries.get((resource_id, day))

    def put(self, resource_id: Optional[str], day: date, windows: Iterable[Interval]) -> Tuple[Interval, ...]:
        entry = tuple(windows)
        self._entries[(resource_id, day)] = entry
        return entry

    def invalidate(self, resource_id: Optional[str], day: date) -> None:
        """Drop the entry of one resource on one date."""
        self._entries.pop((resource_id, day), None)

    def invalidate_date(self, day: date) -> None:
        """Drop every resource's entry for ``day`` (e.g. after a constraint edit)."""
        for key in [key for key in self._entries if key[1] == day]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()
