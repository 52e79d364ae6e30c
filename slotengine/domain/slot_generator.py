"""
Walks a day's open windows and emits the bookable start times.

Operates on minute-of-day integers only; fetching and parsing happen elsewhere.
"""

from bisect import bisect_left, bisect_right
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Sequence

from .exceptions import InvalidQueryError
from .models import AvailableSlot, Interval


def validate_durations(duration_minutes: int, buffer_minutes: int) -> None:
    """Reject durations the generator cannot work with."""
    if duration_minutes is None or duration_minutes <= 0:
        raise InvalidQueryError(
            f"Service duration must be greater than zero, got {duration_minutes}"
        )
    if buffer_minutes is None or buffer_minutes < 0:
        raise InvalidQueryError(
            f"Buffer minutes must not be negative, got {buffer_minutes}"
        )


class SlotGenerator:
    """
    Walks open windows and emits start times that respect existing bookings.

    Algorithm, per window, with the candidate pointer ``t`` at the window start:
    1. If ``t`` is within ``buffer`` minutes after the previous booking's end,
       jump to the end of that buffer
    2. If ``[t, t + duration)`` overlaps a booking, jump to the booking's end
    3. If the service plus buffer would run into the next booking, jump past
       that booking's start plus buffer
    4. Otherwise ``t`` is a slot; advance by ``duration``

    Every branch moves ``t`` forward, so the walk always terminates.
    """

    def __init__(self, busy: Iterable[Interval], buffer_minutes: int = 0):
        self.busy: List[Interval] = sorted(busy)
        self.buffer_minutes = buffer_minutes
        self._starts = [interval.start for interval in self.busy]
        self._ends = sorted(interval.end for interval in self.busy)

    def previous_end(self, minute: int) -> Optional[int]:
        """Latest busy end at or before ``minute``."""
        index = bisect_right(self._ends, minute)
        return self._ends[index - 1] if index else None

    def next_start(self, minute: int) -> Optional[int]:
        """Earliest busy start at or after ``minute``."""
        index = bisect_left(self._starts, minute)
        return self._starts[index] if index < len(self._starts) else None

    def first_overlap(self, start: int, end: int) -> Optional[Interval]:
        """First busy interval (by start) overlapping ``[start, end)``."""
        limit = bisect_left(self._starts, end)
        for interval in self.busy[:limit]:
            if interval.end > start:
                return interval
        return None

    def generate(
        self,
        windows: Sequence[Interval],
        duration_minutes: int,
        day: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> List[AvailableSlot]:
        """
        Generate the valid start times inside ``windows``.

        Args:
            windows: Disjoint open windows, ordered by start
            duration_minutes: Length of the requested service
            day: Date the windows belong to
            now: Current wall-clock time; start times before it are dropped
                 when ``day`` is today

        Returns:
            Slots ordered by start time
        """
        validate_durations(duration_minutes, self.buffer_minutes)

        buffer = self.buffer_minutes
        slots: List[AvailableSlot] = []

        for window in windows:
            t = window.start

            while t + duration_minutes <= window.end:
                previous_end = self.previous_end(t)
                if previous_end is not None and t < previous_end + buffer:
                    t = previous_end + buffer
                    continue

                end = t + duration_minutes
                overlap = self.first_overlap(t, end)
                if overlap:
                    t = overlap.end
                    continue

                next_start = self.next_start(t)
                if next_start is not None and end + buffer > next_start:
                    t = next_start + buffer
                    continue

                if not self._is_past(day, t, now):
                    slots.append(AvailableSlot(start=t, duration_minutes=duration_minutes))
                t += duration_minutes

        return slots

    @staticmethod
    def _is_past(day: Optional[date], minute: int, now: Optional[datetime]) -> bool:
        """Only start times of today can be in the past; other days are kept."""
        if day is None or now is None:
            return False

        wall_clock = now.replace(tzinfo=None)
        if wall_clock.date() != day:
            return False

        start = datetime.combine(day, time(hour=minute // 60, minute=minute % 60))
        return start < wall_clock
