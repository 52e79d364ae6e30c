"""
Maps existing bookings to busy minute intervals.
"""

from datetime import date
from typing import Iterable, List, Optional

from .models import BookedAppointment, Interval, ScopingMode
from .time_arithmetic import MINUTES_PER_DAY


def in_scope(
    booking_resource: Optional[str],
    resource_id: Optional[str],
    mode: ScopingMode,
) -> bool:
    """Check whether a booking of ``booking_resource`` blocks ``resource_id``."""
    if mode is ScopingMode.ALL:
        return True
    if mode is ScopingMode.SHARED and booking_resource is None:
        return True
    return booking_resource == resource_id


def to_interval(start: int, duration_minutes: int) -> Interval | None:
    """Busy range of a booking, clipped at midnight. None for empty bookings."""
    return Interval.between(start, min(start + duration_minutes, MINUTES_PER_DAY))


class BusyIntervalCollector:
    """Collects the busy intervals of one resource on one date."""

    def __init__(self, mode: ScopingMode = ScopingMode.RESOURCE):
        self.mode = ScopingMode(mode)

    def collect(
        self,
        resource_id: Optional[str],
        day: date,
        bookings: Iterable[BookedAppointment],
    ) -> List[Interval]:
        """
        Return busy intervals sorted by start time.

        Cancelled bookings, bookings on other dates and bookings of other
        resources (according to the scoping mode) are ignored.
        """
        busy: List[Interval] = []

        for booking in bookings:
            if booking.is_cancelled or booking.date != day:
                continue
            if not in_scope(booking.resource_id, resource_id, self.mode):
                continue

            interval = to_interval(booking.start, booking.duration_minutes)
            if interval:
                busy.append(interval)

        return sorted(busy)
