"""
Domain models for availability calculations.

All models are immutable snapshots supplied by the caller; the engine never
mutates them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Sequence, Tuple

from .time_arithmetic import MINUTES_PER_DAY, format_time

DEFAULT_DURATION_MINUTES = 60


@dataclass(frozen=True, order=True)
class Interval:
    """
    Half-open minute-of-day range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start minute {self.start} must be before end minute {self.end}")
        if self.start < 0 or self.end > MINUTES_PER_DAY:
            raise ValueError(f"Interval {self.start}-{self.end} is outside the day")

    @classmethod
    def between(cls, start: int, end: int) -> "Interval | None":
        """Build an interval, or return None for an empty or inverted range."""
        if start >= end:
            return None
        return cls(start=start, end=end)

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def contains(self, start: int, end: int) -> bool:
        """Check if ``[start, end)`` lies fully inside this range."""
        return self.start <= start and end <= self.end

    def __str__(self) -> str:
        return f"{format_time(self.start)}-{format_time(self.end)}"


class ScopingMode(str, Enum):
    """Which bookings count as busy for a resource."""

    RESOURCE = "resource"  # only the resource's own bookings
    SHARED = "shared"  # the resource's bookings plus bookings without a resource
    ALL = "all"  # every booking of the day


@dataclass(frozen=True)
class OperatingHoursRule:
    """
    Opening hours of one resource for one day of the week.

    ``day_of_week`` follows the store's convention: 0=Sunday, 6=Saturday.
    A ``resource_id`` of None marks the shared business-wide rule.
    """
    day_of_week: int
    hours: Interval
    breaks: Tuple[Interval, ...] = ()
    slot_duration_minutes: Optional[int] = None
    is_active: bool = True
    resource_id: Optional[str] = None


@dataclass(frozen=True)
class DateConstraint:
    """One-off blackout window. A ``resource_id`` of None applies to all resources."""
    date: date
    window: Interval
    resource_id: Optional[str] = None
    reason: Optional[str] = None

    def applies_to(self, resource_id: Optional[str]) -> bool:
        return self.resource_id is None or self.resource_id == resource_id


@dataclass(frozen=True)
class BookedAppointment:
    """A booking that occupies ``[start, start + duration_minutes)`` on ``date``."""
    date: date
    start: int
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    resource_id: Optional[str] = None
    is_cancelled: bool = False


@dataclass(frozen=True)
class RecurringAppointment:
    """A standing weekly booking."""
    day_of_week: int
    start: int
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    resource_id: Optional[str] = None


@dataclass(frozen=True)
class AvailabilityQuery:
    """
    Input bundle for one availability run.

    ``service_duration_minutes`` of None falls back to the matched rule's slot
    duration, then to ``default_duration_minutes``. ``now`` only matters when
    ``date`` is the same calendar day.
    """
    resource_id: Optional[str]
    date: date
    service_duration_minutes: Optional[int] = None
    buffer_minutes: int = 0
    now: Optional[datetime] = None
    rules: Sequence[OperatingHoursRule] = field(default_factory=tuple)
    constraints: Sequence[DateConstraint] = field(default_factory=tuple)
    bookings: Sequence[BookedAppointment] = field(default_factory=tuple)
    mode: ScopingMode = ScopingMode.RESOURCE
    default_duration_minutes: int = DEFAULT_DURATION_MINUTES


@dataclass(frozen=True, order=True)
class AvailableSlot:
    """A valid start time for a service of ``duration_minutes``."""
    start: int
    duration_minutes: int

    @property
    def end(self) -> int:
        return self.start + self.duration_minutes

    @property
    def label(self) -> str:
        return format_time(self.start)

    def format_display(self) -> str:
        """Format: HH:MM - HH:MM (N min)"""
        return f"{format_time(self.start)} - {format_time(self.end)} ({self.duration_minutes} min)"
