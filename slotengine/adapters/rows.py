"""
Row models for the booking store tables.

The store hands back loosely typed rows (``HH:MM`` or ``HH:MM:SS`` times,
optional columns, legacy break columns). These models validate the shape of a
row and convert it into the engine's domain types.
"""

import logging
from datetime import date, time
from typing import Annotated, Any, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator

from ..config import clamp_buffer_minutes
from ..domain.models import (
    DEFAULT_DURATION_MINUTES,
    BookedAppointment,
    DateConstraint,
    Interval,
    OperatingHoursRule,
    RecurringAppointment,
)
from ..domain.time_arithmetic import MINUTES_PER_DAY, format_time, parse_time

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound="StoreRow")

CANCELLED_STATUSES = ("cancelled", "canceled")


def _normalize_time(value: Any) -> Any:
    # YAML 1.1 reads unquoted 10:30 as the base-60 integer 630
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MINUTES_PER_DAY:
        return format_time(value)
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return value


WallClock = Annotated[Optional[str], BeforeValidator(_normalize_time)]


def _interval(start: Optional[str], end: Optional[str]) -> Interval | None:
    return Interval.between(parse_time(start), parse_time(end))


class StoreRow(BaseModel):
    """Base row: unknown columns are ignored."""
    model_config = ConfigDict(extra="ignore")


class BreakRow(StoreRow):
    start_time: WallClock = None
    end_time: WallClock = None


class BusinessHoursRow(StoreRow):
    """Row of the ``business_hours`` table."""
    day_of_week: int
    start_time: WallClock = None
    end_time: WallClock = None
    break_start_time: WallClock = None
    break_end_time: WallClock = None
    breaks: Optional[List[BreakRow]] = None
    slot_duration_minutes: Optional[int] = None
    is_active: bool = True
    user_id: Optional[str] = None

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, value: int) -> int:
        if value not in range(7):
            raise ValueError(f"day_of_week must be between 0 and 6, got {value}")
        return value

    def all_breaks(self) -> List[Interval]:
        """Breaks from the JSON list plus the legacy single break columns."""
        pairs = [(b.start_time, b.end_time) for b in (self.breaks or [])]
        if self.break_start_time and self.break_end_time:
            pairs.append((self.break_start_time, self.break_end_time))

        breaks: List[Interval] = []
        for start, end in pairs:
            interval = _interval(start, end)
            if interval:
                breaks.append(interval)
        return breaks

    def to_domain(self) -> OperatingHoursRule | None:
        hours = _interval(self.start_time, self.end_time)
        if hours is None:
            logger.warning(
                "Ignoring business hours for day %d with empty range %s-%s",
                self.day_of_week, self.start_time, self.end_time,
            )
            return None

        slot_duration = self.slot_duration_minutes
        if slot_duration is not None and slot_duration <= 0:
            slot_duration = None

        return OperatingHoursRule(
            day_of_week=self.day_of_week,
            hours=hours,
            breaks=tuple(self.all_breaks()),
            slot_duration_minutes=slot_duration,
            is_active=self.is_active,
            resource_id=self.user_id,
        )


class ConstraintRow(StoreRow):
    """Row of the ``business_constraints`` table."""
    date: date
    start_time: WallClock = None
    end_time: WallClock = None
    reason: Optional[str] = None
    user_id: Optional[str] = None

    def to_domain(self) -> DateConstraint | None:
        window = _interval(self.start_time, self.end_time)
        if window is None:
            return None
        return DateConstraint(
            date=self.date,
            window=window,
            resource_id=self.user_id,
            reason=self.reason,
        )


class AppointmentRow(StoreRow):
    """Row of the ``appointments`` table; booked rows have ``is_available = false``."""
    slot_date: date
    slot_time: WallClock = None
    duration_minutes: Optional[int] = None
    is_available: bool = False
    status: Optional[str] = None
    user_id: Optional[str] = None

    def to_domain(self) -> BookedAppointment | None:
        if self.is_available:
            return None
        return BookedAppointment(
            date=self.slot_date,
            start=parse_time(self.slot_time),
            duration_minutes=self.duration_minutes if self.duration_minutes is not None else DEFAULT_DURATION_MINUTES,
            resource_id=self.user_id,
            is_cancelled=(self.status or "").lower() in CANCELLED_STATUSES,
        )


class RecurringRow(StoreRow):
    """Row of the ``recurring_appointments`` table."""
    day_of_week: int
    slot_time: WallClock = None
    duration_minutes: Optional[int] = None
    user_id: Optional[str] = None

    def to_domain(self) -> RecurringAppointment:
        return RecurringAppointment(
            day_of_week=self.day_of_week,
            start=parse_time(self.slot_time),
            duration_minutes=self.duration_minutes if self.duration_minutes is not None else DEFAULT_DURATION_MINUTES,
            resource_id=self.user_id,
        )


class BusinessProfileRow(StoreRow):
    """Row of the ``business_profile`` table; only the break setting matters here."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    break_minutes: Optional[float] = Field(default=None, alias="break")

    @property
    def buffer_minutes(self) -> int:
        return clamp_buffer_minutes(self.break_minutes)


def parse_rows(model: Type[RowT], rows: Iterable[Any]) -> List[RowT]:
    """
    Validate raw rows, skipping the ones that do not match ``model``.

    Malformed rows are logged and dropped so that one bad record does not
    hide the rest of the day.
    """
    parsed: List[RowT] = []
    for raw in rows or []:
        try:
            parsed.append(model.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed %s row %r: %s", model.__name__, raw, exc)
    return parsed


def to_domain(rows: Iterable[StoreRow]) -> list:
    """Convert validated rows, dropping those without a domain counterpart."""
    converted = []
    for row in rows:
        item = row.to_domain()
        if item is not None:
            converted.append(item)
    return converted
