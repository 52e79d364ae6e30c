"""
Public entry points of the availability engine.

Each function is a pure computation over caller-supplied snapshots: the
day-level slot list, the per-day count over a horizon, the nearest open slots
and the weekly listing used for recurring appointments all share the same
resolver, collector and generator.
"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Tuple

import pendulum

from .busy_collector import BusyIntervalCollector, in_scope, to_interval
from .constraint_resolver import ConstraintResolver, day_of_week
from .exceptions import InvalidQueryError
from .models import (
    DEFAULT_DURATION_MINUTES,
    AvailabilityQuery,
    AvailableSlot,
    BookedAppointment,
    DateConstraint,
    Interval,
    OperatingHoursRule,
    RecurringAppointment,
    ScopingMode,
)
from .slot_generator import SlotGenerator, validate_durations
from .time_arithmetic import TimeLike, parse_time

logger = logging.getLogger(__name__)


def resolve_service_duration(
    requested: Optional[int],
    rule: Optional[OperatingHoursRule],
    default: int = DEFAULT_DURATION_MINUTES,
) -> int:
    """
    Pick the service duration for a query.

    An explicit duration wins, even a non-positive one, which the generator
    then rejects. Otherwise the rule's slot duration is used when positive,
    and ``default`` when the rule has none.
    """
    if requested is not None:
        return requested
    if rule is not None and rule.slot_duration_minutes and rule.slot_duration_minutes > 0:
        return rule.slot_duration_minutes
    return default


def next_days(start: date, count: int) -> List[date]:
    """Return ``count`` consecutive dates beginning with ``start``."""
    if count <= 0:
        raise InvalidQueryError(f"Horizon must contain at least one day, got {count}")

    first = pendulum.date(start.year, start.month, start.day)
    return [first.add(days=offset) for offset in range(count)]


def compute_available_slots(
    query: AvailabilityQuery,
    windows: Optional[Sequence[Interval]] = None,
) -> List[AvailableSlot]:
    """
    Compute the bookable start times for one resource, date and service.

    Args:
        query: The immutable input bundle
        windows: Already resolved open windows for (resource, date), e.g. from
                 a caller-side cache. Resolved from the query when omitted.

    Returns:
        Slots ordered by start time

    Raises:
        InvalidQueryError: If the duration is not positive or the buffer is negative
    """
    resolver = ConstraintResolver(query.rules, query.constraints)
    rule = resolver.select_rule(query.resource_id, day_of_week(query.date))
    duration = resolve_service_duration(
        query.service_duration_minutes, rule, query.default_duration_minutes
    )
    validate_durations(duration, query.buffer_minutes)

    if windows is None:
        windows = resolver.resolve(query.resource_id, query.date)

    busy = BusyIntervalCollector(query.mode).collect(
        query.resource_id, query.date, query.bookings
    )

    slots = SlotGenerator(busy, query.buffer_minutes).generate(
        windows, duration, day=query.date, now=query.now
    )
    logger.debug(
        "Resource %s on %s: %d window(s), %d busy, %d slot(s)",
        query.resource_id, query.date, len(windows), len(busy), len(slots),
    )
    return slots


def compute_day_availability(
    resource_id: Optional[str],
    dates: Sequence[date],
    service_duration_minutes: Optional[int],
    buffer_minutes: int,
    rules: Sequence[OperatingHoursRule],
    constraints: Sequence[DateConstraint],
    bookings: Sequence[BookedAppointment],
    now: Optional[datetime] = None,
    mode: ScopingMode = ScopingMode.RESOURCE,
    default_duration_minutes: int = DEFAULT_DURATION_MINUTES,
) -> Dict[date, int]:
    """
    Count the open slots of every date in ``dates``.

    A count of zero marks a closed or fully booked day.
    """
    counts: Dict[date, int] = {}

    for day in dates:
        query = AvailabilityQuery(
            resource_id=resource_id,
            date=day,
            service_duration_minutes=service_duration_minutes,
            buffer_minutes=buffer_minutes,
            now=now,
            rules=rules,
            constraints=constraints,
            bookings=bookings,
            mode=mode,
            default_duration_minutes=default_duration_minutes,
        )
        counts[day] = len(compute_available_slots(query))

    return counts


def find_nearest_slots(
    resource_id: Optional[str],
    start: date,
    service_duration_minutes: Optional[int],
    buffer_minutes: int,
    rules: Sequence[OperatingHoursRule],
    constraints: Sequence[DateConstraint],
    bookings: Sequence[BookedAppointment],
    now: Optional[datetime] = None,
    mode: ScopingMode = ScopingMode.RESOURCE,
    horizon_days: int = 14,
    limit: int = 3,
    default_duration_minutes: int = DEFAULT_DURATION_MINUTES,
) -> List[Tuple[date, AvailableSlot]]:
    """
    Return the first ``limit`` open slots from ``start`` onwards.

    The search covers ``start`` plus ``horizon_days`` following days and
    stops as soon as enough slots were found.
    """
    if limit <= 0:
        raise InvalidQueryError(f"Limit must be greater than zero, got {limit}")
    if horizon_days < 0:
        raise InvalidQueryError(f"Horizon must not be negative, got {horizon_days}")

    found: List[Tuple[date, AvailableSlot]] = []

    for day in next_days(start, horizon_days + 1):
        query = AvailabilityQuery(
            resource_id=resource_id,
            date=day,
            service_duration_minutes=service_duration_minutes,
            buffer_minutes=buffer_minutes,
            now=now,
            rules=rules,
            constraints=constraints,
            bookings=bookings,
            mode=mode,
            default_duration_minutes=default_duration_minutes,
        )
        for slot in compute_available_slots(query):
            found.append((day, slot))
            if len(found) == limit:
                return found

    return found


def list_recurring_times(
    resource_id: Optional[str],
    weekday: int,
    service_duration_minutes: Optional[int],
    rules: Sequence[OperatingHoursRule],
    recurring: Sequence[RecurringAppointment] = (),
    bookings: Sequence[BookedAppointment] = (),
    mode: ScopingMode = ScopingMode.SHARED,
    default_duration_minutes: int = DEFAULT_DURATION_MINUTES,
) -> List[AvailableSlot]:
    """
    List start times that can host a new weekly recurring appointment.

    The weekday's hours minus breaks are walked like a regular day. Standing
    recurring appointments on that weekday and every booking falling on that
    weekday count as busy. Date constraints are ignored since the booking
    repeats every week.
    """
    if not 0 <= weekday <= 6:
        raise InvalidQueryError(f"Weekday must be between 0 and 6, got {weekday}")

    resolver = ConstraintResolver(rules)
    rule = resolver.select_rule(resource_id, weekday)
    duration = resolve_service_duration(service_duration_minutes, rule, default_duration_minutes)
    windows = resolver.weekly_windows(resource_id, weekday)

    busy: List[Interval] = []
    for standing in recurring:
        if standing.day_of_week == weekday and in_scope(standing.resource_id, resource_id, mode):
            busy.append(to_interval(standing.start, standing.duration_minutes))

    for booking in bookings:
        if booking.is_cancelled or day_of_week(booking.date) != weekday:
            continue
        if in_scope(booking.resource_id, resource_id, mode):
            busy.append(to_interval(booking.start, booking.duration_minutes))

    generator = SlotGenerator([interval for interval in busy if interval], buffer_minutes=0)
    return generator.generate(windows, duration)


def is_blocked(
    resource_id: Optional[str],
    day: date,
    start: TimeLike,
    constraints: Sequence[DateConstraint],
) -> bool:
    """Check whether a start time on ``day`` falls inside a blackout constraint."""
    return ConstraintResolver((), constraints).is_blocked(resource_id, day, parse_time(start))
