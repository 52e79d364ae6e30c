"""
Application services for computing bookable slots.

The service coordinates fetching snapshots via a booking store adapter and
delegates the actual availability calculation to the domain-level engine.
This keeps the CLI thin and improves testability by allowing the store
dependency to be replaced via a simple protocol.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

import pendulum

from ..config import DefaultsConfig
from ..domain.constraint_resolver import ConstraintResolver, day_of_week
from ..domain.engine import (
    compute_available_slots,
    compute_day_availability,
    find_nearest_slots,
    is_blocked,
    list_recurring_times,
    next_days,
)
from ..domain.models import (
    AvailabilityQuery,
    AvailableSlot,
    BookedAppointment,
    DateConstraint,
    OperatingHoursRule,
    RecurringAppointment,
    ScopingMode,
)
from ..domain.time_arithmetic import TimeLike
from .window_cache import WindowCache

logger = logging.getLogger(__name__)


class BookingStoreProtocol(Protocol):
    """Protocol describing the read operations the service needs from a store."""

    def get_operating_hours(self, day_of_week: int) -> List[OperatingHoursRule]:
        """Return the active rules of every resource for a weekday (0=Sunday)."""

    def get_constraints(self, day: date) -> List[DateConstraint]:
        """Return the blackout constraints of a date."""

    def get_bookings(self, day: date) -> List[BookedAppointment]:
        """Return the booked appointments of a date."""

    def get_bookings_between(self, start: date, end: date) -> List[BookedAppointment]:
        """Return the booked appointments between two dates, inclusive."""

    def get_recurring(self, day_of_week: int) -> List[RecurringAppointment]:
        """Return the standing weekly appointments of a weekday."""

    def get_buffer_minutes(self) -> int:
        """Return the configured gap between bookings."""


@dataclass(frozen=True)
class DaySnapshot:
    """Everything the engine needs about one date."""
    day: date
    rules: List[OperatingHoursRule]
    constraints: List[DateConstraint]
    bookings: List[BookedAppointment]


class AvailabilityService:
    """
    Orchestrates snapshot retrieval and slot calculation.

    Store calls are blocking; they run in worker threads so that a horizon of
    days is fetched concurrently.
    """

    def __init__(
        self,
        store: BookingStoreProtocol,
        defaults: Optional[DefaultsConfig] = None,
        cache: Optional[WindowCache] = None,
    ) -> None:
        self._store = store
        self._defaults = defaults or DefaultsConfig()
        self._cache = cache

    async def load_day(self, day: date) -> DaySnapshot:
        """Fetch rules, constraints and bookings of one date concurrently."""
        rules, constraints, bookings = await asyncio.gather(
            asyncio.to_thread(self._store.get_operating_hours, day_of_week(day)),
            asyncio.to_thread(self._store.get_constraints, day),
            asyncio.to_thread(self._store.get_bookings, day),
        )
        return DaySnapshot(day=day, rules=rules, constraints=constraints, bookings=bookings)

    async def load_days(self, days: Sequence[date]) -> List[DaySnapshot]:
        return list(await asyncio.gather(*(self.load_day(day) for day in days)))

    async def resolve_buffer(self, buffer_minutes: Optional[int]) -> int:
        """Explicit buffer wins; otherwise the store's business profile value."""
        if buffer_minutes is not None:
            return buffer_minutes
        stored = await asyncio.to_thread(self._store.get_buffer_minutes)
        return stored if stored else self._defaults.buffer_minutes

    async def available_slots(
        self,
        resource_id: Optional[str],
        day: date,
        *,
        service_duration_minutes: Optional[int] = None,
        buffer_minutes: Optional[int] = None,
        now: Optional[datetime] = None,
        mode: Optional[ScopingMode] = None,
    ) -> List[AvailableSlot]:
        """List the bookable start times of one resource on one date."""
        snapshot, buffer = await asyncio.gather(
            self.load_day(day),
            self.resolve_buffer(buffer_minutes),
        )

        query = AvailabilityQuery(
            resource_id=resource_id,
            date=day,
            service_duration_minutes=service_duration_minutes,
            buffer_minutes=buffer,
            now=now or pendulum.now(),
            rules=snapshot.rules,
            constraints=snapshot.constraints,
            bookings=snapshot.bookings,
            mode=mode or self._defaults.scoping_mode,
            default_duration_minutes=self._defaults.service_duration_minutes,
        )
        return compute_available_slots(query, windows=self._cached_windows(snapshot, resource_id))

    async def day_availability(
        self,
        resource_id: Optional[str],
        start: date,
        *,
        days: Optional[int] = None,
        service_duration_minutes: Optional[int] = None,
        buffer_minutes: Optional[int] = None,
        now: Optional[datetime] = None,
        mode: Optional[ScopingMode] = None,
    ) -> Dict[date, int]:
        """Count the open slots of every date in the horizon starting at ``start``."""
        dates = next_days(start, self._defaults.horizon_days if days is None else days)
        snapshots, buffer = await asyncio.gather(
            self.load_days(dates),
            self.resolve_buffer(buffer_minutes),
        )
        rules, constraints, bookings = self._merge(snapshots)

        return compute_day_availability(
            resource_id,
            dates,
            service_duration_minutes,
            buffer,
            rules,
            constraints,
            bookings,
            now=now or pendulum.now(),
            mode=mode or self._defaults.scoping_mode,
            default_duration_minutes=self._defaults.service_duration_minutes,
        )

    async def nearest_slots(
        self,
        resource_id: Optional[str],
        *,
        start: Optional[date] = None,
        service_duration_minutes: Optional[int] = None,
        buffer_minutes: Optional[int] = None,
        now: Optional[datetime] = None,
        mode: Optional[ScopingMode] = None,
        horizon_days: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Tuple[date, AvailableSlot]]:
        """Find the nearest open slots from ``start`` (today by default)."""
        now = now or pendulum.now()
        start = start or now.date()
        horizon = self._defaults.nearest_horizon_days if horizon_days is None else horizon_days

        snapshots, buffer = await asyncio.gather(
            self.load_days(next_days(start, horizon + 1)),
            self.resolve_buffer(buffer_minutes),
        )
        rules, constraints, bookings = self._merge(snapshots)

        return find_nearest_slots(
            resource_id,
            start,
            service_duration_minutes,
            buffer,
            rules,
            constraints,
            bookings,
            now=now,
            mode=mode or self._defaults.scoping_mode,
            horizon_days=horizon,
            limit=self._defaults.nearest_limit if limit is None else limit,
            default_duration_minutes=self._defaults.service_duration_minutes,
        )

    async def recurring_times(
        self,
        resource_id: Optional[str],
        weekday: int,
        *,
        service_duration_minutes: Optional[int] = None,
        today: Optional[date] = None,
        mode: ScopingMode = ScopingMode.SHARED,
    ) -> List[AvailableSlot]:
        """
        List start times free for a new weekly appointment on ``weekday``.

        Bookings from ``today`` over the configured look-ahead count as busy.
        """
        today = today or pendulum.today().date()
        lookahead_end = next_days(today, self._defaults.recurring_lookahead_days)[-1]

        rules, recurring, bookings = await asyncio.gather(
            asyncio.to_thread(self._store.get_operating_hours, weekday),
            asyncio.to_thread(self._store.get_recurring, weekday),
            asyncio.to_thread(self._store.get_bookings_between, today, lookahead_end),
        )

        return list_recurring_times(
            resource_id,
            weekday,
            service_duration_minutes,
            rules,
            recurring=recurring,
            bookings=bookings,
            mode=mode,
            default_duration_minutes=self._defaults.service_duration_minutes,
        )

    async def check_bookable(self, resource_id: Optional[str], day: date, start: TimeLike) -> bool:
        """Return False when ``start`` falls inside a blackout constraint."""
        constraints = await asyncio.to_thread(self._store.get_constraints, day)
        blocked = is_blocked(resource_id, day, start, constraints)
        if blocked:
            logger.info("Start %s on %s is blocked by a constraint", start, day)
        return not blocked

    def invalidate(self, resource_id: Optional[str], day: date) -> None:
        """Forget cached windows after hours or constraints changed."""
        if self._cache is not None:
            self._cache.invalidate(resource_id, day)

    def _cached_windows(self, snapshot: DaySnapshot, resource_id: Optional[str]):
        if self._cache is None:
            return None

        cached = self._cache.get(resource_id, snapshot.day)
        if cached is not None:
            return cached

        resolver = ConstraintResolver(snapshot.rules, snapshot.constraints)
        return self._cache.put(resource_id, snapshot.day, resolver.resolve(resource_id, snapshot.day))

    @staticmethod
    def _merge(snapshots: Sequence[DaySnapshot]):
        """
        Combine per-day snapshots into flat lists for the engine.

        Rules repeat for every date that shares a weekday; they are kept once.
        """
        rules: List[OperatingHoursRule] = []
        seen_weekdays: set[int] = set()
        constraints: List[DateConstraint] = []
        bookings: List[BookedAppointment] = []

        for snapshot in snapshots:
            weekday = day_of_week(snapshot.day)
            if weekday not in seen_weekdays:
                rules.extend(snapshot.rules)
                seen_weekdays.add(weekday)
            constraints.extend(snapshot.constraints)
            bookings.extend(snapshot.bookings)

        return rules, constraints, bookings
