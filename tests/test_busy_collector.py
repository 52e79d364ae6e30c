"""
Tests for busy interval collection.
"""

import pendulum
import pytest

from slotengine.domain.busy_collector import BusyIntervalCollector
from slotengine.domain.models import BookedAppointment, Interval, ScopingMode

MONDAY = pendulum.date(2024, 11, 25)


@pytest.fixture
def bookings():
    return [
        BookedAppointment(date=MONDAY, start=720, duration_minutes=45, resource_id=None),
        BookedAppointment(date=MONDAY, start=660, duration_minutes=30, resource_id="bob-id"),
        BookedAppointment(date=MONDAY, start=600, duration_minutes=60, resource_id="alice-id"),
        BookedAppointment(date=MONDAY, start=780, duration_minutes=60, resource_id="alice-id", is_cancelled=True),
        BookedAppointment(date=MONDAY.add(days=1), start=540, duration_minutes=60, resource_id="alice-id"),
        BookedAppointment(date=MONDAY, start=900, duration_minutes=0, resource_id="alice-id"),
    ]


class TestBusyIntervalCollector:
    """Tests for BusyIntervalCollector."""

    def test_resource_mode_only_sees_own_bookings(self, bookings):
        collector = BusyIntervalCollector(ScopingMode.RESOURCE)

        assert collector.collect("alice-id", MONDAY, bookings) == [Interval(600, 660)]

    def test_shared_mode_adds_bookings_without_resource(self, bookings):
        collector = BusyIntervalCollector(ScopingMode.SHARED)

        assert collector.collect("alice-id", MONDAY, bookings) == [Interval(600, 660), Interval(720, 765)]

    def test_all_mode_sees_every_booking(self, bookings):
        collector = BusyIntervalCollector(ScopingMode.ALL)

        assert collector.collect("alice-id", MONDAY, bookings) == [
            Interval(600, 660),
            Interval(660, 690),
            Interval(720, 765),
        ]

    def test_shared_resource_sees_unassigned_bookings(self, bookings):
        collector = BusyIntervalCollector()

        assert collector.collect(None, MONDAY, bookings) == [Interval(720, 765)]

    def test_mode_accepts_plain_strings(self, bookings):
        collector = BusyIntervalCollector("shared")

        assert collector.mode is ScopingMode.SHARED

    def test_output_is_sorted_by_start(self, bookings):
        busy = BusyIntervalCollector(ScopingMode.ALL).collect(None, MONDAY, bookings)

        assert busy == sorted(busy, key=lambda interval: interval.start)

    def test_booking_running_past_midnight_is_clipped(self):
        late = [BookedAppointment(date=MONDAY, start=1410, duration_minutes=60)]

        assert BusyIntervalCollector().collect(None, MONDAY, late) == [Interval(1410, 1440)]

    def test_no_bookings(self):
        assert BusyIntervalCollector().collect("alice-id", MONDAY, []) == []
