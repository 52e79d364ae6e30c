"""
Tests for store row models.
"""

from datetime import date, time

from slotengine.adapters.rows import (
    AppointmentRow,
    BusinessHoursRow,
    BusinessProfileRow,
    ConstraintRow,
    RecurringRow,
    parse_rows,
    to_domain,
)
from slotengine.domain.models import Interval


class TestBusinessHoursRow:
    """Tests for BusinessHoursRow."""

    def test_seconds_are_accepted(self):
        rule = BusinessHoursRow(day_of_week=1, start_time="09:00:00", end_time="17:00:00").to_domain()

        assert rule.hours == Interval(540, 1020)
        assert rule.resource_id is None

    def test_legacy_break_is_merged_with_break_list(self):
        row = BusinessHoursRow(
            day_of_week=1,
            start_time="09:00",
            end_time="18:00",
            break_start_time="12:00",
            break_end_time="13:00",
            breaks=[{"start_time": "15:00", "end_time": "15:15"}],
        )

        assert row.all_breaks() == [Interval(900, 915), Interval(720, 780)]

    def test_yaml_sexagesimal_times_are_read_as_wall_clock(self):
        """PyYAML turns an unquoted 10:30 into the integer 630."""
        row = BusinessHoursRow(day_of_week=1, start_time=630, end_time=time(14, 0))

        assert row.start_time == "10:30"
        assert row.to_domain().hours == Interval(630, 840)

    def test_empty_range_has_no_rule(self):
        assert BusinessHoursRow(day_of_week=1, start_time="10:00", end_time="10:00").to_domain() is None

    def test_missing_or_invalid_slot_duration_is_left_unset(self):
        """The configured default duration applies later, when slots are computed."""
        missing = BusinessHoursRow(day_of_week=1, start_time="09:00", end_time="17:00").to_domain()
        zero = BusinessHoursRow(
            day_of_week=1, start_time="09:00", end_time="17:00", slot_duration_minutes=0
        ).to_domain()

        assert missing.slot_duration_minutes is None
        assert zero.slot_duration_minutes is None

    def test_resource_rule(self):
        rule = BusinessHoursRow(
            day_of_week=3, start_time="10:00", end_time="14:00", slot_duration_minutes=30, user_id="alice-id"
        ).to_domain()

        assert rule.resource_id == "alice-id"
        assert rule.slot_duration_minutes == 30


class TestAppointmentRow:
    """Tests for AppointmentRow."""

    def test_booked_row(self):
        booking = AppointmentRow(
            slot_date="2024-11-25", slot_time="10:30:00", duration_minutes=45, user_id="alice-id"
        ).to_domain()

        assert booking.date == date(2024, 11, 25)
        assert booking.start == 630
        assert booking.duration_minutes == 45
        assert booking.resource_id == "alice-id"
        assert not booking.is_cancelled

    def test_available_row_is_not_a_booking(self):
        assert AppointmentRow(slot_date="2024-11-25", slot_time="10:00", is_available=True).to_domain() is None

    def test_missing_duration_defaults_to_sixty(self):
        booking = AppointmentRow(slot_date="2024-11-25", slot_time="10:00").to_domain()

        assert booking.duration_minutes == 60

    def test_cancelled_status(self):
        booking = AppointmentRow(slot_date="2024-11-25", slot_time="10:00", status="Cancelled").to_domain()

        assert booking.is_cancelled


class TestOtherRows:
    """Tests for constraint, recurring and profile rows."""

    def test_constraint_row(self):
        constraint = ConstraintRow(
            date="2024-11-25", start_time="16:00", end_time="17:00", reason="Staff meeting"
        ).to_domain()

        assert constraint.window == Interval(960, 1020)
        assert constraint.reason == "Staff meeting"
        assert constraint.resource_id is None

    def test_constraint_without_range_is_dropped(self):
        assert ConstraintRow(date="2024-11-25", start_time="16:00").to_domain() is None

    def test_recurring_row(self):
        item = RecurringRow(day_of_week=1, slot_time="13:00", user_id="alice-id").to_domain()

        assert item.start == 780
        assert item.duration_minutes == 60

    def test_profile_buffer_is_clamped(self):
        assert BusinessProfileRow.model_validate({"break": 240}).buffer_minutes == 180
        assert BusinessProfileRow.model_validate({"break": -5}).buffer_minutes == 0
        assert BusinessProfileRow.model_validate({}).buffer_minutes == 0
        assert BusinessProfileRow(break_minutes=15).buffer_minutes == 15


class TestParseRows:
    """Tests for parse_rows and to_domain."""

    def test_malformed_rows_are_skipped(self, caplog):
        rows = [
            {"day_of_week": 1, "start_time": "09:00", "end_time": "12:00"},
            {"day_of_week": 9, "start_time": "09:00", "end_time": "12:00"},
            {"start_time": "09:00"},
        ]

        parsed = parse_rows(BusinessHoursRow, rows)

        assert len(parsed) == 1
        assert "Skipping malformed BusinessHoursRow" in caplog.text

    def test_none_is_an_empty_table(self):
        assert parse_rows(AppointmentRow, None) == []

    def test_to_domain_drops_rows_without_counterpart(self):
        rows = parse_rows(
            AppointmentRow,
            [
                {"slot_date": "2024-11-25", "slot_time": "10:00"},
                {"slot_date": "2024-11-25", "slot_time": "11:00", "is_available": True},
            ],
        )

        assert [booking.start for booking in to_domain(rows)] == [600]

    def test_unknown_columns_are_ignored(self):
        row = AppointmentRow.model_validate(
            {"slot_date": "2024-11-25", "slot_time": "10:00", "customer_name": "Jane"}
        )

        assert row.to_domain().start == 600
