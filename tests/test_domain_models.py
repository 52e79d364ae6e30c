"""
Tests for domain models.
"""

import pendulum
import pytest

from slotengine.domain.models import AvailableSlot, DateConstraint, Interval


class TestInterval:
    """Tests for Interval model."""

    def test_create_valid_interval(self):
        interval = Interval(start=540, end=1020)

        assert interval.duration_minutes == 480  # 8 hours
        assert str(interval) == "09:00-17:00"

    def test_invalid_interval_raises_error(self):
        with pytest.raises(ValueError, match="Start minute .* must be before end minute"):
            Interval(start=1020, end=540)

    def test_empty_interval_raises_error(self):
        with pytest.raises(ValueError):
            Interval(start=600, end=600)

    def test_interval_outside_day_raises_error(self):
        with pytest.raises(ValueError, match="outside the day"):
            Interval(start=1400, end=1500)

    def test_between_drops_degenerate_ranges(self):
        assert Interval.between(600, 600) is None
        assert Interval.between(660, 600) is None
        assert Interval.between(600, 660) == Interval(600, 660)

    def test_overlaps(self):
        morning = Interval(540, 720)
        midday = Interval(660, 840)
        afternoon = Interval(720, 1020)

        assert morning.overlaps(midday)
        assert midday.overlaps(morning)
        assert not morning.overlaps(afternoon)

    def test_contains(self):
        window = Interval(540, 720)

        assert window.contains(540, 720)
        assert not window.contains(500, 600)


class TestAvailableSlot:
    """Tests for AvailableSlot."""

    def test_label_and_end(self):
        slot = AvailableSlot(start=570, duration_minutes=45)

        assert slot.label == "09:30"
        assert slot.end == 615

    def test_format_display(self):
        slot = AvailableSlot(start=540, duration_minutes=60)

        assert slot.format_display() == "09:00 - 10:00 (60 min)"


class TestDateConstraint:
    """Tests for constraint scoping."""

    def test_unscoped_constraint_applies_to_everyone(self):
        constraint = DateConstraint(date=pendulum.date(2024, 11, 25), window=Interval(600, 660))

        assert constraint.applies_to("alice-id")
        assert constraint.applies_to(None)

    def test_scoped_constraint_applies_to_its_resource_only(self):
        constraint = DateConstraint(
            date=pendulum.date(2024, 11, 25),
            window=Interval(600, 660),
            resource_id="alice-id",
        )

        assert constraint.applies_to("alice-id")
        assert not constraint.applies_to("bob-id")
        assert not constraint.applies_to(None)
