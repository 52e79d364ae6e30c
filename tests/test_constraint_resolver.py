"""
Tests for the constraint resolver.
"""

import pendulum

from slotengine.domain.constraint_resolver import ConstraintResolver, day_of_week
from slotengine.domain.models import DateConstraint, Interval, OperatingHoursRule


def test_day_of_week_uses_sunday_as_zero():
    assert day_of_week(pendulum.date(2024, 11, 24)) == 0  # Sunday
    assert day_of_week(pendulum.date(2024, 11, 25)) == 1  # Monday
    assert day_of_week(pendulum.date(2024, 11, 30)) == 6  # Saturday


class TestRuleSelection:
    """Tests for picking the operating-hours rule."""

    def test_resource_rule_is_preferred(self, shared_rules):
        own = OperatingHoursRule(day_of_week=1, hours=Interval(600, 840), resource_id="alice-id")
        resolver = ConstraintResolver(shared_rules + [own])

        assert resolver.select_rule("alice-id", 1) == own

    def test_falls_back_to_shared_rule(self, shared_rules):
        resolver = ConstraintResolver(shared_rules)

        assert resolver.select_rule("alice-id", 1) == shared_rules[0]

    def test_inactive_rule_is_ignored(self, shared_rules):
        inactive = OperatingHoursRule(
            day_of_week=1, hours=Interval(600, 840), is_active=False, resource_id="alice-id"
        )
        resolver = ConstraintResolver(shared_rules + [inactive])

        assert resolver.select_rule("alice-id", 1) == shared_rules[0]

    def test_no_rule_means_closed(self, shared_rules, monday):
        resolver = ConstraintResolver(shared_rules)
        sunday = monday.subtract(days=1)

        assert resolver.select_rule(None, 0) is None
        assert resolver.resolve(None, sunday) == []

    def test_other_resources_rule_is_not_used(self):
        bobs = OperatingHoursRule(day_of_week=1, hours=Interval(600, 840), resource_id="bob-id")
        resolver = ConstraintResolver([bobs])

        assert resolver.select_rule("alice-id", 1) is None
        assert resolver.select_rule(None, 1) is None


class TestResolve:
    """Tests for resolving the open windows of a date."""

    def test_breaks_are_subtracted(self, shared_rules, monday):
        resolver = ConstraintResolver(shared_rules)

        assert resolver.resolve(None, monday) == [Interval(540, 720), Interval(780, 1020)]

    def test_constraints_for_all_resources_are_subtracted(self, shared_rules, monday):
        constraint = DateConstraint(date=monday, window=Interval(900, 960))
        resolver = ConstraintResolver(shared_rules, [constraint])

        assert resolver.resolve("alice-id", monday) == [
            Interval(540, 720),
            Interval(780, 900),
            Interval(960, 1020),
        ]

    def test_resource_constraint_only_affects_that_resource(self, shared_rules, monday):
        constraint = DateConstraint(date=monday, window=Interval(540, 600), resource_id="alice-id")
        resolver = ConstraintResolver(shared_rules, [constraint])

        assert resolver.resolve("alice-id", monday)[0] == Interval(600, 720)
        assert resolver.resolve("bob-id", monday)[0] == Interval(540, 720)

    def test_constraint_on_other_date_is_ignored(self, shared_rules, monday):
        constraint = DateConstraint(date=monday.add(days=1), window=Interval(540, 1020))
        resolver = ConstraintResolver(shared_rules, [constraint])

        assert resolver.resolve(None, monday) == [Interval(540, 720), Interval(780, 1020)]

    def test_whole_day_constraint_closes_the_day(self, shared_rules, monday):
        constraint = DateConstraint(date=monday, window=Interval(0, 1439))
        resolver = ConstraintResolver(shared_rules, [constraint])

        assert resolver.resolve(None, monday) == []

    def test_weekly_windows_ignore_constraints(self, shared_rules, monday):
        constraint = DateConstraint(date=monday, window=Interval(0, 1439))
        resolver = ConstraintResolver(shared_rules, [constraint])

        assert resolver.weekly_windows(None, 1) == [Interval(540, 720), Interval(780, 1020)]


class TestIsBlocked:
    """Tests for the booking guard."""

    def test_start_inside_constraint_is_blocked(self, shared_rules, monday):
        constraint = DateConstraint(date=monday, window=Interval(720, 780))
        resolver = ConstraintResolver(shared_rules, [constraint])

        assert resolver.is_blocked(None, monday, 720)
        assert resolver.is_blocked(None, monday, 779)
        assert not resolver.is_blocked(None, monday, 780)
        assert not resolver.is_blocked(None, monday, 719)
