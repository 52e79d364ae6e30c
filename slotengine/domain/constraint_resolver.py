"""
Resolves the open windows of one resource on one date.
"""

import logging
from datetime import date
from typing import List, Optional, Sequence

from .models import DateConstraint, Interval, OperatingHoursRule
from .window_set import subtract_all

logger = logging.getLogger(__name__)


def day_of_week(day: date) -> int:
    """Day of week in the store's convention (0=Sunday, 6=Saturday)."""
    return day.isoweekday() % 7


class ConstraintResolver:
    """
    Builds the effective open-window set for a (resource, date) pair.

    Algorithm:
    1. Pick the operating-hours rule (resource rule first, shared rule second)
    2. Start from the rule's base hours
    3. Subtract the rule's recurring breaks
    4. Subtract date constraints for this resource or for all resources
    """

    def __init__(
        self,
        rules: Sequence[OperatingHoursRule],
        constraints: Sequence[DateConstraint] = (),
    ):
        self.rules = list(rules)
        self.constraints = list(constraints)

    def select_rule(
        self,
        resource_id: Optional[str],
        weekday: int,
    ) -> OperatingHoursRule | None:
        """
        Find the active rule for a resource and weekday.

        Falls back to the shared rule (resource_id None) when the resource has
        no rule of its own. Returns None when the resource is closed.
        """
        candidates = [
            rule for rule in self.rules
            if rule.is_active and rule.day_of_week == weekday
        ]

        if resource_id is not None:
            for rule in candidates:
                if rule.resource_id == resource_id:
                    return rule

        for rule in candidates:
            if rule.resource_id is None:
                return rule

        return None

    def weekly_windows(self, resource_id: Optional[str], weekday: int) -> List[Interval]:
        """Open windows of a weekday before any date-specific constraint."""
        rule = self.select_rule(resource_id, weekday)
        if rule is None:
            logger.debug("No operating hours for resource %s on weekday %d", resource_id, weekday)
            return []

        return subtract_all([rule.hours], rule.breaks)

    def constraints_for(self, resource_id: Optional[str], day: date) -> List[DateConstraint]:
        return [
            constraint for constraint in self.constraints
            if constraint.date == day and constraint.applies_to(resource_id)
        ]

    def resolve(self, resource_id: Optional[str], day: date) -> List[Interval]:
        """Return the disjoint, time-ordered open windows for ``day``."""
        windows = self.weekly_windows(resource_id, day_of_week(day))
        if not windows:
            return []

        cuts = [constraint.window for constraint in self.constraints_for(resource_id, day)]
        return subtract_all(windows, cuts)

    def is_blocked(self, resource_id: Optional[str], day: date, minute: int) -> bool:
        """Check whether a start time falls inside a blackout constraint."""
        return any(
            constraint.window.start <= minute < constraint.window.end
            for constraint in self.constraints_for(resource_id, day)
        )
