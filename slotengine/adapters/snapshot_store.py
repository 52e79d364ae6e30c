"""
Booking store backed by a local snapshot file.

A snapshot holds the same tables as the remote store (``business_hours``,
``business_constraints``, ``appointments``, ``recurring_appointments`` and
``business_profile``) and is handy for offline runs and tests.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..domain.exceptions import StoreError
from ..domain.models import (
    BookedAppointment,
    DateConstraint,
    OperatingHoursRule,
    RecurringAppointment,
)
from .rows import (
    AppointmentRow,
    BusinessHoursRow,
    BusinessProfileRow,
    ConstraintRow,
    RecurringRow,
    parse_rows,
    to_domain,
)

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Store that serves rows from a YAML or JSON file.

    The file is read once; every query filters the parsed rows in memory.
    """

    def __init__(self, data: Dict[str, Any]):
        self.rules: List[OperatingHoursRule] = to_domain(
            parse_rows(BusinessHoursRow, data.get("business_hours"))
        )
        self.constraints: List[DateConstraint] = to_domain(
            parse_rows(ConstraintRow, data.get("business_constraints"))
        )
        self.bookings: List[BookedAppointment] = to_domain(
            parse_rows(AppointmentRow, data.get("appointments"))
        )
        self.recurring: List[RecurringAppointment] = to_domain(
            parse_rows(RecurringRow, data.get("recurring_appointments"))
        )

        profile = data.get("business_profile") or {}
        profiles = parse_rows(BusinessProfileRow, [profile])
        self.buffer_minutes = profiles[0].buffer_minutes if profiles else 0

    @classmethod
    def from_file(cls, path: Path) -> "SnapshotStore":
        """
        Load a snapshot from ``path``.

        Raises:
            FileNotFoundError: If the file doesn't exist
            StoreError: If the file cannot be parsed
        """
        if not path.exists():
            raise FileNotFoundError(f"Snapshot file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise StoreError(f"Could not parse snapshot {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StoreError("Snapshot file must contain a mapping of tables at the root level.")

        logger.debug("Loaded snapshot %s", path)
        return cls(data)

    def get_operating_hours(self, day_of_week: int) -> List[OperatingHoursRule]:
        return [rule for rule in self.rules if rule.day_of_week == day_of_week and rule.is_active]

    def get_constraints(self, day: date) -> List[DateConstraint]:
        return [constraint for constraint in self.constraints if constraint.date == day]

    def get_bookings(self, day: date) -> List[BookedAppointment]:
        return [booking for booking in self.bookings if booking.date == day]

    def get_bookings_between(self, start: date, end: date) -> List[BookedAppointment]:
        return [booking for booking in self.bookings if start <= booking.date <= end]

    def get_recurring(self, day_of_week: int) -> List[RecurringAppointment]:
        return [item for item in self.recurring if item.day_of_week == day_of_week]

    def get_buffer_minutes(self) -> int:
        return self.buffer_minutes
