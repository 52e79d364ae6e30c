"""
Domain layer - the availability engine and its value types. No I/O happens here.
"""

from .constraint_resolver import ConstraintResolver, day_of_week
from .busy_collector import BusyIntervalCollector
from .engine import (
    compute_available_slots,
    compute_day_availability,
    find_nearest_slots,
    is_blocked,
    list_recurring_times,
    next_days,
    resolve_service_duration,
)
from .exceptions import ConfigError, InvalidQueryError, SlotEngineError, StoreError
from .models import (
    AvailabilityQuery,
    AvailableSlot,
    BookedAppointment,
    DateConstraint,
    Interval,
    OperatingHoursRule,
    RecurringAppointment,
    ScopingMode,
)
from .slot_generator import SlotGenerator
from .time_arithmetic import add_minutes, format_time, parse_time

__all__ = [
    "AvailabilityQuery",
    "AvailableSlot",
    "BookedAppointment",
    "BusyIntervalCollector",
    "ConfigError",
    "ConstraintResolver",
    "DateConstraint",
    "Interval",
    "InvalidQueryError",
    "OperatingHoursRule",
    "RecurringAppointment",
    "ScopingMode",
    "SlotEngineError",
    "SlotGenerator",
    "StoreError",
    "add_minutes",
    "compute_available_slots",
    "compute_day_availability",
    "day_of_week",
    "find_nearest_slots",
    "format_time",
    "is_blocked",
    "list_recurring_times",
    "next_days",
    "parse_time",
    "resolve_service_duration",
]
