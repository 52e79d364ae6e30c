"""
slotengine - appointment slot availability engine.

Computes bookable start times for a resource from its operating hours,
breaks, blackout constraints and existing bookings.
"""

from .domain import (
    AvailabilityQuery,
    AvailableSlot,
    BookedAppointment,
    DateConstraint,
    Interval,
    OperatingHoursRule,
    ScopingMode,
    compute_available_slots,
    compute_day_availability,
)

__version__ = "0.1.0"

__all__ = [
    "AvailabilityQuery",
    "AvailableSlot",
    "BookedAppointment",
    "DateConstraint",
    "Interval",
    "OperatingHoursRule",
    "ScopingMode",
    "compute_available_slots",
    "compute_day_availability",
    "__version__",
]
