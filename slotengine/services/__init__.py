"""
Service layer - async orchestration of store reads and engine calls.
"""

from .availability_service import AvailabilityService, BookingStoreProtocol, DaySnapshot
from .window_cache import WindowCache

__all__ = ["AvailabilityService", "BookingStoreProtocol", "DaySnapshot", "WindowCache"]
