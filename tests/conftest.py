"""Pytest configuration and fixtures."""

import pendulum
import pytest

from slotengine.domain.models import Interval, OperatingHoursRule

# 2024-11-25 is a Monday; the store numbers weekdays 0=Sunday
MONDAY = 1
TUESDAY = 2


@pytest.fixture
def monday():
    return pendulum.date(2024, 11, 25)


@pytest.fixture
def shared_rules():
    """Business-wide hours Monday and Tuesday, 09:00-17:00 with a lunch break."""
    return [
        OperatingHoursRule(
            day_of_week=MONDAY,
            hours=Interval(540, 1020),
            breaks=(Interval(720, 780),),
        ),
        OperatingHoursRule(
            day_of_week=TUESDAY,
            hours=Interval(540, 1020),
            breaks=(Interval(720, 780),),
        ),
    ]


@pytest.fixture
def snapshot_data():
    """Store tables as they come back from the remote store."""
    return {
        "business_hours": [
            {
                "day_of_week": MONDAY,
                "start_time": "09:00:00",
                "end_time": "17:00:00",
                "break_start_time": "12:00",
                "break_end_time": "13:00",
                "slot_duration_minutes": 60,
                "is_active": True,
                "user_id": None,
            },
            {
                "day_of_week": MONDAY,
                "start_time": "10:00",
                "end_time": "14:00",
                "breaks": [],
                "slot_duration_minutes": 30,
                "is_active": True,
                "user_id": "alice-id",
            },
            {
                "day_of_week": TUESDAY,
                "start_time": "09:00",
                "end_time": "12:00",
                "is_active": False,
                "user_id": None,
            },
        ],
        "business_constraints": [
            {"date": "2024-11-25", "start_time": "16:00", "end_time": "17:00", "reason": "Staff meeting"},
        ],
        "appointments": [
            {"slot_date": "2024-11-25", "slot_time": "10:00", "duration_minutes": 60, "is_available": False, "user_id": None},
            {"slot_date": "2024-11-25", "slot_time": "11:00", "duration_minutes": 30, "is_available": False, "user_id": "alice-id"},
            {"slot_date": "2024-11-25", "slot_time": "14:00", "duration_minutes": 60, "is_available": True, "user_id": None},
            {"slot_date": "2024-11-26", "slot_time": "09:00", "duration_minutes": 60, "is_available": False, "user_id": None},
        ],
        "recurring_appointments": [
            {"day_of_week": MONDAY, "slot_time": "13:00", "duration_minutes": 30, "user_id": "alice-id"},
        ],
        "business_profile": {"break": 0},
    }
