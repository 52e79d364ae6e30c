"""
Read-only client for the booking store's REST interface (PostgREST dialect).
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pendulum
import requests

from ..config import StoreConfig
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

Params = Sequence[Tuple[str, str]]


def _date_param(day: date) -> str:
    return pendulum.date(day.year, day.month, day.day).to_date_string()


class RestStoreClient:
    """
    Fetches operating hours, constraints and bookings from the remote store.

    Only reads are performed; booking a slot is handled elsewhere.
    """

    REST_PATH = "/rest/v1"

    def __init__(self, config: StoreConfig, session: Optional[requests.Session] = None):
        """
        Initialize the store client.

        Args:
            config: Store URL, API key and timeout
            session: Optional preconfigured session (mainly for tests)
        """
        if not config.is_configured:
            raise StoreError("No store URL configured. Set store.url in config.yaml or use a snapshot file.")

        self.config = config
        self.session = session or requests.Session()
        self.headers = {
            "apikey": config.api_key,
            "Authorization": f"Bearer {config.api_key}",
            "Accept": "application/json",
        }

    def _get(self, table: str, params: Params) -> List[Dict[str, Any]]:
        url = f"{self.config.url}{self.REST_PATH}/{table}"

        try:
            response = self.session.get(
                url,
                headers=self.headers,
                params=list(params),
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as exc:
            raise StoreError(f"Failed to fetch {table} from booking store: {exc}") from exc
        except ValueError as exc:
            raise StoreError(f"Booking store returned invalid JSON for {table}: {exc}") from exc

        if not isinstance(data, list):
            raise StoreError(f"Unexpected response for {table}: expected a list of rows")

        logger.debug("Fetched %d row(s) from %s", len(data), table)
        return data

    def get_operating_hours(self, day_of_week: int) -> List[OperatingHoursRule]:
        """Active business hours of every resource for a weekday (0=Sunday)."""
        rows = self._get(
            "business_hours",
            [("select", "*"), ("day_of_week", f"eq.{day_of_week}"), ("is_active", "eq.true")],
        )
        return to_domain(parse_rows(BusinessHoursRow, rows))

    def get_constraints(self, day: date) -> List[DateConstraint]:
        rows = self._get(
            "business_constraints",
            [("select", "*"), ("date", f"eq.{_date_param(day)}"), ("order", "start_time")],
        )
        return to_domain(parse_rows(ConstraintRow, rows))

    def get_bookings(self, day: date) -> List[BookedAppointment]:
        """Booked (not available) appointments of every resource on ``day``."""
        rows = self._get(
            "appointments",
            [
                ("select", "*"),
                ("slot_date", f"eq.{_date_param(day)}"),
                ("is_available", "eq.false"),
                ("order", "slot_time"),
            ],
        )
        return to_domain(parse_rows(AppointmentRow, rows))

    def get_bookings_between(self, start: date, end: date) -> List[BookedAppointment]:
        rows = self._get(
            "appointments",
            [
                ("select", "*"),
                ("slot_date", f"gte.{_date_param(start)}"),
                ("slot_date", f"lte.{_date_param(end)}"),
                ("is_available", "eq.false"),
                ("order", "slot_date,slot_time"),
            ],
        )
        return to_domain(parse_rows(AppointmentRow, rows))

    def get_recurring(self, day_of_week: int) -> List[RecurringAppointment]:
        rows = self._get(
            "recurring_appointments",
            [("select", "*"), ("day_of_week", f"eq.{day_of_week}")],
        )
        return to_domain(parse_rows(RecurringRow, rows))

    def get_buffer_minutes(self) -> int:
        """Mandatory gap between bookings, from the business profile."""
        rows = self._get("business_profile", [("select", "*"), ("limit", "1")])
        profiles = parse_rows(BusinessProfileRow, rows)
        if not profiles:
            return 0
        return profiles[0].buffer_minutes
