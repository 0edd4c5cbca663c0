from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date


class ICalendarService(ABC):
    """Port for service calendars (which service ids run on which day)."""

    @abstractmethod
    def service_ids_on(self, agency_id: str, day: date) -> frozenset[str]:
        raise NotImplementedError

    @abstractmethod
    def timezone_for_agency(self, agency_id: str) -> str:
        """IANA timezone name whose local days bound the agency's service days."""
