from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from src.app.ports.output import ICalendarService
from src.domain.exceptions import UnknownStopOrRoute

from .transit_graph import ServiceCalendar, TransitGraph


@dataclass(slots=True)
class GtfsCalendarService(ICalendarService):
    transit_graph: TransitGraph

    _by_agency: dict[str, tuple[ServiceCalendar, ...]] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        grouped: dict[str, list[ServiceCalendar]] = {}
        for (agency_id, _), cal in self.transit_graph.calendars.items():
            grouped.setdefault(agency_id, []).append(cal)
        self._by_agency = {a: tuple(cals) for a, cals in grouped.items()}

    def service_ids_on(self, agency_id: str, day: date) -> frozenset[str]:
        return frozenset(
            cal.service_id
            for cal in self._by_agency.get(agency_id, ())
            if cal.runs_on(day)
        )

    def timezone_for_agency(self, agency_id: str) -> str:
        tz = self.transit_graph.agencies.get(agency_id)
        if tz is None:
            raise UnknownStopOrRoute(f"Unknown agency: {agency_id}")
        return tz
