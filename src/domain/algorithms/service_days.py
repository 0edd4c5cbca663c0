from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from src.domain.models import ServiceDay

if TYPE_CHECKING:
    from src.app.ports.output import ICalendarService


def service_day_time_base(day: date, tz: ZoneInfo) -> int:
    """Epoch seconds of 'noon minus 12h' on day, local to tz.

    This is midnight except on DST switch days, where GTFS offsets still
    count from noon minus 12 hours.
    """

    noon = datetime.combine(day, time(12, 0), tzinfo=tz)
    return int(noon.timestamp()) - 12 * 3600


def local_date(epoch_s: int, tz: ZoneInfo) -> date:
    return datetime.fromtimestamp(int(epoch_s), tz=timezone.utc).astimezone(tz).date()


def _service_day(
    day: date, agency_id: str, calendar: ICalendarService, tz: ZoneInfo
) -> ServiceDay:
    return ServiceDay(
        day=day,
        agency_id=agency_id,
        service_ids=frozenset(calendar.service_ids_on(agency_id, day)),
        time_base_s=service_day_time_base(day, tz),
    )


def service_day_for(
    epoch_s: int, agency_id: str, calendar: ICalendarService
) -> ServiceDay:
    tz = ZoneInfo(calendar.timezone_for_agency(agency_id))
    return _service_day(local_date(epoch_s, tz), agency_id, calendar, tz)


def resolve_service_days(
    reference_s: int, agency_id: str, calendar: ICalendarService
) -> tuple[ServiceDay, ServiceDay, ServiceDay]:
    """Yesterday, today and tomorrow relative to reference_s for an agency.

    Trips running past midnight belong to the previous service day, so
    callers check all three. Days are stepped on the local calendar, so a
    23h or 25h DST day is never skipped or repeated.
    """

    tz = ZoneInfo(calendar.timezone_for_agency(agency_id))
    local_today = local_date(reference_s, tz)
    yesterday, today, tomorrow = (
        _service_day(local_today + timedelta(days=delta), agency_id, calendar, tz)
        for delta in (-1, 0, 1)
    )
    return (yesterday, today, tomorrow)
