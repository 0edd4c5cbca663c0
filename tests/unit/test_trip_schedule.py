from __future__ import annotations

from datetime import date

import pytest

from src.domain.algorithms.trip_schedule import find_trip_times, subsequent_stop_times
from src.domain.exceptions import TripNotFound
from src.domain.models import EventPhase, GeoPoint, ServiceDay

T0 = 1_767_830_400  # 2026-01-08T00:00:00Z


def _day(base: int, *service_ids: str) -> ServiceDay:
    return ServiceDay(
        day=date(2026, 1, 8),
        agency_id="A",
        service_ids=frozenset(service_ids),
        time_base_s=base,
    )


@pytest.fixture
def variant(make_variant, make_trip):
    pts = tuple(GeoPoint(lat=0.0, lon=0.001 * i) for i in range(3))
    return make_variant(
        "A:R1:0",
        ("S1", "S2", "S3"),
        pts,
        (make_trip("T1", (28800, 29000), (28900, 29100)),),
    )


@pytest.mark.unit
def test_stop_times_from_first_stop(variant) -> None:
    days = [_day(T0 - 86400, "WK"), _day(T0, "WK"), _day(T0 + 86400, "WK")]

    times = subsequent_stop_times(variant, "T1", T0 + 3600, days)

    assert [(t.stop_id, t.time_s, t.phase) for t in times] == [
        ("S1", T0 + 28800, EventPhase.DEPARTURE),
        ("S2", T0 + 28900, EventPhase.ARRIVAL),
        ("S3", T0 + 29100, EventPhase.ARRIVAL),
    ]


@pytest.mark.unit
def test_stop_times_from_intermediate_stop(variant) -> None:
    times = subsequent_stop_times(
        variant, "T1", T0, [_day(T0, "WK")], first_stop_id="S2"
    )

    assert [(t.stop_id, t.time_s) for t in times] == [
        ("S2", T0 + 29000),
        ("S3", T0 + 29100),
    ]


@pytest.mark.unit
def test_next_run_is_taken_after_todays_departure(variant) -> None:
    days = [_day(T0, "WK"), _day(T0 + 86400, "WK")]

    times = subsequent_stop_times(variant, "T1", T0 + 30000, days)

    assert times[0].time_s == T0 + 86400 + 28800


@pytest.mark.unit
def test_trip_without_a_later_run_is_not_found(variant) -> None:
    with pytest.raises(TripNotFound):
        subsequent_stop_times(variant, "T1", T0 + 30000, [_day(T0, "WK")])
    with pytest.raises(TripNotFound):
        subsequent_stop_times(variant, "T1", T0, [_day(T0, "SAT")])


@pytest.mark.unit
def test_unknown_trip_or_stop_is_not_found(variant) -> None:
    assert find_trip_times(variant, "nope") is None
    with pytest.raises(TripNotFound):
        subsequent_stop_times(variant, "nope", T0, [_day(T0, "WK")])
    with pytest.raises(TripNotFound):
        subsequent_stop_times(variant, "T1", T0, [_day(T0, "WK")], first_stop_id="S9")
    # The last stop has no departure.
    with pytest.raises(TripNotFound):
        subsequent_stop_times(variant, "T1", T0, [_day(T0, "WK")], first_stop_id="S3")


@pytest.mark.unit
def test_departure_exactly_at_requested_time_is_kept(variant) -> None:
    days = [_day(T0 - 86400, "WK"), _day(T0, "WK")]

    times = subsequent_stop_times(variant, "T1", T0 + 28800, days)

    assert times[0].time_s == T0 + 28800
    with pytest.raises(TripNotFound):
        subsequent_stop_times(variant, "T1", T0 + 28801, days)
