from __future__ import annotations

import csv
import logging
import os
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Iterator

from src.adapters.graph.transit_graph import ServiceCalendar, TransitGraph
from src.app.ports.output import IGraphRepository
from src.domain.algorithms.geo_utils import slice_polyline_between_points
from src.domain.models import GeoPoint, Hop, RouteVariant, Stop, TripRef, TripTimes

logger = logging.getLogger(__name__)

DEFAULT_AGENCY_ID = "1"
DEFAULT_TIMEZONE = "UTC"

_WEEKDAY_COLUMNS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def _parse_gtfs_time_to_seconds(raw: str) -> int:
    # GTFS time can be HH:MM:SS with HH possibly > 24.
    hh, mm, ss = raw.strip().split(":")
    return int(hh) * 3600 + int(mm) * 60 + int(ss)


def _parse_gtfs_date(raw: str) -> date:
    raw = raw.strip()
    return date(int(raw[0:4]), int(raw[4:6]), int(raw[6:8]))


def _rows(path: Path) -> Iterator[dict[str, str]]:
    if not path.exists():
        return
    with path.open("r", encoding="utf-8-sig", newline="") as fp:
        yield from csv.DictReader(fp)


def _field(row: dict[str, str], name: str) -> str:
    return (row.get(name) or "").strip()


@dataclass(slots=True)
class _TripRow:
    trip_id: str
    route_id: str
    service_id: str
    shape_id: str | None
    headsign: str | None


@dataclass(slots=True)
class GtfsGraphRepository(IGraphRepository):
    """Builds a transit graph snapshot from a directory of GTFS .txt files.

    Env vars:
      - GTFS_PATH: path to directory containing agency.txt, stops.txt,
        routes.txt, trips.txt, stop_times.txt and calendar(_dates).txt

    Stops and service ids are not agency scoped in GTFS. A stop is registered
    under each agency whose routes call at it (the first agency when none do)
    and calendars are registered for every agency.
    """

    base_path: str | Path | None = None

    def _base(self) -> Path:
        value = self.base_path or os.getenv("GTFS_PATH") or "data/gtfs"
        return Path(value)

    def load_graph(self) -> TransitGraph:
        base = self._base()
        if not (base / "stop_times.txt").exists():
            raise FileNotFoundError(f"No GTFS feed at {base}")

        graph = TransitGraph()

        for row in _rows(base / "agency.txt"):
            agency_id = _field(row, "agency_id") or DEFAULT_AGENCY_ID
            graph.add_agency(agency_id, _field(row, "agency_timezone") or DEFAULT_TIMEZONE)
        if not graph.agencies:
            graph.add_agency(DEFAULT_AGENCY_ID, DEFAULT_TIMEZONE)
        default_agency = next(iter(graph.agencies))

        stops: dict[str, Stop] = {}
        for row in _rows(base / "stops.txt"):
            stop_id = _field(row, "stop_id")
            if not stop_id:
                continue
            try:
                location = GeoPoint(
                    lat=float(row["stop_lat"]), lon=float(row["stop_lon"])
                )
            except (TypeError, ValueError, KeyError):
                continue
            stops[stop_id] = Stop(
                id=stop_id,
                name=_field(row, "stop_name") or stop_id,
                location=location,
                code=_field(row, "stop_code") or None,
            )

        route_agency: dict[str, str] = {}
        for row in _rows(base / "routes.txt"):
            route_id = _field(row, "route_id")
            if route_id:
                route_agency[route_id] = _field(row, "agency_id") or default_agency

        self._load_calendars(base, graph)

        trips: dict[str, _TripRow] = {}
        for row in _rows(base / "trips.txt"):
            trip_id = _field(row, "trip_id")
            if not trip_id:
                continue
            trips[trip_id] = _TripRow(
                trip_id=trip_id,
                route_id=_field(row, "route_id"),
                service_id=_field(row, "service_id"),
                shape_id=_field(row, "shape_id") or None,
                headsign=_field(row, "trip_headsign") or None,
            )

        shapes = self._load_shapes(base)

        # Build stop_times per trip with ordering.
        stop_times_by_trip: dict[str, list[tuple[int, str, int, int]]] = {}
        skipped: set[str] = set()
        for row in _rows(base / "stop_times.txt"):
            trip_id = _field(row, "trip_id")
            stop_id = _field(row, "stop_id")
            if not trip_id or not stop_id or trip_id in skipped:
                continue
            arr_raw = _field(row, "arrival_time")
            dep_raw = _field(row, "departure_time")
            if not arr_raw and not dep_raw:
                # Non-timepoint rows are not interpolated.
                skipped.add(trip_id)
                continue
            arr_s = _parse_gtfs_time_to_seconds(arr_raw or dep_raw)
            dep_s = _parse_gtfs_time_to_seconds(dep_raw or arr_raw)
            seq = int(_field(row, "stop_sequence") or 0)
            stop_times_by_trip.setdefault(trip_id, []).append((seq, stop_id, dep_s, arr_s))

        if skipped:
            logger.info("Skipped %d trips with untimed stop_times", len(skipped))

        # One variant per (agency, route, stop sequence).
        grouped: dict[tuple[str, str, tuple[str, ...]], list[TripTimes]] = {}
        shape_for_variant: dict[tuple[str, str, tuple[str, ...]], str] = {}
        for trip_id, entries in stop_times_by_trip.items():
            if trip_id in skipped:
                continue
            trip = trips.get(trip_id)
            if trip is None or len(entries) < 2:
                continue
            entries.sort(key=lambda x: x[0])
            agency_id = route_agency.get(trip.route_id, default_agency)
            stop_ids = tuple(e[1] for e in entries)
            key = (agency_id, trip.route_id, stop_ids)

            grouped.setdefault(key, []).append(
                TripTimes(
                    trip=TripRef(
                        agency_id=agency_id,
                        trip_id=trip_id,
                        route_id=trip.route_id,
                        service_id=trip.service_id,
                        headsign=trip.headsign,
                    ),
                    departure_offsets_s=tuple(e[2] for e in entries[:-1]),
                    arrival_offsets_s=tuple(e[3] for e in entries[1:]),
                )
            )
            if trip.shape_id and trip.shape_id in shapes:
                shape_for_variant.setdefault(key, trip.shape_id)

        served_by: dict[str, set[str]] = {}
        counters: dict[tuple[str, str], int] = {}
        for key, trip_times in grouped.items():
            agency_id, route_id, stop_ids = key
            n = counters.get((agency_id, route_id), 0)
            counters[(agency_id, route_id)] = n + 1

            trip_times.sort(key=lambda tt: (tt.departure_offsets_s[0], tt.trip.trip_id))
            shape_id = shape_for_variant.get(key)
            hops = self._build_hops(
                stops, stop_ids, shapes.get(shape_id) if shape_id else None
            )
            if hops is None:
                logger.warning(
                    "Skipping variant with unknown stops",
                    extra={"agency_id": agency_id, "route_id": route_id},
                )
                continue
            graph.add_variant(
                RouteVariant(
                    agency_id=agency_id,
                    route_id=route_id,
                    name=f"{agency_id}:{route_id}:{n}",
                    stop_ids=stop_ids,
                    hops=hops,
                    trips=tuple(trip_times),
                )
            )
            for stop_id in stop_ids:
                served_by.setdefault(stop_id, set()).add(agency_id)

        # A stop belongs to every agency serving it; unserved stops to the first.
        for stop_id, stop in stops.items():
            for agency_id in sorted(served_by.get(stop_id) or {default_agency}):
                graph.add_stop(replace(stop, agency_id=agency_id))

        logger.info(
            "Loaded transit graph from %s: %d stops, %d variants",
            base,
            len(graph.stops_by_key),
            len(graph.variants_by_name),
        )
        return graph.freeze()

    def _load_calendars(self, base: Path, graph: TransitGraph) -> None:
        weekly: dict[str, dict[str, object]] = {}
        for row in _rows(base / "calendar.txt"):
            service_id = _field(row, "service_id")
            if not service_id:
                continue
            weekly[service_id] = {
                "weekdays": tuple(_field(row, c) == "1" for c in _WEEKDAY_COLUMNS),
                "start_date": _parse_gtfs_date(row["start_date"]),
                "end_date": _parse_gtfs_date(row["end_date"]),
            }

        added: dict[str, set[date]] = {}
        removed: dict[str, set[date]] = {}
        for row in _rows(base / "calendar_dates.txt"):
            service_id = _field(row, "service_id")
            if not service_id:
                continue
            day = _parse_gtfs_date(row["date"])
            exception_type = _field(row, "exception_type")
            if exception_type == "1":
                added.setdefault(service_id, set()).add(day)
            elif exception_type == "2":
                removed.setdefault(service_id, set()).add(day)

        for service_id in set(weekly) | set(added) | set(removed):
            base_kwargs = weekly.get(service_id, {})
            for agency_id in graph.agencies:
                graph.add_calendar(
                    ServiceCalendar(
                        agency_id=agency_id,
                        service_id=service_id,
                        added=frozenset(added.get(service_id, ())),
                        removed=frozenset(removed.get(service_id, ())),
                        **base_kwargs,  # type: ignore[arg-type]
                    )
                )

    def _load_shapes(self, base: Path) -> dict[str, tuple[GeoPoint, ...]]:
        tmp: dict[str, list[tuple[int, GeoPoint]]] = {}
        for row in _rows(base / "shapes.txt"):
            shape_id = _field(row, "shape_id")
            if not shape_id:
                continue
            try:
                seq = int(row.get("shape_pt_sequence") or 0)
                lat = float(row["shape_pt_lat"])
                lon = float(row["shape_pt_lon"])
            except (TypeError, ValueError, KeyError):
                continue
            tmp.setdefault(shape_id, []).append((seq, GeoPoint(lat=lat, lon=lon)))

        shapes: dict[str, tuple[GeoPoint, ...]] = {}
        for shape_id, pts in tmp.items():
            pts.sort(key=lambda x: x[0])
            shapes[shape_id] = tuple(p for _, p in pts)
        return shapes

    def _build_hops(
        self,
        stops: dict[str, Stop],
        stop_ids: tuple[str, ...],
        shape: tuple[GeoPoint, ...] | None,
    ) -> tuple[Hop, ...] | None:
        locations: list[GeoPoint] = []
        for stop_id in stop_ids:
            stop = stops.get(stop_id)
            if stop is None:
                return None
            locations.append(stop.location)

        hops: list[Hop] = []
        cursor = 0
        for i, (a, b) in enumerate(zip(locations, locations[1:])):
            if shape:
                geometry, cursor = slice_polyline_between_points(
                    shape, start=a, end=b, from_index=cursor
                )
            else:
                geometry = (a, b)
            hops.append(
                Hop(
                    index=i,
                    from_stop_id=stop_ids[i],
                    to_stop_id=stop_ids[i + 1],
                    geometry=geometry,
                )
            )
        return tuple(hops)
