from __future__ import annotations

import os
from dataclasses import dataclass

from src.domain.algorithms.stop_events import MAX_STOP_TIME_QUERY_INTERVAL_S
from src.domain.algorithms.trip_locator import (
    DEFAULT_MAX_RESULTS,
    DEGENERATE_LENGTH_M,
    MAX_TIME_DELTA_S,
    MIN_HOP_DURATION_S,
    LocatorParams,
)

STOP_SEARCH_RADIUS_M = 200.0


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else default


@dataclass(frozen=True, slots=True)
class QuerySettings:
    """Tuning knobs for transit queries; overridable via env without code changes."""

    max_stop_time_interval_s: int = MAX_STOP_TIME_QUERY_INTERVAL_S
    default_window_s: int = 86400
    default_max_results: int = DEFAULT_MAX_RESULTS
    min_hop_duration_s: int = MIN_HOP_DURATION_S
    max_time_delta_s: int = MAX_TIME_DELTA_S
    degenerate_length_m: float = DEGENERATE_LENGTH_M
    stop_search_radius_m: float = STOP_SEARCH_RADIUS_M

    @staticmethod
    def from_env() -> "QuerySettings":
        return QuerySettings(
            max_stop_time_interval_s=_env_int(
                "MAX_STOP_TIME_QUERY_INTERVAL_S", MAX_STOP_TIME_QUERY_INTERVAL_S
            ),
            default_window_s=_env_int("DEFAULT_STOP_TIME_WINDOW_S", 86400),
            default_max_results=_env_int("TRIP_MATCH_MAX_RESULTS", DEFAULT_MAX_RESULTS),
            min_hop_duration_s=_env_int("TRIP_MATCH_MIN_HOP_DURATION_S", MIN_HOP_DURATION_S),
            max_time_delta_s=_env_int("TRIP_MATCH_MAX_TIME_DELTA_S", MAX_TIME_DELTA_S),
            degenerate_length_m=_env_float(
                "TRIP_MATCH_DEGENERATE_LENGTH_M", DEGENERATE_LENGTH_M
            ),
            stop_search_radius_m=_env_float("STOP_SEARCH_RADIUS_M", STOP_SEARCH_RADIUS_M),
        )

    @property
    def locator_params(self) -> LocatorParams:
        return LocatorParams(
            min_hop_duration_s=self.min_hop_duration_s,
            max_time_delta_s=self.max_time_delta_s,
            degenerate_length_m=self.degenerate_length_m,
        )
