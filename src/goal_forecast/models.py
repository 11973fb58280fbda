"""
Data models for the goal forecasting engine.

This module defines the data structures shared by every engine stage:
- NormalizedActivity: one training session in canonical shape
- MetricTotals: additive accumulator for count/distance/elevation/time
- MonthBuckets: per-month totals (slot 0 unused)
- AggregateYear: per (year, sport) summary with rolling windows
- SportGoals / YearGoals: user-set targets, None meaning "not set"
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Sport(str, Enum):
    """Supported sports. Anything else is dropped during normalization."""

    RUN = "run"
    RIDE = "ride"


class GoalMetric(str, Enum):
    """Metrics a yearly goal can be set on."""

    DISTANCE_KM = "distanceKm"
    COUNT = "count"
    ELEVATION_M = "elevationM"


class ForecastMode(str, Enum):
    """Weekly-rate strategy used by the UI progress forecast."""

    YTD = "ytd"
    ROLLING28 = "rolling28"
    BLEND = "blend"


@dataclass(frozen=True)
class NormalizedActivity:
    """Canonical activity. Calendar fields are cached at normalization time."""

    id: str
    sport: Sport
    start_date_local: str
    year: int
    month: int  # 1..12
    day_of_year: int  # 1..366
    distance_km: float
    elevation_m: float
    moving_time_sec: float
    is_commute: bool = False
    is_indoor: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sport": self.sport.value,
            "startDateLocal": self.start_date_local,
            "year": self.year,
            "month": self.month,
            "dayOfYear": self.day_of_year,
            "distanceKm": self.distance_km,
            "elevationM": self.elevation_m,
            "movingTimeSec": self.moving_time_sec,
            "isCommute": self.is_commute,
            "isIndoor": self.is_indoor,
        }


@dataclass
class MetricTotals:
    """Additive totals over a set of activities."""

    count: int = 0
    distance_km: float = 0.0
    elevation_m: float = 0.0
    moving_time_hours: float = 0.0

    def add_activity(self, activity: NormalizedActivity) -> "MetricTotals":
        """Return new totals including one more activity."""
        return MetricTotals(
            count=self.count + 1,
            distance_km=self.distance_km + activity.distance_km,
            elevation_m=self.elevation_m + activity.elevation_m,
            moving_time_hours=self.moving_time_hours + activity.moving_time_sec / 3600,
        )

    def __add__(self, other: "MetricTotals") -> "MetricTotals":
        return MetricTotals(
            count=self.count + other.count,
            distance_km=self.distance_km + other.distance_km,
            elevation_m=self.elevation_m + other.elevation_m,
            moving_time_hours=self.moving_time_hours + other.moving_time_hours,
        )

    def value_for(self, metric: GoalMetric) -> float:
        """Return the total tracked for a goal metric."""
        if metric == GoalMetric.COUNT:
            return self.count
        if metric == GoalMetric.DISTANCE_KM:
            return self.distance_km
        return self.elevation_m

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "distanceKm": self.distance_km,
            "elevationM": self.elevation_m,
            "movingTimeHours": self.moving_time_hours,
        }


def _empty_months() -> List[float]:
    # index 0 stays zero, 1..12 are months
    return [0] * 13


@dataclass
class MonthBuckets:
    """Per-month totals, 1-indexed."""

    count: List[int] = field(default_factory=_empty_months)
    distance_km: List[float] = field(default_factory=_empty_months)
    elevation_m: List[float] = field(default_factory=_empty_months)
    moving_time_hours: List[float] = field(default_factory=_empty_months)

    def add_activity(self, activity: NormalizedActivity) -> None:
        m = activity.month
        self.count[m] += 1
        self.distance_km[m] += activity.distance_km
        self.elevation_m[m] += activity.elevation_m
        self.moving_time_hours[m] += activity.moving_time_sec / 3600

    def to_dict(self) -> dict:
        return {
            "count": list(self.count),
            "distanceKm": list(self.distance_km),
            "elevationM": list(self.elevation_m),
            "movingTimeHours": list(self.moving_time_hours),
        }


@dataclass
class AggregateYear:
    """Summary of one sport in one year, relative to an explicit as-of instant."""

    year: int
    sport: Sport
    totals: MetricTotals
    by_month: MonthBuckets
    last7: MetricTotals
    last28: MetricTotals
    last_activity_date_local: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "sport": self.sport.value,
            "totals": self.totals.to_dict(),
            "byMonth": self.by_month.to_dict(),
            "rolling": {
                "last7": self.last7.to_dict(),
                "last28": self.last28.to_dict(),
            },
            "lastActivityDateLocal": self.last_activity_date_local,
        }


@dataclass
class SportGoals:
    """Goals for one sport. None means no goal is set for that metric."""

    distance_km: Optional[float] = None
    count: Optional[int] = None
    elevation_m: Optional[float] = None

    def get(self, metric: GoalMetric) -> Optional[float]:
        if metric == GoalMetric.DISTANCE_KM:
            return self.distance_km
        if metric == GoalMetric.COUNT:
            return self.count
        return self.elevation_m

    def is_empty(self) -> bool:
        return self.distance_km is None and self.count is None and self.elevation_m is None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "SportGoals":
        """Build from a camelCase mapping; missing or null keys stay unset."""
        data = data or {}
        return cls(
            distance_km=data.get("distanceKm"),
            count=data.get("count"),
            elevation_m=data.get("elevationM"),
        )

    def to_dict(self) -> dict:
        out = {}
        if self.distance_km is not None:
            out["distanceKm"] = self.distance_km
        if self.count is not None:
            out["count"] = self.count
        if self.elevation_m is not None:
            out["elevationM"] = self.elevation_m
        return out


@dataclass
class YearGoals:
    """User-set targets for a year, keyed by sport."""

    year: int
    per_sport: Dict[Sport, SportGoals] = field(default_factory=dict)

    def for_sport(self, sport: Sport) -> SportGoals:
        return self.per_sport.get(sport) or SportGoals()

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "perSport": {s.value: g.to_dict() for s, g in self.per_sport.items()},
        }
