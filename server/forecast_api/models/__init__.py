"""Pydantic models for forecast API requests and responses."""
from .goals import SportGoalsIn, to_year_goals
from .forecast import (
    DailyPoint,
    ForecastRequest,
    ForecastResponse,
    MetricValues,
    RequiredPaceRequest,
    RequiredPaceResponse,
)
from .dashboard import (
    AthleteStatsResponse,
    DashboardRequest,
    DashboardResponse,
    NarrativeResponse,
)

__all__ = [
    "SportGoalsIn",
    "to_year_goals",
    "DailyPoint",
    "ForecastRequest",
    "ForecastResponse",
    "MetricValues",
    "RequiredPaceRequest",
    "RequiredPaceResponse",
    "AthleteStatsResponse",
    "DashboardRequest",
    "DashboardResponse",
    "NarrativeResponse",
]
