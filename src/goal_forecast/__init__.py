"""
Goal Forecast Module.

Deterministic engine that turns an athlete's activities into yearly goal
progress, weekly-pace trends and year-end projections.
"""

from .adapters import ActivitySource, ProviderActivity, adapt_activities, from_cached, from_provider
from .aggregator import aggregate_year
from .calendar_math import days_in_year
from .dashboard import build_dashboard_model, build_year_dashboard
from .forecast import (
    DailyDataPoint,
    ForecastInput,
    ForecastResult,
    ForecastStatus,
    build_year_forecast,
    calculate_forecast,
)
from .goal_status import GoalStatus, calculate_goal_status
from .insights import build_narrative, derive_metric_facts
from .models import (
    AggregateYear,
    ForecastMode,
    GoalMetric,
    MetricTotals,
    NormalizedActivity,
    Sport,
    SportGoals,
    YearGoals,
)
from .normalizer import normalize_activities
from .pace import compute_required_per_week, enrich_snapshot, get_time_context
from .ui_stats import UiAthleteStats, UiGoalProgress, build_ui_athlete_stats

__all__ = [
    "ActivitySource",
    "ProviderActivity",
    "adapt_activities",
    "from_cached",
    "from_provider",
    "aggregate_year",
    "days_in_year",
    "build_dashboard_model",
    "build_year_dashboard",
    "DailyDataPoint",
    "ForecastInput",
    "ForecastResult",
    "ForecastStatus",
    "build_year_forecast",
    "calculate_forecast",
    "GoalStatus",
    "calculate_goal_status",
    "build_narrative",
    "derive_metric_facts",
    "AggregateYear",
    "ForecastMode",
    "GoalMetric",
    "MetricTotals",
    "NormalizedActivity",
    "Sport",
    "SportGoals",
    "YearGoals",
    "normalize_activities",
    "compute_required_per_week",
    "enrich_snapshot",
    "get_time_context",
    "UiAthleteStats",
    "UiGoalProgress",
    "build_ui_athlete_stats",
]
