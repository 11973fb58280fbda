"""
Goal Forecast Engine.

Two forecasts live here:
- calculate_forecast: day-granular projection of one metric against a
  yearly goal, with a 30-day trend, a days-ahead signal, a status badge and
  monthly sample lines for sparklines.
- build_year_forecast: simple linear year-end projection per metric from
  an AggregateYear, used by the dashboard model.

Both are pure: "today" / "as of" are always parameters.
"""

import calendar
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional, Union

from .calendar_math import (
    day_of_year,
    days_in_year,
    end_of_year,
    js_round,
    parse_iso_date,
    parse_local_datetime,
    start_of_year,
    whole_days_between,
)
from .models import AggregateYear, GoalMetric, Sport, YearGoals

logger = logging.getLogger(__name__)

TREND_LOOKBACK_DAYS = 30
MIN_TREND_POINTS = 7
DANGER_DEVIATION_PERCENT = -30.0
SAMPLE_DAY_OF_MONTH = 15


class ForecastStatus(str, Enum):
    """Badge status for a day-granular forecast."""

    ON_TRACK = "on-track"
    WARNING = "warning"
    DANGER = "danger"


@dataclass
class DailyDataPoint:
    """One day of a metric series (date as YYYY-MM-DD)."""

    date: str
    value: float


@dataclass
class Point:
    """Sparkline point: x is progress through the year (0..1)."""

    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class ForecastLines:
    ideal: List[Point] = field(default_factory=list)
    actual: List[Point] = field(default_factory=list)
    forecast: List[Point] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "ideal": [p.to_dict() for p in self.ideal],
            "actual": [p.to_dict() for p in self.actual],
            "forecast": [p.to_dict() for p in self.forecast],
        }


@dataclass
class ForecastInput:
    """Inputs of calculate_forecast."""

    goal_value: float
    current_value: float
    today: Union[date, datetime]
    year: Optional[int] = None
    daily_series: Optional[List[DailyDataPoint]] = None
    activity_count_by_day: Optional[List[DailyDataPoint]] = None


@dataclass
class ForecastResult:
    """Day-granular forecast of one metric."""

    expected_today: float
    delta: float
    days_ahead: float
    label: str
    status: ForecastStatus
    trend_per_day: float
    trend_per_week: float
    forecast_eoy: float
    required_per_week: float
    lines: ForecastLines
    per_unit: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "expectedToday": self.expected_today,
            "delta": self.delta,
            "daysAhead": self.days_ahead,
            "label": self.label,
            "status": self.status.value,
            "trendPerDay": self.trend_per_day,
            "trendPerWeek": self.trend_per_week,
            "forecastEOY": self.forecast_eoy,
            "requiredPerWeek": self.required_per_week,
            "perUnit": self.per_unit,
            "lines": self.lines.to_dict(),
        }


def _clamp(n: float, low: float = 0.0, high: float = math.inf) -> float:
    return max(low, min(high, n))


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def _parse_series(series: Optional[List[DailyDataPoint]]) -> List[tuple]:
    """Return (date, value) pairs, skipping points with unparseable dates."""
    parsed = []
    for point in series or []:
        try:
            parsed.append((parse_iso_date(point.date), float(point.value or 0)))
        except (TypeError, ValueError):
            logger.debug(f"[FORECAST] Skipping series point with bad date {point.date!r}")
    return parsed


def _sum_since(series: List[tuple], cutoff: date) -> float:
    return sum(value for day, value in series if day >= cutoff)


def calculate_trend_per_day(
    series: List[tuple],
    current_value: float,
    today: date,
    lookback_days: int = TREND_LOOKBACK_DAYS,
) -> float:
    """
    Average daily progress over the last lookback_days calendar days.

    Divides by calendar days, not by days with an activity, so sparse
    training yields a lower rate. Falls back to the YTD average per calendar
    day when the series is short or has no recent points.
    """
    doy = day_of_year(today)
    ytd_average = current_value / doy if doy > 0 else 0.0

    if len(series) < MIN_TREND_POINTS:
        return ytd_average

    cutoff = today - timedelta(days=lookback_days)
    recent = [(day, value) for day, value in series if day >= cutoff]
    if not recent:
        return ytd_average

    return sum(value for _, value in recent) / lookback_days


def generate_monthly_points(
    year: int,
    goal_value: float,
    current_value: float,
    trend_per_day: float,
    today: date,
    series: List[tuple],
) -> ForecastLines:
    """Sample ideal/actual/forecast lines on the 15th of each month."""
    year_len = days_in_year(year)
    doy_today = day_of_year(today)
    lines = ForecastLines()

    for month in range(1, 13):
        doy_month = day_of_year(date(year, month, SAMPLE_DAY_OF_MONTH))
        progress = doy_month / year_len

        lines.ideal.append(Point(x=progress, y=_clamp(goal_value * progress)))

        if series:
            month_end = date(year, month, calendar.monthrange(year, month)[1])
            actual_value = sum(value for day, value in series if day <= month_end)
        elif doy_month <= doy_today:
            actual_value = current_value * (doy_month / doy_today)
        else:
            actual_value = current_value
        actual_value = _clamp(actual_value)
        lines.actual.append(Point(x=progress, y=actual_value))

        if doy_month <= doy_today:
            lines.forecast.append(Point(x=progress, y=actual_value))
        else:
            days_until = doy_month - doy_today
            lines.forecast.append(
                Point(x=progress, y=_clamp(current_value + trend_per_day * days_until))
            )

    return lines


def classify_status(days_ahead: float, delta: float, expected_today: float) -> ForecastStatus:
    """on-track when ahead; when behind, danger past 30% deviation, else warning."""
    if days_ahead >= 0 or expected_today <= 0:
        return ForecastStatus.ON_TRACK
    deviation_percent = delta / expected_today * 100
    if deviation_percent < DANGER_DEVIATION_PERCENT:
        return ForecastStatus.DANGER
    return ForecastStatus.WARNING


def format_days_label(days_ahead: float) -> str:
    if days_ahead >= 0:
        return f"{js_round(days_ahead, 0)} days ahead"
    return f"{js_round(abs(days_ahead), 0)} days behind"


def calculate_forecast(forecast_input: ForecastInput) -> ForecastResult:
    """
    Calculate the day-granular forecast for one metric.

    Args:
        forecast_input: Goal, current value, today and optional daily series

    Returns:
        ForecastResult with rounded values and monthly sample lines
    """
    today = _as_date(forecast_input.today)
    year = forecast_input.year or today.year
    goal_value = max(0.0, float(forecast_input.goal_value or 0))
    current_value = max(0.0, float(forecast_input.current_value or 0))
    series = _parse_series(forecast_input.daily_series)

    year_len = days_in_year(year)
    doy = day_of_year(today)

    per_day_ideal = goal_value / year_len
    expected_today = per_day_ideal * doy
    delta = current_value - expected_today
    days_ahead = delta / per_day_ideal if per_day_ideal > 0 else 0.0

    trend_per_day = calculate_trend_per_day(series, current_value, today)

    days_left = year_len - doy
    forecast_eoy = _clamp(current_value + trend_per_day * days_left)

    per_unit = None
    counts = _parse_series(forecast_input.activity_count_by_day)
    if series and counts:
        cutoff = today - timedelta(days=TREND_LOOKBACK_DAYS)
        recent_count = _sum_since(counts, cutoff)
        if recent_count > 0:
            per_unit = js_round(_sum_since(series, cutoff) / recent_count, 2)

    remaining = max(goal_value - current_value, 0.0)
    required_per_week = remaining / max(days_left, 1) * 7

    status = classify_status(days_ahead, delta, expected_today)

    logger.debug(
        f"[FORECAST] goal={goal_value} current={current_value} day={doy}/{year_len} "
        f"days_ahead={days_ahead:.1f} status={status.value}"
    )

    return ForecastResult(
        expected_today=js_round(expected_today, 1),
        delta=js_round(delta, 1),
        days_ahead=js_round(days_ahead, 1),
        label=format_days_label(days_ahead),
        status=status,
        trend_per_day=js_round(trend_per_day, 2),
        trend_per_week=js_round(trend_per_day * 7, 2),
        forecast_eoy=js_round(forecast_eoy, 1),
        required_per_week=js_round(required_per_week, 2),
        lines=generate_monthly_points(
            year, goal_value, current_value, trend_per_day, today, series
        ),
        per_unit=per_unit,
    )


# =============================================================================
# Linear year forecast
# =============================================================================


@dataclass
class ForecastMetric:
    """Linear year-end projection of one metric."""

    ytd: float
    projected_year_end: float
    required_per_week: float
    on_track: bool
    goal: Optional[float] = None
    percent: Optional[float] = None  # 0..1

    def to_dict(self) -> dict:
        return {
            "goal": self.goal,
            "ytd": self.ytd,
            "percent": self.percent,
            "projectedYearEnd": self.projected_year_end,
            "requiredPerWeek": self.required_per_week,
            "onTrack": self.on_track,
        }


@dataclass
class YearForecast:
    year: int
    sport: Sport
    as_of_date_local: str
    count: ForecastMetric
    distance_km: ForecastMetric
    elevation_m: ForecastMetric

    def metric(self, metric: GoalMetric) -> ForecastMetric:
        if metric == GoalMetric.COUNT:
            return self.count
        if metric == GoalMetric.DISTANCE_KM:
            return self.distance_km
        return self.elevation_m

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "sport": self.sport.value,
            "asOfDateLocal": self.as_of_date_local,
            "count": self.count.to_dict(),
            "distanceKm": self.distance_km.to_dict(),
            "elevationM": self.elevation_m.to_dict(),
        }


def _make_metric(
    ytd: float,
    goal: Optional[float],
    projected: float,
    required_per_week: float,
) -> ForecastMetric:
    return ForecastMetric(
        goal=goal,
        ytd=ytd,
        percent=min(1.0, ytd / goal) if goal else None,
        projected_year_end=projected,
        required_per_week=required_per_week,
        on_track=projected >= goal if goal else True,
    )


def build_year_forecast(
    aggregate: AggregateYear,
    goals: Optional[YearGoals],
    as_of_date_local: str,
) -> YearForecast:
    """
    Project year-end totals linearly from the YTD daily average.

    Goals are only applied when they belong to the aggregate's year.
    """
    as_of = parse_local_datetime(as_of_date_local)
    year = aggregate.year
    soy = start_of_year(year)
    eoy = end_of_year(year)

    days_elapsed = max(1, whole_days_between(soy, as_of) + 1)
    days_remaining = whole_days_between(as_of, eoy)
    weeks_remaining = max(1, math.ceil(days_remaining / 7))
    total_days = whole_days_between(soy, eoy) + 1

    sport_goals = goals.for_sport(aggregate.sport) if goals and goals.year == year else None

    metrics = {}
    for metric in GoalMetric:
        ytd = aggregate.totals.value_for(metric)
        goal = sport_goals.get(metric) if sport_goals else None
        projected = ytd / days_elapsed * total_days
        required = max(0.0, (goal - ytd) / weeks_remaining) if goal else 0.0
        metrics[metric] = _make_metric(ytd, goal, projected, required)

    return YearForecast(
        year=year,
        sport=aggregate.sport,
        as_of_date_local=as_of_date_local,
        count=metrics[GoalMetric.COUNT],
        distance_km=metrics[GoalMetric.DISTANCE_KM],
        elevation_m=metrics[GoalMetric.ELEVATION_M],
    )
