"""Day-granular forecast and required-pace models."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from goal_forecast.forecast import ForecastStatus
from goal_forecast.models import GoalMetric, Sport

from .goals import SportGoalsIn


class DailyPoint(BaseModel):
    """One day of a metric series."""

    date: str
    value: float = 0.0


class ForecastRequest(BaseModel):
    """Inputs of the day-granular forecast."""

    model_config = ConfigDict(populate_by_name=True)

    goal_value: float = Field(ge=0, alias="goalValue")
    current_value: float = Field(ge=0, alias="currentValue")
    today: str
    year: Optional[int] = Field(default=None, ge=2000, le=2100)
    daily_series: Optional[list[DailyPoint]] = Field(default=None, alias="dailySeries")
    activity_count_by_day: Optional[list[DailyPoint]] = Field(
        default=None, alias="activityCountByDay"
    )


class ForecastPoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    x: float
    y: float


class ForecastLinesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ideal: list[ForecastPoint]
    actual: list[ForecastPoint]
    forecast: list[ForecastPoint]


class ForecastResponse(BaseModel):
    """Day-granular forecast of one metric."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    expected_today: float = Field(alias="expectedToday")
    delta: float
    days_ahead: float = Field(alias="daysAhead")
    label: str
    status: ForecastStatus
    trend_per_day: float = Field(alias="trendPerDay")
    trend_per_week: float = Field(alias="trendPerWeek")
    forecast_eoy: float = Field(alias="forecastEOY")
    required_per_week: float = Field(alias="requiredPerWeek")
    per_unit: Optional[float] = Field(default=None, alias="perUnit")
    lines: ForecastLinesResponse


class MetricValues(BaseModel):
    """Per-metric values (YTD totals or rolling-window totals)."""

    model_config = ConfigDict(populate_by_name=True)

    distance_km: float = Field(default=0.0, ge=0, alias="distanceKm")
    count: float = Field(default=0.0, ge=0)
    elevation_m: float = Field(default=0.0, ge=0, alias="elevationM")

    def by_metric(self) -> dict[GoalMetric, float]:
        return {
            GoalMetric.DISTANCE_KM: self.distance_km,
            GoalMetric.COUNT: self.count,
            GoalMetric.ELEVATION_M: self.elevation_m,
        }


class RequiredPaceRequest(BaseModel):
    """YTD values and goals of one sport at a given day."""

    model_config = ConfigDict(populate_by_name=True)

    sport: Sport
    today: str
    ytd: MetricValues
    last28: MetricValues = Field(default_factory=MetricValues)
    goals: SportGoalsIn = Field(default_factory=SportGoalsIn)


class TimeContextResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    today_iso: str = Field(alias="todayISO")
    year: int
    week_of_year: int = Field(alias="weekOfYear")
    weeks_left_in_year: float = Field(alias="weeksLeftInYear")
    days_left_in_year: int = Field(alias="daysLeftInYear")


class RequiredPaceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sport: Sport
    time: TimeContextResponse
    required_per_week: dict[GoalMetric, float] = Field(alias="requiredPerWeek")
    baseline_forecast_eoy: dict[GoalMetric, float] = Field(
        alias="baselineForecastEoy"
    )
