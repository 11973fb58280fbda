"""Year dashboard and narrative models."""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from goal_forecast.adapters import ActivitySource
from goal_forecast.models import ForecastMode, GoalMetric, Sport

from .goals import SportGoalsIn


class DashboardRequest(BaseModel):
    """Raw activities, goals and forecast options for one year."""

    model_config = ConfigDict(populate_by_name=True)

    year: int = Field(ge=2000, le=2100)
    activities: list[dict[str, Any]] = Field(default_factory=list)
    source: ActivitySource = ActivitySource.PROVIDER
    goals: dict[Sport, SportGoalsIn] = Field(default_factory=dict)
    as_of_date_local: str = Field(alias="asOfDateLocal")
    retrieved_at_local: Optional[str] = Field(default=None, alias="retrievedAtLocal")
    mode: Optional[ForecastMode] = None
    blend_weight_rolling: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, alias="blendWeightRolling"
    )
    include_commute: Optional[bool] = Field(default=None, alias="includeCommute")


class GoalProgressResponse(BaseModel):
    """Progress of one metric."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    metric: GoalMetric
    ytd: float
    avg_per_week: float = Field(alias="avgPerWeek")
    forecast: float
    goal: Optional[float] = None
    to_victory: Optional[float] = Field(default=None, alias="toVictory")
    reachable: Optional[bool] = None
    reached_in_weeks: Optional[float] = Field(default=None, alias="reachedInWeeks")
    reached_on_local: Optional[str] = Field(default=None, alias="reachedOnLocal")


class AthleteStatsResponse(BaseModel):
    """UI stats of one sport."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    sport: Sport
    retrieved_at_local: str = Field(alias="retrievedAtLocal")
    weeks_left_display: int = Field(alias="weeksLeftDisplay")
    weeks_left_exact: float = Field(alias="weeksLeftExact")
    weeks_elapsed: float = Field(alias="weeksElapsed")
    avg_dist_per_run_km: float = Field(alias="avgDistPerRunKm")
    mode: ForecastMode
    progress: dict[GoalMetric, GoalProgressResponse]


class DashboardResponse(BaseModel):
    """UI stats of every sport for one year."""

    model_config = ConfigDict(populate_by_name=True)

    year: int
    mode: ForecastMode
    as_of_date_local: str = Field(alias="asOfDateLocal")
    retrieved_at_local: str = Field(alias="retrievedAtLocal")
    goals: Optional[dict] = None
    run: AthleteStatsResponse
    ride: AthleteStatsResponse


class NarrativeBulletResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    value: str


class NarrativeResponse(BaseModel):
    """Facts and narrative for one (sport, metric) with a goal."""

    model_config = ConfigDict(populate_by_name=True)

    sport: Sport
    metric: GoalMetric
    facts: dict
    title: str
    paragraphs: list[str]
    bullets: list[NarrativeBulletResponse]
