"""
Dashboard orchestration.

Runs the full pipeline (adapt -> normalize -> aggregate -> forecast) for
every supported sport and assembles the structures the UI and narrative
layers consume.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .adapters import ActivitySource, adapt_activities
from .aggregator import aggregate_year
from .forecast import YearForecast, build_year_forecast
from .insights import build_forecast_insights
from .models import AggregateYear, ForecastMode, NormalizedActivity, Sport, SportGoals, YearGoals
from .normalizer import normalize_activities
from .ui_stats import DEFAULT_BLEND_WEIGHT_ROLLING, UiAthleteStats, build_ui_athlete_stats

logger = logging.getLogger(__name__)

SPORTS = (Sport.RUN, Sport.RIDE)


@dataclass
class YearDashboard:
    """UI stats of every sport for one year."""

    year: int
    mode: ForecastMode
    as_of_date_local: str
    retrieved_at_local: str
    goals: Optional[YearGoals]
    sports: Dict[Sport, UiAthleteStats] = field(default_factory=dict)
    aggregates: Dict[Sport, AggregateYear] = field(default_factory=dict)

    def to_dict(self) -> dict:
        out = {
            "year": self.year,
            "mode": self.mode.value,
            "asOfDateLocal": self.as_of_date_local,
            "retrievedAtLocal": self.retrieved_at_local,
            "goals": self.goals.to_dict() if self.goals else None,
        }
        for sport, stats in self.sports.items():
            out[sport.value] = stats.to_dict()
        return out


@dataclass
class SportDashboard:
    aggregate: AggregateYear
    forecast: YearForecast
    insights: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "aggregate": self.aggregate.to_dict(),
            "forecast": self.forecast.to_dict(),
            "insights": list(self.insights),
        }


@dataclass
class DashboardModel:
    """Linear-forecast dashboard with short insights per sport."""

    year: int
    generated_at_local: str
    sports: Dict[Sport, SportDashboard] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "generatedAtLocal": self.generated_at_local,
            "sports": {s.value: d.to_dict() for s, d in self.sports.items()},
        }


def _goals_for(goals: Optional[YearGoals], year: int, sport: Sport) -> Optional[SportGoals]:
    if goals is None:
        return None
    if goals.year != year:
        logger.warning(f"[DASHBOARD] Ignoring goals for {goals.year} on a {year} dashboard")
        return None
    return goals.for_sport(sport)


def build_year_dashboard(
    year: int,
    activities: Iterable[dict],
    as_of_date_local: str,
    source: ActivitySource = ActivitySource.PROVIDER,
    goals: Optional[YearGoals] = None,
    retrieved_at_local: Optional[str] = None,
    mode: ForecastMode = ForecastMode.YTD,
    blend_weight_rolling: float = DEFAULT_BLEND_WEIGHT_ROLLING,
    include_commute: bool = True,
) -> YearDashboard:
    """
    Build UI stats for every sport from raw activity records.

    Args:
        year: Year to report on
        activities: Raw activity dicts in the shape named by source
        as_of_date_local: Reference instant ("today")
        source: Shape of the raw records
        goals: Goals of the year, or None
        retrieved_at_local: When the activities were fetched; defaults to as-of
        mode: Weekly-rate strategy
        blend_weight_rolling: Weight of the rolling-28 rate in blend mode
        include_commute: If False, commutes are excluded

    Returns:
        YearDashboard with one UiAthleteStats per sport

    Raises:
        ValueError: If as_of_date_local cannot be parsed
    """
    adapted = adapt_activities(activities, source)
    normalized = normalize_activities(adapted, include_commute=include_commute)

    dashboard = YearDashboard(
        year=year,
        mode=ForecastMode(mode),
        as_of_date_local=as_of_date_local,
        retrieved_at_local=retrieved_at_local or as_of_date_local,
        goals=goals,
    )

    for sport in SPORTS:
        aggregate = aggregate_year(normalized, year, sport, as_of_date_local)
        dashboard.aggregates[sport] = aggregate
        dashboard.sports[sport] = build_ui_athlete_stats(
            aggregate=aggregate,
            as_of_date_local=as_of_date_local,
            retrieved_at_local=dashboard.retrieved_at_local,
            goals=_goals_for(goals, year, sport),
            mode=mode,
            blend_weight_rolling=blend_weight_rolling,
        )

    logger.info(
        f"[DASHBOARD] Built {year} dashboard from {len(normalized)} activities "
        f"(mode={dashboard.mode.value}, as_of={as_of_date_local})"
    )
    return dashboard


def build_dashboard_model(
    normalized: List[NormalizedActivity],
    year: int,
    as_of_date_local: str,
    goals: Optional[YearGoals] = None,
) -> DashboardModel:
    """Aggregate every sport and attach the linear year forecast and insights."""
    model = DashboardModel(year=year, generated_at_local=as_of_date_local)

    for sport in SPORTS:
        aggregate = aggregate_year(normalized, year, sport, as_of_date_local)
        forecast = build_year_forecast(aggregate, goals, as_of_date_local)
        model.sports[sport] = SportDashboard(
            aggregate=aggregate,
            forecast=forecast,
            insights=build_forecast_insights(forecast),
        )

    return model
