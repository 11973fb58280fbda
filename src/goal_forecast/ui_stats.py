"""
UI Stats Builder.

Rate-based progress forecast used by the dashboard cards. For each metric
(distance, count, elevation) a weekly rate is estimated with the selected
strategy and extrapolated linearly to the end of the year.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from .calendar_math import (
    add_days,
    diff_days,
    end_of_year,
    js_round,
    parse_local_datetime,
    start_of_year,
)
from .models import AggregateYear, ForecastMode, GoalMetric, Sport, SportGoals

logger = logging.getLogger(__name__)

DEFAULT_BLEND_WEIGHT_ROLLING = 0.6
MIN_WEEKS_ELAPSED = 1 / 7


@dataclass
class UiGoalProgress:
    """Progress of one metric; goal fields stay None when no goal is set."""

    metric: GoalMetric
    ytd: float
    avg_per_week: float
    forecast: float
    goal: Optional[float] = None
    to_victory: Optional[float] = None
    reachable: Optional[bool] = None
    reached_in_weeks: Optional[float] = None
    reached_on_local: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "metric": self.metric.value,
            "ytd": self.ytd,
            "avgPerWeek": self.avg_per_week,
            "forecast": self.forecast,
            "goal": self.goal,
            "toVictory": self.to_victory,
            "reachable": self.reachable,
            "reachedInWeeks": self.reached_in_weeks,
            "reachedOnLocal": self.reached_on_local,
        }


@dataclass
class UiAthleteStats:
    """Presentation-ready stats for one sport."""

    sport: Sport
    retrieved_at_local: str
    weeks_left_display: int
    weeks_left_exact: float
    weeks_elapsed: float
    avg_dist_per_run_km: float
    mode: ForecastMode
    progress: Dict[GoalMetric, UiGoalProgress] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "sport": self.sport.value,
            "retrievedAtLocal": self.retrieved_at_local,
            "weeksLeftDisplay": self.weeks_left_display,
            "weeksLeftExact": self.weeks_left_exact,
            "weeksElapsed": self.weeks_elapsed,
            "avgDistPerRunKm": self.avg_dist_per_run_km,
            "mode": self.mode.value,
            "progress": {m.value: p.to_dict() for m, p in self.progress.items()},
        }


def compute_weekly_rates(
    aggregate: AggregateYear,
    weeks_elapsed: float,
    mode: ForecastMode,
    blend_weight_rolling: float = DEFAULT_BLEND_WEIGHT_ROLLING,
) -> Dict[GoalMetric, float]:
    """
    Weekly rate per metric for the given strategy.

    ytd divides YTD totals by elapsed weeks, rolling28 treats the last 28
    days as exactly four weeks, blend mixes both with weight w on rolling28.
    """
    denom = max(weeks_elapsed, MIN_WEEKS_ELAPSED)
    w = blend_weight_rolling

    rates = {}
    for metric in GoalMetric:
        ytd_rate = aggregate.totals.value_for(metric) / denom
        rolling_rate = aggregate.last28.value_for(metric) / 4

        if mode == ForecastMode.YTD:
            rates[metric] = ytd_rate
        elif mode == ForecastMode.ROLLING28:
            rates[metric] = rolling_rate
        else:
            rates[metric] = (1 - w) * ytd_rate + w * rolling_rate
    return rates


def build_progress(
    metric: GoalMetric,
    ytd: float,
    per_week: float,
    weeks_left_exact: float,
    as_of: datetime,
    goal: Optional[float] = None,
) -> UiGoalProgress:
    """
    Linear-pace progress of one metric.

    The reachability test assumes the current weekly pace holds for every
    remaining week.
    """
    is_count = metric == GoalMetric.COUNT
    forecast = ytd + per_week * weeks_left_exact

    to_victory = None
    reachable = None
    reached_in_weeks = None
    reached_on_local = None

    if goal is not None:
        to_victory = max(0.0, goal - ytd)
        reachable = to_victory <= per_week * weeks_left_exact

        if per_week > 0 and to_victory > 0:
            reached_in_weeks = to_victory / per_week
            reached_on_local = add_days(as_of, reached_in_weeks * 7).date().isoformat()

    return UiGoalProgress(
        metric=metric,
        ytd=js_round(ytd, 0 if is_count else 1),
        avg_per_week=js_round(per_week, 2 if is_count else 1),
        forecast=js_round(forecast, 0 if is_count else 2),
        goal=goal,
        to_victory=js_round(to_victory, 0 if is_count else 2) if to_victory is not None else None,
        reachable=reachable,
        reached_in_weeks=js_round(reached_in_weeks, 2) if reached_in_weeks is not None else None,
        reached_on_local=reached_on_local,
    )


def build_ui_athlete_stats(
    aggregate: AggregateYear,
    as_of_date_local: str,
    retrieved_at_local: str,
    goals: Optional[SportGoals] = None,
    mode: ForecastMode = ForecastMode.YTD,
    blend_weight_rolling: float = DEFAULT_BLEND_WEIGHT_ROLLING,
) -> UiAthleteStats:
    """
    Build the per-metric progress structure for one sport.

    Args:
        aggregate: AggregateYear of the sport
        as_of_date_local: Reference instant ("today")
        retrieved_at_local: When the underlying data was fetched (display only)
        goals: Goals of the sport, or None
        mode: Weekly-rate strategy
        blend_weight_rolling: Weight of the rolling-28 rate in blend mode

    Returns:
        UiAthleteStats for the sport

    Raises:
        ValueError: If as_of_date_local cannot be parsed
    """
    as_of = parse_local_datetime(as_of_date_local)
    mode = ForecastMode(mode)
    goals = goals or SportGoals()

    days_elapsed = max(1.0, diff_days(start_of_year(aggregate.year), as_of) + 1)
    weeks_elapsed = max(MIN_WEEKS_ELAPSED, days_elapsed / 7)

    days_left = max(0.0, diff_days(as_of, end_of_year(aggregate.year)))
    weeks_left_exact = max(0.0, days_left / 7)
    weeks_left_display = math.ceil(weeks_left_exact)

    totals = aggregate.totals
    avg_dist_per_run_km = totals.distance_km / totals.count if totals.count > 0 else 0.0

    rates = compute_weekly_rates(aggregate, weeks_elapsed, mode, blend_weight_rolling)

    progress = {
        metric: build_progress(
            metric=metric,
            ytd=totals.value_for(metric),
            per_week=rates[metric],
            weeks_left_exact=weeks_left_exact,
            as_of=as_of,
            goal=goals.get(metric),
        )
        for metric in (GoalMetric.COUNT, GoalMetric.DISTANCE_KM, GoalMetric.ELEVATION_M)
    }

    logger.debug(
        f"[UI_STATS] {aggregate.sport.value} {aggregate.year} mode={mode.value}: "
        f"weeks_elapsed={weeks_elapsed:.2f} weeks_left={weeks_left_exact:.2f}"
    )

    return UiAthleteStats(
        sport=aggregate.sport,
        retrieved_at_local=retrieved_at_local,
        weeks_left_display=weeks_left_display,
        weeks_left_exact=js_round(weeks_left_exact, 2),
        weeks_elapsed=js_round(weeks_elapsed, 2),
        avg_dist_per_run_km=js_round(avg_dist_per_run_km, 2),
        mode=mode,
        progress=progress,
    )
