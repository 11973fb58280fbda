"""
Required-pace engine.

A simpler estimate than the UI forecast, consumed by the insight layer:
"remaining ÷ weeks left" per metric from YTD totals over the same exact
weeks-left span the UI stats use, plus a baseline year-end projection from
the last-28-day weekly average.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Dict, Optional, Union

from .calendar_math import (
    SECONDS_PER_DAY,
    diff_days,
    end_of_year,
    js_round,
    parse_local_datetime,
    start_of_year,
)
from .models import AggregateYear, GoalMetric, Sport, SportGoals
from .ui_stats import UiAthleteStats

logger = logging.getLogger(__name__)


@dataclass
class TimeContext:
    """Where "today" sits in the year."""

    today_iso: str
    year: int
    week_of_year: int
    weeks_left_in_year: float
    days_left_in_year: int

    def to_dict(self) -> dict:
        return {
            "todayISO": self.today_iso,
            "year": self.year,
            "weekOfYear": self.week_of_year,
            "weeksLeftInYear": self.weeks_left_in_year,
            "daysLeftInYear": self.days_left_in_year,
        }


@dataclass
class SportSnapshot:
    """YTD and recent-window values of one sport, plus derived pace outputs."""

    sport: Sport
    ytd: Dict[GoalMetric, float]
    last7: Dict[GoalMetric, float]
    last28: Dict[GoalMetric, float]
    avg_km_per_run: Optional[float] = None
    baseline_forecast_eoy: Dict[GoalMetric, float] = field(default_factory=dict)
    required_per_week: Dict[GoalMetric, float] = field(default_factory=dict)

    @property
    def avg_weekly_28d(self) -> Dict[GoalMetric, float]:
        return {metric: value / 4 for metric, value in self.last28.items()}

    def to_dict(self) -> dict:
        def keyed(values: Dict[GoalMetric, float]) -> dict:
            return {m.value: v for m, v in values.items()}

        return {
            "sport": self.sport.value,
            "ytd": keyed(self.ytd),
            "last7d": keyed(self.last7),
            "last28d": keyed(self.last28),
            "avgWeekly28d": keyed(self.avg_weekly_28d),
            "avgKmPerRun": self.avg_km_per_run,
            "baselineForecastEoy": keyed(self.baseline_forecast_eoy),
            "requiredPerWeekIfOffTrack": keyed(self.required_per_week),
        }


def get_time_context(today: Union[date, datetime, str]) -> TimeContext:
    """
    Build the time context for a given day.

    week_of_year counts 7-day blocks from Jan 1. weeks_left_in_year is the
    exact fractional number of weeks until the end of Dec 31, rounded to 2
    decimals like the UI stats.
    """
    today = parse_local_datetime(today)
    year = today.year
    end = datetime(year + 1, 1, 1)

    days_left = max(0, math.ceil((end - today).total_seconds() / SECONDS_PER_DAY))
    day = math.floor(diff_days(start_of_year(year), today)) + 1
    week_of_year = math.ceil(day / 7)

    return TimeContext(
        today_iso=today.date().isoformat(),
        year=year,
        week_of_year=week_of_year,
        weeks_left_in_year=js_round(max(0.0, diff_days(today, end_of_year(year)) / 7), 2),
        days_left_in_year=days_left,
    )


def build_sport_snapshot(
    ui_stats: UiAthleteStats,
    aggregate: Optional[AggregateYear] = None,
) -> SportSnapshot:
    """Collect YTD values from UI stats and recent windows from the aggregate."""
    ytd = {}
    for metric in GoalMetric:
        progress = ui_stats.progress.get(metric)
        ytd[metric] = progress.ytd if progress else 0

    if aggregate is not None:
        last7 = {m: aggregate.last7.value_for(m) for m in GoalMetric}
        last28 = {m: aggregate.last28.value_for(m) for m in GoalMetric}
    else:
        last7 = {m: 0 for m in GoalMetric}
        last28 = {m: 0 for m in GoalMetric}

    count = ytd[GoalMetric.COUNT]
    avg_km_per_run = None
    if ui_stats.sport == Sport.RUN and count > 0:
        avg_km_per_run = ytd[GoalMetric.DISTANCE_KM] / count

    return SportSnapshot(
        sport=ui_stats.sport,
        ytd=ytd,
        last7=last7,
        last28=last28,
        avg_km_per_run=avg_km_per_run,
    )


def compute_required_per_week(
    time: TimeContext,
    snapshot: SportSnapshot,
    goal: SportGoals,
) -> Dict[GoalMetric, float]:
    """
    Remaining-to-goal per remaining week, only for metrics with a goal.

    Distance and count round to one decimal, elevation to whole meters.
    """
    weeks = max(1, time.weeks_left_in_year)
    required = {}

    for metric in GoalMetric:
        target = goal.get(metric)
        if target is None:
            continue
        remaining = max(0.0, target - snapshot.ytd.get(metric, 0))
        digits = 0 if metric == GoalMetric.ELEVATION_M else 1
        required[metric] = js_round(remaining / weeks, digits)

    return required


def compute_baseline_forecast(
    time: TimeContext,
    snapshot: SportSnapshot,
) -> Dict[GoalMetric, float]:
    """Project YTD forward with the last-28-day weekly average."""
    weekly = snapshot.avg_weekly_28d
    projected = {
        metric: snapshot.ytd.get(metric, 0) + weekly.get(metric, 0) * time.weeks_left_in_year
        for metric in GoalMetric
    }
    return {
        GoalMetric.DISTANCE_KM: js_round(projected[GoalMetric.DISTANCE_KM], 1),
        GoalMetric.ELEVATION_M: js_round(projected[GoalMetric.ELEVATION_M], 0),
        GoalMetric.COUNT: js_round(projected[GoalMetric.COUNT], 0),
    }


def enrich_snapshot(
    time: TimeContext,
    snapshot: SportSnapshot,
    goal: Optional[SportGoals] = None,
) -> SportSnapshot:
    """Return a copy of the snapshot with baseline forecast and required pace filled."""
    goal = goal or SportGoals()
    enriched = replace(
        snapshot,
        baseline_forecast_eoy=compute_baseline_forecast(time, snapshot),
        required_per_week=compute_required_per_week(time, snapshot, goal),
    )
    required = {m.value: v for m, v in enriched.required_per_week.items()}
    logger.debug(
        f"[PACE] {snapshot.sport.value}: weeks_left={time.weeks_left_in_year} "
        f"required={required}"
    )
    return enriched
