"""
Deterministic insight generation.

Turns engine outputs into facts and short English narratives. Engine
values are phrased as-is; nothing here recomputes a forecast.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from .calendar_math import js_round
from .forecast import YearForecast
from .goal_status import GoalStatus, calculate_goal_status
from .models import GoalMetric, Sport, SportGoals
from .ui_stats import UiAthleteStats

ON_TRACK_TOLERANCE = 1.1
CLOSE_TO_GOAL_FRACTION = 0.15
CLOSE_TO_GOAL_MIN = 10
MAX_INSIGHTS = 4

SPORT_LABELS = {
    Sport.RUN: "Running",
    Sport.RIDE: "Cycling",
}

METRIC_UNITS = {
    GoalMetric.DISTANCE_KM: ("km", "km"),
    GoalMetric.COUNT: ("activity", "activities"),
    GoalMetric.ELEVATION_M: ("m", "m"),
}


@dataclass
class MetricFacts:
    """Facts about one metric of one sport, all rounded to 2 decimals."""

    ytd: float
    goal: float
    remaining: float
    required_per_week: float
    trend_per_week: float
    forecast_eoy: float
    weeks_left: float
    status: GoalStatus
    avg_per_unit: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "ytd": self.ytd,
            "goal": self.goal,
            "remaining": self.remaining,
            "requiredPerWeek": self.required_per_week,
            "trendPerWeek": self.trend_per_week,
            "forecastEoy": self.forecast_eoy,
            "weeksLeft": self.weeks_left,
            "status": self.status.value,
            "avgPerUnit": self.avg_per_unit,
        }


@dataclass
class NarrativeBullet:
    label: str
    value: str


@dataclass
class NarrativeResult:
    title: str
    paragraphs: List[str] = field(default_factory=list)
    bullets: List[NarrativeBullet] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "paragraphs": list(self.paragraphs),
            "bullets": [{"label": b.label, "value": b.value} for b in self.bullets],
        }


def derive_metric_facts(
    metric: GoalMetric,
    ui_stats: Optional[UiAthleteStats],
    goals: Optional[SportGoals],
) -> Optional[MetricFacts]:
    """
    Derive narrative facts for one metric.

    Returns:
        MetricFacts, or None when stats are missing or no positive goal is set
    """
    if ui_stats is None or goals is None:
        return None

    goal_value = goals.get(metric)
    if goal_value is None or goal_value <= 0:
        return None

    progress = ui_stats.progress.get(metric)
    if progress is None:
        return None

    ytd = progress.ytd
    remaining = max(0.0, goal_value - ytd)
    weeks_left = max(0.0, ui_stats.weeks_left_exact)
    trend_per_week = progress.avg_per_week
    required_per_week = remaining / max(1.0, weeks_left)
    forecast_eoy = max(ytd + trend_per_week * weeks_left, ytd)

    avg_per_unit = None
    if metric == GoalMetric.DISTANCE_KM:
        count_progress = ui_stats.progress.get(GoalMetric.COUNT)
        if count_progress and count_progress.ytd > 0:
            avg_per_unit = js_round(ytd / count_progress.ytd, 2)

    return MetricFacts(
        ytd=js_round(ytd, 2),
        goal=goal_value,
        remaining=js_round(remaining, 2),
        required_per_week=js_round(required_per_week, 2),
        trend_per_week=js_round(trend_per_week, 2),
        forecast_eoy=js_round(forecast_eoy, 2),
        weeks_left=js_round(weeks_left, 2),
        status=calculate_goal_status(trend_per_week, required_per_week),
        avg_per_unit=avg_per_unit,
    )


def format_number(n: float, metric: GoalMetric) -> str:
    if metric == GoalMetric.DISTANCE_KM:
        return f"{n:.1f}"
    return str(js_round(n, 0))


def _unit(metric: GoalMetric, plural: bool = True) -> str:
    singular, many = METRIC_UNITS[metric]
    return many if plural else singular


def build_narrative(sport: Sport, metric: GoalMetric, facts: MetricFacts) -> NarrativeResult:
    """Build a two-paragraph status narrative with key-value bullets."""
    unit = _unit(metric)

    def fmt(n: float) -> str:
        return f"{format_number(n, metric)} {unit}"

    title = f"{SPORT_LABELS[sport]} · {_unit(metric, plural=False)}"

    bullets = [
        NarrativeBullet("Achieved so far", fmt(facts.ytd)),
        NarrativeBullet("Goal", fmt(facts.goal)),
        NarrativeBullet("Remaining", fmt(facts.remaining)),
        NarrativeBullet("Needed per week", fmt(facts.required_per_week)),
        NarrativeBullet("Current trend", f"{fmt(facts.trend_per_week)}/week"),
        NarrativeBullet("Forecast for Dec 31", fmt(facts.forecast_eoy)),
    ]
    if facts.avg_per_unit is not None and metric == GoalMetric.DISTANCE_KM:
        bullets.append(
            NarrativeBullet("Average per activity", f"{format_number(facts.avg_per_unit, metric)} km")
        )

    if facts.remaining <= 0:
        status_text = (
            f"Congratulations! You already reached your goal of {fmt(facts.goal)}. "
            f"Your current trend says you are still enjoying {SPORT_LABELS[sport].lower()}. "
            f"How is the body holding up? 😄"
        )
        outlook_text = (
            f"At your current trend you would finish the year with {fmt(facts.forecast_eoy)}. "
            f"That is well above the goal, great effort!"
        )
    else:
        if facts.required_per_week <= facts.trend_per_week * ON_TRACK_TOLERANCE:
            status_text = (
                f"You are on track! 🎯 With your current rhythm of "
                f"{fmt(facts.trend_per_week)}/week you will reach your goal by the end of the year. "
                f"Keep it up, your form is good."
            )
        else:
            status_text = (
                f"You are behind your plan. 📉 To reach your goal of {fmt(facts.goal)} "
                f"you need {fmt(facts.required_per_week)}/week. "
                f"Right now you are at {fmt(facts.trend_per_week)}/week."
            )

        weeks_text = (
            "less than a week" if facts.weeks_left < 1 else f"{math.ceil(facts.weeks_left)} weeks"
        )
        outlook_text = f"There are {weeks_text} left in the year. "
        close_margin = max(facts.goal * CLOSE_TO_GOAL_FRACTION, CLOSE_TO_GOAL_MIN)
        if facts.trend_per_week > 0 and abs(facts.forecast_eoy - facts.goal) <= close_margin:
            outlook_text += "If you keep going like this, you will be very close to your goal."
        elif facts.forecast_eoy < facts.goal:
            shortfall = fmt(facts.goal - facts.forecast_eoy)
            outlook_text += (
                f"Right now you risk falling {shortfall} short. "
                f"Pick up the pace if you can."
            )
        else:
            outlook_text += f"Your forecast: {fmt(facts.forecast_eoy)}, just above the goal."

    return NarrativeResult(title=title, paragraphs=[status_text, outlook_text], bullets=bullets)


INSIGHT_LABELS = {
    GoalMetric.DISTANCE_KM: ("Distance", "km", "km/week"),
    GoalMetric.COUNT: ("Activities", "activities", "/week"),
    GoalMetric.ELEVATION_M: ("Elevation", "m", "m/week"),
}


def build_forecast_insights(forecast: YearForecast) -> List[str]:
    """Short one-line insights for each metric that has a goal."""
    insights = []
    for metric in (GoalMetric.DISTANCE_KM, GoalMetric.COUNT, GoalMetric.ELEVATION_M):
        item = forecast.metric(metric)
        if not item.goal:
            continue
        label, unit, rate_unit = INSIGHT_LABELS[metric]
        if item.on_track:
            insights.append(
                f"✅ {label}: on track (forecast {js_round(item.projected_year_end, 1)} {unit})"
            )
        else:
            insights.append(
                f"⚠️ {label}: ~{js_round(item.required_per_week, 1)} {rate_unit} needed"
            )
    return insights[:MAX_INSIGHTS]
