"""
Unit tests for facts and narrative generation.
"""
import pytest

from goal_forecast.forecast import build_year_forecast
from goal_forecast.goal_status import GoalStatus
from goal_forecast.insights import (
    build_forecast_insights,
    build_narrative,
    derive_metric_facts,
    format_number,
)
from goal_forecast.models import ForecastMode, GoalMetric, Sport, SportGoals, YearGoals
from goal_forecast.ui_stats import build_ui_athlete_stats


@pytest.fixture
def rolling_stats(run_aggregate_2025, as_of):
    """Run stats at the rolling-28 pace of 3 km/week."""
    return build_ui_athlete_stats(
        run_aggregate_2025, as_of, as_of, mode=ForecastMode.ROLLING28
    )


@pytest.fixture
def ytd_stats(run_aggregate_2025, as_of):
    """Run stats at the YTD pace of about 0.84 km/week."""
    return build_ui_athlete_stats(run_aggregate_2025, as_of, as_of, mode=ForecastMode.YTD)


class TestDeriveMetricFacts:
    """Test fact derivation from UI stats."""

    def test_facts_for_distance(self, rolling_stats):
        """Test remaining, required pace and per-activity average."""
        facts = derive_metric_facts(
            GoalMetric.DISTANCE_KM, rolling_stats, SportGoals(distance_km=100)
        )

        assert facts.ytd == 22.0
        assert facts.goal == 100
        assert facts.remaining == 78.0
        assert facts.weeks_left == 26.07
        assert facts.trend_per_week == 3.0
        assert facts.required_per_week == 2.99
        assert facts.forecast_eoy == 100.21
        assert facts.avg_per_unit == 11.0
        assert facts.status == GoalStatus.ON_TRACK

    def test_no_facts_without_goal(self, rolling_stats):
        """Test that missing or zero goals give no facts."""
        assert derive_metric_facts(GoalMetric.COUNT, rolling_stats, SportGoals()) is None
        assert derive_metric_facts(GoalMetric.COUNT, rolling_stats, SportGoals(count=0)) is None
        assert derive_metric_facts(GoalMetric.COUNT, rolling_stats, None) is None

    def test_off_track_status(self, ytd_stats):
        """Test that a slow pace is off track."""
        facts = derive_metric_facts(GoalMetric.DISTANCE_KM, ytd_stats, SportGoals(distance_km=100))

        assert facts.status == GoalStatus.OFF_TRACK

    def test_to_dict(self, rolling_stats):
        """Test camelCase serialization."""
        facts = derive_metric_facts(
            GoalMetric.DISTANCE_KM, rolling_stats, SportGoals(distance_km=100)
        )
        data = facts.to_dict()

        assert data["status"] == "on-track"
        assert data["requiredPerWeek"] == 2.99


class TestBuildNarrative:
    """Test the English narrative text."""

    def test_on_track_narrative(self, rolling_stats):
        """Test the on-track wording and close-to-goal outlook."""
        facts = derive_metric_facts(
            GoalMetric.DISTANCE_KM, rolling_stats, SportGoals(distance_km=100)
        )

        narrative = build_narrative(Sport.RUN, GoalMetric.DISTANCE_KM, facts)

        assert narrative.title == "Running · km"
        assert narrative.paragraphs[0].startswith("You are on track!")
        assert narrative.paragraphs[1].startswith("There are 27 weeks left in the year.")
        assert "very close to your goal" in narrative.paragraphs[1]

    def test_behind_narrative(self, ytd_stats):
        """Test the behind wording and shortfall outlook."""
        facts = derive_metric_facts(GoalMetric.DISTANCE_KM, ytd_stats, SportGoals(distance_km=100))

        narrative = build_narrative(Sport.RUN, GoalMetric.DISTANCE_KM, facts)

        assert narrative.paragraphs[0].startswith("You are behind your plan.")
        assert "100.0 km" in narrative.paragraphs[0]
        assert "risk falling" in narrative.paragraphs[1]

    def test_goal_reached_narrative(self, ytd_stats):
        """Test the congratulation wording once the goal is met."""
        facts = derive_metric_facts(GoalMetric.DISTANCE_KM, ytd_stats, SportGoals(distance_km=20))

        narrative = build_narrative(Sport.RUN, GoalMetric.DISTANCE_KM, facts)

        assert narrative.paragraphs[0].startswith("Congratulations!")
        assert "running" in narrative.paragraphs[0]

    def test_bullets(self, rolling_stats):
        """Test key-value bullets including the per-activity average."""
        facts = derive_metric_facts(
            GoalMetric.DISTANCE_KM, rolling_stats, SportGoals(distance_km=100)
        )

        narrative = build_narrative(Sport.RUN, GoalMetric.DISTANCE_KM, facts)
        bullets = {b.label: b.value for b in narrative.bullets}

        assert bullets["Achieved so far"] == "22.0 km"
        assert bullets["Remaining"] == "78.0 km"
        assert bullets["Current trend"] == "3.0 km/week"
        assert bullets["Average per activity"] == "11.0 km"

    def test_count_narrative_has_no_average(self, rolling_stats):
        """Test count wording and the absence of a per-activity bullet."""
        facts = derive_metric_facts(GoalMetric.COUNT, rolling_stats, SportGoals(count=10))

        narrative = build_narrative(Sport.RIDE, GoalMetric.COUNT, facts)

        assert narrative.title == "Cycling · activity"
        assert all(b.label != "Average per activity" for b in narrative.bullets)
        assert narrative.to_dict()["bullets"][1] == {"label": "Goal", "value": "10 activities"}


class TestFormatting:
    """Test number formatting."""

    def test_format_number(self):
        """Test one decimal for distance, whole numbers otherwise."""
        assert format_number(12.345, GoalMetric.DISTANCE_KM) == "12.3"
        assert format_number(12.5, GoalMetric.COUNT) == "13"
        assert format_number(949.6, GoalMetric.ELEVATION_M) == "950"


class TestForecastInsights:
    """Test one-line insights from the linear year forecast."""

    def test_off_track_insight(self, run_aggregate_2025, as_of):
        """Test the weekly pace hint for an off-track goal."""
        goals = YearGoals(year=2025, per_sport={Sport.RUN: SportGoals(distance_km=1000)})

        insights = build_forecast_insights(build_year_forecast(run_aggregate_2025, goals, as_of))

        assert insights == ["⚠️ Distance: ~37.6 km/week needed"]

    def test_on_track_insight(self, run_aggregate_2025, as_of):
        """Test the on-track line with the projected total."""
        goals = YearGoals(year=2025, per_sport={Sport.RUN: SportGoals(count=3)})

        insights = build_forecast_insights(build_year_forecast(run_aggregate_2025, goals, as_of))

        assert insights == ["✅ Activities: on track (forecast 4.0 activities)"]

    def test_no_goals_no_insights(self, run_aggregate_2025, as_of):
        """Test that metrics without goals produce nothing."""
        assert build_forecast_insights(build_year_forecast(run_aggregate_2025, None, as_of)) == []
