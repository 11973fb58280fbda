#!/usr/bin/env python3
"""
Goal Forecast smoke run.

Runs the full pipeline (adapt -> normalize -> aggregate -> UI stats) over a
JSON file of activities, or over a small built-in sample, and prints the
resulting dashboard as JSON.

Usage:
    python scripts/forecast_smoke.py
    python scripts/forecast_smoke.py --file activities.json --year 2025 --as-of 2025-07-02T12:00:00
    python scripts/forecast_smoke.py --file cache.json --source cached --mode blend
    python scripts/forecast_smoke.py --goals goals.json --narrative
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from goal_forecast import (  # noqa: E402
    ActivitySource,
    ForecastMode,
    GoalMetric,
    Sport,
    SportGoals,
    YearGoals,
    build_narrative,
    build_year_dashboard,
    derive_metric_facts,
)

load_dotenv()

# Minimal sample data (Run + Ride)
SAMPLE_ACTIVITIES = [
    {
        "id": 1,
        "type": "Run",
        "start_date_local": "2025-11-01T07:10:00",
        "distance": 12000,
        "total_elevation_gain": 180,
        "moving_time": 4200,
    },
    {
        "id": 2,
        "type": "Run",
        "start_date_local": "2025-11-10T07:20:00",
        "distance": 8000,
        "total_elevation_gain": 90,
        "moving_time": 2600,
    },
    {
        "id": 3,
        "type": "Ride",
        "start_date_local": "2025-11-12T10:00:00",
        "distance": 42000,
        "total_elevation_gain": 600,
        "moving_time": 5400,
    },
]

SAMPLE_YEAR = 2026
SAMPLE_AS_OF = "2026-01-01T08:38:08"


def load_activities(path: Path) -> list:
    """Load a JSON list of activities, or an object holding an 'activities' list."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("activities", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a list of activities")
    return data


def load_goals(path: Path, year: int) -> YearGoals:
    """Load goals shaped like {"run": {"distanceKm": 1000}, "ride": {...}}."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    per_sport = {Sport(key): SportGoals.from_dict(value) for key, value in data.items()}
    return YearGoals(year=year, per_sport=per_sport)


def main():
    parser = argparse.ArgumentParser(
        description="Goal Forecast smoke run",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Built-in sample (2026, as of Jan 1st)
  python scripts/forecast_smoke.py

  # Provider activities for 2025
  python scripts/forecast_smoke.py --file activities.json --year 2025 --as-of 2025-07-02T12:00:00

  # Cached activities with a blended weekly rate
  python scripts/forecast_smoke.py --file cache.json --source cached --mode blend
        """,
    )

    parser.add_argument(
        "--file",
        type=Path,
        help="JSON file with activities (default: built-in sample)",
    )
    parser.add_argument(
        "--source",
        choices=[s.value for s in ActivitySource],
        default=ActivitySource.PROVIDER.value,
        help="Shape of the activity records (default: provider)",
    )
    parser.add_argument(
        "--year",
        type=int,
        default=SAMPLE_YEAR,
        help=f"Year to report on (default: {SAMPLE_YEAR})",
    )
    parser.add_argument(
        "--as-of",
        default=SAMPLE_AS_OF,
        help=f"Reference local date-time (default: {SAMPLE_AS_OF})",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ForecastMode],
        default=ForecastMode.YTD.value,
        help="Weekly-rate strategy (default: ytd)",
    )
    parser.add_argument(
        "--goals",
        type=Path,
        help="JSON file with per-sport goals",
    )
    parser.add_argument(
        "--exclude-commute",
        action="store_true",
        help="Drop commute activities",
    )
    parser.add_argument(
        "--narrative",
        action="store_true",
        help="Print goal narratives instead of the dashboard",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        activities = load_activities(args.file) if args.file else SAMPLE_ACTIVITIES
        goals = load_goals(args.goals, args.year) if args.goals else None

        dashboard = build_year_dashboard(
            year=args.year,
            activities=activities,
            as_of_date_local=args.as_of,
            source=ActivitySource(args.source),
            goals=goals,
            mode=ForecastMode(args.mode),
            include_commute=not args.exclude_commute,
        )
    except (OSError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)

    if not args.narrative:
        print(json.dumps(dashboard.to_dict(), indent=2, ensure_ascii=False))
        return

    if goals is None:
        print("[INFO] No goals given, nothing to narrate")
        return

    for sport, stats in dashboard.sports.items():
        for metric in GoalMetric:
            facts = derive_metric_facts(metric, stats, goals.for_sport(sport))
            if facts is None:
                continue
            narrative = build_narrative(sport, metric, facts)
            print("=" * 60)
            print(narrative.title)
            print("=" * 60)
            for paragraph in narrative.paragraphs:
                print(f"\n{paragraph}")
            print()
            for bullet in narrative.bullets:
                print(f"  {bullet.label}: {bullet.value}")
            print()


if __name__ == "__main__":
    main()
