"""
Pytest fixtures for Goal Forecast tests.
"""
import sys
import pytest
from pathlib import Path
from dotenv import load_dotenv

# Ensure src/ and the repo root are on sys.path so tests can import goal_forecast and server.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Load environment variables
load_dotenv()

from goal_forecast.adapters import adapt_activities  # noqa: E402
from goal_forecast.aggregator import aggregate_year  # noqa: E402
from goal_forecast.models import Sport  # noqa: E402
from goal_forecast.normalizer import normalize_activities  # noqa: E402


# ============================================================================
# Activity Fixtures
# ============================================================================

def make_activity(
    id,
    type="Run",
    start="2025-03-01T07:00:00",
    distance_m=10000,
    elevation_m=100,
    moving_time_s=3600,
    **extra,
) -> dict:
    """Build a provider-shaped activity record."""
    record = {
        "id": id,
        "type": type,
        "start_date_local": start,
        "distance": distance_m,
        "total_elevation_gain": elevation_m,
        "moving_time": moving_time_s,
    }
    record.update(extra)
    return record


# Mixed 2024/2025 sample: two runs and a ride in 2025, one run in 2024,
# one unsupported sport and one record with a broken date.
SAMPLE_ACTIVITIES = [
    make_activity(1, "Run", "2025-01-10T07:00:00", 10000, 50, 3000),
    make_activity(2, "Run", "2025-06-20T07:00:00", 12000, 120, 3900),
    make_activity(3, "Ride", "2025-06-25T17:30:00", 40000, 500, 5400, commute=True),
    make_activity(4, "Run", "2024-12-31T09:00:00", 8000, 40, 2800),
    make_activity(5, "Swim", "2025-05-01T06:00:00", 1500, 0, 1800),
    make_activity(6, "Run", "not-a-date", 5000, 10, 1500),
]

AS_OF = "2025-07-02T12:00:00"


@pytest.fixture
def sample_activities():
    """Raw provider activities spanning two years and three sports."""
    return [dict(a) for a in SAMPLE_ACTIVITIES]


@pytest.fixture
def normalized_sample(sample_activities):
    """Normalized sample activities, commutes included."""
    return normalize_activities(adapt_activities(sample_activities))


@pytest.fixture
def as_of():
    """Reference instant used by the sample fixtures (day 183 of 2025)."""
    return AS_OF


@pytest.fixture
def run_aggregate_2025(normalized_sample):
    """AggregateYear of the sample runs in 2025."""
    return aggregate_year(normalized_sample, 2025, Sport.RUN, AS_OF)


@pytest.fixture
def steady_runs_2025():
    """
    Factory fixture: one 10 km run every 7 days from Jan 1 up to a given date.

    Returns a function that accepts the last date (YYYY-MM-DD) and returns
    normalized activities.
    """
    from datetime import date, timedelta

    def _build(until: str):
        last = date.fromisoformat(until)
        day = date(2025, 1, 1)
        records = []
        i = 0
        while day <= last:
            records.append(make_activity(i, "Run", f"{day.isoformat()}T07:00:00", 10000, 100, 3600))
            day += timedelta(days=7)
            i += 1
        return normalize_activities(adapt_activities(records))

    return _build
