"""
API tests for the Goal Forecast service.

Runs requests against the FastAPI app in-process, without a live server.
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from server.forecast_api.config import Settings, get_settings
from server.forecast_api.main import app

from conftest import AS_OF, SAMPLE_ACTIVITIES


@pytest.fixture
def client():
    """Test client with default settings."""
    app.dependency_overrides[get_settings] = lambda: Settings()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _dashboard_payload(**overrides):
    payload = {
        "year": 2025,
        "activities": [dict(a) for a in SAMPLE_ACTIVITIES],
        "goals": {"run": {"distanceKm": 100}},
        "asOfDateLocal": AS_OF,
    }
    payload.update(overrides)
    return payload


class TestHealth:
    """Test the health endpoint."""

    def test_health(self, client):
        """Test that the service reports healthy."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCalculateEndpoint:
    """Test POST /api/forecast/calculate."""

    def test_ahead_of_plan(self, client):
        """Test the forecast response shape and values."""
        response = client.post("/api/forecast/calculate", json={
            "goalValue": 365,
            "currentValue": 200,
            "today": "2025-07-02",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["daysAhead"] == 17.0
        assert data["label"] == "17 days ahead"
        assert data["status"] == "on-track"
        assert data["forecastEOY"] > 0
        assert len(data["lines"]["ideal"]) == 12
        assert data["perUnit"] is None

    def test_with_series(self, client):
        """Test per-activity averages from daily series."""
        days = [f"2025-06-{d:02d}" for d in range(23, 31)] + ["2025-07-01", "2025-07-02"]
        response = client.post("/api/forecast/calculate", json={
            "goalValue": 1000,
            "currentValue": 500,
            "today": "2025-07-02",
            "dailySeries": [{"date": d, "value": 5} for d in days],
            "activityCountByDay": [{"date": d, "value": 1} for d in days],
        })

        assert response.status_code == 200
        assert response.json()["perUnit"] == 5.0

    def test_invalid_today(self, client):
        """Test that a malformed date is a 400."""
        response = client.post("/api/forecast/calculate", json={
            "goalValue": 365,
            "currentValue": 200,
            "today": "yesterday",
        })

        assert response.status_code == 400

    def test_negative_goal_rejected(self, client):
        """Test request validation of negative values."""
        response = client.post("/api/forecast/calculate", json={
            "goalValue": -1,
            "currentValue": 200,
            "today": "2025-07-02",
        })

        assert response.status_code == 422


class TestRequiredPaceEndpoint:
    """Test POST /api/forecast/required-pace."""

    def test_required_pace(self, client):
        """Test required pace, baseline and time context."""
        response = client.post("/api/forecast/required-pace", json={
            "sport": "run",
            "today": "2025-07-02",
            "ytd": {"distanceKm": 22, "count": 2, "elevationM": 170},
            "last28": {"distanceKm": 12, "count": 1, "elevationM": 120},
            "goals": {"distanceKm": 100},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["requiredPerWeek"] == {"distanceKm": 3.0}
        assert data["baselineForecastEoy"]["distanceKm"] == 100.4
        assert data["time"]["weekOfYear"] == 27
        assert data["time"]["weeksLeftInYear"] == 26.14

    def test_unknown_sport(self, client):
        """Test that unsupported sports are rejected."""
        response = client.post("/api/forecast/required-pace", json={
            "sport": "swim",
            "today": "2025-07-02",
            "ytd": {},
        })

        assert response.status_code == 422


class TestDashboardEndpoint:
    """Test POST /api/forecast/dashboard."""

    def test_dashboard(self, client):
        """Test per-sport stats with goals and a rolling pace."""
        response = client.post(
            "/api/forecast/dashboard", json=_dashboard_payload(mode="rolling28")
        )

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "rolling28"
        assert data["asOfDateLocal"] == AS_OF
        run_distance = data["run"]["progress"]["distanceKm"]
        assert run_distance["reachable"] is True
        assert run_distance["reachedOnLocal"] == "2025-12-31"
        assert data["run"]["weeksLeftDisplay"] == 27
        assert data["ride"]["progress"]["distanceKm"]["goal"] is None

    def test_settings_defaults(self, client):
        """Test that configured defaults apply when the request omits options."""
        app.dependency_overrides[get_settings] = lambda: Settings(
            default_mode="blend", include_commute=False
        )

        response = client.post("/api/forecast/dashboard", json=_dashboard_payload())

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "blend"
        assert data["ride"]["progress"]["count"]["ytd"] == 0

    def test_request_overrides_settings(self, client):
        """Test that request options win over configured defaults."""
        app.dependency_overrides[get_settings] = lambda: Settings(include_commute=False)

        response = client.post(
            "/api/forecast/dashboard", json=_dashboard_payload(includeCommute=True)
        )

        assert response.json()["ride"]["progress"]["count"]["ytd"] == 1

    def test_invalid_as_of(self, client):
        """Test that a malformed as-of instant is a 400."""
        response = client.post(
            "/api/forecast/dashboard", json=_dashboard_payload(asOfDateLocal="soon")
        )

        assert response.status_code == 400

    def test_cached_source(self, client):
        """Test the cached record shape."""
        response = client.post("/api/forecast/dashboard", json=_dashboard_payload(
            source="cached",
            activities=[{"id": "c1", "sport": "ride", "startDate": "2025-05-01T08:00:00", "distanceKm": 30}],
            goals={},
        ))

        assert response.status_code == 200
        data = response.json()
        assert data["goals"] is None
        assert data["ride"]["progress"]["distanceKm"]["ytd"] == 30.0


class TestNarrativeEndpoint:
    """Test POST /api/forecast/narrative."""

    def test_narrative_per_goal(self, client):
        """Test that one narrative is built per metric with a goal."""
        response = client.post(
            "/api/forecast/narrative", json=_dashboard_payload(mode="rolling28")
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["sport"] == "run"
        assert data[0]["metric"] == "distanceKm"
        assert data[0]["facts"]["status"] == "on-track"
        assert data[0]["paragraphs"][0].startswith("You are on track!")

    def test_no_goals_no_narratives(self, client):
        """Test an empty list without goals."""
        response = client.post("/api/forecast/narrative", json=_dashboard_payload(goals={}))

        assert response.status_code == 200
        assert response.json() == []


class TestAsyncClient:
    """Test the app through an async httpx client."""

    @pytest.mark.asyncio
    async def test_calculate_async(self):
        """Test the forecast endpoint over ASGI transport."""
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.post("/api/forecast/calculate", json={
                "goalValue": 365,
                "currentValue": 150,
                "today": "2025-07-02",
            })

        assert response.status_code == 200
        assert response.json()["status"] == "warning"
