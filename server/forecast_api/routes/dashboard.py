"""Year dashboard and narrative routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from goal_forecast.dashboard import YearDashboard, build_year_dashboard
from goal_forecast.insights import build_narrative, derive_metric_facts
from goal_forecast.models import GoalMetric, Sport

from ..config import Settings, get_settings
from ..models.dashboard import (
    AthleteStatsResponse,
    DashboardRequest,
    DashboardResponse,
    NarrativeResponse,
)
from ..models.goals import to_year_goals

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forecast", tags=["Dashboard"])


def _build_dashboard(request: DashboardRequest, settings: Settings) -> YearDashboard:
    """Run the engine with request options, falling back to configured defaults."""
    try:
        return build_year_dashboard(
            year=request.year,
            activities=request.activities,
            as_of_date_local=request.as_of_date_local,
            source=request.source,
            goals=to_year_goals(request.year, request.goals),
            retrieved_at_local=request.retrieved_at_local,
            mode=request.mode or settings.default_mode,
            blend_weight_rolling=(
                request.blend_weight_rolling
                if request.blend_weight_rolling is not None
                else settings.blend_weight_rolling
            ),
            include_commute=(
                request.include_commute
                if request.include_commute is not None
                else settings.include_commute
            ),
        )
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid 'asOfDateLocal': {request.as_of_date_local!r}",
        )


@router.post("/dashboard", response_model=DashboardResponse)
async def get_year_dashboard(
    request: DashboardRequest,
    settings: Settings = Depends(get_settings),
):
    """Goal progress and forecasts for every sport of one year."""
    dashboard = _build_dashboard(request, settings)

    return DashboardResponse(
        year=dashboard.year,
        mode=dashboard.mode,
        as_of_date_local=dashboard.as_of_date_local,
        retrieved_at_local=dashboard.retrieved_at_local,
        goals=dashboard.goals.to_dict() if dashboard.goals else None,
        run=AthleteStatsResponse.model_validate(dashboard.sports[Sport.RUN]),
        ride=AthleteStatsResponse.model_validate(dashboard.sports[Sport.RIDE]),
    )


@router.post("/narrative", response_model=list[NarrativeResponse])
async def get_narratives(
    request: DashboardRequest,
    settings: Settings = Depends(get_settings),
):
    """Facts and narrative for every (sport, metric) that has a goal."""
    dashboard = _build_dashboard(request, settings)

    narratives = []
    for sport, stats in dashboard.sports.items():
        sport_goals = dashboard.goals.for_sport(sport) if dashboard.goals else None
        for metric in GoalMetric:
            facts = derive_metric_facts(metric, stats, sport_goals)
            if facts is None:
                continue
            narrative = build_narrative(sport, metric, facts)
            narratives.append(
                NarrativeResponse(
                    sport=sport,
                    metric=metric,
                    facts=facts.to_dict(),
                    **narrative.to_dict(),
                )
            )

    log.info(f"[API] Built {len(narratives)} narrative(s) for {request.year}")
    return narratives
