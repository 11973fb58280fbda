"""Day-granular forecast and required-pace routes."""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from goal_forecast.forecast import DailyDataPoint, ForecastInput, calculate_forecast
from goal_forecast.calendar_math import parse_iso_date
from goal_forecast.pace import SportSnapshot, enrich_snapshot, get_time_context

from ..models.forecast import (
    DailyPoint,
    ForecastRequest,
    ForecastResponse,
    RequiredPaceRequest,
    RequiredPaceResponse,
    TimeContextResponse,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forecast", tags=["Forecast"])


def _to_series(points: Optional[list[DailyPoint]]) -> Optional[list[DailyDataPoint]]:
    if points is None:
        return None
    return [DailyDataPoint(date=p.date, value=p.value) for p in points]


@router.post("/calculate", response_model=ForecastResponse)
async def calculate(request: ForecastRequest):
    """Day-granular forecast of one metric against a yearly goal."""
    try:
        today = parse_iso_date(request.today)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid 'today' date: {request.today!r}")

    result = calculate_forecast(
        ForecastInput(
            goal_value=request.goal_value,
            current_value=request.current_value,
            today=today,
            year=request.year,
            daily_series=_to_series(request.daily_series),
            activity_count_by_day=_to_series(request.activity_count_by_day),
        )
    )
    log.info(f"[API] Forecast for goal={request.goal_value}: {result.label} ({result.status.value})")
    return ForecastResponse.model_validate(result)


@router.post("/required-pace", response_model=RequiredPaceResponse)
async def required_pace(request: RequiredPaceRequest):
    """Required weekly pace and baseline year-end projection for one sport."""
    try:
        time = get_time_context(request.today)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid 'today' date: {request.today!r}")

    snapshot = SportSnapshot(
        sport=request.sport,
        ytd=request.ytd.by_metric(),
        last7={},
        last28=request.last28.by_metric(),
    )
    enriched = enrich_snapshot(time, snapshot, request.goals.to_sport_goals())

    return RequiredPaceResponse(
        sport=request.sport,
        time=TimeContextResponse.model_validate(time),
        required_per_week=enriched.required_per_week,
        baseline_forecast_eoy=enriched.baseline_forecast_eoy,
    )
