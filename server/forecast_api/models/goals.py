"""Goal models."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from goal_forecast.models import Sport, SportGoals, YearGoals


class SportGoalsIn(BaseModel):
    """Goals of one sport. Omitted or null metrics mean no goal."""

    model_config = ConfigDict(populate_by_name=True)

    distance_km: Optional[float] = Field(default=None, ge=0, alias="distanceKm")
    count: Optional[int] = Field(default=None, ge=0)
    elevation_m: Optional[float] = Field(default=None, ge=0, alias="elevationM")

    def to_sport_goals(self) -> SportGoals:
        return SportGoals(
            distance_km=self.distance_km,
            count=self.count,
            elevation_m=self.elevation_m,
        )


def to_year_goals(year: int, per_sport: dict[Sport, SportGoalsIn]) -> Optional[YearGoals]:
    """Convert request goals to YearGoals, or None when nothing is set."""
    converted = {
        sport: goals.to_sport_goals()
        for sport, goals in per_sport.items()
        if not goals.to_sport_goals().is_empty()
    }
    if not converted:
        return None
    return YearGoals(year=year, per_sport=converted)
