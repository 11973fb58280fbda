"""
Activity normalization.

Converts provider-shaped activities into NormalizedActivity records:
- Maps sport types to the supported allow-list (run, ride)
- Drops records with unparseable start timestamps
- Optionally drops commutes
- Caches year/month/day-of-year so later stages never recompute them
"""

import logging
from typing import Iterable, List, Optional

from .adapters import ProviderActivity
from .calendar_math import day_of_year, parse_local_datetime
from .models import NormalizedActivity, Sport

logger = logging.getLogger(__name__)


def map_sport(activity_type: Optional[str]) -> Optional[Sport]:
    """Map a provider sport type to a Sport, or None if unsupported."""
    t = (activity_type or "").strip().lower()
    if t == "run":
        return Sport.RUN
    if t == "ride":
        return Sport.RIDE
    return None


def _normalize_one(
    activity: ProviderActivity,
    include_commute: bool,
) -> Optional[NormalizedActivity]:
    sport = map_sport(activity.type)
    if sport is None:
        return None

    try:
        start = parse_local_datetime(activity.start_date_local)
    except (TypeError, ValueError):
        logger.debug(
            f"[NORMALIZE] Dropping activity {activity.id}: "
            f"unparseable start {activity.start_date_local!r}"
        )
        return None

    is_commute = bool(activity.commute)
    if is_commute and not include_commute:
        return None

    return NormalizedActivity(
        id=str(activity.id),
        sport=sport,
        start_date_local=activity.start_date_local,
        year=start.year,
        month=start.month,
        day_of_year=day_of_year(start),
        distance_km=max(0.0, (activity.distance or 0) / 1000),
        elevation_m=max(0.0, activity.total_elevation_gain or 0),
        moving_time_sec=max(0.0, activity.moving_time or 0),
        is_commute=is_commute,
        is_indoor=bool(activity.trainer),
    )


def normalize_activities(
    activities: Iterable[ProviderActivity],
    include_commute: bool = True,
) -> List[NormalizedActivity]:
    """
    Normalize provider activities.

    Unsupported sports and unparseable dates are skipped silently; a bad
    record never fails the batch.

    Args:
        activities: Adapted provider activities
        include_commute: If False, commute activities are excluded

    Returns:
        Normalized activities sorted by start_date_local
    """
    activities = list(activities)
    normalized = []
    for activity in activities:
        result = _normalize_one(activity, include_commute)
        if result is not None:
            normalized.append(result)

    normalized.sort(key=lambda a: a.start_date_local)

    logger.debug(
        f"[NORMALIZE] Kept {len(normalized)} of {len(activities)} activities "
        f"(include_commute={include_commute})"
    )
    return normalized
