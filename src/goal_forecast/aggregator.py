"""
Yearly aggregation of normalized activities.

Buckets one sport's activities of one year into totals, month buckets and
rolling 7/28-day windows. The as-of instant is always passed in.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, List

from .calendar_math import parse_local_datetime
from .models import AggregateYear, MetricTotals, MonthBuckets, NormalizedActivity, Sport

logger = logging.getLogger(__name__)


def sum_totals(activities: Iterable[NormalizedActivity]) -> MetricTotals:
    """Fold activities into MetricTotals."""
    totals = MetricTotals()
    for activity in activities:
        totals = totals.add_activity(activity)
    return totals


def rolling_totals(
    activities: Iterable[NormalizedActivity],
    as_of: datetime,
    days: int,
) -> MetricTotals:
    """Totals of activities starting within [as_of - days, as_of], both ends inclusive."""
    cutoff = as_of - timedelta(days=days)
    in_window = [
        a for a in activities
        if cutoff <= parse_local_datetime(a.start_date_local) <= as_of
    ]
    return sum_totals(in_window)


def aggregate_year(
    normalized: List[NormalizedActivity],
    year: int,
    sport: Sport,
    as_of_date_local: str,
) -> AggregateYear:
    """
    Aggregate one (year, sport) slice of normalized activities.

    Args:
        normalized: Output of normalize_activities (sorted ascending)
        year: Calendar year to aggregate
        sport: Sport to aggregate
        as_of_date_local: Reference instant for rolling windows

    Returns:
        AggregateYear for the slice

    Raises:
        ValueError: If as_of_date_local cannot be parsed
    """
    as_of = parse_local_datetime(as_of_date_local)
    sport = Sport(sport)

    filtered = [a for a in normalized if a.year == year and a.sport == sport]

    by_month = MonthBuckets()
    for activity in filtered:
        by_month.add_activity(activity)

    last7 = rolling_totals(filtered, as_of, 7)
    last28 = rolling_totals(filtered, as_of, 28)

    aggregate = AggregateYear(
        year=year,
        sport=sport,
        totals=sum_totals(filtered),
        by_month=by_month,
        last7=last7,
        last28=last28,
        last_activity_date_local=filtered[-1].start_date_local if filtered else None,
    )

    logger.debug(
        f"[AGGREGATE] {sport.value} {year}: {aggregate.totals.count} activities, "
        f"{aggregate.totals.distance_km:.1f} km, last28={last28.count}"
    )
    return aggregate
