"""
Input adapters for raw activity records.

Activities reach the engine in one of two shapes: provider-native records
from the live fitness API, or records from the local activity cache. The
caller picks the adapter through ActivitySource; the engine never guesses
the shape at runtime.

Adapters do not validate. Missing values are defaulted so that the
Normalizer can drop unusable records one by one.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)


class ActivitySource(str, Enum):
    """Shape of the raw activity records supplied by the caller."""

    PROVIDER = "provider"
    CACHED = "cached"


@dataclass
class ProviderActivity:
    """Provider-shaped activity, the input of the Normalizer."""

    id: Union[int, str]
    type: str  # e.g. "Run", "Ride"
    start_date_local: str
    distance: float = 0.0  # meters
    total_elevation_gain: float = 0.0  # meters
    moving_time: float = 0.0  # seconds
    elapsed_time: Optional[float] = None
    commute: bool = False
    trainer: bool = False  # indoor
    name: Optional[str] = None


def _to_float(value: Any) -> float:
    """Convert loosely typed numbers ('12.5', None, '') to float."""
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def from_provider(record: dict) -> ProviderActivity:
    """Adapt a provider-native activity record."""
    elapsed = record.get("elapsed_time")
    return ProviderActivity(
        id=record.get("id", ""),
        type=str(record.get("type") or ""),
        start_date_local=str(record.get("start_date_local") or ""),
        distance=_to_float(record.get("distance")),
        total_elevation_gain=_to_float(record.get("total_elevation_gain")),
        moving_time=_to_float(record.get("moving_time")),
        elapsed_time=_to_float(elapsed) if elapsed is not None else None,
        commute=bool(record.get("commute")),
        trainer=bool(record.get("trainer")),
        name=record.get("name"),
    )


def from_cached(record: dict) -> ProviderActivity:
    """Adapt a cached domain activity (sport/startDate/distanceKm shape)."""
    sport = str(record.get("sport") or "")
    return ProviderActivity(
        id=record.get("id", ""),
        type=sport.capitalize(),
        start_date_local=str(record.get("startDate") or ""),
        distance=_to_float(record.get("distanceKm")) * 1000,
        total_elevation_gain=_to_float(record.get("elevationM")),
        moving_time=_to_float(record.get("movingTimeSec")),
        commute=bool(record.get("commute")),
        trainer=bool(record.get("trainer")),
        name=record.get("name"),
    )


ADAPTERS = {
    ActivitySource.PROVIDER: from_provider,
    ActivitySource.CACHED: from_cached,
}


def adapt_activities(
    records: Iterable[dict],
    source: ActivitySource = ActivitySource.PROVIDER,
) -> List[ProviderActivity]:
    """
    Adapt a batch of raw records with the adapter for the given source.

    Args:
        records: Raw activity dicts
        source: Which shape the records have

    Returns:
        List of ProviderActivity, one per record
    """
    adapter = ADAPTERS[ActivitySource(source)]
    adapted = [adapter(record) for record in records]
    logger.debug(f"[ADAPT] Adapted {len(adapted)} {ActivitySource(source).value} record(s)")
    return adapted
