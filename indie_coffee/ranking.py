"""Ordering strategies for assembled results.

Every ordering here goes through ``sorted`` so equal keys keep their input
order. A missing distance is mapped once to ``config.DISTANCE_SENTINEL`` and
then compared like any other number.
"""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from . import config
from .models import RankedResult
from .scoring import distance_tier, quality_score

STRATEGY_DISTANCE = "distance"
STRATEGY_COMPOSITE = "composite"
STRATEGIES = (STRATEGY_DISTANCE, STRATEGY_COMPOSITE)

DISPLAY_DISTANCE = "distance"
DISPLAY_RATING = "rating"
DISPLAY_ORDERS = (DISPLAY_DISTANCE, DISPLAY_RATING)


def distance_or_sentinel(distance_meters: Optional[float]) -> float:
    if distance_meters is None:
        return float(config.DISTANCE_SENTINEL)
    return float(distance_meters)


def distance_sort_key(row: RankedResult) -> Tuple[float]:
    return (distance_or_sentinel(row.distance_meters),)


def composite_sort_key(row: RankedResult) -> Tuple[int, float, float]:
    return (
        distance_tier(row.distance_meters),
        -quality_score(row.rating, row.user_rating_count),
        distance_or_sentinel(row.distance_meters),
    )


def rating_sort_key(row: RankedResult) -> Tuple[float, int, float]:
    """Best rated first, then most reviewed, then closest."""
    return (
        -(float(row.rating) if row.rating is not None else 0.0),
        -(int(row.user_rating_count) if row.user_rating_count is not None else 0),
        distance_or_sentinel(row.distance_meters),
    )


_STRATEGY_KEYS: Dict[str, Callable[[RankedResult], Tuple]] = {
    STRATEGY_DISTANCE: distance_sort_key,
    STRATEGY_COMPOSITE: composite_sort_key,
}

_DISPLAY_KEYS: Dict[str, Callable[[RankedResult], Tuple]] = {
    DISPLAY_DISTANCE: distance_sort_key,
    DISPLAY_RATING: rating_sort_key,
}


def validate_strategy(strategy: str) -> str:
    value = (strategy or "").strip().lower()
    if value not in _STRATEGY_KEYS:
        raise ValueError(f"strategy must be one of: {', '.join(STRATEGIES)}")
    return value


def rank(results: Iterable[RankedResult], strategy: str = STRATEGY_DISTANCE) -> List[RankedResult]:
    key = _STRATEGY_KEYS[validate_strategy(strategy)]
    return sorted(results, key=key)


def sort_for_display(results: Iterable[RankedResult], order: str = DISPLAY_DISTANCE) -> List[RankedResult]:
    """Re-sort an already filtered list the way the results view offers."""
    value = (order or "").strip().lower()
    if value not in _DISPLAY_KEYS:
        raise ValueError(f"display order must be one of: {', '.join(DISPLAY_ORDERS)}")
    return sorted(results, key=_DISPLAY_KEYS[value])
