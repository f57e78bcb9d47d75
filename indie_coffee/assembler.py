"""Turns raw upstream places into the final ranked, capped result list."""
from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlencode

from . import config
from .chains import classify_chain
from .geo import haversine_meters
from .models import RankedResult, RawPlace
from .ranking import rank
from .relevance import looks_like_coffee_venue

logger = logging.getLogger(__name__)


def maps_deep_link(place_id: str) -> str:
    params = {"api": "1", "query": config.DEEP_LINK_QUERY, "query_place_id": place_id}
    return f"{config.MAPS_SEARCH_URL}?{urlencode(params)}"


def dedupe_by_id(places: Iterable[RawPlace]) -> List[RawPlace]:
    """Keep the first occurrence of each place_id, preserving order."""
    unique: Dict[str, RawPlace] = {}
    for place in places:
        if place.place_id and place.place_id not in unique:
            unique[place.place_id] = place
    return list(unique.values())


def compute_distance_meters(
    place: RawPlace, origin_lat: Optional[float], origin_lon: Optional[float]
) -> Optional[int]:
    if origin_lat is None or origin_lon is None or not place.has_location:
        return None
    dist = haversine_meters(origin_lat, origin_lon, float(place.lat), float(place.lon))
    # Half-up rounding, not banker's.
    return int(math.floor(dist + 0.5))


def assemble(
    raw_places: Iterable[RawPlace],
    origin_lat: Optional[float],
    origin_lon: Optional[float],
    strategy: str = config.DEFAULT_STRATEGY,
    max_results: int = config.MAX_RESULTS,
    require_coffee_hint: bool = False,
) -> List[RankedResult]:
    unique = dedupe_by_id(raw_places)

    items: List[RankedResult] = []
    rejection_counts: Dict[str, int] = {}
    for place in unique:
        reason = None
        if not (place.name or "").strip():
            reason = "missing_name"
        else:
            chain_reason = classify_chain(place.name)
            if chain_reason is not None:
                reason = f"chain_{chain_reason}"
            elif require_coffee_hint and not looks_like_coffee_venue(place.name):
                reason = "not_coffee"

        if reason:
            rejection_counts[reason] = rejection_counts.get(reason, 0) + 1
            logger.debug("Dropped %s (%s): %s", place.place_id, place.name, reason)
            continue

        distance = compute_distance_meters(place, origin_lat, origin_lon)
        items.append(RankedResult.from_place(place, distance, maps_deep_link(place.place_id)))

    ranked = rank(items, strategy)
    capped = ranked[: max(0, int(max_results))]
    logger.info(
        "Assembled %s results from %s unique places (%s kept before cap, rejections=%s)",
        len(capped),
        len(unique),
        len(items),
        rejection_counts,
    )
    return capped
