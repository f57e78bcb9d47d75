"""Distance tiers and review-based quality score for composite ranking."""
from __future__ import annotations

import math
from typing import Optional, Sequence

from . import config


def distance_tier(
    distance_meters: Optional[float],
    bounds: Sequence[float] = config.DISTANCE_TIER_BOUNDS_M,
) -> int:
    """0 for the closest band up to len(bounds) for far or unknown distances."""
    if distance_meters is None:
        return len(bounds)
    for tier, upper in enumerate(bounds):
        if distance_meters < upper:
            return tier
    return len(bounds)


def quality_score(rating: Optional[float], user_rating_count: Optional[int]) -> float:
    r = float(rating) if rating is not None else 0.0
    v = max(0, int(user_rating_count)) if user_rating_count is not None else 0
    return config.QUALITY_RATING_WEIGHT * r + math.log10(v + 1)
