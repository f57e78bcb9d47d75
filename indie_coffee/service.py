"""Request handling around the ranking core.

Validates caller input, applies the rate-limit policy, fetches places from the
upstream provider and hands them to the assembler.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests

from . import config
from .assembler import assemble
from .geo import is_valid_coordinate
from .http import HttpClient
from .models import RankedResult
from .places_client import PlacesApiError, PlacesClient
from .rate_limit import RateLimitPolicy, build_rate_limiter, client_key_from_headers
from .ranking import validate_strategy

logger = logging.getLogger(__name__)


class SearchError(RuntimeError):
    status_code = 500


class InputValidationError(SearchError, ValueError):
    status_code = 400


class RateLimitExceededError(SearchError):
    status_code = 429


class ConfigurationError(SearchError):
    status_code = 500


class UpstreamError(SearchError):
    status_code = 502


@dataclass
class SearchResponse:
    radius_meters: int
    items: List[RankedResult] = field(default_factory=list)

    @property
    def returned(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "radiusMeters": self.radius_meters,
            "returned": self.returned,
            "items": [item.to_dict() for item in self.items],
        }


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_coordinates(lat: Any, lng: Any) -> Tuple[float, float]:
    if lat is None or lng is None or lat == "" or lng == "":
        raise InputValidationError("lat and lng are required")
    lat_f = _to_float(lat)
    lng_f = _to_float(lng)
    if lat_f is None or lng_f is None or not is_valid_coordinate(lat_f, lng_f):
        raise InputValidationError("lat/lng must be valid numbers")
    return lat_f, lng_f


def clamp_radius(radius: Any = None) -> int:
    """Default when absent or unparseable, else round and clamp to the provider range."""
    if radius is None or radius == "":
        return config.DEFAULT_RADIUS_M
    value = _to_float(radius)
    if value is None or not math.isfinite(value):
        return config.DEFAULT_RADIUS_M
    rounded = int(math.floor(value + 0.5))
    return max(config.MIN_RADIUS_M, min(config.MAX_RADIUS_M, rounded))


class CoffeeSearchService:
    def __init__(
        self,
        places_client: Optional[PlacesClient] = None,
        api_key: Optional[str] = None,
        rate_limiter: Optional[RateLimitPolicy] = None,
        max_pages: int = config.PLACES_MAX_PAGES,
        max_results: Optional[int] = None,
    ) -> None:
        self.places_client = places_client
        self.api_key = api_key
        # None follows config: a sliding window when enabled, NoRateLimit otherwise.
        self.rate_limiter: RateLimitPolicy = (
            rate_limiter if rate_limiter is not None else build_rate_limiter()
        )
        self.max_pages = max_pages
        self.max_results = max_results

    def _client(self) -> PlacesClient:
        if self.places_client is not None:
            return self.places_client
        if not self.api_key:
            raise ConfigurationError(f"Missing {config.API_KEY_ENV}")
        http_client = HttpClient(
            timeout=config.HTTP_TIMEOUT_SECONDS,
            retry_max=config.HTTP_RETRY_MAX,
            backoff_base=config.HTTP_BACKOFF_BASE,
            backoff_max=config.HTTP_BACKOFF_MAX,
        )
        self.places_client = PlacesClient(http_client, self.api_key)
        return self.places_client

    def search(
        self,
        lat: Any,
        lng: Any,
        radius_meters: Any = None,
        strategy: Optional[str] = None,
        client_key: Optional[str] = None,
        require_coffee_hint: Optional[bool] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> SearchResponse:
        if client_key is None:
            client_key = client_key_from_headers(headers)
        if not self.rate_limiter.allow(client_key):
            logger.warning("Rate limit exceeded for %s", client_key)
            raise RateLimitExceededError("Rate limit exceeded. Try again in a minute.")

        client = self._client()
        origin_lat, origin_lng = parse_coordinates(lat, lng)
        radius = clamp_radius(radius_meters)
        try:
            strategy = validate_strategy(strategy or config.DEFAULT_STRATEGY)
        except ValueError as exc:
            raise InputValidationError(str(exc)) from exc
        if require_coffee_hint is None:
            require_coffee_hint = config.REQUIRE_COFFEE_HINT
        max_results = self.max_results if self.max_results is not None else config.MAX_RESULTS

        try:
            raw = client.search_text_all(
                config.SEARCH_QUERY, origin_lat, origin_lng, radius, max_pages=self.max_pages
            )
        except PlacesApiError as exc:
            logger.error("Upstream search failed: %s", exc)
            raise UpstreamError(str(exc)) from exc
        except requests.RequestException as exc:
            logger.error("Upstream request failed: %s", exc)
            raise UpstreamError(f"Upstream request failed: {exc}") from exc

        items = assemble(
            raw,
            origin_lat,
            origin_lng,
            strategy=strategy,
            max_results=max_results,
            require_coffee_hint=require_coffee_hint,
        )
        return SearchResponse(radius_meters=radius, items=items)
