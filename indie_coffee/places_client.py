"""Places Text Search client with pagination and response parsing."""
from __future__ import annotations

import logging
import math
import time
from typing import Any, Callable, Dict, List, Optional

from . import config
from .http import HttpClient
from .models import RawPlace

logger = logging.getLogger(__name__)


class PlacesApiError(RuntimeError):
    def __init__(self, status: str, message: Optional[str] = None) -> None:
        self.status = status
        self.message = message
        detail = f"Places API status {status}"
        if message:
            detail = f"{detail}: {message}"
        super().__init__(detail)


class PlacesClient:
    def __init__(
        self,
        http_client: HttpClient,
        api_key: str,
        url: str = config.PLACES_TEXT_SEARCH_URL,
        page_token_delay: float = config.PAGE_TOKEN_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.http = http_client
        self.api_key = api_key
        self.url = url
        self.page_token_delay = page_token_delay
        self.sleep = sleep

    def search_text(
        self,
        query: str,
        lat: float,
        lon: float,
        radius_m: int,
        page_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = build_text_search_params(query, lat, lon, radius_m, self.api_key, page_token)
        return self.http.get_json(self.url, params)

    def search_text_all(
        self,
        query: str,
        lat: float,
        lon: float,
        radius_m: int,
        max_pages: int = config.PLACES_MAX_PAGES,
    ) -> List[RawPlace]:
        """Collect up to ``max_pages`` pages of results.

        An error status on the first page raises PlacesApiError. A failure on a
        continuation page keeps what was already collected.
        """
        places: List[RawPlace] = []
        page_token: Optional[str] = None
        for page in range(max(1, int(max_pages))):
            if page_token:
                self.sleep(self.page_token_delay)
            resp = self.search_text(query, lat, lon, radius_m, page_token=page_token)
            status = resp.get("status")
            if status and status not in config.PLACES_OK_STATUSES:
                if page == 0:
                    raise PlacesApiError(status, resp.get("error_message"))
                logger.warning(
                    "Places page %s returned %s; keeping %s places", page + 1, status, len(places)
                )
                break
            places.extend(parse_places_response(resp))
            page_token = resp.get("next_page_token")
            if not page_token:
                break
        logger.info("Fetched %s places for %r within %sm", len(places), query, radius_m)
        return places


def build_text_search_params(
    query: str,
    lat: float,
    lon: float,
    radius_m: int,
    api_key: str,
    page_token: Optional[str] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "query": query,
        "location": f"{lat},{lon}",
        "radius": str(int(radius_m)),
        "key": api_key,
    }
    if page_token:
        params["pagetoken"] = page_token
    return params


# Adapter/mapper for Places response fields

def _number_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def parse_places_response(response: Dict[str, Any]) -> List[RawPlace]:
    results = response.get("results") or []
    parsed: List[RawPlace] = []
    for p in results:
        place_id = p.get("place_id")
        if not place_id:
            continue
        rating = _number_or_none(p.get("rating"))
        count = _number_or_none(p.get("user_ratings_total"))
        geometry = p.get("geometry") or {}
        location = geometry.get("location") or {}
        lat = _number_or_none(location.get("lat"))
        lon = _number_or_none(location.get("lng"))
        hours = p.get("opening_hours") or {}
        open_now = hours.get("open_now")
        parsed.append(
            RawPlace(
                place_id=str(place_id),
                name=p.get("name"),
                rating=rating,
                user_rating_count=int(count) if count is not None else None,
                address=p.get("formatted_address") or p.get("vicinity"),
                open_now=open_now if isinstance(open_now, bool) else None,
                lat=lat,
                lon=lon,
            )
        )
    return parsed
