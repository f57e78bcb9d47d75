"""Place records flowing through the ranking pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RawPlace:
    place_id: str
    name: Optional[str] = None
    rating: Optional[float] = None
    user_rating_count: Optional[int] = None
    address: Optional[str] = None
    open_now: Optional[bool] = None
    lat: Optional[float] = None
    lon: Optional[float] = None

    @property
    def has_location(self) -> bool:
        return self.lat is not None and self.lon is not None


@dataclass(frozen=True)
class RankedResult:
    place_id: str
    name: str
    rating: Optional[float]
    user_rating_count: Optional[int]
    address: Optional[str]
    open_now: Optional[bool]
    lat: Optional[float]
    lon: Optional[float]
    distance_meters: Optional[int]
    maps_url: str

    @classmethod
    def from_place(
        cls, place: RawPlace, distance_meters: Optional[int], maps_url: str
    ) -> "RankedResult":
        return cls(
            place_id=place.place_id,
            name=place.name or "",
            rating=place.rating,
            user_rating_count=place.user_rating_count,
            address=place.address,
            open_now=place.open_now,
            lat=place.lat,
            lon=place.lon,
            distance_meters=distance_meters,
            maps_url=maps_url,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Caller-facing shape, keyed the way the web client reads it."""
        return {
            "placeId": self.place_id,
            "name": self.name,
            "rating": self.rating,
            "ratingsTotal": self.user_rating_count,
            "address": self.address,
            "openNow": self.open_now,
            "lat": self.lat,
            "lng": self.lon,
            "distanceMeters": self.distance_meters,
            "mapsUrl": self.maps_url,
        }
