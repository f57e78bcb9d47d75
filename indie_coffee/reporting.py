"""Output reporting helpers."""
from __future__ import annotations

import csv
import json
import os
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO

from .models import RankedResult

CSV_FIELDNAMES = [
    "placeId",
    "name",
    "rating",
    "ratingsTotal",
    "address",
    "openNow",
    "lat",
    "lng",
    "distanceMeters",
    "mapsUrl",
]


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


@contextmanager
def atomic_writer(
    path: str,
    mode: str = "w",
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> Iterator[TextIO]:
    dir_path = os.path.dirname(path) or "."
    base = os.path.basename(path)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{base}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, mode, encoding=encoding, newline=newline) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def write_json_object(path: str, payload: Dict[str, Any]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


def write_results_csv(path: str, rows: Iterable[RankedResult]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDNAMES)
        writer.writeheader()
        for row in rows:
            writer.writerow(row.to_dict())


def format_distance(distance_meters: Optional[int]) -> str:
    if distance_meters is None:
        return ""
    if distance_meters < 1000:
        return f"{distance_meters} m"
    return f"{distance_meters / 1000:.1f} km"


def render_results(rows: Iterable[RankedResult]) -> List[str]:
    lines: List[str] = []
    for idx, row in enumerate(rows, start=1):
        header = f"{idx}. {row.name}"
        distance = format_distance(row.distance_meters)
        if distance:
            header = f"{header} ({distance})"
        lines.append(header)

        details: List[str] = []
        if row.rating is not None:
            rating = f"{row.rating:.1f} stars"
            if row.user_rating_count is not None:
                rating = f"{rating} ({row.user_rating_count})"
            details.append(rating)
        if row.open_now is not None:
            details.append("Open now" if row.open_now else "Closed")
        if details:
            lines.append("   " + " | ".join(details))
        if row.address:
            lines.append(f"   {row.address}")
        lines.append(f"   {row.maps_url}")
    if not lines:
        lines.append("No independent coffee shops found nearby.")
    return lines
