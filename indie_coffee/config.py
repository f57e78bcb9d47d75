"""Project configuration.

Loads optional overrides from search_config.json when available, falling back
to the defaults below. Brand and hint lists live here as plain data so they
can be extended without touching the classifier.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- API endpoints ---

PLACES_TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
MAPS_SEARCH_URL = "https://www.google.com/maps/search/"

API_KEY_ENV = "GOOGLE_PLACES_API_KEY"

# --- Upstream query ---

SEARCH_QUERY = "coffee shop"
DEEP_LINK_QUERY = "coffee"
PLACES_OK_STATUSES = ("OK", "ZERO_RESULTS")
PLACES_MAX_PAGES = 3
# Google needs a moment before a next_page_token becomes valid.
PAGE_TOKEN_DELAY_SECONDS = 2.0

# --- Radius (meters) ---

DEFAULT_RADIUS_M = 5000
MIN_RADIUS_M = 500
MAX_RADIUS_M = 100000

# --- Results ---

MAX_RESULTS = 60
DEFAULT_STRATEGY = "distance"
REQUIRE_COFFEE_HINT = False

# Stands in for "no distance". Larger than any great-circle distance on Earth
# (about 2.0e7 m), so it never collides with a computed value.
DISTANCE_SENTINEL = 9e15

# Composite ranking tier upper bounds, exclusive.
DISTANCE_TIER_BOUNDS_M = (500, 1200, 2500)
QUALITY_RATING_WEIGHT = 2.0

# --- Chain classification ---

_DEFAULT_KNOWN_CHAINS: List[str] = [
    "starbucks",
    "dunkin",
    "peet",
    "tim hortons",
    "caribou",
    "dutch bros",
    "scooter",
    "the human bean",
    "biggby",
    "gloria jean",
    "coffee bean & tea leaf",
    "the coffee bean",
    "7-eleven",
    "mcdonald",
    "panera",
    "einstein bros",
    "costa",
    "pret a manger",
    "greggs",
    "dunn brothers",
    "dunn brothers coffee",
    "holiday stationstores",
    "holiday station store",
    "holiday",
]

# Brand tokens that also show up in independent names. A match on one of these
# alone needs a corroborating term before it counts.
_DEFAULT_AMBIGUOUS_CHAIN_TOKENS: Dict[str, List[str]] = {
    "holiday": ["station", "store", "gas", "stationstores"],
}

_DEFAULT_COFFEE_HINTS: List[str] = [
    "coffee",
    "cafe",
    "caffe",
    "espresso",
    "roast",
    "roaster",
    "roastery",
    "roasting",
    "cold brew",
    "brew",
    "latte",
    "bean",
    "barista",
    "kaffee",
    "koffie",
]

KNOWN_CHAINS: List[str] = list(_DEFAULT_KNOWN_CHAINS)
AMBIGUOUS_CHAIN_TOKENS: Dict[str, List[str]] = {
    k: list(v) for k, v in _DEFAULT_AMBIGUOUS_CHAIN_TOKENS.items()
}
COFFEE_HINTS: List[str] = list(_DEFAULT_COFFEE_HINTS)

# --- Rate limiting ---

RATE_LIMIT_ENABLED = True
RATE_LIMIT_REQUESTS = 30
RATE_LIMIT_WINDOW_SECONDS = 60.0
RATE_LIMIT_KEY_PREFIX = "coffee"

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 20
HTTP_RETRY_MAX = 3
HTTP_BACKOFF_BASE = 0.5
HTTP_BACKOFF_MAX = 8.0


def reset_defaults() -> None:
    """Restore the list/mapping globals touched by load_search_config."""
    globals_ref = globals()
    globals_ref["KNOWN_CHAINS"] = list(_DEFAULT_KNOWN_CHAINS)
    globals_ref["AMBIGUOUS_CHAIN_TOKENS"] = {
        k: list(v) for k, v in _DEFAULT_AMBIGUOUS_CHAIN_TOKENS.items()
    }
    globals_ref["COFFEE_HINTS"] = list(_DEFAULT_COFFEE_HINTS)


def load_search_config(path: Optional[str] = None) -> bool:
    """Load search configuration from a JSON file.

    Updates module-level globals with values from the config file.
    ``extra_chains`` / ``extra_coffee_hints`` extend the default lists, while
    ``known_chains`` / ``coffee_hints`` replace them outright.
    Returns True if config was loaded, False if file not found.
    """
    if path is None:
        path = str(_REPO_ROOT / "search_config.json")

    config_path = Path(path)
    if not config_path.exists():
        return False

    with open(config_path, "r", encoding="utf-8") as f:
        data: Dict[str, Any] = json.load(f)

    globals_ref = globals()

    chains = data.get("known_chains")
    if chains:
        globals_ref["KNOWN_CHAINS"] = [str(c) for c in chains]
    extra_chains = data.get("extra_chains", [])
    if extra_chains:
        globals_ref["KNOWN_CHAINS"] = list(globals_ref["KNOWN_CHAINS"]) + [
            str(c) for c in extra_chains
        ]

    ambiguous = data.get("ambiguous_chain_tokens")
    if ambiguous:
        globals_ref["AMBIGUOUS_CHAIN_TOKENS"] = {
            str(token): [str(t) for t in terms] for token, terms in ambiguous.items()
        }

    hints = data.get("coffee_hints")
    if hints:
        globals_ref["COFFEE_HINTS"] = [str(h) for h in hints]
    extra_hints = data.get("extra_coffee_hints", [])
    if extra_hints:
        globals_ref["COFFEE_HINTS"] = list(globals_ref["COFFEE_HINTS"]) + [
            str(h) for h in extra_hints
        ]

    radius = data.get("default_radius_m")
    if radius is not None:
        globals_ref["DEFAULT_RADIUS_M"] = int(radius)

    max_results = data.get("max_results")
    if max_results is not None:
        globals_ref["MAX_RESULTS"] = int(max_results)

    strategy = data.get("strategy")
    if strategy:
        globals_ref["DEFAULT_STRATEGY"] = str(strategy)

    if "require_coffee_hint" in data:
        globals_ref["REQUIRE_COFFEE_HINT"] = bool(data["require_coffee_hint"])

    rate_limit = data.get("rate_limit", {})
    if "enabled" in rate_limit:
        globals_ref["RATE_LIMIT_ENABLED"] = bool(rate_limit["enabled"])
    if "requests" in rate_limit:
        globals_ref["RATE_LIMIT_REQUESTS"] = int(rate_limit["requests"])
    if "window_seconds" in rate_limit:
        globals_ref["RATE_LIMIT_WINDOW_SECONDS"] = float(rate_limit["window_seconds"])

    return True
