"""Coffee relevance check for names returned by broad upstream queries."""
from __future__ import annotations

from typing import Iterable, Optional

from . import config
from .text import contains_any, normalize


def looks_like_coffee_venue(name: Optional[str], hints: Optional[Iterable[str]] = None) -> bool:
    """True when the normalized name carries any coffee hint.

    Permissive on purpose: only meant to drop obviously unrelated venues when
    the upstream query was not restricted to a category.
    """
    if hints is None:
        hints = config.COFFEE_HINTS
    return contains_any(normalize(name), hints)
