"""Name normalization shared by the classifier and relevance filter."""
from __future__ import annotations

import re
from typing import Iterable, Optional

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """Lower-case, replace anything but a-z, 0-9 and whitespace with a space,
    then collapse whitespace runs and trim."""
    if not text:
        return ""
    lowered = _NON_ALNUM_RE.sub(" ", str(text).lower())
    return _WHITESPACE_RE.sub(" ", lowered).strip()


def contains_any(normalized: str, needles: Iterable[str]) -> bool:
    if not normalized:
        return False
    for needle in needles:
        norm_needle = normalize(needle)
        if norm_needle and norm_needle in normalized:
            return True
    return False
