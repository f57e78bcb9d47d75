"""Name-based chain/franchise detection."""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence

from . import config
from .text import contains_any, normalize

REASON_BRAND = "brand"
REASON_NUMBERED_OUTLET = "numbered_outlet"
REASON_STORE_NUMBER = "store_number"

# Checked against the lower-cased raw name; normalization strips "#".
_NUMBERED_OUTLET_RE = re.compile(r"#\s?\d{2,}\b")
_STORE_WORD_RE = re.compile(r"\b(store|location)\b")
_STANDALONE_NUMBER_RE = re.compile(r"\b\d{2,}\b")


def matching_brands(normalized_name: str, brands: Iterable[str]) -> List[str]:
    """Return the normalized brand entries contained in ``normalized_name``."""
    matches: List[str] = []
    if not normalized_name:
        return matches
    for brand in brands:
        norm_brand = normalize(brand)
        if norm_brand and norm_brand in normalized_name and norm_brand not in matches:
            matches.append(norm_brand)
    return matches


def _confirmed_by_brand(
    normalized_name: str,
    matches: Sequence[str],
    ambiguous_tokens: Dict[str, List[str]],
) -> bool:
    ambiguous = {normalize(token): terms for token, terms in ambiguous_tokens.items()}
    if any(m not in ambiguous for m in matches):
        return True
    return any(contains_any(normalized_name, ambiguous[m]) for m in matches)


def classify_chain(
    name: Optional[str],
    brands: Optional[Iterable[str]] = None,
    ambiguous_tokens: Optional[Dict[str, List[str]]] = None,
) -> Optional[str]:
    """Return why ``name`` looks like a chain outlet, or None if it does not.

    A brand-list hit decides on its own; the numbering heuristics only run
    when no brand entry matched at all.
    """
    if brands is None:
        brands = config.KNOWN_CHAINS
    if ambiguous_tokens is None:
        ambiguous_tokens = config.AMBIGUOUS_CHAIN_TOKENS

    normalized = normalize(name)
    matches = matching_brands(normalized, brands)
    if matches:
        if _confirmed_by_brand(normalized, matches, ambiguous_tokens):
            return REASON_BRAND
        return None

    if _NUMBERED_OUTLET_RE.search((name or "").lower()):
        return REASON_NUMBERED_OUTLET
    if _STORE_WORD_RE.search(normalized) and _STANDALONE_NUMBER_RE.search(normalized):
        return REASON_STORE_NUMBER
    return None


def is_chain(
    name: Optional[str],
    brands: Optional[Iterable[str]] = None,
    ambiguous_tokens: Optional[Dict[str, List[str]]] = None,
) -> bool:
    return classify_chain(name, brands=brands, ambiguous_tokens=ambiguous_tokens) is not None
