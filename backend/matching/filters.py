"""Filter normalisation.

Raw group filters arrive from clients with optional, camelCase or malformed
fields. They are parsed once into :class:`GroupFilters` when the group is
created, and combined with the requester's location into a
:class:`CandidateFilter` on every candidate request. Malformed numbers never
raise: they fall back to their defaults.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..groups.models import GroupFilters

_ALIASES: dict[str, tuple[str, ...]] = {
    "min_price_level": ("min_price_level", "minPriceLevel"),
    "max_price_level": ("max_price_level", "maxPriceLevel", "price_level", "priceLevel"),
    "min_rating": ("min_rating", "minRating"),
    "categories": ("categories",),
    "custom_options": ("custom_options", "customOptions", "options"),
    "max_distance_km": ("max_distance_km", "maxDistanceKm"),
    "open_now": ("open_now", "openNow"),
}


@dataclass(frozen=True)
class CandidateFilter:
    categories: frozenset[str] = frozenset()
    min_rating: float = 0.0
    max_price_level: int | None = None
    open_now_required: bool = False
    name_allow_list: frozenset[str] | None = None
    requester_location: tuple[float, float] | None = None


def coerce_float(
    value: Any,
    default: float | None = None,
    lo: float | None = None,
    hi: float | None = None,
) -> float | None:
    """Parse *value* as a finite float within [lo, hi], else return *default*."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    if (lo is not None and number < lo) or (hi is not None and number > hi):
        return default
    return number


def coerce_int(
    value: Any,
    default: int | None = None,
    lo: int | None = None,
    hi: int | None = None,
) -> int | None:
    number = coerce_float(value, None, lo, hi)
    if number is None or not number.is_integer():
        return default
    return int(number)


def coerce_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes"}:
            return True
        if lowered in {"false", "0", "no"}:
            return False
    return default


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        items: list[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
    else:
        return []
    return [str(v).strip() for v in items if v is not None and str(v).strip()]


def _pick(raw: Mapping[str, Any], key: str) -> Any:
    for alias in _ALIASES[key]:
        if raw.get(alias) is not None:
            return raw[alias]
    return None


def parse_group_filters(raw: Mapping[str, Any] | GroupFilters | None) -> GroupFilters:
    """Parse a raw filter mapping into :class:`GroupFilters`, substituting defaults."""
    if isinstance(raw, GroupFilters):
        return raw
    if not isinstance(raw, Mapping):
        return GroupFilters()

    return GroupFilters(
        min_price_level=coerce_int(_pick(raw, "min_price_level"), None, 0, 4),
        max_price_level=coerce_int(_pick(raw, "max_price_level"), None, 0, 4),
        min_rating=coerce_float(_pick(raw, "min_rating"), 0.0, 0.0, 5.0),
        categories=_string_list(_pick(raw, "categories")),
        custom_options=_string_list(_pick(raw, "custom_options")),
        max_distance_km=coerce_float(_pick(raw, "max_distance_km"), None, 0.0),
        open_now=coerce_bool(_pick(raw, "open_now")),
    )


def normalize_location(lat: Any, lng: Any) -> tuple[float, float] | None:
    """Return ``(lat, lng)`` when both parse as valid coordinates, else None."""
    lat_f = coerce_float(lat, None, -90.0, 90.0)
    lng_f = coerce_float(lng, None, -180.0, 180.0)
    if lat_f is None or lng_f is None:
        return None
    return lat_f, lng_f


def build_candidate_filter(
    filters: GroupFilters,
    requester_location: tuple[float, float] | None = None,
) -> CandidateFilter:
    allow = frozenset(name.strip().lower() for name in filters.custom_options if name.strip())
    return CandidateFilter(
        categories=frozenset(c.strip().lower() for c in filters.categories if c.strip()),
        min_rating=filters.min_rating,
        max_price_level=filters.max_price_level,
        open_now_required=filters.open_now,
        name_allow_list=allow or None,
        requester_location=requester_location,
    )


def normalize_filters(
    raw: Mapping[str, Any] | GroupFilters | None,
    lat: Any = None,
    lng: Any = None,
) -> CandidateFilter:
    """Turn raw filter configuration plus an optional location into a CandidateFilter."""
    return build_candidate_filter(parse_group_filters(raw), normalize_location(lat, lng))
