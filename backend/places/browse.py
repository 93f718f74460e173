"""Category browse mode for the place catalogue.

Unlike group candidate ranking this mode is not tied to a group: requested
categories are OR-matched and a place must share at least one of them to
appear. Matching places are scored as::

    0.5 * matched / requested + 0.3 * rating / 5 + 0.2 * price_factor

where ``price_factor`` is ``1 - price_level / 4`` or 0.5 when unknown.
Without categories the field filters apply and places sort by rating.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd

from ..matching.filters import coerce_bool, coerce_float, coerce_int
from .config import DEFAULT_PLACE_STORE_CONFIG, PlaceStoreConfig
from .data_store import row_to_place
from .models import BrowseItem, BrowseResponse, PlaceOut

BROWSE_WEIGHTS = {"category": 0.5, "rating": 0.3, "price": 0.2}


@dataclass(frozen=True)
class BrowseQuery:
    location: str | None = None
    categories: tuple[str, ...] = ()
    min_rating: float | None = None
    price_level: int | None = None
    open_now: bool = False


def parse_browse_query(
    location: str | None = None,
    types: str | None = None,
    min_rating: Any = None,
    price_level: Any = None,
    open_now: Any = None,
) -> BrowseQuery:
    """Build a BrowseQuery from raw query-string values, ignoring malformed numbers."""
    categories = tuple(t.strip() for t in (types or "").split(",") if t.strip())
    return BrowseQuery(
        location=location.strip() if location and location.strip() else None,
        categories=categories,
        min_rating=coerce_float(min_rating, None, 0.0, 5.0),
        price_level=coerce_int(price_level, None, 0, 4),
        open_now=coerce_bool(open_now),
    )


def _field_mask(places: pd.DataFrame, query: BrowseQuery) -> pd.Series:
    mask = places["is_active"].astype(bool)
    if query.location:
        mask = mask & (places["city_lower"] == query.location.lower())
    if query.min_rating is not None:
        mask = mask & (places["rating"] >= query.min_rating)
    if query.price_level is not None:
        mask = mask & (places["price_level"] == query.price_level)
    if query.open_now:
        mask = mask & places["is_open_now"].astype(bool)
    return mask


def browse_places(
    places: pd.DataFrame,
    query: BrowseQuery,
    config: PlaceStoreConfig = DEFAULT_PLACE_STORE_CONFIG,
) -> BrowseResponse:
    candidates = places.loc[_field_mask(places, query)].copy()

    if not query.categories:
        top = candidates.sort_values("rating", ascending=False, na_position="last", kind="mergesort")
        top = top.head(config.browse_limit)
        items = [BrowseItem(place=PlaceOut(**row_to_place(row))) for _, row in top.iterrows()]
        return BrowseResponse(places=items, total_candidates=len(candidates))

    requested = {c.lower() for c in query.categories}
    candidates["category_match_count"] = (
        candidates["categories_lower"]
        .apply(lambda cats: len(requested.intersection(cats)))
        .astype(int)
    )
    # At least one shared category is required to appear at all
    candidates = candidates.loc[candidates["category_match_count"] > 0]
    if candidates.empty:
        return BrowseResponse(places=[], total_candidates=0)

    rating_norm = candidates["rating"].fillna(0.0) / 5.0
    price_factor = (1.0 - candidates["price_level"] / 4.0).fillna(0.5)
    candidates = candidates.assign(
        score=BROWSE_WEIGHTS["category"] * candidates["category_match_count"] / len(requested)
        + BROWSE_WEIGHTS["rating"] * rating_norm
        + BROWSE_WEIGHTS["price"] * price_factor
    )

    top = candidates.nlargest(config.browse_limit, "score")
    items = [
        BrowseItem(
            place=PlaceOut(**row_to_place(row)),
            score=round(float(row["score"]), 4),
            category_match_count=int(row["category_match_count"]),
        )
        for _, row in top.iterrows()
    ]
    return BrowseResponse(places=items, total_candidates=len(candidates))
