from __future__ import annotations

import pandas as pd

from .filters import CandidateFilter


def select_candidates(places: pd.DataFrame, city: str, flt: CandidateFilter) -> pd.DataFrame:
    """Apply the hard filters to the place catalogue.

    All predicates must pass and a blank city selects nothing. Places
    without a price level fail an explicit price cap. The result is not
    truncated here.
    """
    city_lower = (city or "").strip().lower()
    if not city_lower:
        return places.iloc[0:0].copy()

    mask = places["is_active"].astype(bool)
    mask = mask & places["city_lower"].str.contains(city_lower, na=False, regex=False)

    if flt.open_now_required:
        mask = mask & places["is_open_now"].astype(bool)

    if flt.min_rating > 0:
        mask = mask & (places["rating"] >= flt.min_rating)

    if flt.max_price_level is not None:
        # NaN comparisons are False, so a missing price level is excluded
        mask = mask & (places["price_level"] <= flt.max_price_level)

    if flt.name_allow_list:
        mask = mask & places["name_lower"].isin(list(flt.name_allow_list))

    return places.loc[mask].copy()
