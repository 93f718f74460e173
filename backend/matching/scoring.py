"""Weighted composite ranking (WCRA) of candidate places.

Each candidate gets five factors normalised to [0, 1]:

* ``norm_rating``      R = rating / 5 (missing rating counts as 0)
* ``norm_popularity``  P = min(log10(ratings + 1) / 3, 1)
* ``norm_distance``    D = max(0, 1 - km / 20), planar distance at 111 km per
  degree, or a flat 10 km when the requester's location is unknown
* ``category_match``   C = 1 when the place shares a requested category
* ``budget_match``     B = 1 when the price level is within budget

plus a tie-break E drawn uniformly from [0, 0.05) per candidate::

    final_score = 0.35 R + 0.25 P + 0.20 D + 0.10 C + 0.10 B + E

The tie-break makes ordering among near-equal candidates vary between
requests. Pass a seeded ``numpy.random.Generator`` to make it reproducible.
"""
from __future__ import annotations

import numpy as np
import pandas as pd

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .filters import CandidateFilter
from .selector import select_candidates

FACTOR_COLUMNS = (
    "norm_rating",
    "norm_popularity",
    "norm_distance",
    "category_match",
    "budget_match",
)


def _distance_km(
    candidates: pd.DataFrame,
    location: tuple[float, float] | None,
    config: MatchingConfig,
) -> pd.Series:
    if location is None:
        return pd.Series(config.default_distance_km, index=candidates.index, dtype=float)
    lat, lng = location
    degrees = np.sqrt(
        (candidates["latitude"] - lat) ** 2 + (candidates["longitude"] - lng) ** 2
    )
    return degrees * config.km_per_degree


def score_candidates(
    candidates: pd.DataFrame,
    flt: CandidateFilter,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    rng: np.random.Generator | None = None,
) -> pd.DataFrame:
    """Return a copy of *candidates* with factor columns and ``final_score``."""
    rng = rng if rng is not None else np.random.default_rng()
    w = config.candidate_weights
    scored = candidates.copy()

    rating = scored["rating"].fillna(0.0).astype(float)
    scored["norm_rating"] = (rating / config.max_rating).clip(0.0, 1.0)

    ratings_total = scored["user_ratings_total"].fillna(0.0).astype(float).clip(lower=0.0)
    scored["norm_popularity"] = np.minimum(
        np.log10(ratings_total + 1.0) / config.popularity_log_scale, 1.0
    )

    scored["distance_km"] = _distance_km(scored, flt.requester_location, config)
    # Places without coordinates get no distance credit
    scored["norm_distance"] = (
        (1.0 - scored["distance_km"] / config.max_distance_km).clip(lower=0.0).fillna(0.0)
    )

    if flt.categories:
        wanted = flt.categories
        scored["category_match"] = (
            scored["categories_lower"]
            .apply(lambda cats: 1.0 if wanted.intersection(cats) else 0.0)
            .astype(float)
        )
    else:
        scored["category_match"] = 0.0

    budget = flt.max_price_level if flt.max_price_level is not None else config.default_budget
    price = scored["price_level"].fillna(float(config.missing_price_sentinel))
    scored["budget_match"] = (price <= budget).astype(float)

    scored["tie_break"] = rng.uniform(0.0, config.tie_break_max, size=len(scored))

    scored["final_score"] = (
        w["rating"] * scored["norm_rating"]
        + w["popularity"] * scored["norm_popularity"]
        + w["distance"] * scored["norm_distance"]
        + w["category"] * scored["category_match"]
        + w["budget"] * scored["budget_match"]
        + scored["tie_break"]
    ).astype(float)

    return scored


def rank_candidates(
    places: pd.DataFrame,
    city: str,
    flt: CandidateFilter,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    rng: np.random.Generator | None = None,
) -> tuple[pd.DataFrame, int]:
    """Select, score and sort candidates.

    Returns the top ``config.candidate_limit`` rows by descending
    ``final_score`` together with the number of eligible candidates before
    the cap was applied.
    """
    candidates = select_candidates(places, city, flt)
    total = len(candidates)
    if candidates.empty:
        return candidates, 0

    scored = score_candidates(candidates, flt, config, rng)
    return scored.nlargest(config.candidate_limit, "final_score"), total
