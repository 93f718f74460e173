from __future__ import annotations

import pandas as pd

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig


def rank_consensus(
    unanimous: pd.DataFrame,
    total_members: int,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> pd.DataFrame:
    """Score agreed places by coverage, rating and price and sort them.

    ``score = 0.5 * coverage + 0.3 * rating / 5 + 0.2 * (1 - price_level / 4)``
    with a neutral price score of 0.5 when the price level is unknown. No
    randomness: identical inputs always give the identical order, ties are
    broken by place id.
    """
    if unanimous.empty:
        return unanimous.copy()

    w = config.consensus_weights
    ranked = unanimous.copy()
    ranked["coverage"] = ranked["likes_count"].astype(float) / max(total_members, 1)
    ranked["rating_norm"] = ranked["rating"].fillna(0.0).astype(float) / config.max_rating
    ranked["price_score"] = (
        1.0 - ranked["price_level"].astype(float) / config.max_price_level
    ).fillna(config.neutral_price_score)
    ranked["score"] = (
        w["coverage"] * ranked["coverage"]
        + w["rating"] * ranked["rating_norm"]
        + w["price"] * ranked["price_score"]
    )
    return ranked.sort_values(
        ["score", "place_id"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)
