from __future__ import annotations

from dataclasses import dataclass, field


def _candidate_weights() -> dict[str, float]:
    return {
        "rating": 0.35,
        "popularity": 0.25,
        "distance": 0.20,
        "category": 0.10,
        "budget": 0.10,
    }


def _consensus_weights() -> dict[str, float]:
    return {"coverage": 0.5, "rating": 0.3, "price": 0.2}


@dataclass(frozen=True)
class MatchingConfig:
    candidate_limit: int = 200
    candidate_weights: dict[str, float] = field(default_factory=_candidate_weights)
    tie_break_max: float = 0.05
    km_per_degree: float = 111.0
    max_distance_km: float = 20.0
    default_distance_km: float = 10.0
    # log10(1000 + 1) ~= 3, so 1000+ ratings saturate popularity
    popularity_log_scale: float = 3.0
    default_budget: int = 4
    missing_price_sentinel: int = 99
    max_price_level: int = 4
    max_rating: float = 5.0
    consensus_weights: dict[str, float] = field(default_factory=_consensus_weights)
    neutral_price_score: float = 0.5


DEFAULT_MATCHING_CONFIG = MatchingConfig()
