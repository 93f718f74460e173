from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from ..groups.models import Group
from ..places.data_store import row_to_place
from ..places.models import PlaceOut
from .aggregator import aggregate_unanimous
from .consensus import rank_consensus
from .filters import build_candidate_filter
from .models import (
    CandidateItem,
    CandidateResponse,
    MatchItem,
    MatchResponse,
    ScoreBreakdown,
)
from .scoring import rank_candidates

if TYPE_CHECKING:
    from ..context import AppContext

logger = logging.getLogger(__name__)


def _candidate_item(row: pd.Series, has_location: bool) -> CandidateItem:
    distance = row["distance_km"]
    return CandidateItem(
        place=PlaceOut(**row_to_place(row)),
        score=float(row["final_score"]),
        distance_km=round(float(distance), 3) if has_location and pd.notna(distance) else None,
        breakdown=ScoreBreakdown(
            rating=float(row["norm_rating"]),
            popularity=float(row["norm_popularity"]),
            distance=float(row["norm_distance"]),
            category=float(row["category_match"]),
            budget=float(row["budget_match"]),
            tie_break=float(row["tie_break"]),
        ),
    )


def compute_candidates(
    ctx: AppContext,
    group: Group,
    requester_location: tuple[float, float] | None = None,
    rng: np.random.Generator | None = None,
) -> CandidateResponse:
    """Return the group's eligible places ranked by WCRA score, at most 200."""
    start_time = time.time()
    flt = build_candidate_filter(group.filters, requester_location)
    rng = rng if rng is not None else ctx.rng_factory()

    top, total_candidates = rank_candidates(ctx.places.frame, group.city, flt, ctx.matching, rng)
    has_location = requester_location is not None
    items = [_candidate_item(row, has_location) for _, row in top.iterrows()]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "WCRA scoring for group %s (city=%s, location=%s): %d eligible, %d returned",
        group.id, group.city, has_location, total_candidates, len(items),
    )
    ctx.events.record("candidates", {
        "group_id": group.id,
        "city": group.city,
        "has_location": has_location,
        "total_candidates": total_candidates,
        "results_returned": len(items),
        "response_time_ms": elapsed_ms,
    })
    return CandidateResponse(candidates=items, total_candidates=total_candidates)


def compute_matches(ctx: AppContext, group: Group) -> MatchResponse:
    """Return the places every active member liked, best first."""
    liked = ctx.swipes.for_group(group.id, liked=True)
    aggregate = aggregate_unanimous(liked, ctx.places.frame, group.active_member_ids())
    ranked = rank_consensus(aggregate.unanimous, aggregate.total_members, ctx.matching)

    matches: list[MatchItem] = []
    for _, row in ranked.iterrows():
        place = row_to_place(row)
        matches.append(MatchItem(
            place_id=place["id"],
            name=place["name"],
            city=place["city"],
            address=place["address"],
            image=place["image"],
            rating=place["rating"],
            price_level=place["price_level"],
            likes_count=int(row["likes_count"]),
            coverage=float(row["coverage"]),
            score=float(row["score"]),
        ))

    logger.info(
        "Match for group %s: %d liked swipes, %d members, %d unanimous",
        group.id, aggregate.liked_swipes, aggregate.total_members, len(matches),
    )
    ctx.events.record("match", {
        "group_id": group.id,
        "liked_swipes": aggregate.liked_swipes,
        "has_match": bool(matches),
    })
    return MatchResponse(
        has_match=bool(matches),
        matches=matches,
        liked_swipes=aggregate.liked_swipes,
    )
