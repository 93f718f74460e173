from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from ..swipes.models import Swipe


@dataclass(frozen=True)
class SwipeAggregate:
    unanimous: pd.DataFrame
    liked_swipes: int
    total_members: int


def active_member_total(member_ids: Iterable[str]) -> int:
    return max(len(set(member_ids)), 1)


def aggregate_unanimous(
    swipes: Iterable[Swipe],
    places: pd.DataFrame,
    member_ids: Iterable[str],
) -> SwipeAggregate:
    """Count likes per place and keep the places every active member liked.

    Only likes by *member_ids* are counted, so a member who left or went
    inactive neither blocks nor inflates a match. Places that no longer
    exist or are inactive are dropped.
    """
    members = set(member_ids)
    total = active_member_total(members)

    rows = [
        {"place_id": s.place_id, "user_id": s.user_id}
        for s in swipes
        if s.liked and s.user_id in members
    ]
    if not rows:
        return SwipeAggregate(pd.DataFrame(columns=["place_id", "likes_count"]), 0, total)

    likes = (
        pd.DataFrame(rows)
        .groupby("place_id")["user_id"]
        .nunique()
        .rename("likes_count")
        .reset_index()
    )
    joined = likes.merge(places, left_on="place_id", right_on="id", how="inner")
    joined = joined.loc[joined["is_active"].astype(bool)]

    unanimous = joined.loc[joined["likes_count"] == total].reset_index(drop=True)
    return SwipeAggregate(unanimous, len(rows), total)
