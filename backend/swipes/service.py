from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..groups.service import require_member
from .models import Swipe, SwipeRequest

if TYPE_CHECKING:
    from ..context import AppContext

logger = logging.getLogger(__name__)


def record_swipe(ctx: AppContext, user_id: str, body: SwipeRequest) -> Swipe:
    """Save or replace the member's judgment of a place within a group."""
    group = ctx.groups.get(body.group_id)
    require_member(group, user_id)
    place = ctx.places.get(body.place_id)

    swipe = ctx.swipes.upsert(group.id, user_id, str(place["id"]), body.liked)
    logger.debug("Swipe group=%s user=%s place=%s liked=%s", group.id, user_id, swipe.place_id, swipe.liked)
    ctx.events.record("swipe", {"group_id": group.id, "liked": swipe.liked})
    return swipe
