from __future__ import annotations

import threading

from .models import Swipe

SwipeKey = tuple[str, str, str]


class SwipeStore:
    """In-memory swipe table with a unique (group, user, place) key."""

    def __init__(self) -> None:
        self._swipes: dict[SwipeKey, Swipe] = {}
        self._lock = threading.Lock()

    def upsert(self, group_id: str, user_id: str, place_id: str, liked: bool) -> Swipe:
        """Insert or replace the swipe for this triple; last write wins."""
        swipe = Swipe(group_id=group_id, user_id=user_id, place_id=place_id, liked=liked)
        with self._lock:
            self._swipes[(group_id, user_id, place_id)] = swipe
        return swipe

    def for_group(self, group_id: str, liked: bool | None = None) -> list[Swipe]:
        with self._lock:
            swipes = [s for s in self._swipes.values() if s.group_id == group_id]
        if liked is not None:
            swipes = [s for s in swipes if s.liked is liked]
        return swipes

    def delete_group(self, group_id: str) -> int:
        with self._lock:
            keys = [k for k in self._swipes if k[0] == group_id]
            for key in keys:
                del self._swipes[key]
        return len(keys)

    def __len__(self) -> int:
        return len(self._swipes)
