from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import numpy as np

from .analytics.store import EventStore
from .groups.config import DEFAULT_GROUP_CONFIG, GroupConfig
from .groups.store import GroupStore
from .matching.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .places.config import DEFAULT_PLACE_STORE_CONFIG, PlaceStoreConfig
from .places.data_store import PlaceStore
from .swipes.store import SwipeStore


@dataclass
class AppContext:
    """Everything a request needs, built once at process start.

    ``rng_factory`` is called once per candidate request; the default gives
    fresh entropy every time.
    """

    places: PlaceStore
    groups: GroupStore = field(default_factory=GroupStore)
    swipes: SwipeStore = field(default_factory=SwipeStore)
    events: EventStore = field(default_factory=EventStore)
    matching: MatchingConfig = DEFAULT_MATCHING_CONFIG
    rng_factory: Callable[[], np.random.Generator] = np.random.default_rng


def build_context(
    place_config: PlaceStoreConfig = DEFAULT_PLACE_STORE_CONFIG,
    group_config: GroupConfig = DEFAULT_GROUP_CONFIG,
    matching_config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> AppContext:
    return AppContext(
        places=PlaceStore.from_config(place_config),
        groups=GroupStore(group_config),
        matching=matching_config,
    )
