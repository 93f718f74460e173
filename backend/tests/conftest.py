from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from fastapi.testclient import TestClient

from backend.app import app
from backend.context import AppContext
from backend.places.data_store import PlaceStore

SAMPLE_PLACES = [
    {"id": "a", "name": "Pricey Noodles", "city": "Bangkok", "latitude": 13.75, "longitude": 100.50,
     "price_level": 3, "rating": 4.0, "user_ratings_total": 100, "categories": "Food & Drink"},
    {"id": "b", "name": "Street Kitchen", "city": "Bangkok", "latitude": 13.75, "longitude": 100.50,
     "price_level": 1, "rating": 4.0, "user_ratings_total": 100, "categories": "Food & Drink"},
    {"id": "c", "name": "Night Market", "city": "Bangkok", "latitude": 13.75, "longitude": 100.50,
     "price_level": 1, "rating": 4.0, "user_ratings_total": 100, "categories": "Shopping"},
    {"id": "d", "name": "Sky Lounge", "city": "Bangkok", "latitude": 13.72, "longitude": 100.52,
     "price_level": 4, "rating": 4.8, "user_ratings_total": 1000, "categories": "Nightlife"},
    {"id": "e", "name": "Mystery Diner", "city": "Bangkok", "latitude": 13.76, "longitude": 100.51,
     "price_level": None, "rating": 4.2, "user_ratings_total": 50, "categories": "Food & Drink"},
    {"id": "f", "name": "Evening Temple", "city": "Bangkok", "latitude": 13.74, "longitude": 100.49,
     "price_level": 0, "rating": 4.9, "user_ratings_total": 40000, "categories": "Attraction",
     "is_open_now": False},
    {"id": "g", "name": "Retired Stall", "city": "Bangkok", "latitude": 13.75, "longitude": 100.50,
     "price_level": 1, "rating": 4.5, "user_ratings_total": 300, "categories": "Food & Drink",
     "is_active": False},
    {"id": "h", "name": "Nimman Roasters", "city": "Chiang Mai", "latitude": 18.80, "longitude": 98.97,
     "price_level": 2, "rating": 4.5, "user_ratings_total": 5000, "categories": "Cafe"},
    {"id": "i", "name": "Perfect Pad Thai", "city": "Bangkok", "latitude": 13.70, "longitude": 100.40,
     "price_level": 0, "rating": 5.0, "user_ratings_total": 1000, "categories": "Food & Drink,Cafe"},
]


def make_places(rows: list[dict] | None = None) -> pd.DataFrame:
    return PlaceStore(pd.DataFrame(rows if rows is not None else SAMPLE_PLACES)).frame


@pytest.fixture
def places_frame() -> pd.DataFrame:
    return make_places()


@pytest.fixture
def ctx() -> AppContext:
    return AppContext(
        places=PlaceStore(pd.DataFrame(SAMPLE_PLACES)),
        rng_factory=lambda: np.random.default_rng(1234),
    )


@pytest.fixture
def login(ctx, monkeypatch):
    """Return a factory of logged-in TestClients sharing the test context."""
    monkeypatch.setattr(app.state, "context", ctx)

    def _login(username: str) -> TestClient:
        c = TestClient(app)
        resp = c.post("/auth/login", json={"username": username, "password": f"{username}123"})
        assert resp.status_code == 200
        return c

    return _login


@pytest.fixture
def build_places():
    return make_places
