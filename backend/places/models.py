from __future__ import annotations

from pydantic import BaseModel, Field


class PlaceOut(BaseModel):
    id: str
    external_id: str | None = None
    name: str
    city: str
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    price_level: int | None = Field(default=None, ge=0, le=4)
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    user_ratings_total: int = 0
    categories: list[str] = Field(default_factory=list)
    is_open_now: bool = True
    image: str | None = None
    maps_url: str | None = None
    is_active: bool = True


class BrowseItem(BaseModel):
    place: PlaceOut
    score: float | None = None
    category_match_count: int | None = None


class BrowseResponse(BaseModel):
    places: list[BrowseItem]
    total_candidates: int
