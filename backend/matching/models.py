from __future__ import annotations

from pydantic import BaseModel, Field

from ..places.models import PlaceOut


class ScoreBreakdown(BaseModel):
    rating: float = Field(..., ge=0.0, le=1.0)
    popularity: float = Field(..., ge=0.0, le=1.0)
    distance: float = Field(..., ge=0.0, le=1.0)
    category: float = Field(..., ge=0.0, le=1.0)
    budget: float = Field(..., ge=0.0, le=1.0)
    tie_break: float = Field(..., ge=0.0)


class CandidateItem(BaseModel):
    place: PlaceOut
    score: float
    distance_km: float | None = None
    breakdown: ScoreBreakdown


class CandidateResponse(BaseModel):
    candidates: list[CandidateItem]
    total_candidates: int


class MatchItem(BaseModel):
    place_id: str
    name: str
    city: str
    address: str | None = None
    image: str | None = None
    rating: float | None = None
    price_level: int | None = None
    likes_count: int
    coverage: float
    score: float


class MatchResponse(BaseModel):
    has_match: bool
    matches: list[MatchItem] = Field(default_factory=list)
    liked_swipes: int = Field(
        default=0, description="Likes by active members; 0 means nobody has liked anything yet"
    )
