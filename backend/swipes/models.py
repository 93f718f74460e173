from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, StrictBool

from ..groups.models import utcnow


class Swipe(BaseModel):
    group_id: str
    user_id: str
    place_id: str
    liked: bool
    created_at: datetime = Field(default_factory=utcnow)


class SwipeRequest(BaseModel):
    group_id: str = Field(..., min_length=1)
    place_id: str = Field(..., min_length=1)
    liked: StrictBool
