from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, Field, StringConstraints

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GroupStatus(str, Enum):
    pending = "PENDING"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"


class MemberRole(str, Enum):
    host = "host"
    member = "member"


class GroupMember(BaseModel):
    user_id: str
    role: MemberRole = MemberRole.member
    joined_at: datetime = Field(default_factory=utcnow)
    is_active: bool = True


class GroupFilters(BaseModel):
    """Typed filter configuration stored on a group."""

    min_price_level: int | None = Field(default=None, ge=0, le=4)
    max_price_level: int | None = Field(default=None, ge=0, le=4)
    min_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    categories: list[str] = Field(default_factory=list)
    custom_options: list[str] = Field(
        default_factory=list, description="Exact place names; restricts results to these only"
    )
    max_distance_km: float | None = Field(default=None, ge=0.0)
    open_now: bool = False


class Group(BaseModel):
    id: str
    name: str
    city: str
    host_id: str
    members: list[GroupMember] = Field(default_factory=list)
    join_code: str
    status: GroupStatus = GroupStatus.pending
    max_members: int = 10
    filters: GroupFilters = Field(default_factory=GroupFilters)

    final_place_id: str | None = None
    final_confirmed_by: str | None = None
    final_confirmed_at: datetime | None = None

    created_at: datetime = Field(default_factory=utcnow)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def is_member(self, user_id: str) -> bool:
        return any(m.user_id == user_id for m in self.members)

    def active_member_ids(self) -> set[str]:
        return {m.user_id for m in self.members if m.is_active is not False}


# ── Requests ─────────────────────────────────────────────────────────────


class GroupCreateRequest(BaseModel):
    name: NonBlankStr
    city: NonBlankStr
    max_members: int | None = Field(default=None, ge=1, le=50)
    filters: dict[str, Any] | None = Field(
        default=None, description="Raw filter configuration, validated leniently"
    )
    options: list[str] | None = Field(
        default=None, description="Explicit place names the group may choose from"
    )


class JoinGroupRequest(BaseModel):
    join_code: str = Field(..., min_length=1)


class ConfirmPlaceRequest(BaseModel):
    place_id: str = Field(..., min_length=1)


class LeaveGroupResponse(BaseModel):
    ok: bool = True
    deleted: bool = False
