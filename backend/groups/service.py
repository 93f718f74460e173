from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import ForbiddenError, InvalidRequestError, NotGroupMemberError
from ..matching.filters import parse_group_filters
from .models import (
    Group,
    GroupCreateRequest,
    GroupMember,
    GroupStatus,
    LeaveGroupResponse,
    MemberRole,
    utcnow,
)

if TYPE_CHECKING:
    from ..context import AppContext

logger = logging.getLogger(__name__)


def require_member(group: Group, user_id: str) -> None:
    if not group.is_member(user_id):
        raise NotGroupMemberError()


def require_host(group: Group, user_id: str, action: str) -> None:
    if group.host_id != user_id:
        raise ForbiddenError(f"Only host can {action}")


def create_group(ctx: AppContext, user_id: str, body: GroupCreateRequest) -> Group:
    raw_filters = dict(body.filters or {})
    if body.options is not None:
        raw_filters["custom_options"] = body.options
    filters = parse_group_filters(raw_filters)

    group = Group(
        id=ctx.groups.new_id(),
        name=body.name,
        city=body.city,
        host_id=user_id,
        members=[GroupMember(user_id=user_id, role=MemberRole.host)],
        join_code=ctx.groups.new_join_code(),
        max_members=body.max_members or ctx.groups.config.max_members,
        filters=filters,
        status=GroupStatus.pending,
    )
    group = ctx.groups.add(group)
    logger.info("Group %s created in %s by %s", group.id, group.city, user_id)
    return group


def join_group(ctx: AppContext, user_id: str, join_code: str) -> Group:
    group = ctx.groups.get_by_code(join_code)

    def _join(draft: Group) -> Group:
        if draft.is_member(user_id):
            return draft
        if len(draft.members) >= draft.max_members:
            raise InvalidRequestError("Group is full")
        draft.members.append(GroupMember(user_id=user_id, role=MemberRole.member))
        return draft

    return ctx.groups.update(group.id, _join)


def start_group(ctx: AppContext, user_id: str, group_id: str) -> Group:
    def _start(draft: Group) -> Group:
        require_host(draft, user_id, "start session")
        draft.status = GroupStatus.in_progress
        draft.started_at = utcnow()
        return draft

    return ctx.groups.update(group_id, _start)


def confirm_place(ctx: AppContext, user_id: str, group_id: str, place_id: str) -> Group:
    def _confirm(draft: Group) -> Group:
        require_member(draft, user_id)
        place = ctx.places.get(place_id)
        now = utcnow()
        draft.final_place_id = str(place["id"])
        draft.final_confirmed_by = user_id
        draft.final_confirmed_at = now
        draft.status = GroupStatus.completed
        draft.completed_at = now
        return draft

    group = ctx.groups.update(group_id, _confirm)
    ctx.events.record("confirm", {"group_id": group_id, "place_id": group.final_place_id})
    return group


def delete_group(ctx: AppContext, user_id: str, group_id: str) -> None:
    group = ctx.groups.get(group_id)
    require_host(group, user_id, "delete group")
    _remove(ctx, group)


def leave_group(ctx: AppContext, user_id: str, group_id: str) -> LeaveGroupResponse:
    """Remove the user from the group; a leaving host deletes the whole group."""
    group = ctx.groups.get(group_id)
    if group.host_id == user_id:
        _remove(ctx, group)
        return LeaveGroupResponse(ok=True, deleted=True)

    def _leave(draft: Group) -> None:
        draft.members = [m for m in draft.members if m.user_id != user_id]

    ctx.groups.update(group_id, _leave)
    return LeaveGroupResponse(ok=True, deleted=False)


def _remove(ctx: AppContext, group: Group) -> None:
    removed = ctx.swipes.delete_group(group.id)
    ctx.groups.delete(group.id)
    logger.info("Group %s deleted with %d swipes", group.id, removed)
