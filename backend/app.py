from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .auth.dependencies import require_admin, require_user
from .auth.models import LoginRequest
from .auth.users import authenticate
from .context import AppContext, build_context
from .errors import GroupSwipeError
from .groups.models import (
    ConfirmPlaceRequest,
    Group,
    GroupCreateRequest,
    JoinGroupRequest,
    LeaveGroupResponse,
)
from .groups.service import (
    confirm_place,
    create_group,
    delete_group,
    join_group,
    leave_group,
    require_member,
    start_group,
)
from .matching.filters import normalize_location
from .matching.models import CandidateResponse, MatchResponse
from .matching.service import compute_candidates, compute_matches
from .places.browse import browse_places, parse_browse_query
from .places.models import BrowseResponse
from .swipes.models import Swipe, SwipeRequest
from .swipes.service import record_swipe

logger = logging.getLogger(__name__)

app = FastAPI(title="Group Swipe API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "group-swipe-secret-change-in-production"),
)
app.state.context = build_context()


def get_context(request: Request) -> AppContext:
    return request.app.state.context


@app.exception_handler(GroupSwipeError)
async def handle_domain_error(request: Request, exc: GroupSwipeError) -> JSONResponse:
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata(ctx: AppContext = Depends(get_context)) -> dict:
    return {"cities": ctx.places.cities(), "categories": ctx.places.categories()}


@app.get("/places", response_model=BrowseResponse)
def places(
    location: str | None = None,
    types: str | None = Query(default=None, alias="type"),
    min_rating: str | None = Query(default=None, alias="minRating"),
    price_level: str | None = Query(default=None, alias="priceLevel"),
    open_now: str | None = Query(default=None, alias="openNow"),
    ctx: AppContext = Depends(get_context),
) -> BrowseResponse:
    query = parse_browse_query(location, types, min_rating, price_level, open_now)
    return browse_places(ctx.places.frame, query)


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Group endpoints ──────────────────────────────────────────────────────


@app.post("/groups", response_model=Group, status_code=status.HTTP_201_CREATED)
def groups_create(
    body: GroupCreateRequest,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> Group:
    return create_group(ctx, user["id"], body)


@app.get("/groups/code/{join_code}", response_model=Group)
def groups_preview(
    join_code: str,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> Group:
    return ctx.groups.get_by_code(join_code)


@app.post("/groups/join", response_model=Group)
def groups_join(
    body: JoinGroupRequest,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> Group:
    return join_group(ctx, user["id"], body.join_code)


@app.get("/groups/{group_id}", response_model=Group)
def groups_detail(
    group_id: str,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> Group:
    return ctx.groups.get(group_id)


@app.post("/groups/{group_id}/start", response_model=Group)
def groups_start(
    group_id: str,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> Group:
    return start_group(ctx, user["id"], group_id)


@app.get("/groups/{group_id}/places", response_model=CandidateResponse)
def groups_places(
    group_id: str,
    lat: str | None = None,
    lng: str | None = None,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> CandidateResponse:
    group = ctx.groups.get(group_id)
    require_member(group, user["id"])
    return compute_candidates(ctx, group, normalize_location(lat, lng))


@app.get("/groups/{group_id}/match", response_model=MatchResponse)
def groups_match(
    group_id: str,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> MatchResponse:
    group = ctx.groups.get(group_id)
    require_member(group, user["id"])
    return compute_matches(ctx, group)


@app.post("/groups/{group_id}/confirm", response_model=Group)
def groups_confirm(
    group_id: str,
    body: ConfirmPlaceRequest,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> Group:
    return confirm_place(ctx, user["id"], group_id, body.place_id)


@app.post("/groups/{group_id}/leave", response_model=LeaveGroupResponse)
def groups_leave(
    group_id: str,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> LeaveGroupResponse:
    return leave_group(ctx, user["id"], group_id)


@app.delete("/groups/{group_id}")
def groups_delete(
    group_id: str,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> dict:
    delete_group(ctx, user["id"], group_id)
    return {"ok": True}


# ── Swipe endpoints ──────────────────────────────────────────────────────


@app.post("/swipes", response_model=Swipe, status_code=status.HTTP_201_CREATED)
def swipes(
    body: SwipeRequest,
    user: dict = Depends(require_user),
    ctx: AppContext = Depends(get_context),
) -> Swipe:
    return record_swipe(ctx, user["id"], body)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(
    user: dict = Depends(require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return compute_analytics(ctx.events.all())
