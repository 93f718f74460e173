from __future__ import annotations

from fastapi.testclient import TestClient

from backend.app import app


def _create_group(c, **overrides):
    body = {"name": "Friday dinner", "city": "Bangkok"}
    body.update(overrides)
    resp = c.post("/groups", json=body)
    assert resp.status_code == 201
    return resp.json()


def _join(c, join_code):
    resp = c.post("/groups/join", json={"join_code": join_code})
    assert resp.status_code == 200
    return resp.json()


def _swipe(c, group_id, place_id, liked=True):
    return c.post("/swipes", json={"group_id": group_id, "place_id": place_id, "liked": liked})


# ── Lifecycle ────────────────────────────────────────────────────────────


def test_create_group_makes_requester_host(login):
    alice = login("alice")
    group = _create_group(alice, filters={"maxPriceLevel": 2, "categories": ["Food & Drink"]})
    assert group["status"] == "PENDING"
    assert group["host_id"] == "user-alice"
    assert [m["role"] for m in group["members"]] == ["host"]
    assert len(group["join_code"]) == 6
    assert group["filters"]["max_price_level"] == 2
    assert group["max_members"] == 10


def test_create_group_tolerates_bad_filter_numbers(login):
    alice = login("alice")
    group = _create_group(alice, filters={"maxPriceLevel": "lots", "minRating": "x"})
    assert group["filters"]["max_price_level"] is None
    assert group["filters"]["min_rating"] == 0.0


def test_create_group_maps_options_to_allow_list(login):
    alice = login("alice")
    group = _create_group(alice, options=["Street Kitchen"])
    assert group["filters"]["custom_options"] == ["Street Kitchen"]


def test_create_group_requires_name(login):
    alice = login("alice")
    resp = alice.post("/groups", json={"name": "", "city": "Bangkok"})
    assert resp.status_code == 422


def test_create_group_rejects_blank_city(login):
    alice = login("alice")
    assert alice.post("/groups", json={"name": "Trip", "city": "   "}).status_code == 422
    assert alice.post("/groups", json={"name": "  ", "city": "Bangkok"}).status_code == 422


def test_create_group_strips_city(login):
    alice = login("alice")
    group = _create_group(alice, city="  Bangkok ")
    assert group["city"] == "Bangkok"


def test_create_group_requires_login(login):
    c = TestClient(app)
    resp = c.post("/groups", json={"name": "x", "city": "Bangkok"})
    assert resp.status_code == 401


def test_join_codes_are_unique(login):
    alice = login("alice")
    codes = {_create_group(alice)["join_code"] for _ in range(20)}
    assert len(codes) == 20


def test_join_by_code_is_case_insensitive_and_idempotent(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    _join(bob, group["join_code"].lower())
    joined = _join(bob, group["join_code"])
    assert [m["user_id"] for m in joined["members"]] == ["user-alice", "user-bob"]


def test_join_unknown_code(login):
    bob = login("bob")
    resp = bob.post("/groups/join", json={"join_code": "NOPE42"})
    assert resp.status_code == 404


def test_join_full_group(login):
    alice, bob, carol = login("alice"), login("bob"), login("carol")
    group = _create_group(alice, max_members=2)
    _join(bob, group["join_code"])
    resp = carol.post("/groups/join", json={"join_code": group["join_code"]})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Group is full"


def test_preview_by_code(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    resp = bob.get(f"/groups/code/{group['join_code']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == group["id"]


def test_get_unknown_group(login):
    alice = login("alice")
    assert alice.get("/groups/missing").status_code == 404


def test_only_host_can_start(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    _join(bob, group["join_code"])
    assert bob.post(f"/groups/{group['id']}/start").status_code == 403
    resp = alice.post(f"/groups/{group['id']}/start")
    assert resp.status_code == 200
    assert resp.json()["status"] == "IN_PROGRESS"
    assert resp.json()["started_at"] is not None


def test_member_leaves(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    _join(bob, group["join_code"])
    resp = bob.post(f"/groups/{group['id']}/leave")
    assert resp.json() == {"ok": True, "deleted": False}
    members = alice.get(f"/groups/{group['id']}").json()["members"]
    assert [m["user_id"] for m in members] == ["user-alice"]


def test_host_leaving_deletes_group_and_swipes(login, ctx):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    _join(bob, group["join_code"])
    assert _swipe(bob, group["id"], "b").status_code == 201

    resp = alice.post(f"/groups/{group['id']}/leave")
    assert resp.json() == {"ok": True, "deleted": True}
    assert alice.get(f"/groups/{group['id']}").status_code == 404
    assert ctx.swipes.for_group(group["id"]) == []


def test_only_host_can_delete(login, ctx):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    _join(bob, group["join_code"])
    assert bob.delete(f"/groups/{group['id']}").status_code == 403
    assert alice.delete(f"/groups/{group['id']}").json() == {"ok": True}
    assert len(ctx.groups) == 0


# ── Swipes ───────────────────────────────────────────────────────────────


def test_swipe_requires_membership(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    resp = _swipe(bob, group["id"], "b")
    assert resp.status_code == 403


def test_swipe_unknown_place_or_group(login):
    alice = login("alice")
    group = _create_group(alice)
    assert _swipe(alice, group["id"], "nope").status_code == 404
    assert _swipe(alice, "nope", "b").status_code == 404


def test_swipe_liked_must_be_boolean(login):
    alice = login("alice")
    group = _create_group(alice)
    resp = alice.post("/swipes", json={"group_id": group["id"], "place_id": "b", "liked": "yes"})
    assert resp.status_code == 422


def test_swipe_resubmission_replaces(login, ctx):
    alice = login("alice")
    group = _create_group(alice)
    _swipe(alice, group["id"], "b", liked=True)
    _swipe(alice, group["id"], "b", liked=False)
    swipes = ctx.swipes.for_group(group["id"])
    assert len(swipes) == 1
    assert swipes[0].liked is False


# ── Candidates ───────────────────────────────────────────────────────────


def test_candidates_respect_group_filters(login):
    alice = login("alice")
    group = _create_group(alice, filters={"maxPriceLevel": 2, "categories": ["Food & Drink"]})
    resp = alice.get(f"/groups/{group['id']}/places")
    assert resp.status_code == 200
    body = resp.json()
    ids = [c["place"]["id"] for c in body["candidates"]]
    assert "a" not in ids
    assert "d" not in ids
    assert ids.index("b") < ids.index("c")
    assert body["total_candidates"] == len(ids)
    scores = [c["score"] for c in body["candidates"]]
    assert scores == sorted(scores, reverse=True)
    assert all(c["distance_km"] is None for c in body["candidates"])


def test_candidates_use_requester_location(login):
    alice = login("alice")
    group = _create_group(alice)
    body = alice.get(f"/groups/{group['id']}/places", params={"lat": "13.70", "lng": "100.40"}).json()
    perfect = next(c for c in body["candidates"] if c["place"]["id"] == "i")
    assert perfect["distance_km"] == 0.0
    assert perfect["breakdown"]["distance"] == 1.0


def test_candidates_ignore_malformed_location(login):
    alice = login("alice")
    group = _create_group(alice)
    body = alice.get(f"/groups/{group['id']}/places", params={"lat": "north", "lng": "1"}).json()
    assert all(c["breakdown"]["distance"] == 0.5 for c in body["candidates"])


def test_candidates_require_membership(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    assert bob.get(f"/groups/{group['id']}/places").status_code == 403


def test_candidates_unknown_group(login):
    alice = login("alice")
    assert alice.get("/groups/missing/places").status_code == 404


def test_candidates_empty_city_is_success(login):
    alice = login("alice")
    group = _create_group(alice, city="Atlantis")
    resp = alice.get(f"/groups/{group['id']}/places")
    assert resp.status_code == 200
    assert resp.json() == {"candidates": [], "total_candidates": 0}


# ── Matches ──────────────────────────────────────────────────────────────


def test_match_with_no_swipes(login):
    alice = login("alice")
    group = _create_group(alice)
    resp = alice.get(f"/groups/{group['id']}/match")
    assert resp.status_code == 200
    body = resp.json()
    assert body["has_match"] is False
    assert body["matches"] == []
    assert body["liked_swipes"] == 0


def test_match_requires_every_member(login):
    alice, bob, carol = login("alice"), login("bob"), login("carol")
    group = _create_group(alice)
    _join(bob, group["join_code"])
    _join(carol, group["join_code"])
    gid = group["id"]

    for c in (alice, bob):
        _swipe(c, gid, "b")
    body = alice.get(f"/groups/{gid}/match").json()
    assert body == {"has_match": False, "matches": [], "liked_swipes": 2}

    _swipe(carol, gid, "b")
    body = alice.get(f"/groups/{gid}/match").json()
    assert body["has_match"] is True
    assert [m["place_id"] for m in body["matches"]] == ["b"]
    assert body["matches"][0]["likes_count"] == 3
    assert body["matches"][0]["coverage"] == 1.0


def test_match_reflects_changed_mind(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    _join(bob, group["join_code"])
    gid = group["id"]
    for c in (alice, bob):
        _swipe(c, gid, "i")
        _swipe(c, gid, "b")
    _swipe(bob, gid, "i", liked=False)

    body = bob.get(f"/groups/{gid}/match").json()
    assert [m["place_id"] for m in body["matches"]] == ["b"]


def test_match_ranking_order(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    _join(bob, group["join_code"])
    gid = group["id"]
    for place in ("d", "a", "i", "b"):
        for c in (alice, bob):
            _swipe(c, gid, place)
    body = alice.get(f"/groups/{gid}/match").json()
    assert [m["place_id"] for m in body["matches"]] == ["i", "b", "a", "d"]


def test_match_requires_membership(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    assert bob.get(f"/groups/{group['id']}/match").status_code == 403


# ── Confirmation ─────────────────────────────────────────────────────────


def test_confirm_completes_group(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    _join(bob, group["join_code"])
    resp = bob.post(f"/groups/{group['id']}/confirm", json={"place_id": "b"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "COMPLETED"
    assert body["final_place_id"] == "b"
    assert body["final_confirmed_by"] == "user-bob"
    assert body["final_confirmed_at"] is not None


def test_confirm_checks_membership_and_place(login):
    alice, bob = login("alice"), login("bob")
    group = _create_group(alice)
    assert bob.post(f"/groups/{group['id']}/confirm", json={"place_id": "b"}).status_code == 403
    assert alice.post(f"/groups/{group['id']}/confirm", json={"place_id": "nope"}).status_code == 404
