from __future__ import annotations

from collections import Counter
from typing import Any


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    candidate_requests = [e for e in events if e["type"] == "candidates"]
    total = len(candidate_requests)

    # Average response time
    times = [e["response_time_ms"] for e in candidate_requests if "response_time_ms" in e]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Top cities
    city_counter: Counter[str] = Counter()
    for e in candidate_requests:
        city_counter[e.get("city", "unknown")] += 1
    top_cities = [{"name": n, "count": c} for n, c in city_counter.most_common(10)]

    with_location = sum(1 for e in candidate_requests if e.get("has_location"))

    # Swipes
    swipes = [e for e in events if e["type"] == "swipe"]
    likes = sum(1 for e in swipes if e.get("liked"))

    # Matches
    match_requests = [e for e in events if e["type"] == "match"]
    with_match = sum(1 for e in match_requests if e.get("has_match"))

    confirmations = sum(1 for e in events if e["type"] == "confirm")

    return {
        "total_candidate_requests": total,
        "avg_response_time_ms": avg_time,
        "top_cities": top_cities,
        "location_usage_rate": _rate(with_location, total),
        "swipe_stats": {
            "total": len(swipes),
            "likes": likes,
            "dislikes": len(swipes) - likes,
            "like_rate": _rate(likes, len(swipes)),
        },
        "match_stats": {
            "requests": len(match_requests),
            "with_match": with_match,
            "match_rate": _rate(with_match, len(match_requests)),
        },
        "confirmed_groups": confirmations,
    }
