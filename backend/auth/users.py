from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _seed_users() -> None:
    """Pre-seed demo users on import."""
    for name in ("alice", "bob", "carol", "dave"):
        _users[name] = {
            "id": f"user-{name}",
            "password_hash": _hash_password(f"{name}123"),
            "role": "user",
        }
    _users["admin"] = {
        "id": "user-admin",
        "password_hash": _hash_password("admin123"),
        "role": "admin",
    }


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, username, role}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {"id": record["id"], "username": username, "role": record["role"]}
    return None


_seed_users()
