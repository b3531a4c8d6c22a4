from __future__ import annotations

import threading
import uuid
from typing import Any

import bcrypt

from ..errors import InvalidInput, NotFound

_users: dict[str, dict[str, Any]] = {}
_lock = threading.Lock()

_PUBLIC_FIELDS = ("id", "name", "email", "phone")


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _public(record: dict[str, Any]) -> dict[str, Any]:
    return {k: record.get(k) for k in _PUBLIC_FIELDS}


def _seed_users() -> None:
    """Pre-seed demo customers on import."""
    for name, email, password, phone in (
        ("Demo Customer", "user@fruitygulp.ug", "user123", "+256700000001"),
        ("Second Customer", "other@fruitygulp.ug", "other123", None),
    ):
        _users[email] = {
            "id": str(uuid.uuid4()),
            "name": name,
            "email": email,
            "phone": phone,
            "password_hash": _hash_password(password),
        }


def register_user(
    name: str, email: str, password: str, phone: str | None = None,
) -> dict[str, Any]:
    """Create an account. Returns ``{id, name, email, phone}``."""
    key = email.strip().lower()
    with _lock:
        if key in _users:
            raise InvalidInput("An account with this email already exists")
        record = {
            "id": str(uuid.uuid4()),
            "name": name.strip(),
            "email": key,
            "phone": phone.strip() if phone else None,
            "password_hash": _hash_password(password),
        }
        _users[key] = record
    return _public(record)


def authenticate(email: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns the public user or ``None``."""
    with _lock:
        record = _users.get(email.strip().lower())
        snapshot = dict(record) if record else None
    if snapshot and _verify_password(password, snapshot["password_hash"]):
        return _public(snapshot)
    return None


def _find(user_id: str) -> dict[str, Any]:
    """Caller must hold ``_lock``."""
    for record in _users.values():
        if record["id"] == user_id:
            return record
    raise NotFound("User not found")


def get_user(user_id: str) -> dict[str, Any]:
    with _lock:
        return _public(_find(user_id))


def update_profile(
    user_id: str, name: str | None = None, phone: str | None = None,
) -> dict[str, Any]:
    with _lock:
        record = _find(user_id)
        if name is not None:
            record["name"] = name.strip()
        if phone is not None:
            record["phone"] = phone.strip()
        return _public(record)


_seed_users()
