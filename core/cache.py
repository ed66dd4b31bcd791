# core/cache.py

"""
Per-process role cache.

Keeps Supabase role lookups off the hot path of every request. Expiry is
measured on the monotonic clock so wall-clock jumps can't extend an entry.
A role change becomes visible once the entry expires or is forgotten.
"""

from threading import Lock
from time import monotonic
from typing import Dict, Optional, Tuple

from models.enums import Role


class RoleCache:
    """Thread-safe map of user id -> (role, monotonic expiry)."""

    def __init__(self):
        self._entries: Dict[str, Tuple[Role, float]] = {}
        self._lock = Lock()

    def get(self, user_id: str) -> Optional[Role]:
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None

            role, expires_at = entry
            if monotonic() >= expires_at:
                del self._entries[user_id]
                return None

            return role

    def put(self, user_id: str, role: Role, ttl_seconds: int):
        """
        Remember `role` for `ttl_seconds`.
        GUEST and non-positive TTLs are ignored: a failed lookup is never pinned.
        """
        if not isinstance(role, Role):
            raise TypeError(f"RoleCache only stores Role values, got {type(role).__name__}")
        if role == Role.GUEST or ttl_seconds <= 0:
            return

        with self._lock:
            self._entries[user_id] = (role, monotonic() + ttl_seconds)

    def forget(self, user_id: str):
        with self._lock:
            self._entries.pop(user_id, None)

    def clear(self):
        with self._lock:
            self._entries.clear()


# Global cache instance
_roles = RoleCache()


def get_cached_role(user_id: str) -> Optional[Role]:
    return _roles.get(user_id)


def cache_role(user_id: str, role: Role, ttl_seconds: int):
    _roles.put(user_id, role, ttl_seconds)


def forget_role(user_id: str):
    _roles.forget(user_id)


def clear_role_cache():
    """Drop every cached role."""
    _roles.clear()
