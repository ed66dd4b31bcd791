# core/role_lookup.py

from typing import Optional

from core.cache import cache_role, forget_role, get_cached_role
from core.config import settings
from core.errors import extract_supabase_error
from core.logging_config import logger
from core.roles import coerce_role
from core.supabase_client import get_supabase_client
from models.enums import Role


# -----------------------------------------------------
# Fetch a user's role from public.users
# -----------------------------------------------------
def fetch_user_role(user_id: str) -> Optional[Role]:
    """
    Read public.users.role for one user.
    Returns None when the row is missing, the role is unknown,
    or Supabase can't be reached.
    """
    client = get_supabase_client()
    if client is None:
        return None

    try:
        result = (
            client.table("users")
            .select("role")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Role lookup failed for user {user_id}: {extract_supabase_error(e)}")
        return None

    if not result.data:
        logger.info(f"No users row for {user_id}")
        return None

    raw_role = result.data[0].get("role")
    role = coerce_role(raw_role)
    if role is None:
        logger.warning(f"User {user_id} has unrecognised role {raw_role!r}")
    return role


def get_user_role(user_id: Optional[str]) -> Role:
    """
    Resolve the role used for authorization decisions.

    public.users.role is the only source; auth user_metadata is editable by
    the user and is never consulted. A missing row, unknown role or Supabase
    error resolves to GUEST and is not cached.
    """
    if not user_id:
        return Role.GUEST

    cached = get_cached_role(user_id)
    if cached is not None:
        logger.debug(f"Role cache hit: {user_id}")
        return cached

    role = fetch_user_role(user_id)
    if role is None:
        return Role.GUEST

    cache_role(user_id, role, settings.ROLE_CACHE_TTL_SECONDS)
    return role


def invalidate_user_role(user_id: str):
    """Call after changing someone's role so the next request re-reads it."""
    forget_role(user_id)
