# core/supabase_client.py

from typing import Optional

from supabase import create_client, Client
from core.config import settings
from core.errors import extract_supabase_error
from core.logging_config import logger


# ============================================================
# Supabase Client Factory (ALWAYS service role)
# ============================================================

def get_supabase_client() -> Optional[Client]:
    """
    Creates a Supabase client using the SERVICE ROLE KEY.
    REQUIRED for:
        - auth.get_user (token verification)
        - reading public.users.role regardless of RLS policies

    Returns None when credentials are missing or the client can't be built,
    so callers can fail closed.
    """
    supabase_url = settings.SUPABASE_URL
    supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY  # MUST be service-role

    if not supabase_url or not supabase_key:
        logger.error("Missing Supabase credentials")
        logger.error(f"   URL: {supabase_url}")
        logger.error(f"   SERVICE ROLE KEY: {'SET' if supabase_key else 'MISSING'}")
        return None

    try:
        return create_client(supabase_url, supabase_key)
    except Exception as e:
        logger.error(f"Supabase Init Error: {extract_supabase_error(e)}", exc_info=True)
        return None


# ============================================================
# Ping Supabase for health checks
# ============================================================

def ping_supabase() -> dict:
    """
    Connectivity check against the users table (role source).
    Does NOT query auth tables.
    """
    client = get_supabase_client()
    if client is None:
        return {"service": "Supabase", "status": "not_configured"}

    try:
        res = client.table("users").select("id").limit(1).execute()
    except Exception as e:
        logger.error(f"Supabase Ping Error: {extract_supabase_error(e)}")
        return {"service": "Supabase", "status": "error", "detail": extract_supabase_error(e)}

    return {
        "service": "Supabase",
        "status": "ok",
        "tables": {"users": {"status": "ok", "rows_found": len(res.data or [])}},
    }
