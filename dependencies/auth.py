from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from core.errors import extract_supabase_error
from core.logging_config import logger
from core.role_lookup import get_user_role
from core.supabase_client import get_supabase_client
from models.enums import Role


bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# Current User Model (identity + resolved role)
# ============================================================
class CurrentUser(BaseModel):
    id: str                         # Supabase Auth UID (= public.users.id)
    email: str
    role: Role = Role.GUEST

    full_name: Optional[str] = None


# ============================================================
# AUTH DECODING (Supabase validates the JWT, we only read the result)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(credentials.credentials)
    except Exception as e:
        logger.info(f"Token rejected by Supabase: {extract_supabase_error(e)}")
        raise unauthorized

    auth_user = getattr(auth_resp, "user", None)
    if not auth_user or not auth_user.email:
        raise unauthorized

    metadata = auth_user.user_metadata or {}

    # ---------------------------------------------------------
    # Role: public.users.role only (user_metadata is user-editable)
    # ---------------------------------------------------------
    role = get_user_role(auth_user.id)

    return CurrentUser(
        id=auth_user.id,
        email=auth_user.email,
        role=role,
        full_name=metadata.get("name") or metadata.get("full_name"),
    )


# ============================================================
# OPTIONAL AUTHENTICATION (guests allowed)
# ============================================================
def get_optional_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer_scheme),
) -> Optional[CurrentUser]:
    """
    Returns CurrentUser if a valid token was provided, None otherwise.
    Does not raise when the token is missing or rejected.
    """
    if not credentials:
        return None

    try:
        return get_current_user(credentials)
    except HTTPException:
        return None


def get_current_role(
    current_user: Optional[CurrentUser] = Depends(get_optional_auth),
) -> Role:
    """Role of the caller; GUEST when there is no valid session."""
    if current_user is None:
        return Role.GUEST
    return current_user.role
