# core/errors.py

from fastapi import HTTPException, status


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1 - Supabase Auth / GoTrue / PostgREST errors
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2 - Supabase errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3 - Plain string fallback
    return str(error) or "Unknown Supabase error"


def access_denied(message: str, authenticated: bool = True) -> HTTPException:
    """
    Build (don't raise) the HTTPException for a denied authorization check.
    Guests get 401 so the front end can send them to /login.
    """
    if not authenticated:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
