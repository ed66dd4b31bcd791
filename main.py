from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Core
from core.authorization import AuthorizationEngine, default_engine
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.logging_config import logger
from core.permissions import RuleSet

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.health import router as health_router
from routers.permissions import router as permissions_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app(rule_set: Optional[RuleSet] = None) -> FastAPI:
    """
    Build the API around one authorization engine.
    Pass `rule_set` to serve a different (already validated) rule table.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Home21 / Pass21 role-based access control, enforced server-side",
    )

    app.state.authorization_engine = (
        AuthorizationEngine(rule_set) if rule_set is not None else default_engine
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup logging
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info("Starting Home21 Authorization API")
        validate_config_on_startup()
        for route in app.routes:
            methods = ",".join(sorted(getattr(route, "methods", None) or []))
            logger.debug(f"Route {methods:10s} {getattr(route, 'path', '')}")

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url.path} - {exc.detail}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(permissions_router)
    app.include_router(health_router)

    return app


# Create the global FastAPI instance
app = create_app()
