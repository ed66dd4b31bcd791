from fastapi import Depends, Request

from core.authorization import AuthorizationEngine, RoleLike
from core.errors import access_denied
from core.logging_config import logger
from dependencies.auth import get_current_role
from models.enums import Action, Resource, Role, SpecialPermission


# -----------------------------------------------------
# Engine injection (set on app.state by create_app)
# -----------------------------------------------------
def get_authorization_engine(request: Request) -> AuthorizationEngine:
    return request.app.state.authorization_engine


def _deny(engine: AuthorizationEngine, role: Role, resource=None):
    return access_denied(
        engine.get_access_denied_message(role, resource),
        authenticated=role != Role.GUEST,
    )


# -----------------------------------------------------
# FastAPI dependency wrappers
# -----------------------------------------------------
def requires_permission(resource: Resource, action: Action):
    """
    Usage:
        @router.delete("/{id}", dependencies=[Depends(requires_permission(Resource.RESIDENTS, Action.DELETE))])
    """

    def dependency(
        role: Role = Depends(get_current_role),
        engine: AuthorizationEngine = Depends(get_authorization_engine),
    ) -> Role:
        if not engine.has_permission(role, resource, action):
            logger.warning(f"Permission denied: role={role} resource={resource} action={action}")
            raise _deny(engine, role, resource)
        return role

    return dependency


def requires_page_access(page_path: str):
    def dependency(
        role: Role = Depends(get_current_role),
        engine: AuthorizationEngine = Depends(get_authorization_engine),
    ) -> Role:
        if not engine.can_access_page(role, page_path):
            logger.warning(f"Page access denied: role={role} page={page_path}")
            raise _deny(engine, role)
        return role

    return dependency


def requires_special_permission(permission: SpecialPermission):
    def dependency(
        role: Role = Depends(get_current_role),
        engine: AuthorizationEngine = Depends(get_authorization_engine),
    ) -> Role:
        if not engine.has_special_permission(role, permission):
            logger.warning(f"Special permission denied: role={role} permission={permission}")
            raise _deny(engine, role)
        return role

    return dependency


# ============================================================
# USER-ADMINISTRATION CHECK (for handlers that know the target)
# ============================================================
def require_user_management(
    engine: AuthorizationEngine,
    actor_role: Role,
    target_role: RoleLike,
    action: Action,
):
    """Raise unless actor_role may perform `action` on a user holding target_role."""
    if not engine.can_manage_user(actor_role, target_role, action):
        logger.warning(
            f"User management denied: actor={actor_role} target={target_role} action={action}"
        )
        raise _deny(engine, actor_role, Resource.USERS)
