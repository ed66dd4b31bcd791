# routers/permissions.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from core.authorization import AuthorizationEngine
from core.errors import access_denied
from core.logging_config import logger
from core.permission_helpers import (
    get_authorization_engine,
    require_user_management,
    requires_permission,
)
from core.role_lookup import get_user_role, invalidate_user_role
from core.roles import (
    ROLES_BY_RANK,
    get_permission_level,
    get_role_badge_color,
    get_role_description,
    get_role_display_name,
)
from dependencies.auth import get_current_role
from models.enums import Action, Resource, Role
from models.permissions import (
    ManagedUserPermissions,
    PageAccessCheck,
    PermissionCheck,
    RoleInfo,
    RoleSummary,
    UserManagementCheck,
)

router = APIRouter(
    prefix="/permissions",
    tags=["Permissions"],
)


# ============================================================
# Caller's own permissions
# ============================================================
@router.get(
    "/me",
    response_model=RoleSummary,
    summary="Role, permissions and pages of the current caller",
)
def get_my_permissions(
    role: Role = Depends(get_current_role),
    engine: AuthorizationEngine = Depends(get_authorization_engine),
):
    return RoleSummary(**engine.get_role_summary(role))


# ============================================================
# Role catalogue (labels / levels for dropdowns and badges)
# ============================================================
@router.get("/roles", response_model=List[RoleInfo], summary="List every role")
def list_roles():
    return [
        RoleInfo(
            role=role,
            display_name=get_role_display_name(role),
            description=get_role_description(role),
            level=get_permission_level(role),
            badge_color=get_role_badge_color(role),
        )
        for role in ROLES_BY_RANK
    ]


# ============================================================
# Point checks (unknown values answer allowed=false, never 422)
# ============================================================
@router.get("/check", response_model=PermissionCheck, summary="Check a resource/action pair")
def check_permission(
    resource: Optional[str] = Query(None),
    action: Optional[str] = Query(None),
    role: Role = Depends(get_current_role),
    engine: AuthorizationEngine = Depends(get_authorization_engine),
):
    allowed = engine.has_permission(role, resource, action)
    return PermissionCheck(
        resource=resource or "",
        action=action or "",
        allowed=allowed,
        message=None if allowed else engine.get_access_denied_message(role, resource),
    )


@router.get("/pages/check", response_model=PageAccessCheck, summary="Check access to a front-end page")
def check_page_access(
    path: Optional[str] = Query(None),
    role: Role = Depends(get_current_role),
    engine: AuthorizationEngine = Depends(get_authorization_engine),
):
    return PageAccessCheck(
        path=path or "",
        allowed=engine.can_access_page(role, path),
        requires_auth=engine.requires_auth(path),
    )


@router.get(
    "/users/check",
    response_model=UserManagementCheck,
    summary="Check whether the caller may act on users of a given role",
)
def check_user_management(
    target_role: Optional[str] = Query(None),
    action: Optional[str] = Query(None),
    role: Role = Depends(get_current_role),
    engine: AuthorizationEngine = Depends(get_authorization_engine),
):
    return UserManagementCheck(
        target_role=target_role or "",
        action=action or "",
        allowed=engine.can_manage_user(role, target_role, action),
    )


# ============================================================
# Per-user administration
# ============================================================
def _require_manageable(engine: AuthorizationEngine, actor: Role, target: Role, action: Action):
    # Unknown accounts resolve to GUEST and are refused exactly like
    # accounts the caller outranks too little to touch
    if target == Role.GUEST:
        logger.warning(f"User management denied: actor={actor} target=unknown action={action}")
        raise access_denied(
            engine.get_access_denied_message(actor, Resource.USERS),
            authenticated=actor != Role.GUEST,
        )
    require_user_management(engine, actor, target, action)


def _managed_user(engine: AuthorizationEngine, actor: Role, user_id: str) -> ManagedUserPermissions:
    target = get_user_role(user_id)
    _require_manageable(engine, actor, target, Action.VIEW)

    return ManagedUserPermissions(
        user_id=user_id,
        role=target,
        actions=[a for a in Action if engine.can_manage_user(actor, target, a)],
        assignable_roles=engine.get_assignable_roles(actor),
    )


@router.get(
    "/users/{user_id}",
    response_model=ManagedUserPermissions,
    summary="What the caller may do to a specific user",
)
def get_user_permissions(
    user_id: str,
    role: Role = Depends(requires_permission(Resource.USERS, Action.VIEW)),
    engine: AuthorizationEngine = Depends(get_authorization_engine),
):
    return _managed_user(engine, role, user_id)


@router.post(
    "/users/{user_id}/refresh",
    response_model=ManagedUserPermissions,
    summary="Drop a user's cached role after it was changed",
)
def refresh_user_role(
    user_id: str,
    role: Role = Depends(requires_permission(Resource.USERS, Action.UPDATE)),
    engine: AuthorizationEngine = Depends(get_authorization_engine),
):
    # Authorize against the role currently on record before touching the cache
    _require_manageable(engine, role, get_user_role(user_id), Action.UPDATE)

    invalidate_user_role(user_id)
    return _managed_user(engine, role, user_id)
