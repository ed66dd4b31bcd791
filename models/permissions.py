# models/permissions.py

from typing import Dict, List, Optional
from pydantic import BaseModel

from models.enums import Action, Resource, Role, SpecialPermission


# ===============================================================
# RESPONSE MODELS (read-only authorization API)
# ===============================================================

class RoleInfo(BaseModel):
    """Public metadata for one role (labels, badges, hierarchy level)."""
    role: Role
    display_name: str
    description: str
    level: int
    badge_color: str


class RoleSummary(RoleInfo):
    """Everything the front end needs to render affordances for a role."""
    permissions: Dict[Resource, List[Action]] = {}
    pages: List[str] = []
    special_permissions: List[SpecialPermission] = []
    assignable_roles: List[Role] = []


class PermissionCheck(BaseModel):
    resource: str
    action: str
    allowed: bool
    message: Optional[str] = None


class PageAccessCheck(BaseModel):
    path: str
    allowed: bool
    requires_auth: bool


class UserManagementCheck(BaseModel):
    target_role: str
    action: str
    allowed: bool


class ManagedUserPermissions(BaseModel):
    """What the caller may do to one specific user."""
    user_id: str
    role: Role
    actions: List[Action]
    assignable_roles: List[Role]
