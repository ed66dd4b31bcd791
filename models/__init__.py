# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    Resource,
    Action,
    SpecialPermission,
)

# -------------------------
# Authorization API Models
# -------------------------
from .permissions import (
    RoleInfo,
    RoleSummary,
    PermissionCheck,
    PageAccessCheck,
    UserManagementCheck,
    ManagedUserPermissions,
)

__all__ = [
    # enums
    "Role",
    "Resource",
    "Action",
    "SpecialPermission",

    # authorization api
    "RoleInfo",
    "RoleSummary",
    "PermissionCheck",
    "PageAccessCheck",
    "UserManagementCheck",
    "ManagedUserPermissions",
]
