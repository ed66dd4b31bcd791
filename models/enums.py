from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Privilege level stored in public.users.role (GUEST = no session)."""

    GUEST = "GUEST"
    RESIDENT = "RESIDENT"
    ENCADRANT = "ENCADRANT"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


# -----------------------------------------------------
# RESOURCE
# -----------------------------------------------------
class Resource(BaseStrEnum):
    """Protected category of facility data."""

    USERS = "users"
    SETTINGS = "settings"
    RESIDENTS = "residents"
    HOUSES = "houses"
    TASKS = "tasks"
    SERVICES = "services"
    DASHBOARD = "dashboard"
    PROFILE = "profile"


# -----------------------------------------------------
# ACTION
# -----------------------------------------------------
class Action(BaseStrEnum):
    """Operation on a resource. MANAGE implies the other four."""

    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"


# -----------------------------------------------------
# SPECIAL PERMISSION
# -----------------------------------------------------
class SpecialPermission(BaseStrEnum):
    """Capabilities not tied to a resource/action pair."""

    CREATE_SUPER_ADMIN = "create_super_admin"
    MANAGE_SYSTEM_SETTINGS = "manage_system_settings"
    VIEW_ALL_AUDIT_LOGS = "view_all_audit_logs"
