# core/roles.py

from typing import Optional, Union

from models.enums import Role


# ============================================
# ROLE HIERARCHY (strict total order)
# ============================================
ROLE_LEVELS = {
    Role.GUEST: 0,
    Role.RESIDENT: 1,
    Role.ENCADRANT: 2,
    Role.ADMIN: 3,
    Role.SUPER_ADMIN: 4,
}

# Roles ordered from least to most privileged
ROLES_BY_RANK = tuple(sorted(ROLE_LEVELS, key=ROLE_LEVELS.get))

# Legacy spellings still present in older profiles / front-end builds
ROLE_ALIASES = {
    "INVITÉ": Role.GUEST,
    "INVITE": Role.GUEST,
}


# ============================================
# DISPLAY METADATA (front-end badges & labels)
# ============================================
ROLE_DISPLAY_NAMES = {
    Role.GUEST: "Invité",
    Role.RESIDENT: "Résident",
    Role.ENCADRANT: "Encadrant",
    Role.ADMIN: "Administrateur",
    Role.SUPER_ADMIN: "Super Administrateur",
}

ROLE_DESCRIPTIONS = {
    Role.GUEST: "Visitor without a session",
    Role.RESIDENT: "Resident - personal services",
    Role.ENCADRANT: "Supervisor - residents and tasks",
    Role.ADMIN: "Administrator - facility management",
    Role.SUPER_ADMIN: "Super administrator - full access",
}

ROLE_BADGE_COLORS = {
    Role.GUEST: "bg-gray-800 text-gray-200",
    Role.RESIDENT: "bg-blue-800 text-blue-200",
    Role.ENCADRANT: "bg-green-800 text-green-200",
    Role.ADMIN: "bg-purple-800 text-purple-200",
    Role.SUPER_ADMIN: "bg-red-800 text-red-200",
}


# -----------------------------------------------------
# Role parsing
# -----------------------------------------------------
def coerce_role(value: Union[Role, str, None]) -> Optional[Role]:
    """
    Parse a role value coming from Supabase, a query string, or code.
    Returns None for anything that isn't a known role.
    """
    if isinstance(value, Role):
        return value

    if not isinstance(value, str):
        return None

    key = value.strip().upper()
    if key in ROLE_ALIASES:
        return ROLE_ALIASES[key]

    try:
        return Role(key)
    except ValueError:
        return None


def resolve_role(value: Union[Role, str, None]) -> Role:
    """Same as coerce_role, but unknown / missing roles become GUEST."""
    return coerce_role(value) or Role.GUEST


# -----------------------------------------------------
# Hierarchy helpers
# -----------------------------------------------------
def get_permission_level(role: Union[Role, str, None]) -> int:
    return ROLE_LEVELS[resolve_role(role)]


def outranks(actor: Role, target: Role) -> bool:
    """True when actor sits strictly above target in the hierarchy."""
    return ROLE_LEVELS[actor] > ROLE_LEVELS[target]


def get_role_display_name(role: Union[Role, str, None]) -> str:
    return ROLE_DISPLAY_NAMES[resolve_role(role)]


def get_role_description(role: Union[Role, str, None]) -> str:
    return ROLE_DESCRIPTIONS[resolve_role(role)]


def get_role_badge_color(role: Union[Role, str, None]) -> str:
    return ROLE_BADGE_COLORS[resolve_role(role)]
