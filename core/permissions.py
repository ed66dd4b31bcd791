# core/permissions.py

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from core.logging_config import logger
from core.roles import ROLES_BY_RANK
from models.enums import Action, Resource, Role, SpecialPermission


ALL_ACTIONS = (Action.VIEW, Action.CREATE, Action.UPDATE, Action.DELETE, Action.MANAGE)
CRUD_ACTIONS = (Action.VIEW, Action.CREATE, Action.UPDATE, Action.DELETE)


# ============================================
# CENTRALIZED ROLE → RESOURCE → ACTIONS MAP
# ============================================
ROLE_PERMISSIONS: Dict[Role, Dict[Resource, List[Action]]] = {

    # =====================================================
    # SUPER ADMIN - full access to everything
    # =====================================================
    Role.SUPER_ADMIN: {
        Resource.USERS: list(ALL_ACTIONS),
        Resource.SETTINGS: [Action.VIEW, Action.UPDATE, Action.MANAGE],
        Resource.RESIDENTS: list(ALL_ACTIONS),
        Resource.HOUSES: list(ALL_ACTIONS),
        Resource.TASKS: list(ALL_ACTIONS),
        Resource.SERVICES: list(ALL_ACTIONS),
        Resource.DASHBOARD: [Action.VIEW],
        Resource.PROFILE: [Action.VIEW, Action.UPDATE],
    },

    # =====================================================
    # ADMIN - no MANAGE on users (cannot touch super admins),
    # no system settings
    # =====================================================
    Role.ADMIN: {
        Resource.USERS: list(CRUD_ACTIONS),
        Resource.RESIDENTS: list(ALL_ACTIONS),
        Resource.HOUSES: list(ALL_ACTIONS),
        Resource.TASKS: list(ALL_ACTIONS),
        Resource.SERVICES: list(ALL_ACTIONS),
        Resource.DASHBOARD: [Action.VIEW],
        Resource.PROFILE: [Action.VIEW, Action.UPDATE],
    },

    # =====================================================
    # ENCADRANT - read/update residents & houses, no deletes
    # =====================================================
    Role.ENCADRANT: {
        Resource.RESIDENTS: [Action.VIEW, Action.UPDATE],
        Resource.HOUSES: [Action.VIEW, Action.UPDATE],
        Resource.TASKS: [Action.VIEW, Action.CREATE, Action.UPDATE],
        Resource.SERVICES: [Action.VIEW, Action.CREATE, Action.UPDATE],
        Resource.DASHBOARD: [Action.VIEW],
        Resource.PROFILE: [Action.VIEW, Action.UPDATE],
    },

    # =====================================================
    # RESIDENT - own dashboard, profile and service requests
    # =====================================================
    Role.RESIDENT: {
        Resource.SERVICES: [Action.VIEW, Action.CREATE],
        Resource.DASHBOARD: [Action.VIEW],
        Resource.PROFILE: [Action.VIEW, Action.UPDATE],
    },

    # =====================================================
    # FALLBACK
    # =====================================================
    Role.GUEST: {},
}


# ============================================
# SPECIAL (NON-RESOURCE) PERMISSIONS
# ============================================
SPECIAL_PERMISSIONS: Dict[Role, List[SpecialPermission]] = {
    Role.SUPER_ADMIN: [
        SpecialPermission.CREATE_SUPER_ADMIN,
        SpecialPermission.MANAGE_SYSTEM_SETTINGS,
        SpecialPermission.VIEW_ALL_AUDIT_LOGS,
    ],
}


# ============================================
# PAGES
# ============================================
# Section root → resource whose VIEW permission opens it (and its sub-pages)
PAGE_RESOURCES: Dict[str, Resource] = {
    "/admin/users": Resource.USERS,
    "/settings": Resource.SETTINGS,
    "/residents": Resource.RESIDENTS,
    "/houses": Resource.HOUSES,
    "/tasks": Resource.TASKS,
    "/services": Resource.SERVICES,
    "/dashboard": Resource.DASHBOARD,
    "/profile": Resource.PROFILE,
}

PUBLIC_PAGES: Tuple[str, ...] = (
    "/",
    "/login",
    "/forgot-password",
    "/reset-password",
    "/about",
)

WILDCARD_PAGE = "*"

# Roles whose page list is the wildcard
UNRESTRICTED_ROLES: Tuple[Role, ...] = (Role.SUPER_ADMIN,)


# -----------------------------------------------------
# Effective actions (MANAGE expands to the CRUD set)
# -----------------------------------------------------
def expand_actions(actions: Iterable[Action]) -> FrozenSet[Action]:
    granted = frozenset(actions)
    if Action.MANAGE in granted:
        return granted | frozenset(CRUD_ACTIONS)
    return granted


def _pages_cover(granted: Tuple[str, ...], required: Tuple[str, ...]) -> bool:
    if WILDCARD_PAGE in granted:
        return True
    return set(required) <= set(granted)


# ============================================
# RULE SET (immutable, injected into the engine)
# ============================================
@dataclass(frozen=True)
class RuleSet:
    """
    Canonical, read-only authorization tables.

    Built once and handed to AuthorizationEngine. To change rules, build a
    new RuleSet and swap the engine reference; never mutate one in place.
    Construction fails with ValueError if a higher role would be missing
    something a lower role is granted.
    """

    permissions: Mapping[Role, Mapping[Resource, FrozenSet[Action]]]
    special_permissions: Mapping[Role, FrozenSet[SpecialPermission]]
    pages: Mapping[Role, Tuple[str, ...]]
    public_pages: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        problems = self.monotonicity_violations()
        if problems:
            message = "Rule set breaks the role hierarchy: " + "; ".join(problems)
            logger.error(message)
            raise ValueError(message)

    def actions_for(self, role: Role, resource: Resource) -> FrozenSet[Action]:
        return self.permissions.get(role, {}).get(resource, frozenset())

    def specials_for(self, role: Role) -> FrozenSet[SpecialPermission]:
        return self.special_permissions.get(role, frozenset())

    def pages_for(self, role: Role) -> Tuple[str, ...]:
        return self.pages.get(role, ())

    def monotonicity_violations(self) -> List[str]:
        problems = []

        for lower, higher in zip(ROLES_BY_RANK, ROLES_BY_RANK[1:]):
            for resource in Resource:
                missing = expand_actions(self.actions_for(lower, resource)) - expand_actions(
                    self.actions_for(higher, resource)
                )
                if missing:
                    names = ", ".join(sorted(str(a) for a in missing))
                    problems.append(f"{higher} lacks {resource}:{names} granted to {lower}")

            missing_specials = self.specials_for(lower) - self.specials_for(higher)
            if missing_specials:
                names = ", ".join(sorted(str(s) for s in missing_specials))
                problems.append(f"{higher} lacks special {names} granted to {lower}")

            if not _pages_cover(self.pages_for(higher), self.pages_for(lower)):
                problems.append(f"{higher} cannot reach every page open to {lower}")

        return problems


# -----------------------------------------------------
# Builder
# -----------------------------------------------------
def build_rule_set(
    role_permissions: Optional[Mapping[Role, Mapping[Resource, Iterable[Action]]]] = None,
    special_permissions: Optional[Mapping[Role, Iterable[SpecialPermission]]] = None,
    page_resources: Optional[Mapping[str, Resource]] = None,
    public_pages: Optional[Iterable[str]] = None,
    unrestricted_roles: Optional[Iterable[Role]] = None,
) -> RuleSet:
    """
    Freeze the permission tables and derive each role's page list from them:
    public pages, plus every section whose resource the role can VIEW
    (exact path and "/*" sub-pages), or "*" for unrestricted roles.
    """
    role_permissions = ROLE_PERMISSIONS if role_permissions is None else role_permissions
    special_permissions = SPECIAL_PERMISSIONS if special_permissions is None else special_permissions
    page_resources = PAGE_RESOURCES if page_resources is None else page_resources
    public_pages = PUBLIC_PAGES if public_pages is None else tuple(public_pages)
    unrestricted = frozenset(UNRESTRICTED_ROLES if unrestricted_roles is None else unrestricted_roles)

    permissions = {}
    for role in Role:
        table = role_permissions.get(role, {})
        permissions[role] = MappingProxyType(
            {resource: frozenset(table[resource]) for resource in table if table[resource]}
        )

    specials = {
        role: frozenset(special_permissions.get(role, ()))
        for role in Role
    }

    pages = {}
    for role in Role:
        if role in unrestricted:
            pages[role] = (WILDCARD_PAGE,)
            continue

        allowed = list(public_pages)
        for path, resource in page_resources.items():
            if Action.VIEW in expand_actions(permissions[role].get(resource, ())):
                allowed.extend([path, f"{path}/*"])
        pages[role] = tuple(allowed)

    return RuleSet(
        permissions=MappingProxyType(permissions),
        special_permissions=MappingProxyType(specials),
        pages=MappingProxyType(pages),
        public_pages=frozenset(public_pages),
    )


# Loaded once at import, read-only afterwards
DEFAULT_RULE_SET = build_rule_set()
