# core/authorization.py

"""
Authorization engine for Home21.

Every query is a pure lookup against an immutable RuleSet, so one engine
can be shared by all request handlers without locking. Unknown or missing
roles, resources, actions and paths always resolve to "denied".
"""

from typing import Dict, List, Optional, Type, TypeVar, Union
from urllib.parse import unquote, urlsplit

from core.permissions import DEFAULT_RULE_SET, WILDCARD_PAGE, RuleSet
from core.roles import (
    ROLES_BY_RANK,
    coerce_role,
    get_permission_level,
    get_role_badge_color,
    get_role_description,
    get_role_display_name,
    outranks,
    resolve_role,
)
from models.enums import Action, Resource, Role, SpecialPermission


RoleLike = Union[Role, str, None]
ResourceLike = Union[Resource, str, None]
ActionLike = Union[Action, str, None]

E = TypeVar("E", Resource, Action, SpecialPermission)


# ============================================
# DENIAL MESSAGES (generic per role, never per record)
# ============================================
GUEST_DENIED_MESSAGE = "You must be signed in to access this feature."

ACCESS_DENIED_MESSAGES = {
    Role.RESIDENT: "This feature is not available to residents.",
    Role.ENCADRANT: "You do not have the permissions required to access this section.",
    Role.ADMIN: "Only super administrators can access this feature.",
    Role.SUPER_ADMIN: "Access denied.",
}


# -----------------------------------------------------
# Input coercion
# -----------------------------------------------------
def _coerce(enum_cls: Type[E], value) -> Optional[E]:
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return None


def normalize_path(page_path: Optional[str]) -> Optional[str]:
    """
    "/residents/42/?tab=notes" -> "/residents/42"

    Returns None for paths that can't be matched safely (empty, relative,
    or containing "." / ".." segments, plain or percent-encoded).
    """
    if not isinstance(page_path, str) or not page_path.strip():
        return None

    parts = urlsplit(page_path.strip())
    path = parts.path
    if parts.scheme or parts.netloc or not path.startswith("/"):
        return None

    for segment in path.split("/"):
        decoded = unquote(segment)
        # "%2e%2e", "%2f" and double-encoded forms are refused outright
        if decoded in (".", "..") or "/" in decoded or "\\" in decoded or "%" in decoded:
            return None

    if path != "/":
        path = path.rstrip("/") or "/"

    return path


def _page_matches(pattern: str, path: str) -> bool:
    if pattern == path:
        return True
    if pattern.endswith("/*"):
        base = pattern[:-2]
        return path == base or path.startswith(base + "/")
    return False


# ============================================
# ENGINE
# ============================================
class AuthorizationEngine:
    """Answers authorization queries against one RuleSet."""

    def __init__(self, rule_set: Optional[RuleSet] = None):
        self._rules = rule_set if rule_set is not None else DEFAULT_RULE_SET

    @property
    def rules(self) -> RuleSet:
        return self._rules

    # -------------------------------------------------
    # Resource / action
    # -------------------------------------------------
    def has_permission(self, role: RoleLike, resource: ResourceLike, action: ActionLike) -> bool:
        resource = _coerce(Resource, resource)
        action = _coerce(Action, action)
        if resource is None or action is None:
            return False

        granted = self._rules.actions_for(resolve_role(role), resource)
        return action in granted or Action.MANAGE in granted

    def get_available_actions(self, role: RoleLike, resource: ResourceLike) -> List[Action]:
        """For showing/hiding UI controls. Enforcement goes through has_permission."""
        return [action for action in Action if self.has_permission(role, resource, action)]

    # -------------------------------------------------
    # Pages
    # -------------------------------------------------
    def can_access_page(self, role: RoleLike, page_path: Optional[str]) -> bool:
        path = normalize_path(page_path)
        if path is None:
            return False

        patterns = self._rules.pages_for(resolve_role(role))
        if WILDCARD_PAGE in patterns:
            return True

        return any(_page_matches(pattern, path) for pattern in patterns)

    def requires_auth(self, page_path: Optional[str]) -> bool:
        return normalize_path(page_path) not in self._rules.public_pages

    # -------------------------------------------------
    # Special permissions
    # -------------------------------------------------
    def has_special_permission(self, role: RoleLike, permission_name) -> bool:
        permission = _coerce(SpecialPermission, permission_name)
        if permission is None:
            return False
        return permission in self._rules.specials_for(resolve_role(role))

    # -------------------------------------------------
    # User administration
    # -------------------------------------------------
    def can_manage_user(self, actor_role: RoleLike, target_role: RoleLike, action: ActionLike) -> bool:
        """
        Actor needs USERS permission for the action and must strictly outrank
        the target. A super admin may only VIEW another super admin.
        """
        actor = resolve_role(actor_role)
        target = coerce_role(target_role)
        action = _coerce(Action, action)
        if target is None or action is None:
            return False

        if not self.has_permission(actor, Resource.USERS, action):
            return False

        if actor == Role.SUPER_ADMIN and target == Role.SUPER_ADMIN:
            return action == Action.VIEW

        return outranks(actor, target)

    def get_assignable_roles(self, actor_role: RoleLike) -> List[Role]:
        actor = resolve_role(actor_role)
        if not (
            self.has_permission(actor, Resource.USERS, Action.CREATE)
            or self.has_permission(actor, Resource.USERS, Action.UPDATE)
        ):
            return []

        assignable = []
        for role in ROLES_BY_RANK:
            if role == Role.GUEST or outranks(role, actor):
                continue
            if role == Role.SUPER_ADMIN and not self.has_special_permission(
                actor, SpecialPermission.CREATE_SUPER_ADMIN
            ):
                continue
            assignable.append(role)
        return assignable

    # -------------------------------------------------
    # Presentation helpers (never used for decisions)
    # -------------------------------------------------
    def get_access_denied_message(self, role: RoleLike, resource: ResourceLike = None) -> str:
        """
        One fixed message per role. `resource` is accepted so callers can pass
        what they were checking, but it never changes the text: the message
        must not reveal which resources exist or are protected.
        """
        actor = coerce_role(role)
        if actor is None or actor == Role.GUEST:
            return GUEST_DENIED_MESSAGE
        return ACCESS_DENIED_MESSAGES[actor]

    def get_role_summary(self, role: RoleLike) -> Dict:
        actor = resolve_role(role)
        actions = {resource: self.get_available_actions(actor, resource) for resource in Resource}
        return {
            "role": actor,
            "display_name": get_role_display_name(actor),
            "description": get_role_description(actor),
            "level": get_permission_level(actor),
            "badge_color": get_role_badge_color(actor),
            "permissions": {resource: granted for resource, granted in actions.items() if granted},
            "pages": list(self._rules.pages_for(actor)),
            "special_permissions": sorted(self._rules.specials_for(actor), key=str),
            "assignable_roles": self.get_assignable_roles(actor),
        }


# Process-wide default, built from DEFAULT_RULE_SET
default_engine = AuthorizationEngine()
