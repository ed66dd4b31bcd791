# tests/test_roles.py

"""
Tests for role parsing and hierarchy metadata.
"""

import pytest

from core.roles import (
    ROLES_BY_RANK,
    coerce_role,
    get_permission_level,
    get_role_badge_color,
    get_role_display_name,
    outranks,
    resolve_role,
)
from models.enums import Role


def test_hierarchy_order():
    assert ROLES_BY_RANK == (
        Role.GUEST,
        Role.RESIDENT,
        Role.ENCADRANT,
        Role.ADMIN,
        Role.SUPER_ADMIN,
    )
    assert [get_permission_level(r) for r in ROLES_BY_RANK] == [0, 1, 2, 3, 4]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("ADMIN", Role.ADMIN),
        ("super_admin", Role.SUPER_ADMIN),
        ("  encadrant ", Role.ENCADRANT),
        ("INVITÉ", Role.GUEST),
        (Role.RESIDENT, Role.RESIDENT),
    ],
)
def test_coerce_role(raw, expected):
    assert coerce_role(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "MANAGER", "NURSE", 1, ["ADMIN"]])
def test_unknown_roles(raw):
    assert coerce_role(raw) is None
    assert resolve_role(raw) == Role.GUEST


def test_outranks_is_strict():
    assert outranks(Role.ADMIN, Role.ENCADRANT)
    assert not outranks(Role.ADMIN, Role.ADMIN)
    assert not outranks(Role.RESIDENT, Role.ADMIN)


def test_display_metadata_falls_back_to_guest():
    assert get_role_display_name(Role.SUPER_ADMIN) == "Super Administrateur"
    assert get_role_display_name("unknown") == "Invité"
    assert get_role_badge_color(None) == "bg-gray-800 text-gray-200"
    assert get_permission_level("MANAGER") == 0


def test_role_serializes_as_plain_string():
    assert str(Role.ENCADRANT) == "ENCADRANT"
    assert Role.list() == ["GUEST", "RESIDENT", "ENCADRANT", "ADMIN", "SUPER_ADMIN"]
