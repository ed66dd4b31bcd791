# tests/test_auth.py

"""
Tests for resolving the caller's identity and role from a Supabase session.
"""

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch

from core.cache import get_cached_role
from dependencies.auth import (
    CurrentUser,
    get_current_role,
    get_current_user,
    get_optional_auth,
)
from models.enums import Role


def _credentials(token: str = "test-token") -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _auth_client(metadata=None):
    mock_client = Mock()
    auth_user = Mock()
    auth_user.id = "user-1"
    auth_user.email = "marie@example.com"
    auth_user.user_metadata = metadata or {}
    mock_client.auth.get_user.return_value = Mock(user=auth_user)
    return mock_client


def test_current_user_role_comes_from_users_table():
    mock_client = _auth_client({"role": "RESIDENT", "name": "Marie Curie"})

    with patch("dependencies.auth.get_supabase_client", return_value=mock_client), patch(
        "dependencies.auth.get_user_role", return_value=Role.ENCADRANT
    ) as mock_role:
        user = get_current_user(_credentials())

    assert user == CurrentUser(
        id="user-1",
        email="marie@example.com",
        role=Role.ENCADRANT,
        full_name="Marie Curie",
    )
    mock_client.auth.get_user.assert_called_once_with("test-token")
    mock_role.assert_called_once_with("user-1")


def test_rejected_token_is_401():
    mock_client = Mock()
    mock_client.auth.get_user.side_effect = Exception("invalid JWT")

    with patch("dependencies.auth.get_supabase_client", return_value=mock_client):
        with pytest.raises(HTTPException) as exc:
            get_current_user(_credentials("bad"))

    assert exc.value.status_code == 401


def test_user_without_email_is_401():
    mock_client = _auth_client()
    mock_client.auth.get_user.return_value.user.email = None

    with patch("dependencies.auth.get_supabase_client", return_value=mock_client):
        with pytest.raises(HTTPException) as exc:
            get_current_user(_credentials())

    assert exc.value.status_code == 401


def test_missing_supabase_client_is_500():
    with patch("dependencies.auth.get_supabase_client", return_value=None):
        with pytest.raises(HTTPException) as exc:
            get_current_user(_credentials())

    assert exc.value.status_code == 500


def test_optional_auth_swallows_failures():
    assert get_optional_auth(None) is None

    with patch("dependencies.auth.get_supabase_client", return_value=None):
        assert get_optional_auth(_credentials()) is None


def test_current_role_defaults_to_guest():
    assert get_current_role(None) == Role.GUEST
    assert get_current_role(CurrentUser(id="a", email="a@example.com", role=Role.ADMIN)) == Role.ADMIN


def test_bearer_token_end_to_end(client: TestClient, stub_users_table):
    mock_client = _auth_client()
    stub_users_table(mock_client, [{"role": "SUPER_ADMIN"}])

    with patch("dependencies.auth.get_supabase_client", return_value=mock_client), patch(
        "core.role_lookup.get_supabase_client", return_value=mock_client
    ):
        response = client.get("/permissions/me", headers={"Authorization": "Bearer test-token"})

    assert response.status_code == 200
    assert response.json()["role"] == "SUPER_ADMIN"
    assert response.json()["pages"] == ["*"]


def test_invalid_bearer_token_falls_back_to_guest(client: TestClient):
    mock_client = Mock()
    mock_client.auth.get_user.side_effect = Exception("expired")

    with patch("dependencies.auth.get_supabase_client", return_value=mock_client):
        response = client.get("/permissions/me", headers={"Authorization": "Bearer expired"})

    assert response.status_code == 200
    assert response.json()["role"] == "GUEST"


def test_metadata_role_is_ignored_when_users_row_is_missing(stub_users_table):
    mock_client = _auth_client({"role": "SUPER_ADMIN"})
    stub_users_table(mock_client, [])

    with patch("dependencies.auth.get_supabase_client", return_value=mock_client), patch(
        "core.role_lookup.get_supabase_client", return_value=mock_client
    ):
        user = get_current_user(_credentials())

    assert user.role == Role.GUEST
    assert get_cached_role("user-1") is None


def test_metadata_role_is_ignored_during_outage():
    mock_client = _auth_client({"role": "SUPER_ADMIN"})
    mock_client.table.side_effect = Exception("connection refused")

    with patch("dependencies.auth.get_supabase_client", return_value=mock_client), patch(
        "core.role_lookup.get_supabase_client", return_value=mock_client
    ):
        user = get_current_user(_credentials())

    assert user.role == Role.GUEST
    assert get_cached_role("user-1") is None
