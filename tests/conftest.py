# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
from typing import Callable, Generator

from main import create_app
from core.authorization import AuthorizationEngine
from dependencies.auth import CurrentUser, get_optional_auth
from models.enums import Role


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


@pytest.fixture
def engine() -> AuthorizationEngine:
    """Engine over the default rule set."""
    return AuthorizationEngine()


@pytest.fixture
def login_as(app) -> Callable[[Role], CurrentUser]:
    """
    Pretend Supabase already authenticated the caller with the given role.

    Usage:
        login_as(Role.ADMIN)
    """

    def _login(role: Role) -> CurrentUser:
        user = CurrentUser(
            id=f"{role.value.lower()}-user-id",
            email=f"{role.value.lower()}@example.com",
            role=role,
        )
        app.dependency_overrides[get_optional_auth] = lambda: user
        return user

    return _login


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = Mock()
    mock_table = Mock()
    mock_client.table.return_value = mock_table
    return mock_client


def users_table_returning(mock_client: Mock, rows):
    """Wire client.table("users").select().eq().limit().execute() to return rows."""
    query = mock_client.table.return_value.select.return_value
    query.eq.return_value.limit.return_value.execute.return_value = Mock(data=rows)
    return query


@pytest.fixture
def stub_users_table():
    return users_table_returning


@pytest.fixture(autouse=True)
def reset_cache():
    """Reset the role cache before each test."""
    from core.cache import clear_role_cache
    clear_role_cache()
    yield
    clear_role_cache()
