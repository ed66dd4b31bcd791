# tests/test_startup.py

"""
Tests for application startup: config validation and route logging.
"""

import pytest
from fastapi.testclient import TestClient
from starlette.routing import BaseRoute
from unittest.mock import patch

from core.config import Settings, settings
from core.config_validator import (
    validate_config_on_startup,
    validate_optional_config,
    validate_required_config,
)
from main import create_app


class _PathlessRoute(BaseRoute):
    """Stands in for router entries that expose no `path` attribute."""


def test_startup_tolerates_routes_without_path():
    app = create_app()
    app.router.routes.append(_PathlessRoute())

    with patch("main.logger") as mock_logger:
        with TestClient(app):
            pass

    mock_logger.info.assert_any_call("Starting Home21 Authorization API")
    logged = [call.args[0] for call in mock_logger.debug.call_args_list]
    assert logged and all(line.startswith("Route") for line in logged)


def test_required_config_lists_missing_supabase_credentials():
    with patch.object(settings, "SUPABASE_URL", None), patch.object(
        settings, "SUPABASE_SERVICE_ROLE_KEY", None
    ):
        assert validate_required_config() == ["SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"]


def test_settings_only_declare_used_supabase_keys():
    assert "SUPABASE_ANON_KEY" not in Settings.model_fields

    with patch.object(settings, "ROLE_CACHE_TTL_SECONDS", 300):
        assert validate_optional_config() == []


def test_missing_config_is_fatal_only_in_production():
    with patch.object(settings, "SUPABASE_URL", None), patch.object(settings, "ENV", "production"):
        with pytest.raises(RuntimeError):
            validate_config_on_startup()

    with patch.object(settings, "SUPABASE_URL", None), patch.object(settings, "ENV", "development"):
        validate_config_on_startup()
