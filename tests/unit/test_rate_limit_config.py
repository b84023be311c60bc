"""Tests for rate limiter construction (src/projecthub/core/rate_limit.py)."""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request

from src.projecthub.core.rate_limit import create_limiter, get_rate_limit_key

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_request() -> MagicMock:
    request = MagicMock(spec=Request)
    request.headers = {"X-Forwarded-For": "10.0.0.1"}
    request.client = MagicMock()
    request.client.host = "192.168.1.100"
    return request


def settings_for(app_env: str, redis_url: str | None = None) -> MagicMock:
    settings = MagicMock()
    settings.app_env = app_env
    settings.redis_url = redis_url
    return settings


class TestGetRateLimitKey:
    def test_uses_client_ip_and_ignores_headers(self, mock_request: MagicMock) -> None:
        with patch("src.projecthub.core.rate_limit.get_remote_address", return_value="192.168.1.100"):
            assert get_rate_limit_key(mock_request) == "192.168.1.100"

    def test_unknown_when_address_is_missing(self, mock_request: MagicMock) -> None:
        with patch("src.projecthub.core.rate_limit.get_remote_address", return_value=None):
            assert get_rate_limit_key(mock_request) == "unknown"


class TestCreateLimiter:
    def test_disabled_in_testing(self) -> None:
        with patch(
            "src.projecthub.core.rate_limit.get_settings", return_value=settings_for("testing")
        ):
            limiter = create_limiter()

        assert limiter.enabled is False

    def test_redis_backend_when_configured(self) -> None:
        settings = settings_for("production", "redis://cache:6379/0")
        with (
            patch("src.projecthub.core.rate_limit.get_settings", return_value=settings),
            patch("src.projecthub.core.rate_limit.Limiter") as limiter_cls,
        ):
            create_limiter()

        assert limiter_cls.call_args.kwargs["storage_uri"] == "redis://cache:6379/0"

    def test_in_memory_without_redis(self) -> None:
        with (
            patch(
                "src.projecthub.core.rate_limit.get_settings",
                return_value=settings_for("development"),
            ),
            patch("src.projecthub.core.rate_limit.Limiter") as limiter_cls,
        ):
            create_limiter()

        assert "storage_uri" not in limiter_cls.call_args.kwargs
        assert "enabled" not in limiter_cls.call_args.kwargs
