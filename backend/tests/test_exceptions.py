"""
Tests for the custom exception hierarchy and its FastAPI handler.

Verifies:
- Exception class attributes and inheritance
- Error responses have the public structure only
- The application handler maps exceptions to their status codes
"""

import pytest
from fastapi.testclient import TestClient

from hera_ai.core.exceptions import (
    CacheError,
    ConfigurationError,
    HeraAIException,
    MissingAPIKeyError,
    ProviderError,
    ProviderNotFoundError,
    ProviderTimeoutError,
    ResourceNotFoundError,
)
from hera_ai.main import app


class TestExceptionAttributes:
    """Test exception class attributes and initialization."""

    def test_base_exception_attributes(self):
        exc = HeraAIException("Something broke", details={"key": "value"})

        assert exc.message == "Something broke"
        assert exc.error_code == "INTERNAL_ERROR"
        assert exc.details == {"key": "value"}
        assert exc.status_code == 500
        assert exc.timestamp
        assert str(exc) == "Something broke"

    def test_provider_error(self):
        exc = ProviderError("openai returned 500", provider="openai")

        assert exc.provider == "openai"
        assert exc.details["provider"] == "openai"
        assert exc.status_code == 502

    def test_provider_timeout_error(self):
        exc = ProviderTimeoutError("claude", 2.5)

        assert exc.message == "claude request timed out after 2.5s"
        assert exc.error_code == "PROVIDER_TIMEOUT"
        assert exc.status_code == 504
        assert exc.details["timeout_seconds"] == 2.5
        assert isinstance(exc, ProviderError)

    def test_provider_not_found_error(self):
        exc = ProviderNotFoundError("gemini")

        assert exc.status_code == 404
        assert exc.error_code == "PROVIDER_NOT_FOUND"
        assert "gemini" in exc.message
        assert isinstance(exc, ResourceNotFoundError)

    def test_missing_api_key_error(self):
        exc = MissingAPIKeyError("deepseek")

        assert exc.status_code == 501
        assert exc.details["service_name"] == "deepseek"
        assert isinstance(exc, ConfigurationError)

    def test_cache_error(self):
        assert CacheError().error_code == "CACHE_ERROR"


class TestErrorResponseStructure:
    """Test error response structure consistency."""

    def test_to_dict_hides_details(self):
        response = ProviderError("Test error", provider="openai", details={"extra": "data"}).to_dict()

        assert set(response) == {"error", "message", "timestamp"}

    def test_error_codes_are_uppercase_with_underscores(self):
        test_cases = [
            (ProviderError(), "PROVIDER_ERROR"),
            (ProviderTimeoutError("openai", 1), "PROVIDER_TIMEOUT"),
            (ProviderNotFoundError("x"), "PROVIDER_NOT_FOUND"),
            (CacheError(), "CACHE_ERROR"),
            (ConfigurationError(), "CONFIGURATION_ERROR"),
            (MissingAPIKeyError("test"), "MISSING_API_KEY"),
        ]

        for exc, expected_code in test_cases:
            assert exc.error_code == expected_code
            assert exc.error_code.isupper()
            assert " " not in exc.error_code


class TestExceptionHandlers:
    """The application's handlers, exercised through temporary routes."""

    @pytest.fixture
    def error_client(self):
        path = "/__test__/raise-timeout"

        @app.get(path)
        async def raise_timeout():
            raise ProviderTimeoutError("openai", 30)

        yield TestClient(app, raise_server_exceptions=False)

        app.router.routes[:] = [
            route for route in app.router.routes if getattr(route, "path", None) != path
        ]

    def test_hera_exception_handler(self, error_client):
        response = error_client.get("/__test__/raise-timeout")

        assert response.status_code == 504
        data = response.json()
        assert data["error"] == "PROVIDER_TIMEOUT"
        assert data["message"] == "openai request timed out after 30s"
        assert "details" not in data
