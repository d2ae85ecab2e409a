"""
Pytest configuration and fixtures for the AI router test suite.

Provides a three-provider registry of fake adapters mirroring the production
setup and a FastAPI test client wired to it.
"""

from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient

from fakes import FakeProvider, make_descriptor
from hera_ai.main import app
from hera_ai.services.ai_service import get_ai_router
from hera_ai.services.routing import AIRequestRouter, InMemoryResponseCache, ProviderRegistry


@pytest.fixture
def fake_providers() -> Dict[str, FakeProvider]:
    """One fake adapter per hosted provider, keyed by provider id."""
    return {name: FakeProvider(name) for name in ("openai", "claude", "deepseek")}


@pytest.fixture
def registry(fake_providers) -> ProviderRegistry:
    """Registry in production registration order: openai, claude, deepseek."""
    registry = ProviderRegistry()
    for priority, (name, adapter) in enumerate(fake_providers.items(), start=1):
        registry.register(make_descriptor(name, priority), adapter)
    return registry


@pytest.fixture
def response_cache() -> InMemoryResponseCache:
    return InMemoryResponseCache(capacity=100)


@pytest.fixture
def ai_router(registry, response_cache) -> AIRequestRouter:
    return AIRequestRouter(registry, cache=response_cache)


@pytest.fixture
def client(ai_router) -> Generator[TestClient, None, None]:
    """Test client with the shared router replaced by the fake-backed one."""
    app.dependency_overrides[get_ai_router] = lambda: ai_router

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
