"""Shared fixtures for integration tests.

Every test gets a fresh application (and therefore a fresh pet store) with
tracing disabled. Logging is marked as configured up front so that building
the app does not replace the Loguru sinks installed by the tests.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from petstore.api.main import create_app
from petstore.core.config import (
    ObservabilityConfig,
    PetstoreConfig,
    Settings,
    get_settings,
)
from petstore.core.context import RequestContext
from petstore.core.logging import _state

type SettingsFactoryType = Callable[..., Settings]
type SettingsClientFactoryType = Callable[[Settings], Awaitable[AsyncClient]]


def make_settings(**overrides: object) -> Settings:
    """Test settings: tracing off, sample data loaded unless overridden."""
    values: dict[str, object] = {
        "observability_config": ObservabilityConfig(enable_tracing=False),
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


@pytest.fixture(autouse=True)
def logging_configured() -> Generator[None]:
    """Keep create_app from reconfiguring Loguru during tests."""
    previous = _state.configured
    _state.configured = True
    yield
    _state.configured = previous


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Clear RequestContext before and after each test."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture
def settings_factory() -> SettingsFactoryType:
    """Expose make_settings to tests."""
    return make_settings


@pytest.fixture
def app() -> FastAPI:
    """Application seeded with the sample pets."""
    return create_app(make_settings())


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to the seeded application."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def empty_client() -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to an application with an empty store."""
    app = create_app(
        make_settings(petstore_config=PetstoreConfig(seed_sample_data=False))
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def client_with_settings() -> AsyncGenerator[SettingsClientFactoryType]:
    """Factory creating clients for apps built from custom settings.

    Usage:
        async def test_something(client_with_settings):
            client = await client_with_settings(make_settings(app_name="X"))
    """
    clients: list[AsyncClient] = []

    async def _create_client(settings: Settings) -> AsyncClient:
        app = create_app(settings)
        app.dependency_overrides[get_settings] = lambda: settings

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        client = AsyncClient(transport=transport, base_url="http://test")
        clients.append(client)
        return client

    yield _create_client

    for client in clients:
        await client.aclose()
