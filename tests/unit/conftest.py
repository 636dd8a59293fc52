"""Shared fixtures for unit tests."""

import os
from collections.abc import Generator

import pytest
from loguru import logger

from petstore.core.config import Settings, get_settings
from petstore.core.context import RequestContext
from petstore.core.error_context import _get_sensitive_fields
from petstore.domain.pets import Category, Pet, PetStatus
from petstore.infrastructure.pet_repository import PetRepository


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear cached settings before and after each test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove application environment variables that could leak into Settings.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    env_prefixes = (
        "APP_",
        "API_",
        "ENVIRONMENT",
        "DEBUG",
        "LOG_CONFIG__",
        "OBSERVABILITY_CONFIG__",
        "PETSTORE_CONFIG__",
        "K_SERVICE",
        "AWS_EXECUTION_ENV",
    )
    for key in list(os.environ):
        if key.startswith(env_prefixes):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Make sure no correlation ID leaks between tests."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture
def log_messages() -> Generator[list[dict[str, object]]]:
    """Capture Loguru records emitted during the test.

    Yields:
        list[dict[str, object]]: One dict per record with message, level and extra.
    """
    captured: list[dict[str, object]] = []

    def sink(message: object) -> None:
        record = message.record  # type: ignore[attr-defined]
        captured.append(
            {
                "message": record["message"],
                "level": record["level"].name,
                "extra": dict(record["extra"]),
            }
        )

    handler_id = logger.add(sink, level="DEBUG")
    yield captured
    logger.remove(handler_id)


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings built from test environment values.

    Returns:
        Settings: Real settings object with test defaults.
    """
    monkeypatch.setenv("APP_NAME", "TestPetstore")
    monkeypatch.setenv("APP_VERSION", "9.9.9")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    return Settings()


@pytest.fixture
def dog() -> Pet:
    """An available dog tagged ``friendly`` and ``small``."""
    return Pet(
        id=1,
        name="Rex",
        status=PetStatus.AVAILABLE,
        tags=["friendly", "small"],
        category=Category(id=1, name="Dogs"),
    )


@pytest.fixture
def cat() -> Pet:
    """A sold cat tagged ``indoor``."""
    return Pet(id=2, name="Tom", status=PetStatus.SOLD, tags=["indoor"])


@pytest.fixture
def parrot() -> Pet:
    """A pending parrot tagged ``small`` and ``loud``."""
    return Pet(id=3, name="Polly", status=PetStatus.PENDING, tags=["small", "loud"])


@pytest.fixture
def pet_repository(dog: Pet, cat: Pet, parrot: Pet) -> PetRepository:
    """Repository holding the dog, the cat and the parrot, in that order."""
    repository = PetRepository()
    for pet in (dog, cat, parrot):
        repository.add(pet)
    return repository
