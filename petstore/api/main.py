"""FastAPI application factory.

``create_app`` wires together:
- logging and tracing setup
- exception handlers and middleware
- the pet repository (optionally seeded with sample pets) on ``app.state``
- the pet router under ``petstore_config.api_prefix``
- service endpoints: ``/``, ``/health`` and ``/info``

Middleware run in reverse order of registration, so the last one added is
the first to see a request.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI
from loguru import logger

from petstore.api.middleware.error_handler import register_exception_handlers
from petstore.api.middleware.request_context import RequestContextMiddleware
from petstore.api.middleware.request_logging import RequestLoggingMiddleware
from petstore.api.routes import PET_TAG_METADATA, build_pet_router
from petstore.api.utils.responses import ORJSONResponse
from petstore.core.config import Settings, get_settings
from petstore.core.logging import setup_logging
from petstore.core.observability import instrument_app, setup_tracing
from petstore.infrastructure.dependencies import PetStore
from petstore.infrastructure.pet_repository import PetRepository, seed_sample_pets


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Log application startup and shutdown.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Control while the application is serving.
    """
    logger.info(
        "Application startup complete - {} v{} ({} pets in store)",
        app_instance.title,
        app_instance.version,
        app_instance.state.pet_repository.count(),
    )

    yield

    logger.info("Application shutdown complete")


def create_pet_repository(settings: Settings) -> PetRepository:
    """Create the store, loading the sample pets when configured to."""
    repository = PetRepository()
    if settings.petstore_config.seed_sample_data:
        seed_sample_pets(repository)
    return repository


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Sample pet store API over an in-memory collection of pets",
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        openapi_tags=[PET_TAG_METADATA],
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    application.state.pet_repository = create_pet_repository(settings)

    register_exception_handlers(application)

    # 2. Request logging middleware (logs requests/responses)
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)

    # 1. Request context middleware (creates correlation ID)
    application.add_middleware(RequestContextMiddleware)

    application.include_router(
        build_pet_router(settings.petstore_config),
        prefix=settings.petstore_config.api_prefix,
    )

    @application.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Welcome message."""
        return {"message": f"Hello from {settings.app_name}!"}

    @application.get("/health", include_in_schema=False)
    async def health(pets: PetStore) -> dict[str, object]:
        """Liveness check reporting the number of stored pets."""
        return {"status": "healthy", "pets": pets.count()}

    @application.get("/info", include_in_schema=False)
    async def info(
        app_settings: Annotated[Settings, Depends(get_settings)],
    ) -> dict[str, Any]:
        """Get application information.

        Args:
            app_settings: Application settings injected via dependency.

        Returns:
            dict[str, Any]: Name, version, environment and debug flag.
        """
        return {
            "app_name": app_settings.app_name,
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "debug": app_settings.debug,
        }

    instrument_app(application, settings)

    return application


app = create_app()
