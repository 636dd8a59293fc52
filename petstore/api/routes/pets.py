"""Pet endpoints: lookup by id, add/update, and the two finder queries.

All handlers delegate storage to the application's ``PetRepository`` and
shape their output with ``petstore.api.utils.responses.ok`` so that JSON or
XML is returned according to the ``Accept`` header.

The ``api_key`` and ``petstore_auth`` security schemes are attached for the
OpenAPI document only; no credentials are checked.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Path, Query, Response, Security
from fastapi.openapi.models import OAuthFlowImplicit
from fastapi.openapi.models import OAuthFlows as OAuthFlowsModel
from fastapi.security import APIKeyHeader, OAuth2
from loguru import logger

from petstore.api.constants import (
    API_KEY_SCHEME,
    DEFAULT_STATUS_FILTER,
    OAUTH_SCHEME,
    OAUTH_SCOPES,
    PET_OPENAPI_TAG,
    PET_ROUTE_PREFIX,
    SUCCESS_MESSAGE,
)
from petstore.api.schemas.errors import ErrorResponse
from petstore.api.utils.responses import MediaType, ok
from petstore.core.config import PetstoreConfig
from petstore.core.exceptions import NotFoundError, ValidationError
from petstore.core.observability import add_span_attributes
from petstore.domain.pets import ID_MAX, ID_MIN, Pet, PetStatus, split_values
from petstore.infrastructure.dependencies import PetStore

PET_TAG_METADATA = {"name": PET_OPENAPI_TAG, "description": "Operations about pets"}

_XML_CONTENT: dict[str, Any] = {"content": {"application/xml": {}}}
PET_BODY_DESCRIPTION = "Pet object that needs to be added to the store"
VALIDATION_FAILED = "Request validation failed"


def _error(description: str) -> dict[str, Any]:
    return {"model": ErrorResponse, "description": description}


def build_pet_router(config: PetstoreConfig) -> APIRouter:
    """Create the ``/pet`` router.

    Args:
        config: Pet endpoint settings (OAuth URL for the documented scheme).

    Returns:
        APIRouter: Router to be included under ``config.api_prefix``.
    """
    api_key = APIKeyHeader(
        name=API_KEY_SCHEME, scheme_name=API_KEY_SCHEME, auto_error=False
    )
    petstore_auth = OAuth2(
        flows=OAuthFlowsModel(
            implicit=OAuthFlowImplicit(
                authorizationUrl=config.oauth_authorization_url,
                scopes=OAUTH_SCOPES,
            )
        ),
        scheme_name=OAUTH_SCHEME,
        auto_error=False,
    )
    pet_scopes = Security(petstore_auth, scopes=list(OAUTH_SCOPES))

    router = APIRouter(prefix=PET_ROUTE_PREFIX, tags=[PET_OPENAPI_TAG])

    # Fixed paths are registered before "/{pet_id}" so they are matched first

    @router.get(
        "/findByStatus",
        summary="Finds Pets by status",
        description=(
            "Multiple status values can be provided with comma separated strings"
        ),
        response_model=list[Pet],
        responses={200: _XML_CONTENT, 400: _error("Invalid status value")},
        dependencies=[pet_scopes],
    )
    async def find_pets_by_status(
        pets: PetStore,
        media_type: MediaType,
        status: Annotated[
            list[str],
            Query(
                description=(
                    "Status values that need to be considered for filter: "
                    "available, pending, sold"
                ),
            ),
        ] = [DEFAULT_STATUS_FILTER],  # noqa: B006 - FastAPI copies query defaults
    ) -> Response:
        statuses = split_values(status)
        allowed = [s.value for s in PetStatus]
        invalid = [value for value in statuses if value not in allowed]
        if invalid or not statuses:
            raise ValidationError(
                "Invalid status value",
                context={"invalid_values": invalid, "allowed_values": allowed},
            )

        found = pets.find_by_status(statuses)
        add_span_attributes(
            **{"pet.status": ",".join(statuses), "pet.count": len(found)}
        )
        logger.debug("Found {} pets by status {}", len(found), statuses)
        return ok(media_type, found)

    @router.get(
        "/findByTags",
        summary="Finds Pets by tags",
        description=(
            "Multiple tags can be provided with comma separated strings. "
            "Use tag1, tag2, tag3 for testing."
        ),
        response_model=list[Pet],
        responses={200: _XML_CONTENT, 400: _error("Invalid tag value")},
        dependencies=[pet_scopes],
        deprecated=True,
    )
    async def find_pets_by_tags(
        pets: PetStore,
        media_type: MediaType,
        tags: Annotated[list[str], Query(description="Tags to filter by")],
    ) -> Response:
        wanted = split_values(tags)
        if not wanted:
            raise ValidationError("Invalid tag value", context={"tags": tags})

        found = pets.find_by_tags(wanted)
        add_span_attributes(
            **{"pet.tags": ",".join(wanted), "pet.count": len(found)}
        )
        logger.debug("Found {} pets by tags {}", len(found), wanted)
        return ok(media_type, found)

    @router.get(
        "/{pet_id}",
        summary="Find pet by ID",
        description=(
            "Returns a pet when ID < 10. "
            "ID > 10 or nonintegers will simulate API error conditions"
        ),
        response_model=Pet,
        responses={
            200: _XML_CONTENT,
            400: _error("Invalid ID supplied"),
            404: _error("Pet not found"),
            422: _error(VALIDATION_FAILED),
        },
        dependencies=[Security(api_key), pet_scopes],
    )
    async def get_pet_by_id(
        pets: PetStore,
        media_type: MediaType,
        pet_id: Annotated[
            int,
            Path(
                ge=ID_MIN,
                le=ID_MAX,
                description="ID of pet that needs to be fetched",
            ),
        ],
    ) -> Response:
        add_span_attributes(**{"pet.id": pet_id})

        pet = pets.get(pet_id)
        if pet is None:
            raise NotFoundError("Pet not found", context={"pet_id": pet_id})
        return ok(media_type, pet)

    @router.post(
        "",
        summary="Add a new pet to the store",
        response_model=str,
        responses={
            200: _XML_CONTENT,
            405: _error("Invalid input"),
            422: _error(VALIDATION_FAILED),
        },
        dependencies=[pet_scopes],
    )
    async def add_pet(
        pets: PetStore,
        media_type: MediaType,
        pet: Annotated[Pet, Body(description=PET_BODY_DESCRIPTION)],
    ) -> Response:
        add_span_attributes(**{"pet.id": pet.id})
        pets.add(pet)
        return ok(media_type, SUCCESS_MESSAGE)

    @router.put(
        "",
        summary="Update an existing pet",
        response_model=str,
        responses={
            200: _XML_CONTENT,
            400: _error("Invalid ID supplied"),
            404: _error("Pet not found"),
            405: _error("Validation exception"),
            422: _error(VALIDATION_FAILED),
        },
        dependencies=[pet_scopes],
    )
    async def update_pet(
        pets: PetStore,
        media_type: MediaType,
        pet: Annotated[Pet, Body(description=PET_BODY_DESCRIPTION)],
    ) -> Response:
        add_span_attributes(**{"pet.id": pet.id})
        pets.add(pet)
        return ok(media_type, SUCCESS_MESSAGE)

    return router
