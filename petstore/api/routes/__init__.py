"""HTTP routers mounted by ``create_app``."""

from petstore.api.routes.pets import PET_TAG_METADATA, build_pet_router

__all__ = ["PET_TAG_METADATA", "build_pet_router"]
