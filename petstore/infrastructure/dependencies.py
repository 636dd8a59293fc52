"""FastAPI dependency wiring for the pet store.

The repository is created once by ``create_app`` and kept on ``app.state``;
handlers receive it through the ``PetStore`` annotated type.
"""

from typing import Annotated

from fastapi import Depends, Request

from petstore.infrastructure.pet_repository import PetRepository


def get_pet_repository(request: Request) -> PetRepository:
    """Return the repository attached to the running application.

    Example:
        @router.get("/{petId}")
        async def get_pet_by_id(pets: PetStore, pet_id: int):
            return pets.get(pet_id)
    """
    repository: PetRepository = request.app.state.pet_repository
    return repository


PetStore = Annotated[PetRepository, Depends(get_pet_repository)]
