"""Storage for the petstore.

- **repository**: ``MapBackedRepository``, a generic lock-guarded dict store
- **pet_repository**: the pet specialisation and the sample data
- **dependencies**: FastAPI dependency returning the application's store
"""

from petstore.infrastructure.pet_repository import (
    PetRepository,
    sample_pets,
    seed_sample_pets,
)
from petstore.infrastructure.repository import MapBackedRepository

__all__ = [
    "MapBackedRepository",
    "PetRepository",
    "sample_pets",
    "seed_sample_pets",
]
