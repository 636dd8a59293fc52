"""Pet storage and the sample data served by the demo."""

from collections.abc import Iterable

from loguru import logger

from petstore.domain.pets import Category, Pet, PetStatus, status_is, tags_contain
from petstore.infrastructure.repository import MapBackedRepository


class PetRepository(MapBackedRepository[int, Pet]):
    """Pets keyed by ``Pet.id``."""

    def __init__(self) -> None:
        super().__init__(Pet, key_of=lambda pet: pet.id)

    def find_by_status(self, statuses: Iterable[str]) -> list[Pet]:
        """Pets whose status is one of ``statuses``."""
        return self.where(status_is(statuses))

    def find_by_tags(self, tags: Iterable[str]) -> list[Pet]:
        """Pets tagged with at least one of ``tags``."""
        return self.where(tags_contain(tags))


def _sample_pet(
    pet_id: int,
    category: Category,
    name: str,
    tags: list[str],
    status: PetStatus,
) -> Pet:
    return Pet(
        id=pet_id,
        name=name,
        category=category,
        photo_urls=["url1", "url2"],
        tags=tags,
        status=status,
    )


def sample_pets() -> list[Pet]:
    """Pets 1-10 advertised by the API documentation (tags tag1..tag4)."""
    dogs = Category(id=1, name="Dogs")
    cats = Category(id=2, name="Cats")
    lions = Category(id=4, name="Lions")
    rabbits = Category(id=3, name="Rabbits")

    return [
        _sample_pet(1, cats, "Cat 1", ["tag1", "tag2"], PetStatus.AVAILABLE),
        _sample_pet(2, cats, "Cat 2", ["tag2", "tag3"], PetStatus.AVAILABLE),
        _sample_pet(3, cats, "Cat 3", ["tag3", "tag4"], PetStatus.PENDING),
        _sample_pet(4, dogs, "Dog 1", ["tag1", "tag2"], PetStatus.AVAILABLE),
        _sample_pet(5, dogs, "Dog 2", ["tag2", "tag3"], PetStatus.SOLD),
        _sample_pet(6, dogs, "Dog 3", ["tag3", "tag4"], PetStatus.PENDING),
        _sample_pet(7, lions, "Lion 1", ["tag1", "tag2"], PetStatus.AVAILABLE),
        _sample_pet(8, lions, "Lion 2", ["tag2", "tag3"], PetStatus.AVAILABLE),
        _sample_pet(9, lions, "Lion 3", ["tag3", "tag4"], PetStatus.AVAILABLE),
        _sample_pet(10, rabbits, "Rabbit 1", ["tag3", "tag4"], PetStatus.AVAILABLE),
    ]


def seed_sample_pets(repository: PetRepository) -> int:
    """Add the sample pets to ``repository``.

    Returns:
        int: Number of pets added.
    """
    pets = sample_pets()
    for pet in pets:
        repository.add(pet)

    logger.info("Seeded {} sample pets", len(pets))
    return len(pets)
