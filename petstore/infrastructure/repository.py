"""Generic in-memory repository keyed by an entity identifier.

Entities are kept in a plain dict guarded by a lock, so a single repository
can be shared by every request the application serves.
"""

from collections.abc import Callable, Hashable
from threading import Lock

from loguru import logger


class MapBackedRepository[K: Hashable, V]:
    """Store entities in a dict under the key returned by ``key_of``.

    Args:
        model_class: The entity type held by this repository (used for logs).
        key_of: Extracts the identifier from an entity.

    Example:
        class PetRepository(MapBackedRepository[int, Pet]):
            def __init__(self) -> None:
                super().__init__(Pet, key_of=lambda pet: pet.id)
    """

    def __init__(self, model_class: type[V], key_of: Callable[[V], K]) -> None:
        self.model_class = model_class
        self._key_of = key_of
        self._entities: dict[K, V] = {}
        self._lock = Lock()
        logger.debug("Initialized repository for {}", model_class.__name__)

    def get(self, key: K) -> V | None:
        """Return the entity stored under ``key``, or None."""
        with self._lock:
            instance = self._entities.get(key)

        if instance is None:
            logger.debug(
                "{} instance not found with key: {}", self.model_class.__name__, key
            )
        return instance

    def add(self, entity: V) -> V:
        """Insert ``entity``, replacing any entity stored under the same key.

        Returns:
            V: The stored entity.
        """
        key = self._key_of(entity)
        with self._lock:
            replaced = key in self._entities
            self._entities[key] = entity

        logger.info(
            "{} {} instance with key: {}",
            "Replaced" if replaced else "Added",
            self.model_class.__name__,
            key,
        )
        return entity

    def where(self, predicate: Callable[[V], bool]) -> list[V]:
        """Return the entities matching ``predicate`` in insertion order."""
        with self._lock:
            matches = [e for e in self._entities.values() if predicate(e)]

        logger.debug(
            "Filtered {} - found {} instances", self.model_class.__name__, len(matches)
        )
        return matches

    def values(self) -> list[V]:
        """Return a snapshot of every stored entity."""
        with self._lock:
            return list(self._entities.values())

    def count(self) -> int:
        """Return the number of stored entities."""
        with self._lock:
            return len(self._entities)

    def exists(self, key: K) -> bool:
        """Return True when an entity is stored under ``key``."""
        with self._lock:
            return key in self._entities
