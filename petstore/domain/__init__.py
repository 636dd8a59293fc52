"""Domain model of the petstore."""

from petstore.domain.pets import (
    ID_MAX,
    ID_MIN,
    Category,
    Pet,
    PetPredicate,
    PetStatus,
    split_values,
    status_is,
    tags_contain,
)

__all__ = [
    "ID_MAX",
    "ID_MIN",
    "Category",
    "Pet",
    "PetPredicate",
    "PetStatus",
    "split_values",
    "status_is",
    "tags_contain",
]
