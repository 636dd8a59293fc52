"""The Pet entity and the predicates used to filter stored pets."""

from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

type PetPredicate = Callable[["Pet"], bool]

# Identifiers are signed 64-bit integers, the widest orjson can serialize
ID_MIN: Final[int] = -(2**63)
ID_MAX: Final[int] = 2**63 - 1


class PetStatus(StrEnum):
    """Availability of a pet in the store."""

    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"


class Category(BaseModel):
    """Grouping a pet belongs to, e.g. ``Dogs``."""

    id: int | None = Field(
        default=None, ge=ID_MIN, le=ID_MAX, description="Category identifier"
    )
    name: str | None = Field(default=None, description="Category name")


class Pet(BaseModel):
    """A pet record.

    Stored as a whole: updating a pet replaces every field, nothing is merged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "id": 1,
                    "name": "Cat 1",
                    "category": {"id": 2, "name": "Cats"},
                    "photoUrls": ["url1", "url2"],
                    "tags": ["tag1", "tag2"],
                    "status": "available",
                }
            ]
        },
    )

    id: int = Field(..., ge=ID_MIN, le=ID_MAX, description="Unique pet identifier")
    name: str = Field(..., description="Pet name", examples=["doggie"])
    status: PetStatus | None = Field(
        default=None, description="Pet status in the store"
    )
    tags: list[str] = Field(
        default_factory=list, description="Free-text tags, without duplicates"
    )
    category: Category | None = Field(default=None, description="Pet category")
    photo_urls: list[str] = Field(default_factory=list, description="Photo URLs")

    @field_validator("tags", mode="after")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        """Drop repeated tags, keeping the first occurrence."""
        return list(dict.fromkeys(v))


def split_values(raw: Iterable[str]) -> list[str]:
    """Flatten repeated and comma separated query values.

    ``["available,sold", " pending "]`` becomes
    ``["available", "sold", "pending"]``. Empty tokens and duplicates are
    dropped; first-seen order is kept.
    """
    tokens = (token.strip() for value in raw for token in value.split(","))
    return list(dict.fromkeys(token for token in tokens if token))


def status_is(statuses: Iterable[str]) -> PetPredicate:
    """Match pets whose status equals one of ``statuses``."""
    wanted = frozenset(statuses)

    def predicate(pet: Pet) -> bool:
        return pet.status is not None and pet.status.value in wanted

    return predicate


def tags_contain(tags: Iterable[str]) -> PetPredicate:
    """Match pets carrying at least one of ``tags``."""
    wanted = frozenset(tags)

    def predicate(pet: Pet) -> bool:
        return not wanted.isdisjoint(pet.tags)

    return predicate
