"""Unit tests for the Pet model and the filtering predicates."""

import pytest
from pydantic import ValidationError

from petstore.domain.pets import (
    ID_MAX,
    ID_MIN,
    Category,
    Pet,
    PetStatus,
    split_values,
    status_is,
    tags_contain,
)


@pytest.mark.unit
class TestPetModel:
    """Test Pet validation and serialization."""

    def test_minimal_pet_defaults(self) -> None:
        """Only id and name are required."""
        pet = Pet(id=7, name="Nemo")

        assert pet.status is None
        assert pet.tags == []
        assert pet.category is None
        assert pet.photo_urls == []

    def test_status_accepts_known_values(self) -> None:
        """Status strings are coerced into PetStatus."""
        pet = Pet.model_validate({"id": 1, "name": "Rex", "status": "pending"})

        assert pet.status is PetStatus.PENDING

    def test_status_rejects_unknown_value(self) -> None:
        """Statuses outside the enumeration fail validation."""
        with pytest.raises(ValidationError):
            Pet.model_validate({"id": 1, "name": "Rex", "status": "adopted"})

    @pytest.mark.parametrize("missing", ["id", "name"])
    def test_required_fields(self, missing: str) -> None:
        """A pet without id or name is rejected."""
        data = {"id": 1, "name": "Rex"}
        del data[missing]

        with pytest.raises(ValidationError):
            Pet.model_validate(data)

    @pytest.mark.parametrize("pet_id", [ID_MIN - 1, ID_MAX + 1, 2**70])
    def test_id_outside_64_bit_range_rejected(self, pet_id: int) -> None:
        """Ids must fit a signed 64-bit integer."""
        with pytest.raises(ValidationError):
            Pet(id=pet_id, name="Big")

    @pytest.mark.parametrize("pet_id", [ID_MIN, 0, ID_MAX])
    def test_id_bounds_accepted(self, pet_id: int) -> None:
        """The 64-bit limits themselves are valid ids."""
        assert Pet(id=pet_id, name="Edge").id == pet_id

    def test_category_id_outside_64_bit_range_rejected(self) -> None:
        """Category ids share the pet id range."""
        with pytest.raises(ValidationError):
            Category(id=ID_MAX + 1, name="Huge")

    def test_tags_are_deduplicated_in_order(self) -> None:
        """Tags behave like an ordered set."""
        pet = Pet(id=1, name="Rex", tags=["b", "a", "b", "c", "a"])

        assert pet.tags == ["b", "a", "c"]

    def test_accepts_camel_case_and_snake_case(self) -> None:
        """photoUrls on the wire, photo_urls in Python."""
        from_wire = Pet.model_validate({"id": 1, "name": "Rex", "photoUrls": ["u"]})
        from_python = Pet(id=1, name="Rex", photo_urls=["u"])

        assert from_wire == from_python

    def test_dump_by_alias_uses_camel_case(self) -> None:
        """Serialized pets use the API field names."""
        pet = Pet(
            id=1,
            name="Rex",
            status=PetStatus.SOLD,
            category=Category(id=3, name="Dogs"),
            photo_urls=["u"],
        )

        dumped = pet.model_dump(mode="json", by_alias=True)

        assert dumped == {
            "id": 1,
            "name": "Rex",
            "status": "sold",
            "tags": [],
            "category": {"id": 3, "name": "Dogs"},
            "photoUrls": ["u"],
        }


@pytest.mark.unit
class TestSplitValues:
    """Test flattening of query values."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (["available"], ["available"]),
            (["available,sold"], ["available", "sold"]),
            (["available", "sold"], ["available", "sold"]),
            ([" a , b ", "c"], ["a", "b", "c"]),
            (["a,,b", ""], ["a", "b"]),
            (["a,b", "b,a"], ["a", "b"]),
            ([], []),
            ([",", " "], []),
        ],
    )
    def test_split_values(self, raw: list[str], expected: list[str]) -> None:
        """Repeated and comma separated values are flattened."""
        assert split_values(raw) == expected


@pytest.mark.unit
class TestPredicates:
    """Test status_is and tags_contain."""

    def test_status_is_matches_any_given_status(self, dog: Pet, cat: Pet) -> None:
        """A pet matches when its status is one of the given values."""
        predicate = status_is(["sold", "pending"])

        assert predicate(cat)
        assert not predicate(dog)

    def test_status_is_never_matches_missing_status(self) -> None:
        """Pets without a status are never returned by a status filter."""
        assert not status_is(["available"])(Pet(id=1, name="Ghost"))

    def test_status_is_is_case_sensitive(self, dog: Pet) -> None:
        """Status comparison is exact string equality."""
        assert not status_is(["AVAILABLE"])(dog)

    def test_tags_contain_matches_any_tag(self, dog: Pet, cat: Pet) -> None:
        """One shared tag is enough."""
        predicate = tags_contain(["small", "indoor"])

        assert predicate(dog)
        assert predicate(cat)

    def test_tags_contain_requires_exact_tag(self, dog: Pet) -> None:
        """Substrings of a tag do not match."""
        assert not tags_contain(["friend"])(dog)

    def test_tags_contain_with_no_tags(self, dog: Pet) -> None:
        """An empty tag filter matches nothing."""
        assert not tags_contain([])(dog)
