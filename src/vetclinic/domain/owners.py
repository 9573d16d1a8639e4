"""Owner records.

An owner holds animal IDs, never animal values: animals live in the
repository's collection and the owner only references them.  Nothing
here prevents the same ID from being added twice or to two owners;
:class:`~vetclinic.infrastructure.repository.ClinicRepository` keeps the
at-most-one-owner invariant.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Owner(BaseModel):
    """A pet owner.

    Attributes:
        name: Display name, also the lookup key in ``relations.txt``.
        id: Owner-supplied identity number (free text).
        phone_number: Contact number (free text).
        pet_ids: Ordered animal IDs.
    """

    name: str
    id: str
    phone_number: str
    pet_ids: list[str] = Field(default_factory=list)

    def add_pet(self, animal_id: str) -> None:
        """Append *animal_id* unconditionally."""
        self.pet_ids.append(animal_id)

    def remove_pet(self, animal_id: str) -> None:
        """Remove the first occurrence of *animal_id*; no-op if absent."""
        if animal_id in self.pet_ids:
            self.pet_ids.remove(animal_id)

    def has_pet(self, animal_id: str) -> bool:
        return animal_id in self.pet_ids

    def matches(self, other: Owner) -> bool:
        """Same person: ``(name, phone_number)`` pair match."""
        return self.name == other.name and self.phone_number == other.phone_number

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "phone_number": self.phone_number,
            "pet_ids": list(self.pet_ids),
        }
