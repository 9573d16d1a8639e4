"""Fixed fallback data set used when no valid persisted data exists."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vetclinic.domain.owners import Owner
from vetclinic.domain.types import AnimalKind

if TYPE_CHECKING:
    from vetclinic.domain.animals import Animal
    from vetclinic.infrastructure.repository import ClinicRepository

SAMPLE_ANIMALS: list[tuple[AnimalKind, str, int, str | bool]] = [
    (AnimalKind.DOG, "Buddy", 3, "Golden Retriever"),
    (AnimalKind.CAT, "Miso", 2, True),
    (AnimalKind.BIRD, "Twitter", 1, False),
]

SAMPLE_OWNERS: list[tuple[str, str, str]] = [
    ("John", "1", "0501111111"),
    ("Sarah", "2", "0502222222"),
]

# owner name -> animal names
SAMPLE_RELATIONS: dict[str, list[str]] = {
    "John": ["Buddy"],
    "Sarah": ["Miso", "Twitter"],
}


def seed_sample_data(repo: ClinicRepository) -> None:
    """Populate *repo* with two owners and three pre-linked animals.

    Appends to whatever is already there; callers clear first.
    """
    by_name: dict[str, Animal] = {}
    for kind, name, age, trait in SAMPLE_ANIMALS:
        by_name[name] = repo.create_animal(kind, name, age, trait)

    for name, owner_id, phone in SAMPLE_OWNERS:
        owner = Owner(name=name, id=owner_id, phone_number=phone)
        for pet_name in SAMPLE_RELATIONS[name]:
            owner.add_pet(by_name[pet_name].id)
        repo.add_owner(owner)
