"""ClinicRepository — in-memory animal and owner collections.

The repository is the explicit state object handed to services; there
are no module-level collections.  It owns:

- ``animals``: insertion-ordered list of :class:`Animal`
- ``owners``: insertion-ordered list of :class:`Owner`
- the animal ID counter

The owner -> animal relation is stored only as ``Owner.pet_ids``.  The
reverse direction is recomputed by a linear scan on every call,
O(owners x pets), so it can never go stale.

INVARIANT: an animal ID appears in at most one owner's ``pet_ids``.
:meth:`assign_owner` is the only relinking path and detaches first.
"""

from __future__ import annotations

import logging

from vetclinic.domain.animals import Animal, Trait
from vetclinic.domain.ids import format_animal_id
from vetclinic.domain.owners import Owner
from vetclinic.domain.types import AnimalKind

logger = logging.getLogger(__name__)


class ClinicRepository:
    """Animal and owner collections plus the operations that keep them consistent."""

    def __init__(self) -> None:
        self.animals: list[Animal] = []
        self.owners: list[Owner] = []
        self._counter = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Drop all animals and owners.  The ID counter keeps counting."""
        self.animals.clear()
        self.owners.clear()

    def is_empty(self) -> bool:
        return not self.animals and not self.owners

    def next_animal_id(self) -> str:
        self._counter += 1
        return format_animal_id(self._counter)

    def create_animal(self, kind: AnimalKind, name: str, age: int, trait: Trait) -> Animal:
        """Build an animal with a fresh ID and append it to ``animals``."""
        animal = Animal(id=self.next_animal_id(), kind=kind, name=name, age=age, trait=trait)
        self.add_animal(animal)
        return animal

    def add_animal(self, animal: Animal) -> None:
        self.animals.append(animal)

    def add_owner(self, owner: Owner) -> None:
        self.owners.append(owner)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_animal(self, animal_id: str) -> Animal | None:
        for animal in self.animals:
            if animal.id == animal_id:
                return animal
        return None

    def find_animal_by_name(self, name: str) -> Animal | None:
        """First animal named *name*, or None."""
        for animal in self.animals:
            if animal.name == name:
                return animal
        return None

    def find_owner_by_name(self, name: str) -> Owner | None:
        """First owner named *name*, or None."""
        for owner in self.owners:
            if owner.name == name:
                return owner
        return None

    def find_owner_of(self, animal_id: str) -> Owner | None:
        """First owner whose pet list contains *animal_id*, or None."""
        for owner in self.owners:
            if owner.has_pet(animal_id):
                return owner
        return None

    def pets_of(self, owner: Owner) -> list[Animal]:
        """Resolve *owner*'s pet IDs in list order, skipping deleted animals."""
        pets: list[Animal] = []
        for animal_id in owner.pet_ids:
            animal = self.get_animal(animal_id)
            if animal is not None:
                pets.append(animal)
        return pets

    # ------------------------------------------------------------------
    # Relinking and deletion
    # ------------------------------------------------------------------

    def assign_owner(self, animal_id: str, new_owner: Owner) -> Owner | None:
        """Move *animal_id* to *new_owner*, detaching it from any current owner.

        Returns the previous owner, if there was one.
        """
        previous = self.find_owner_of(animal_id)
        if previous is not None:
            previous.remove_pet(animal_id)
        new_owner.add_pet(animal_id)
        logger.debug(
            "Assigned %s to %s (was %s)",
            animal_id,
            new_owner.name,
            previous.name if previous else None,
        )
        return previous

    def remove_animal(self, animal_id: str) -> bool:
        """Remove *animal_id* from ``animals`` only; owners are not touched."""
        for index, animal in enumerate(self.animals):
            if animal.id == animal_id:
                del self.animals[index]
                return True
        return False

    def delete_animal(self, animal_id: str) -> Owner | None:
        """Detach *animal_id* from its owner, then drop it from ``animals``.

        Returns the owner it was detached from, if any.
        """
        owner = self.find_owner_of(animal_id)
        if owner is not None:
            owner.remove_pet(animal_id)
        self.remove_animal(animal_id)
        return owner

    def delete_owner(self, owner: Owner) -> tuple[bool, list[str]]:
        """Cascade-delete *owner* and every animal in its pet list.

        The pet list is snapshotted first and each of those animals is
        removed from ``animals``; the owner itself is removed last, by
        identity.  Returns ``(owner_removed, removed_animal_ids)``.
        """
        removed: list[str] = []
        for animal_id in list(owner.pet_ids):
            if self.remove_animal(animal_id):
                removed.append(animal_id)

        for index, candidate in enumerate(self.owners):
            if candidate is owner:
                del self.owners[index]
                return True, removed
        return False, removed
