"""RecordService — add, relink, delete, and look up animals and owners.

Mutations only touch the in-memory repository; nothing is written until
:meth:`vetclinic.services.storage.StorageService.save_all` runs.

Animals are addressed by *reference*: a generated ID (``ANM-0001``) or
a name.  Owners are addressed by name.  Names resolve to the first
match, so duplicates shadow later entries.
"""

from __future__ import annotations

import logging
from typing import Any

from vetclinic.domain.animals import KIND_SPECS, Animal, Trait
from vetclinic.domain.ids import is_animal_id
from vetclinic.domain.owners import Owner
from vetclinic.domain.types import AnimalKind
from vetclinic.infrastructure.flatfile import (
    AGE_MAX,
    AGE_MIN,
    parse_age,
    parse_flag,
    unsafe_fields,
)
from vetclinic.services.base import BaseService
from vetclinic.services.result import ServiceResult
from vetclinic.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

_ROUND_TRIP_WARNING = "{field} contains a comma or line break and will not survive save/load"
_DUPLICATE_NAME_WARNING = (
    "Another {entity} is already named {name!r}; lookups by name find it first"
)


class RecordService(BaseService):
    """Animal and owner operations for the presentation layer."""

    # ------------------------------------------------------------------
    # Resolution helpers
    # ------------------------------------------------------------------

    def _resolve_animal(self, ref: str) -> Animal | None:
        if is_animal_id(ref):
            animal = self._repo.get_animal(ref)
            if animal is not None:
                return animal
        return self._repo.find_animal_by_name(ref)

    def _animal_view(self, animal: Animal) -> dict[str, Any]:
        owner = self._repo.find_owner_of(animal.id)
        return {**animal.to_dict(), "owner": owner.name if owner else None}

    def _owner_view(self, owner: Owner) -> dict[str, Any]:
        view = owner.to_dict()
        view["pets"] = [a.name for a in self._repo.pets_of(owner)]
        return view

    @staticmethod
    def _coerce_trait(kind: AnimalKind, trait: Trait) -> Trait:
        if kind is AnimalKind.DOG:
            if not isinstance(trait, str):
                msg = f"breed must be text, got {trait!r}"
                raise ValueError(msg)
            return trait
        if isinstance(trait, bool):
            return trait
        if isinstance(trait, str) and trait.strip().lower() in ("true", "false"):
            return parse_flag(trait)
        msg = f"{KIND_SPECS[kind].trait_key} must be true or false, got {trait!r}"
        raise ValueError(msg)

    # ------------------------------------------------------------------
    # add_animal / add_owner
    # ------------------------------------------------------------------

    @traced
    def add_animal(
        self,
        kind: AnimalKind | str,
        name: str,
        age: int | str,
        trait: Trait,
        *,
        owner: str | None = None,
    ) -> ServiceResult:
        """Create an animal, optionally attached to an existing owner.

        Args:
            kind: ``Dog``, ``Cat`` or ``Bird`` (case-insensitive).
            name: Animal name.
            age: Integer, or text as typed by a user.
            trait: Breed for dogs; indoor/can-fly flag (bool or
                ``"true"``/``"false"``) for cats and birds.
            owner: Name of the owner to attach to.

        Nothing is created when any argument is invalid.
        """
        op = "add_animal"
        parsed_kind = kind if isinstance(kind, AnimalKind) else AnimalKind.parse(kind)
        if parsed_kind is None:
            return ServiceResult.failure(
                op,
                "UNKNOWN_KIND",
                f"Unknown animal kind: {kind!r}",
                allowed=[str(k) for k in AnimalKind],
            )

        if isinstance(age, bool):
            return ServiceResult.failure(op, "INVALID_AGE", "Please enter a valid age", age=age)
        if isinstance(age, str):
            try:
                age = parse_age(age.strip())
            except ValueError:
                return ServiceResult.failure(
                    op, "INVALID_AGE", "Please enter a valid age", age=age
                )
        if not AGE_MIN <= age <= AGE_MAX:
            return ServiceResult.failure(op, "INVALID_AGE", "Please enter a valid age", age=age)

        try:
            trait = self._coerce_trait(parsed_kind, trait)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_TRAIT", str(exc))

        target: Owner | None = None
        if owner is not None:
            target = self._repo.find_owner_by_name(owner)
            if target is None:
                return ServiceResult.failure(
                    op, "OWNER_NOT_FOUND", f"No owner named {owner!r}", owner=owner
                )

        warnings: list[str] = []
        text_fields = {"name": name}
        if isinstance(trait, str):
            text_fields[KIND_SPECS[parsed_kind].trait_key] = trait
        for key in unsafe_fields(**text_fields):
            warnings.append(_ROUND_TRIP_WARNING.format(field=key))
        if self._repo.find_animal_by_name(name) is not None:
            warnings.append(_DUPLICATE_NAME_WARNING.format(entity="animal", name=name))

        animal = self._repo.create_animal(parsed_kind, name, age, trait)
        if target is not None:
            self._repo.assign_owner(animal.id, target)
        logger.info("Added %s %s (%s)", animal.kind, animal.name, animal.id)

        return ServiceResult(ok=True, op=op, data=self._animal_view(animal), warnings=warnings)

    @traced
    def add_owner(self, name: str, owner_id: str, phone_number: str) -> ServiceResult:
        """Register a new owner with an empty pet list."""
        op = "add_owner"
        owner = Owner(name=name, id=owner_id, phone_number=phone_number)

        warnings: list[str] = []
        for key in unsafe_fields(name=name, id=owner_id, phone_number=phone_number):
            warnings.append(_ROUND_TRIP_WARNING.format(field=key))
        if any(existing.matches(owner) for existing in self._repo.owners):
            warnings.append(f"An owner named {name!r} with this phone number already exists")
        elif self._repo.find_owner_by_name(name) is not None:
            warnings.append(_DUPLICATE_NAME_WARNING.format(entity="owner", name=name))

        self._repo.add_owner(owner)
        logger.info("Added owner %s", name)
        return ServiceResult(ok=True, op=op, data=self._owner_view(owner), warnings=warnings)

    # ------------------------------------------------------------------
    # assign / delete
    # ------------------------------------------------------------------

    @traced
    def assign_owner(self, animal_ref: str, owner_name: str) -> ServiceResult:
        """Move an animal to *owner_name*, detaching it from its current owner."""
        op = "assign_owner"
        animal = self._resolve_animal(animal_ref)
        if animal is None:
            return ServiceResult.failure(
                op, "ANIMAL_NOT_FOUND", f"No animal {animal_ref!r}", animal=animal_ref
            )
        owner = self._repo.find_owner_by_name(owner_name)
        if owner is None:
            return ServiceResult.failure(
                op, "OWNER_NOT_FOUND", f"No owner named {owner_name!r}", owner=owner_name
            )

        previous = self._repo.assign_owner(animal.id, owner)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": animal.id,
                "name": animal.name,
                "owner": owner.name,
                "previous_owner": previous.name if previous else None,
            },
        )

    @traced
    def delete_animal(self, animal_ref: str) -> ServiceResult:
        """Remove an animal from its owner's list and from the collection."""
        op = "delete_animal"
        animal = self._resolve_animal(animal_ref)
        if animal is None:
            return ServiceResult.failure(
                op, "ANIMAL_NOT_FOUND", f"No animal {animal_ref!r}", animal=animal_ref
            )

        owner = self._repo.delete_animal(animal.id)
        logger.info("Deleted animal %s (%s)", animal.name, animal.id)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": animal.id,
                "name": animal.name,
                "kind": str(animal.kind),
                "owner": owner.name if owner else None,
            },
        )

    @traced
    def delete_owner(self, owner_name: str) -> ServiceResult:
        """Delete an owner and every animal in its pet list."""
        op = "delete_owner"
        owner = self._repo.find_owner_by_name(owner_name)
        if owner is None:
            return ServiceResult.failure(
                op, "OWNER_NOT_FOUND", f"No owner named {owner_name!r}", owner=owner_name
            )

        pet_names = [a.name for a in self._repo.pets_of(owner)]
        with trace_span("cascade") as span:
            removed, animal_ids = self._repo.delete_owner(owner)
            if span is not None:
                span.counts["animals"] = len(animal_ids)
        if not removed:
            return ServiceResult.failure(
                op,
                "DELETE_FAILED",
                "Failed to delete owner",
                owner=owner_name,
                removed_animals=animal_ids,
            )

        logger.info("Deleted owner %s with %d pets", owner_name, len(animal_ids))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": owner.name,
                "id": owner.id,
                "removed_animals": animal_ids,
                "removed_pets": pet_names,
            },
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @traced
    def list_animals(self) -> ServiceResult:
        items = [self._animal_view(a) for a in self._repo.animals]
        return ServiceResult(ok=True, op="list_animals", data={"items": items, "count": len(items)})

    @traced
    def list_owners(self) -> ServiceResult:
        items = [self._owner_view(o) for o in self._repo.owners]
        return ServiceResult(ok=True, op="list_owners", data={"items": items, "count": len(items)})

    @traced
    def pets_of(self, owner_name: str) -> ServiceResult:
        """Animals in *owner_name*'s pet list, in list order."""
        op = "pets_of"
        owner = self._repo.find_owner_by_name(owner_name)
        if owner is None:
            return ServiceResult.failure(
                op, "OWNER_NOT_FOUND", f"No owner named {owner_name!r}", owner=owner_name
            )
        items = [self._animal_view(a) for a in self._repo.pets_of(owner)]
        return ServiceResult(
            ok=True,
            op=op,
            data={"owner": owner.name, "items": items, "count": len(items)},
        )

    @traced
    def owner_of(self, animal_ref: str) -> ServiceResult:
        """Current owner of an animal; ``owner`` is None when unowned."""
        op = "owner_of"
        animal = self._resolve_animal(animal_ref)
        if animal is None:
            return ServiceResult.failure(
                op, "ANIMAL_NOT_FOUND", f"No animal {animal_ref!r}", animal=animal_ref
            )
        owner = self._repo.find_owner_of(animal.id)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": animal.id,
                "name": animal.name,
                "owner": owner.to_dict() if owner else None,
            },
        )

    @traced
    def provide_service(self, animal_ref: str, service_type: str) -> ServiceResult:
        op = "provide_service"
        animal = self._resolve_animal(animal_ref)
        if animal is None:
            return ServiceResult.failure(
                op, "ANIMAL_NOT_FOUND", f"No animal {animal_ref!r}", animal=animal_ref
            )
        message = animal.provide_service(service_type)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": animal.id, "name": animal.name, "message": message},
        )
