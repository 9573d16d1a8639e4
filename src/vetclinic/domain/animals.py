"""Animal records — one tagged model, per-kind behaviour in a dispatch table.

An :class:`Animal` carries a :class:`~vetclinic.domain.types.AnimalKind`
tag plus a single kind-specific ``trait``:

- Dog  -> breed (``str``)
- Cat  -> indoor (``bool``)
- Bird -> can fly (``bool``)

Pricing, descriptions, and service messages are looked up in
:data:`KIND_SPECS` by kind instead of living on subclasses.  Age is
accepted as given; a negative age is representable.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Self

from pydantic import BaseModel, model_validator

from vetclinic.domain.types import AnimalKind

logger = logging.getLogger(__name__)

Trait = str | bool


def format_flag(value: bool) -> str:
    """Render a boolean the way the record files and descriptions spell it."""
    return "true" if value else "false"


@dataclass(frozen=True)
class KindSpec:
    """Per-kind behaviour: trait naming, price band, service wording."""

    kind: AnimalKind
    trait_type: type
    trait_key: str
    trait_label: str
    price_band: str
    price_note: Callable[[Any], str]
    service_target: Callable[[Any], str]

    def price(self, trait: Trait) -> str:
        return f"Price: {self.price_band} SAR{self.price_note(trait)}"

    def trait_text(self, trait: Trait) -> str:
        if isinstance(trait, bool):
            return format_flag(trait)
        return str(trait)


KIND_SPECS: dict[AnimalKind, KindSpec] = {
    AnimalKind.DOG: KindSpec(
        kind=AnimalKind.DOG,
        trait_type=str,
        trait_key="breed",
        trait_label="Breed",
        price_band="250-300",
        price_note=lambda _breed: "",
        service_target=lambda breed: f"dog ({breed})",
    ),
    AnimalKind.CAT: KindSpec(
        kind=AnimalKind.CAT,
        trait_type=bool,
        trait_key="indoor",
        trait_label="Indoor",
        price_band="150-200",
        price_note=lambda indoor: " (indoor discount)" if indoor else "",
        service_target=lambda indoor: "indoor cat" if indoor else "cat",
    ),
    AnimalKind.BIRD: KindSpec(
        kind=AnimalKind.BIRD,
        trait_type=bool,
        trait_key="can_fly",
        trait_label="Can fly",
        price_band="100-150",
        price_note=lambda can_fly: "" if can_fly else " (extra care needed)",
        service_target=lambda can_fly: "flying bird" if can_fly else "non-flying bird",
    ),
}


class Animal(BaseModel):
    """A patient record.

    Attributes:
        id: Generated ``ANM-NNNN`` handle, stable for the session only.
        kind: Species tag.
        name: Display name, also the lookup key in ``relations.txt``.
        age: Age in years, unvalidated.
        trait: Kind-specific payload (breed, indoor, or can-fly).
    """

    model_config = {"frozen": True}

    id: str
    kind: AnimalKind
    name: str
    age: int
    trait: Trait

    @model_validator(mode="after")
    def _check_trait_type(self) -> Self:
        spec = KIND_SPECS[self.kind]
        if type(self.trait) is not spec.trait_type:
            msg = (
                f"{self.kind} expects {spec.trait_key} of type "
                f"{spec.trait_type.__name__}, got {type(self.trait).__name__}"
            )
            raise ValueError(msg)
        return self

    @property
    def spec(self) -> KindSpec:
        return KIND_SPECS[self.kind]

    @property
    def price(self) -> str:
        """Descriptive price band for this kind, e.g. ``"Price: 250-300 SAR"``."""
        return self.spec.price(self.trait)

    @property
    def description(self) -> str:
        """One-line human-readable summary."""
        spec = self.spec
        return (
            f"Type: {self.kind}, Name: {self.name}, Age: {self.age}, "
            f"{spec.trait_label}: {spec.trait_text(self.trait)}, {self.price}"
        )

    def provide_service(self, service_type: str) -> str:
        """Describe *service_type* being provided to this animal.

        No state changes; the message is logged and returned.
        """
        message = f"Providing {service_type} service to {self.spec.service_target(self.trait)}"
        logger.info(message)
        return message

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a plain dict with the trait under its kind-specific key."""
        return {
            "id": self.id,
            "kind": str(self.kind),
            "name": self.name,
            "age": self.age,
            self.spec.trait_key: self.trait,
            "price": self.price,
            "description": self.description,
        }
