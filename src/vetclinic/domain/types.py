"""Animal kinds.

The enum value doubles as the kind tag written to ``animals.txt``.
"""

from __future__ import annotations

from enum import StrEnum


class AnimalKind(StrEnum):
    """Species tag determining the extra field and pricing rule."""

    DOG = "Dog"
    CAT = "Cat"
    BIRD = "Bird"

    @classmethod
    def parse(cls, value: str) -> AnimalKind | None:
        """Case-insensitive lookup; ``None`` for unknown tags."""
        for kind in cls:
            if kind.value.lower() == value.strip().lower():
                return kind
        return None
