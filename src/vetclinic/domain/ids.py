"""Animal identifiers.

Animals get a sequential ``ANM-NNNN`` ID from the repository counter,
minimum 4 digits.  IDs live only in memory: the flat files key records
by name, so IDs are reassigned on every load.

INVARIANT: Within one repository an ID is never reused, even after delete.
"""

from __future__ import annotations

import re

ANIMAL_PREFIX = "ANM-"
ANIMAL_ID_PATTERN = re.compile(r"^ANM-\d{4,}$")


def format_animal_id(number: int) -> str:
    """Render counter value *number* as an animal ID."""
    return f"{ANIMAL_PREFIX}{number:04d}"


def is_animal_id(value: str) -> bool:
    """Check whether *value* looks like a generated animal ID."""
    return ANIMAL_ID_PATTERN.match(value) is not None
