"""Flat-file codec for the three record files.

One record per line, fields separated by commas, no quoting or escaping:

- ``animals.txt``   — ``kind,name,age,trait`` (breed, or ``true``/``false``)
- ``owners.txt``    — ``name,id,phoneNumber``
- ``relations.txt`` — ``ownerName,animalName``

A comma or line break inside a field corrupts the record on reload.
Callers are warned at entry time (see :func:`unsafe_fields`); the format
itself is left as is so existing files stay readable.

Reading tolerates a missing file (no prior data) and skips lines with too
few fields.  A non-numeric age raises :class:`MalformedAgeError` so the
caller can discard the whole load.  Writing overwrites each file in turn;
there is no temp-file swap, so a failure part-way leaves earlier files
written and later ones untouched or truncated.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from vetclinic.domain.animals import Animal, Trait, format_flag
from vetclinic.domain.owners import Owner
from vetclinic.domain.types import AnimalKind

if TYPE_CHECKING:
    from vetclinic.config.settings import ClinicSettings
    from vetclinic.infrastructure.repository import ClinicRepository

logger = logging.getLogger(__name__)

SEPARATOR = ","

ANIMAL_FIELDS = 4
OWNER_FIELDS = 3
RELATION_FIELDS = 2

# Optional sign, then digits only.
_AGE_PATTERN = re.compile(r"^[+-]?\d+$")
# Signed 32-bit range, as the record files have always held.
AGE_MIN = -(2**31)
AGE_MAX = 2**31 - 1
_BREAKING_CHARS = re.compile(r"[,\r\n]")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class PersistenceError(Exception):
    """Base class for record file failures."""


class MalformedAgeError(PersistenceError):
    """An ``animals.txt`` line carries an age that is not a 32-bit integer."""

    def __init__(self, path: Path, line_number: int, value: str) -> None:
        self.path = path
        self.line_number = line_number
        self.value = value
        super().__init__(f'{path.name} line {line_number}: age "{value}" is not a valid number')


class RecordReadError(PersistenceError):
    """A record file exists but its text cannot be decoded."""

    def __init__(self, path: Path, cause: UnicodeError | LookupError) -> None:
        self.path = path
        super().__init__(f"Cannot read {path.name}: {cause}")


class RecordWriteError(PersistenceError):
    """Writing one of the record files failed.

    Attributes:
        path: The file that failed.
        written: Files fully written before the failure.
    """

    def __init__(self, path: Path, written: list[Path], cause: Exception) -> None:
        self.path = path
        self.written = written
        reason = cause.strerror if isinstance(cause, OSError) and cause.strerror else cause
        super().__init__(f"Cannot write {path}: {reason}")


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StoragePaths:
    """Resolved locations of the three record files."""

    animals: Path
    owners: Path
    relations: Path
    encoding: str = "utf-8"

    @classmethod
    def from_settings(cls, settings: ClinicSettings) -> StoragePaths:
        root = settings.data_dir
        storage = settings.storage
        return cls(
            animals=root / storage.animals_file,
            owners=root / storage.owners_file,
            relations=root / storage.relations_file,
            encoding=storage.encoding,
        )

    def all(self) -> list[Path]:
        """Save order: animals, owners, relations."""
        return [self.animals, self.owners, self.relations]


# ---------------------------------------------------------------------------
# Field codecs
# ---------------------------------------------------------------------------


def parse_age(text: str) -> int:
    """Parse an age field strictly.

    Raises ValueError on anything but an integer in ``AGE_MIN..AGE_MAX``.
    """
    if not _AGE_PATTERN.match(text) or not AGE_MIN <= int(text) <= AGE_MAX:
        msg = f"invalid age: {text!r}"
        raise ValueError(msg)
    return int(text)


def parse_flag(text: str) -> bool:
    """``true`` in any case is True; everything else is False."""
    return text.strip().lower() == "true"


def unsafe_fields(**values: str) -> list[str]:
    """Names of the fields in *values* that would break a record line."""
    return [key for key, value in values.items() if _BREAKING_CHARS.search(value)]


def encode_animal(animal: Animal) -> str:
    trait = format_flag(animal.trait) if isinstance(animal.trait, bool) else animal.trait
    return SEPARATOR.join([str(animal.kind), animal.name, str(animal.age), trait])


def decode_trait(kind: AnimalKind, trait_text: str) -> Trait:
    """Turn the raw trait field into the type *kind* expects."""
    if kind is AnimalKind.DOG:
        return trait_text
    return parse_flag(trait_text)


def encode_owner(owner: Owner) -> str:
    return SEPARATOR.join([owner.name, owner.id, owner.phone_number])


def encode_relation(owner: Owner, animal: Animal) -> str:
    return SEPARATOR.join([owner.name, animal.name])


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_lines(path: Path, *, encoding: str = "utf-8") -> list[str] | None:
    """Return the lines of *path*, or None if the file does not exist.

    Raises:
        RecordReadError: the bytes do not decode, or *encoding* is unknown.
    """
    if not path.exists():
        logger.debug("No record file at %s", path)
        return None
    try:
        with path.open(encoding=encoding, newline="") as handle:
            return handle.read().splitlines()
    except (UnicodeError, LookupError) as exc:
        raise RecordReadError(path, exc) from exc


def write_lines(path: Path, lines: list[str], *, encoding: str = "utf-8") -> None:
    """Overwrite *path* with one line per entry."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=encoding, newline="\n") as handle:
        for line in lines:
            handle.write(line + "\n")


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


@dataclass
class LoadReport:
    """What a load read and what it skipped."""

    owners: int = 0
    animals: int = 0
    relations: int = 0
    files_missing: list[str] = field(default_factory=list)
    skipped: dict[str, int] = field(
        default_factory=lambda: {"owners": 0, "animals": 0, "relations": 0}
    )

    def to_dict(self) -> dict[str, object]:
        return {
            "owners": self.owners,
            "animals": self.animals,
            "relations": self.relations,
            "files_missing": list(self.files_missing),
            "skipped": dict(self.skipped),
        }


def load_records(repo: ClinicRepository, paths: StoragePaths) -> LoadReport:
    """Clear *repo* and fill it from the record files.

    Order: owners, animals, relations (relations resolve names against
    the first two).  Does not seed sample data; that is the caller's call.

    Raises:
        MalformedAgeError: an animal line has a non-numeric age.
        RecordReadError: a file does not decode with the configured encoding.
        OSError: a file exists but cannot be read.
    """
    repo.clear()
    report = LoadReport()

    lines = read_lines(paths.owners, encoding=paths.encoding)
    if lines is None:
        report.files_missing.append(paths.owners.name)
    for line in lines or []:
        parts = line.split(SEPARATOR)
        if len(parts) < OWNER_FIELDS:
            report.skipped["owners"] += 1
            continue
        repo.add_owner(Owner(name=parts[0], id=parts[1], phone_number=parts[2]))
        report.owners += 1

    lines = read_lines(paths.animals, encoding=paths.encoding)
    if lines is None:
        report.files_missing.append(paths.animals.name)
    for number, line in enumerate(lines or [], start=1):
        parts = line.split(SEPARATOR)
        if len(parts) < ANIMAL_FIELDS:
            report.skipped["animals"] += 1
            continue
        try:
            kind = AnimalKind(parts[0])
        except ValueError:
            logger.debug("Unknown animal kind %r on line %d", parts[0], number)
            report.skipped["animals"] += 1
            continue
        try:
            age = parse_age(parts[2])
        except ValueError:
            raise MalformedAgeError(paths.animals, number, parts[2]) from None
        repo.create_animal(kind, parts[1], age, decode_trait(kind, parts[3]))
        report.animals += 1

    lines = read_lines(paths.relations, encoding=paths.encoding)
    if lines is None:
        report.files_missing.append(paths.relations.name)
    for line in lines or []:
        parts = line.split(SEPARATOR)
        if len(parts) < RELATION_FIELDS:
            report.skipped["relations"] += 1
            continue
        owner = repo.find_owner_by_name(parts[0])
        animal = repo.find_animal_by_name(parts[1])
        if owner is None or animal is None:
            logger.debug("Unresolved relation %s -> %s", parts[0], parts[1])
            report.skipped["relations"] += 1
            continue
        repo.assign_owner(animal.id, owner)
        report.relations += 1

    logger.debug(
        "Loaded %d owners, %d animals, %d relations",
        report.owners,
        report.animals,
        report.relations,
    )
    return report


def save_records(repo: ClinicRepository, paths: StoragePaths) -> dict[str, int]:
    """Overwrite all three record files from *repo*.

    The relations file is rebuilt from the owners' pet lists.  Returns
    line counts per file.

    Raises:
        RecordWriteError: a file could not be written or encoded; earlier
            files stay written.
    """
    relation_lines = [
        encode_relation(owner, animal) for owner in repo.owners for animal in repo.pets_of(owner)
    ]
    batches = [
        (paths.animals, [encode_animal(a) for a in repo.animals]),
        (paths.owners, [encode_owner(o) for o in repo.owners]),
        (paths.relations, relation_lines),
    ]

    written: list[Path] = []
    for path, lines in batches:
        try:
            write_lines(path, lines, encoding=paths.encoding)
        except (OSError, UnicodeError, LookupError) as exc:
            raise RecordWriteError(path, written, exc) from exc
        written.append(path)

    return {
        "animals": len(batches[0][1]),
        "owners": len(batches[1][1]),
        "relations": len(relation_lines),
    }
