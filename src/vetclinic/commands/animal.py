"""Command group: animals (add, list, assign, delete, owner, service)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from vetclinic.commands._base import ClinicGroup, save_option
from vetclinic.domain.types import AnimalKind
from vetclinic.services.records import RecordService

if TYPE_CHECKING:
    from vetclinic.commands._context import AppContext

_ANIMAL_EXAMPLES = """\
  vetclinic animal add dog Rex 4 --breed Beagle --owner John --save
  vetclinic animal add cat Luna 2 --indoor --save
  vetclinic animal list
  vetclinic animal assign Rex Sarah --save
  vetclinic animal owner ANM-0002
  vetclinic animal service Luna grooming
  vetclinic animal delete Rex --save"""


@click.group(cls=ClinicGroup, examples=_ANIMAL_EXAMPLES)
@click.pass_obj
def animal(app: AppContext) -> None:
    """Add, relink, and remove animals."""


# ── add ──────────────────────────────────────────────────────────────


@animal.group(
    examples="""\
  vetclinic animal add dog Rex 4 --breed Beagle
  vetclinic animal add cat Luna 2 --indoor --owner Sarah
  vetclinic animal add bird Kiwi 1 --can-fly --save
  vetclinic animal add dog Stray -1 --breed Mutt"""
)
@click.pass_obj
def add(app: AppContext) -> None:
    """Add a dog, cat, or bird."""


# Lets a negative AGE such as -1 through as an argument.
_SIGNED_AGE = {"ignore_unknown_options": True}


def _add(
    app: AppContext,
    kind: AnimalKind,
    name: str,
    age: str,
    trait: str | bool,
    owner: str | None,
    save: bool,
) -> None:
    svc = RecordService(app.clinic)
    result = svc.add_animal(kind, name, age, trait, owner=owner)
    app.emit(app.commit(result, save=save))


@add.command(context_settings=_SIGNED_AGE)
@click.argument("name")
@click.argument("age")
@click.option("--breed", default=None, help="Dog breed.")
@click.option("--owner", default=None, help="Attach to this owner (by name).")
@save_option
@click.pass_obj
def dog(
    app: AppContext,
    name: str,
    age: str,
    breed: str | None,
    owner: str | None,
    save: bool,
) -> None:
    """Add a dog."""
    if breed is None:
        breed = click.prompt("Breed", default="") if app.interactive else ""
    _add(app, AnimalKind.DOG, name, age, breed, owner, save)


@add.command(context_settings=_SIGNED_AGE)
@click.argument("name")
@click.argument("age")
@click.option("--indoor/--outdoor", default=False, help="Indoor cats get a discount.")
@click.option("--owner", default=None, help="Attach to this owner (by name).")
@save_option
@click.pass_obj
def cat(
    app: AppContext,
    name: str,
    age: str,
    indoor: bool,
    owner: str | None,
    save: bool,
) -> None:
    """Add a cat."""
    _add(app, AnimalKind.CAT, name, age, indoor, owner, save)


@add.command(context_settings=_SIGNED_AGE)
@click.argument("name")
@click.argument("age")
@click.option("--can-fly/--cannot-fly", default=False, help="Flightless birds need extra care.")
@click.option("--owner", default=None, help="Attach to this owner (by name).")
@save_option
@click.pass_obj
def bird(
    app: AppContext,
    name: str,
    age: str,
    can_fly: bool,
    owner: str | None,
    save: bool,
) -> None:
    """Add a bird."""
    _add(app, AnimalKind.BIRD, name, age, can_fly, owner, save)


# ── list / lookup ────────────────────────────────────────────────────


@animal.command("list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all animals with their owners."""
    app.emit(RecordService(app.clinic).list_animals())


@animal.command()
@click.argument("ref")
@click.pass_obj
def owner(app: AppContext, ref: str) -> None:
    """Show the current owner of an animal (ID or name)."""
    app.emit(RecordService(app.clinic).owner_of(ref))


@animal.command()
@click.argument("ref")
@click.argument("service_type")
@click.pass_obj
def service(app: AppContext, ref: str, service_type: str) -> None:
    """Describe a service (checkup, grooming, ...) given to an animal."""
    app.emit(RecordService(app.clinic).provide_service(ref, service_type))


# ── relink / delete ──────────────────────────────────────────────────


@animal.command()
@click.argument("ref")
@click.argument("owner_name")
@save_option
@click.pass_obj
def assign(app: AppContext, ref: str, owner_name: str, save: bool) -> None:
    """Move an animal to OWNER_NAME, detaching it from its current owner."""
    result = RecordService(app.clinic).assign_owner(ref, owner_name)
    app.emit(app.commit(result, save=save))


@animal.command()
@click.argument("ref")
@save_option
@click.pass_obj
def delete(app: AppContext, ref: str, save: bool) -> None:
    """Delete an animal (ID or name)."""
    result = RecordService(app.clinic).delete_animal(ref)
    app.emit(app.commit(result, save=save))
