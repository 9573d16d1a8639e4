"""Command group: owners (add, list, pets, delete)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from vetclinic.commands._base import ClinicGroup, save_option
from vetclinic.services.records import RecordService

if TYPE_CHECKING:
    from vetclinic.commands._context import AppContext

_OWNER_EXAMPLES = """\
  vetclinic owner add Maya 3 0503333333 --save
  vetclinic owner list
  vetclinic owner pets Sarah
  vetclinic owner delete John --save"""


@click.group(cls=ClinicGroup, examples=_OWNER_EXAMPLES)
@click.pass_obj
def owner(app: AppContext) -> None:
    """Register owners and manage their pets."""


@owner.command()
@click.argument("name")
@click.argument("owner_id", metavar="ID")
@click.argument("phone")
@save_option
@click.pass_obj
def add(app: AppContext, name: str, owner_id: str, phone: str, save: bool) -> None:
    """Register a new owner."""
    result = RecordService(app.clinic).add_owner(name, owner_id, phone)
    app.emit(app.commit(result, save=save))


@owner.command("list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all owners with their pets."""
    app.emit(RecordService(app.clinic).list_owners())


@owner.command()
@click.argument("name")
@click.pass_obj
def pets(app: AppContext, name: str) -> None:
    """List the pets of an owner."""
    app.emit(RecordService(app.clinic).pets_of(name))


@owner.command()
@click.argument("name")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@save_option
@click.pass_obj
def delete(app: AppContext, name: str, yes: bool, save: bool) -> None:
    """Delete an owner together with all of its pets."""
    if app.interactive and not yes:
        click.confirm(f"Delete {name} and all of their pets?", abort=True)
    result = RecordService(app.clinic).delete_owner(name)
    app.emit(app.commit(result, save=save))
