"""Standalone commands: load and save the record files."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from vetclinic.commands._base import ClinicCommand
from vetclinic.services.storage import StorageService

if TYPE_CHECKING:
    from vetclinic.commands._context import AppContext


@click.command(
    cls=ClinicCommand,
    examples="""\
  vetclinic load
  vetclinic --data-dir ./clinic-data load
  vetclinic --json load""",
)
@click.pass_obj
def load(app: AppContext) -> None:
    """Load the record files and report what was found."""
    _ = app.clinic
    assert app.load_result is not None
    app.emit(app.load_result)


@click.command(
    cls=ClinicCommand,
    examples="""\
  vetclinic save
  vetclinic --data-dir ./clinic-data save""",
)
@click.pass_obj
def save(app: AppContext) -> None:
    """Write the current records (or the sample data) to the record files."""
    app.emit(StorageService(app.clinic).save_all())
