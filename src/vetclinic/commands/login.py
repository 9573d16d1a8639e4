"""Standalone command: check the clinic credentials."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from vetclinic.commands._base import ClinicCommand
from vetclinic.infrastructure.clinic import Clinic
from vetclinic.services.auth import AuthService

if TYPE_CHECKING:
    from vetclinic.commands._context import AppContext


@click.command(
    cls=ClinicCommand,
    examples="""\
  vetclinic -u admin -p 1234 login
  VETCLINIC_USERNAME=admin VETCLINIC_PASSWORD=1234 vetclinic login""",
)
@click.pass_obj
def login(app: AppContext) -> None:
    """Check a username and password against the configured credentials."""
    username = app.settings.username
    password = app.settings.password
    if app.interactive:
        if username is None:
            username = click.prompt("Username")
        if password is None:
            password = click.prompt("Password", hide_input=True)
    app.emit(AuthService(Clinic(app.settings)).authenticate(username, password))
