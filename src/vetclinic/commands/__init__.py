"""Subcommand modules for vetclinic.

Provides register_commands() which uses deferred imports to keep
``vetclinic --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    2 groups (have subcommands) + 3 standalone commands.
    """
    # --- Groups ---
    from vetclinic.commands.animal import animal
    from vetclinic.commands.owner import owner

    cli.add_command(animal)
    cli.add_command(owner)

    # --- Standalone commands ---
    from vetclinic.commands.login import login
    from vetclinic.commands.storage import load, save

    cli.add_command(load)
    cli.add_command(save)
    cli.add_command(login)
