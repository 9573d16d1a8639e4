"""Root CLI group for vetclinic with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from vetclinic import __version__
from vetclinic.commands import register_commands
from vetclinic.commands._context import AppContext
from vetclinic.config.settings import ClinicSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="vetclinic")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Non-interactive mode (no prompts).")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding animals.txt, owners.txt and relations.txt.",
)
@click.option("-u", "--username", default=None, help="Login name for the credential gate.")
@click.option("-p", "--password", default=None, help="Password for the credential gate.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    config_path: str | None,
    data_dir: Path | None,
    username: str | None,
    password: str | None,
) -> None:
    """vetclinic — veterinary clinic records: animals, owners, and who owns what."""
    ctx.ensure_object(dict)
    settings = ClinicSettings.from_cli(
        config_path=config_path,
        data_dir=data_dir,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        no_interact=no_interact,
        username=username,
        password=password,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
