"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Clinic initialization (login gate,
then load from the record files) and centralized result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from vetclinic.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from vetclinic.config.settings import ClinicSettings
    from vetclinic.infrastructure.clinic import Clinic
    from vetclinic.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The clinic is lazily
    initialized on first use so ``--help`` and ``--version`` never
    touch the record files.
    """

    def __init__(self, settings: ClinicSettings) -> None:
        self.settings = settings
        self._clinic: Clinic | None = None
        self.load_result: ServiceResult | None = None

        # Configure structured logging
        from vetclinic.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
            data_dir=settings.data_dir,
        )

        # Enable telemetry context var when verbose
        if settings.verbose:
            from vetclinic.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def interactive(self) -> bool:
        """True when prompts may fire: no ``--no-interact``, no ``--json``, TTY stdin."""
        return (
            not self.settings.no_interact
            and not self.settings.json_output
            and sys.stdin.isatty()
        )

    @property
    def clinic(self) -> Clinic:
        """The loaded clinic (created lazily on first access).

        Passes the login gate when ``[auth] required`` is set, then loads
        the record files, falling back to sample data.  Load warnings go
        to stderr (JSON mode keeps them in ``load_result`` only).
        """
        if self._clinic is None:
            from vetclinic.infrastructure.clinic import Clinic
            from vetclinic.services.auth import AuthService
            from vetclinic.services.storage import StorageService

            clinic = Clinic(self.settings)
            if self.settings.auth.required:
                gate = AuthService(clinic).authenticate(
                    self.settings.username, self.settings.password
                )
                if not gate.ok:
                    self.emit(gate)

            self.load_result = StorageService(clinic).load_all()
            if not self.settings.json_output:
                for warning in self.load_result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            self._clinic = clinic
        return self._clinic

    def commit(self, result: ServiceResult, *, save: bool) -> ServiceResult:
        """Follow a successful mutation with an explicit save, if requested.

        Returns the save failure when the write fails, otherwise *result*
        with ``saved`` set (or a warning that nothing was written).
        """
        if not result.ok:
            return result
        if not save:
            warnings = [*result.warnings, "Changes not saved; pass --save to write them"]
            return result.model_copy(update={"warnings": warnings})

        from vetclinic.services.storage import StorageService

        saved = StorageService(self.clinic).save_all()
        if not saved.ok:
            return saved
        return result.model_copy(update={"data": {**result.data, "saved": True}})

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
