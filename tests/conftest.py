"""Shared pytest fixtures and test helpers for vetclinic tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from vetclinic.config.settings import ClinicSettings
from vetclinic.infrastructure.clinic import Clinic
from vetclinic.infrastructure.repository import ClinicRepository
from vetclinic.services.telemetry import _current_span, disable_telemetry


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Isolate env vars, logging, and telemetry state between tests.

    The CLI reconfigures the root logger on every invocation, so handlers
    and levels are restored afterwards.
    """
    for var in (
        "VETCLINIC_CONFIG",
        "VETCLINIC_DATA_DIR",
        "VETCLINIC_USERNAME",
        "VETCLINIC_PASSWORD",
    ):
        monkeypatch.delenv(var, raising=False)
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    vet = logging.getLogger("vetclinic")
    vet_level = vet.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    vet.setLevel(vet_level)
    disable_telemetry()
    _current_span.set(None)
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Empty directory for the three record files.

    This is the single source of truth for the data directory.  All
    clinic fixtures (clinic, _isolated_clinic) build on this.
    """
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def clinic(data_dir: Path) -> Clinic:
    """Clinic on a temp data directory with an empty repository (nothing loaded)."""
    settings = ClinicSettings.from_cli(data_dir=data_dir)
    return Clinic(settings)


@pytest.fixture
def repo() -> ClinicRepository:
    return ClinicRepository()


@pytest.fixture
def _isolated_clinic(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp data directory so the CLI reads and writes there.

    Use via ``@pytest.mark.usefixtures("_isolated_clinic")`` on command test
    classes.
    """
    monkeypatch.chdir(data_dir)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_records(
    data_dir: Path,
    *,
    animals: list[str] | None = None,
    owners: list[str] | None = None,
    relations: list[str] | None = None,
) -> None:
    """Write record files; a None argument leaves that file absent."""
    for name, lines in (
        ("animals.txt", animals),
        ("owners.txt", owners),
        ("relations.txt", relations),
    ):
        if lines is not None:
            (data_dir / name).write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")


def add_owner(
    clinic: Clinic, name: str, owner_id: str = "9", phone: str = "0500000000"
) -> dict[str, Any]:
    """Add an owner via RecordService, asserting success."""
    from vetclinic.services.records import RecordService

    result = RecordService(clinic).add_owner(name, owner_id, phone)
    assert result.ok, result.error
    return result.data


def add_animal(
    clinic: Clinic, kind: str, name: str, age: Any, trait: Any, **kwargs: Any
) -> dict[str, Any]:
    """Add an animal via RecordService, asserting success."""
    from vetclinic.services.records import RecordService

    result = RecordService(clinic).add_animal(kind, name, age, trait, **kwargs)
    assert result.ok, result.error
    return result.data
