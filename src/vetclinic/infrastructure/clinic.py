"""Clinic — the session state object injected into every service.

Bundles the resolved settings, the in-memory
:class:`~vetclinic.infrastructure.repository.ClinicRepository`, and the
record file locations.  One Clinic per process; nothing is shared
through module globals.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from vetclinic.infrastructure.flatfile import StoragePaths
from vetclinic.infrastructure.repository import ClinicRepository

if TYPE_CHECKING:
    from vetclinic.config.settings import ClinicSettings


class Clinic:
    """Settings, repository, and storage paths for one session.

    The repository starts empty; call
    :meth:`vetclinic.services.storage.StorageService.load_all` to fill it.
    """

    def __init__(self, settings: ClinicSettings) -> None:
        self._settings = settings
        self._repo = ClinicRepository()
        self._paths = StoragePaths.from_settings(settings)

    @property
    def settings(self) -> ClinicSettings:
        return self._settings

    @property
    def repo(self) -> ClinicRepository:
        return self._repo

    @property
    def paths(self) -> StoragePaths:
        return self._paths
