"""BaseService — abstract foundation for all vetclinic services.

Every service receives a :class:`Clinic` at construction time.  The
Clinic holds the repository and storage paths; services never reach
for module-level state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vetclinic.infrastructure.clinic import Clinic
    from vetclinic.infrastructure.repository import ClinicRepository


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class RecordService(BaseService):
            def add_owner(self, name: str, ...) -> ServiceResult:
                self._repo.add_owner(...)
    """

    def __init__(self, clinic: Clinic) -> None:
        self._clinic = clinic

    @property
    def _repo(self) -> ClinicRepository:
        return self._clinic.repo
