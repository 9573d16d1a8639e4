"""AuthService — the fixed-credential gate in front of the records.

This is a boundary check, not authentication: the credentials come from
``[auth]`` in ``vetclinic.toml`` (default ``admin`` / ``1234``) and are
compared in plain text.
"""

from __future__ import annotations

import logging

from vetclinic.services.base import BaseService
from vetclinic.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """Checks a username/password pair against the configured one."""

    def check(self, username: str | None, password: str | None) -> bool:
        auth = self._clinic.settings.auth
        return username == auth.username and password == auth.password

    def authenticate(self, username: str | None, password: str | None) -> ServiceResult:
        op = "login"
        if not self.check(username, password):
            logger.info("Rejected login for %r", username)
            return ServiceResult.failure(op, "AUTH_FAILED", "Invalid username or password")
        return ServiceResult(
            ok=True,
            op=op,
            data={"username": username, "clinic": self._clinic.settings.clinic.name},
        )
