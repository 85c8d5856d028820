"""
Admin login against the single configured credential pair.

The returned token is static and never expires; it gates the dashboard UI
only and is not checked by any endpoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from eventdesk.core.config import Settings
from eventdesk.core.security import constant_time_equals, verify_password

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    """Username or password did not match the configured admin."""


@dataclass
class AdminAuthService:
    username: str
    password: str
    token: str
    password_hash: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminAuthService":
        return cls(
            username=settings.admin_username,
            password=settings.admin_password,
            token=settings.admin_token,
            password_hash=settings.admin_password_hash,
        )

    def _password_ok(self, password: str) -> bool:
        if self.password_hash:
            return verify_password(password, self.password_hash)
        return constant_time_equals(password, self.password)

    def login(self, username: str | None, password: str | None) -> str:
        logger.info("Login attempt: %s", username)
        user_ok = constant_time_equals(str(username or "").strip(), self.username)
        if not (user_ok and self._password_ok(str(password or ""))):
            raise InvalidCredentialsError()
        return self.token
