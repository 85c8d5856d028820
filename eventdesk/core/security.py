"""Security helpers (admin password hashing and verification)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    return f"{_PREFIX}{_ph.hash(password)}"


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return False
    try:
        return _ph.verify(stored[len(_PREFIX) :], password or "")
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def constant_time_equals(given: str | None, expected: str | None) -> bool:
    return secrets.compare_digest((given or "").encode("utf-8"), (expected or "").encode("utf-8"))
