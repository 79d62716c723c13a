"""Credential Hashing — argon2id via argon2-cffi."""

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError, VerificationError


class Argon2PasswordHasher:
    """Satisfies core.repository_protocols.PasswordHasher."""

    def __init__(self, hasher: PasswordHasher | None = None):
        self._ph = hasher or PasswordHasher()

    def hash(self, password: str) -> str:
        return self._ph.hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        try:
            return self._ph.verify(password_hash, password)
        except (VerifyMismatchError, InvalidHashError, VerificationError):
            return False
