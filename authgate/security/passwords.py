"""bcrypt-backed password hashing."""

from __future__ import annotations

import bcrypt

from ..errors import ConfigurationError

MIN_ROUNDS = 10
# bcrypt only considers the first 72 bytes of the secret.
MAX_PASSWORD_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:MAX_PASSWORD_BYTES]


class BcryptPasswordHasher:
    """Salted, adaptive one-way hashing for account passwords."""

    def __init__(self, rounds: int = 12) -> None:
        if rounds < MIN_ROUNDS:
            raise ConfigurationError(f"bcrypt rounds must be at least {MIN_ROUNDS}, got {rounds}")
        self._rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash ``plaintext`` with a freshly generated salt."""
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(plaintext), salt).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Return ``True`` when ``plaintext`` matches ``hashed``; malformed hashes yield ``False``."""
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(_encode(plaintext), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False
