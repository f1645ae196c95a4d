"""Utilities for issuing and validating application JWTs."""

from __future__ import annotations

import time
from typing import Any, Callable

import jwt

from ..config import JWT_SECRET_ENV, TOKEN_TTL_SECONDS
from ..errors import ConfigurationError, InvalidToken

ALGORITHM = "HS256"


class JwtTokenIssuer:
    """Signs and validates stateless HS256 bearer tokens.

    Parameters
    ----------
    secret:
        Process-wide signing key. An empty value is rejected here so a
        misconfigured deployment fails while the application is being built.
    issuer:
        Value written to, and required in, the ``iss`` claim.
    ttl_seconds:
        Lifetime of issued tokens.
    clock:
        Source of the current UNIX time, used when stamping ``iat``/``exp``.
    """

    def __init__(
        self,
        secret: str | None,
        *,
        issuer: str = "authgate",
        ttl_seconds: int = TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ConfigurationError(f"{JWT_SECRET_ENV} is not set; refusing to start without a signing secret")
        self._secret = secret
        self._issuer = issuer
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def issue(self, subject_id: str) -> str:
        """Create a signed JWT whose ``sub`` claim is ``subject_id``."""
        now = int(self._clock())
        payload: dict[str, Any] = {
            "iss": self._issuer,
            "sub": subject_id,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> str:
        """Decode ``token`` and return its subject.

        Raises
        ------
        InvalidToken
            When the signature, structure, issuer or expiry check fails.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                issuer=self._issuer,
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidToken(str(exc)) from exc
        return claims["sub"]
