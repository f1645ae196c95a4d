"""Bearer-token gate placed in front of protected routes."""

from __future__ import annotations

import logging

from fastapi import Header, Request

from ..domain.contracts import TokenCodec, VerifiedIdentity
from ..errors import InvalidToken, Unauthenticated

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AccessGate:
    """Turns an ``Authorization`` header value into a verified identity."""

    def __init__(self, tokens: TokenCodec) -> None:
        self._tokens = tokens

    def authenticate(self, authorization: str | None) -> VerifiedIdentity:
        """Verify the header value or raise ``Unauthenticated``.

        ``Bearer <token>`` is preferred, but a bare token is accepted as-is.
        Only the exact, case-sensitive ``"Bearer "`` prefix is stripped.
        """
        if not authorization:
            logger.debug("gate rejected request: no authorization header")
            raise Unauthenticated("No token provided")

        if authorization.startswith(BEARER_PREFIX):
            token = authorization[len(BEARER_PREFIX):]
        else:
            token = authorization

        try:
            subject = self._tokens.verify(token)
        except InvalidToken as exc:
            logger.debug("gate rejected request: %s", exc)
            raise Unauthenticated("Invalid token") from exc
        return VerifiedIdentity(account_id=subject)


def require_identity(
    request: Request,
    authorization: str | None = Header(default=None),
) -> VerifiedIdentity:
    """FastAPI dependency that admits the request only with a valid token."""
    gate: AccessGate = request.app.state.access_gate
    return gate.authenticate(authorization)
