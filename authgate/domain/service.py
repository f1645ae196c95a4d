"""Registration, login and profile workflows over the account directory."""

from __future__ import annotations

import logging
import secrets

from ..errors import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from .account import AccountPublic
from .contracts import (
    AccountDirectory,
    Credentials,
    PasswordHasher,
    TokenCodec,
    VerifiedIdentity,
)

logger = logging.getLogger(__name__)


class RegistrationService:
    """Creates accounts after a uniqueness check."""

    def __init__(self, directory: AccountDirectory, hasher: PasswordHasher) -> None:
        self._directory = directory
        self._hasher = hasher

    def register(self, credentials: Credentials) -> AccountPublic:
        """Hash the password and persist a new account.

        Raises ``ValidationError`` for missing fields and ``DuplicateEmail`` when
        the address is taken, including when a concurrent registration wins the
        insert.
        """
        if not credentials.is_complete():
            raise ValidationError()
        if self._directory.find_by_email(credentials.email) is not None:
            logger.info("registration rejected: email already registered")
            raise DuplicateEmail()

        password_hash = self._hasher.hash(credentials.password)
        try:
            account = self._directory.create(credentials.email, password_hash)
        except DuplicateEmail:
            logger.info("registration rejected: lost insert race on email")
            raise
        logger.info("account registered id=%s", account.id)
        return account.to_public()


class AuthenticationService:
    """Checks credentials and issues bearer tokens."""

    def __init__(
        self,
        directory: AccountDirectory,
        hasher: PasswordHasher,
        tokens: TokenCodec,
    ) -> None:
        self._directory = directory
        self._hasher = hasher
        self._tokens = tokens
        # Verified against when the email is unknown, so both rejection
        # paths cost one hash check.
        self._dummy_hash = hasher.hash(secrets.token_urlsafe(16))

    def authenticate(self, credentials: Credentials) -> str:
        """Return a bearer token for valid credentials, else raise ``InvalidCredentials``."""
        if not credentials.is_complete():
            raise ValidationError()

        account = self._directory.find_by_email(credentials.email)
        if account is None:
            self._hasher.verify(credentials.password, self._dummy_hash)
            logger.debug("login rejected: unknown account")
            raise InvalidCredentials()
        if not self._hasher.verify(credentials.password, account.password_hash):
            logger.debug("login rejected: password mismatch for id=%s", account.id)
            raise InvalidCredentials()

        token = self._tokens.issue(account.id)
        logger.info("login succeeded id=%s", account.id)
        return token


class ProfileService:
    def __init__(self, directory: AccountDirectory) -> None:
        self._directory = directory

    def get_profile(self, identity: VerifiedIdentity) -> AccountPublic:
        """Resolve the verified subject to its public account data."""
        account = self._directory.find_by_id(identity.account_id)
        if account is None:
            raise NotFound()
        return account
