"""Domain-level contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .account import Account, AccountPublic


@dataclass(slots=True)
class Credentials:
    """Email and plaintext password as submitted by a client."""

    email: str | None
    password: str | None = field(repr=False)

    def is_complete(self) -> bool:
        return bool(self.email) and bool(self.password)


@dataclass(slots=True, frozen=True)
class VerifiedIdentity:
    """Request-scoped identity attached by the access gate."""

    account_id: str


class PasswordHasher(Protocol):
    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, hashed: str) -> bool: ...


class TokenCodec(Protocol):
    def issue(self, subject_id: str) -> str: ...

    def verify(self, token: str) -> str: ...


class AccountDirectory(Protocol):
    """Query contract the flows need from the account store."""

    def find_by_email(self, email: str) -> Account | None: ...

    def find_by_id(self, account_id: str) -> AccountPublic | None: ...

    def create(self, email: str, password_hash: str) -> Account: ...
