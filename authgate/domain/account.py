from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class Account:
    """Stored account row, including the password hash."""

    id: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime

    def to_public(self) -> "AccountPublic":
        return AccountPublic(id=self.id, email=self.email, created_at=self.created_at)


@dataclass(slots=True, frozen=True)
class AccountPublic:
    """Account projection that is safe to hand to handlers and clients."""

    id: str
    email: str
    created_at: datetime
