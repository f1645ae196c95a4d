from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from authgate.config import Settings
from authgate.domain.account import Account, AccountPublic
from authgate.errors import DuplicateEmail
from authgate.main import create_app

TEST_SECRET = "test-secret-key"


class FakeDirectory:
    """In-memory account directory with the store's unique-email behaviour."""

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._lock = threading.Lock()
        self.create_calls = 0

    def find_by_email(self, email: str) -> Account | None:
        for account in self._accounts.values():
            if account.email == email:
                return account
        return None

    def find_by_id(self, account_id: str) -> AccountPublic | None:
        account = self._accounts.get(account_id)
        return account.to_public() if account else None

    def create(self, email: str, password_hash: str) -> Account:
        with self._lock:
            self.create_calls += 1
            if self.find_by_email(email) is not None:
                raise DuplicateEmail()
            account = Account(
                id=str(uuid.uuid4()),
                email=email,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )
            self._accounts[account.id] = account
            return account

    def delete(self, account_id: str) -> None:
        self._accounts.pop(account_id, None)

    def count(self, email: str) -> int:
        return sum(1 for account in self._accounts.values() if account.email == email)


def make_settings(**overrides) -> Settings:
    values = dict(jwt_secret=TEST_SECRET, jwt_issuer="authgate-test", bcrypt_rounds=10, cors_origins=("*",))
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def api_client(settings, directory):
    """Provide a FastAPI test client backed by an isolated in-memory directory."""
    app = create_app(settings, directory=directory)
    with TestClient(app) as client:
        yield client, directory
