"""Database repository for account data."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from psycopg import errors as pg_errors
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import Account, AccountPublic
from .errors import DuplicateEmail

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS accounts (
    id UUID PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


class AccountRepository:
    """Postgres-backed account directory."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def ensure_schema(self) -> None:
        """Create the ``accounts`` table when it does not exist yet."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
                conn.commit()
        logger.info("accounts schema ensured")

    def find_by_email(self, email: str) -> Account | None:
        """Return the full account row for ``email``, hash included, or ``None``."""
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    """
                    SELECT id, email, password_hash, created_at
                    FROM accounts
                    WHERE email = %s
                    """,
                    (email,),
                )
                row = cur.fetchone()
                if not row:
                    return None
        return self._map_account(row)

    def find_by_id(self, account_id: str) -> AccountPublic | None:
        """Return the public projection of an account, never its password hash."""
        try:
            key = uuid.UUID(account_id)
        except (ValueError, TypeError, AttributeError):
            # Not a UUID, so it cannot match the primary key.
            return None
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    """
                    SELECT id, email, created_at
                    FROM accounts
                    WHERE id = %s
                    """,
                    (key,),
                )
                row = cur.fetchone()
                if not row:
                    return None
        return AccountPublic(id=str(row[0]), email=row[1], created_at=row[2])

    def create(self, email: str, password_hash: str) -> Account:
        """Insert a new account; the unique index on ``email`` settles concurrent duplicates."""
        account_id = uuid.uuid4()
        now = datetime.now(timezone.utc)
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        """
                        INSERT INTO accounts (id, email, password_hash, created_at)
                        VALUES (%s, %s, %s, %s)
                        RETURNING id, email, password_hash, created_at
                        """,
                        (account_id, email, password_hash, now),
                    )
                    row = cur.fetchone()
                    conn.commit()
        except pg_errors.UniqueViolation as exc:
            raise DuplicateEmail() from exc
        return self._map_account(row)

    def _map_account(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain ``Account`` dataclass."""
        return Account(
            id=str(row[0]),
            email=row[1],
            password_hash=row[2],
            created_at=row[3],
        )
