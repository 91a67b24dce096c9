"""
auth/store.py -- SQLAlchemy Core persistence layer for accounts.

Pattern: Repository + Data Mapper (same as catalog/store.py).
AccountStore is the repository; _row_to_account is the mapper.
Flow and route code never touches SQL directly.

Uniqueness:
  UNIQUE(email) and UNIQUE(subject_id) are enforced by the database. The
  registration flow pre-checks email as a fast path, but the constraint is
  the source of truth: two concurrent inserts with the same email produce
  exactly one row and one DuplicateEmailError.

Atomicity:
  insert() runs inside engine.begin() -- the row is committed whole or the
  transaction rolls back. No partial writes.

Errors:
  IntegrityError on email   -> DuplicateEmailError
  any other SQLAlchemyError -> StoreError
  No retries here; callers decide.

Security:
  All queries use bound parameters. No f-strings in SQL.
  Emails are lowercased before every read and write.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.errors import DuplicateEmailError, StoreError
from auth.models import Account

logger = logging.getLogger("umovies.auth.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_accounts = Table(
    "accounts",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("subject_id", String(36), nullable=False, unique=True),
    Column("username", String(20), nullable=False),
    Column("email", String(320), nullable=False, unique=True),
    Column("credential_hash", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def canonical_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AccountStore:
    """Repository for Account records.

    Usage:
        store = AccountStore("sqlite:///accounts.db")
        store.insert(Account(subject_id=..., username="alice1", email="a@x.com", credential_hash=...))
        account = store.find_by_email("a@x.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def find_by_email(self, email: str) -> Account | None:
        """Look up an account by email (case-insensitive). Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_accounts.select().where(_accounts.c.email == canonical_email(email))).fetchone()
        except SQLAlchemyError as exc:
            raise StoreError("account lookup by email failed") from exc
        return _row_to_account(row) if row is not None else None

    def find_by_id(self, subject_id: str) -> Account | None:
        """Look up an account by subject id. Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_accounts.select().where(_accounts.c.subject_id == subject_id)).fetchone()
        except SQLAlchemyError as exc:
            raise StoreError("account lookup by id failed") from exc
        return _row_to_account(row) if row is not None else None

    def insert(self, account: Account) -> Account:
        """Insert a new account atomically and return it with created_at set.

        Raises DuplicateEmailError if the email is already registered (including
        when a concurrent request won the race), StoreError on any other failure.
        """
        created_at = _now_iso()
        email = canonical_email(account.email)
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    _accounts.insert().values(
                        subject_id=account.subject_id,
                        username=account.username,
                        email=email,
                        credential_hash=account.credential_hash,
                        created_at=created_at,
                    )
                )
        except IntegrityError as exc:
            if self.find_by_email(email) is not None:
                raise DuplicateEmailError(email) from exc
            raise StoreError("account insert violated a constraint") from exc
        except SQLAlchemyError as exc:
            raise StoreError("account insert failed") from exc
        return Account(
            subject_id=account.subject_id,
            username=account.username,
            email=email,
            credential_hash=account.credential_hash,
            created_at=created_at,
        )

    def count(self) -> int:
        """Return the number of registered accounts."""
        try:
            with self.engine.connect() as conn:
                result = conn.execute(select(func.count()).select_from(_accounts)).scalar()
        except SQLAlchemyError as exc:
            raise StoreError("account count failed") from exc
        return result or 0

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(select(1))
        except SQLAlchemyError:
            logger.exception("Account store health check failed")
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_account(row) -> Account:
    return Account(
        subject_id=row.subject_id,
        username=row.username,
        email=row.email,
        credential_hash=row.credential_hash,
        created_at=row.created_at,
    )
