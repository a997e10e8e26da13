"""
auth/store.py -- SQLAlchemy Core persistence layer for accounts.

Pattern: Repository + Data Mapper (same as cms/store.py).
AccountStore is the repository; _row_to_account is the mapper.
Route and dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.
  Plaintext passwords never reach the table: every write path routes the
  submitted secret through hash_if_modified().

Accounts are never deleted. deactivate() flips is_active; the row stays so
created_by/author references on content remain resolvable.

Layer rule: no imports from api/ or cms/.
"""

from __future__ import annotations

import json
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, and_, func, select
from sqlalchemy.engine import Engine

from auth.models import Account, Role
from auth.tokens import hash_if_modified
from core.config import get_settings
from core.db import make_engine, now_iso
from core.pagination import PageResult, contains_any, fetch_page, order_clause

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_accounts = Table(
    "accounts",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("role", String(20), nullable=False, server_default="user"),
    Column("permissions", Text, nullable=False, server_default="[]"),  # JSON array
    Column("is_active", Integer, nullable=False, server_default="1"),
    Column("avatar", Text, nullable=False, server_default=""),
    Column("phone", String(15)),
    Column("last_login", String(32)),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

# API sort keys -> column names
_SORTABLE = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "name": "name",
    "email": "email",
    "role": "role",
    "lastLogin": "last_login",
}

# Fields update_account() accepts. email is the identity key and is immutable.
_UPDATABLE = {"name", "role", "permissions", "is_active", "avatar", "phone", "password", "last_login"}


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AccountStore:
    """Repository for Account entities.

    Usage:
        store = AccountStore()
        account_id = store.create_account(Account(name="Asha", email="a@x.in"), password="secret1")
        account = store.get_by_email("a@x.in")
        store.close()
    """

    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_account(self, account: Account, password: Optional[str] = None) -> int:
        """Insert a new account and return its assigned database ID.

        The plaintext password (if given) is hashed on the way in. An account
        carrying an existing bcrypt hash and no password keeps that hash.

        Raises sqlalchemy.exc.IntegrityError if the email already exists.
        Callers translate that into Conflict.
        """
        hashed = hash_if_modified(account.hashed_password, password)
        if hashed is None:
            raise ValueError("An account needs a password.")
        now = now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _accounts.insert().values(
                    name=account.name,
                    email=account.email.lower(),
                    hashed_password=hashed,
                    role=account.role,
                    permissions=json.dumps(list(account.permissions)),
                    is_active=1 if account.is_active else 0,
                    avatar=account.avatar or "",
                    phone=account.phone,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def update_account(self, account_id: int, **fields) -> bool:
        """Update mutable fields on an existing account.

        Accepted fields: name, role, permissions, is_active, avatar, phone,
        last_login, password. password is plaintext; it is hashed only if it
        differs from the stored value.

        Returns True if a row was updated, False if account_id was not found.
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unknown account fields: {unknown!r}")
        current = self.get_by_id(account_id)
        if current is None:
            return False
        values: dict = {}
        for key, value in fields.items():
            if key == "password":
                values["hashed_password"] = hash_if_modified(current.hashed_password, value)
            elif key == "permissions":
                values["permissions"] = json.dumps(list(value))
            elif key == "is_active":
                values["is_active"] = 1 if value else 0
            else:
                values[key] = value
        values["updated_at"] = now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(_accounts.update().where(_accounts.c.id == account_id).values(**values))
            conn.commit()
        return result.rowcount > 0

    def deactivate(self, account_id: int) -> bool:
        """Soft-delete: mark the account inactive. The row is kept."""
        return self.update_account(account_id, is_active=False)

    def update_last_login(self, account_id: int) -> None:
        """Stamp the current UTC timestamp as last_login."""
        with self.engine.connect() as conn:
            conn.execute(_accounts.update().where(_accounts.c.id == account_id).values(last_login=now_iso()))
            conn.commit()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def has_accounts(self) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_accounts)).scalar()
        return (result or 0) > 0

    def get_by_id(self, account_id: int) -> Account | None:
        with self.engine.connect() as conn:
            row = conn.execute(_accounts.select().where(_accounts.c.id == account_id)).fetchone()
        return _row_to_account(row) if row is not None else None

    def get_by_email(self, email: str) -> Account | None:
        """Look up an account by email (case-insensitive; emails are stored lower-cased)."""
        with self.engine.connect() as conn:
            row = conn.execute(_accounts.select().where(_accounts.c.email == email.lower())).fetchone()
        return _row_to_account(row) if row is not None else None

    def list_accounts(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "desc",
    ) -> PageResult[Account]:
        """Return one page of accounts matching the filters.

        search matches name or email, case-insensitively.
        """
        conditions = []
        if role:
            conditions.append(_accounts.c.role == role)
        if is_active is not None:
            conditions.append(_accounts.c.is_active == (1 if is_active else 0))
        if search:
            conditions.append(contains_any(search, _accounts.c.name, _accounts.c.email))
        return fetch_page(
            self.engine,
            _accounts,
            _row_to_account,
            page=page,
            limit=limit,
            where=and_(*conditions) if conditions else None,
            order_by=order_clause(_accounts, sort_by, sort_order, _SORTABLE),
        )

    def count_accounts(
        self,
        *,
        is_active: Optional[bool] = True,
        role: Optional[str] = None,
        since: Optional[str] = None,
    ) -> int:
        stmt = select(func.count()).select_from(_accounts)
        if is_active is not None:
            stmt = stmt.where(_accounts.c.is_active == (1 if is_active else 0))
        if role:
            stmt = stmt.where(_accounts.c.role == role)
        if since:
            stmt = stmt.where(_accounts.c.created_at >= since)
        with self.engine.connect() as conn:
            return conn.execute(stmt).scalar() or 0

    def count_active_admins(self) -> int:
        """Used by the admin user routes to refuse deactivating the last admin."""
        return self.count_accounts(is_active=True, role=Role.admin.value)

    def counts_by_role(self) -> list[dict]:
        """Active accounts grouped by role, largest group first."""
        stmt = (
            select(_accounts.c.role, func.count().label("n"))
            .where(_accounts.c.is_active == 1)
            .group_by(_accounts.c.role)
            .order_by(func.count().desc())
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [{"role": r.role, "count": r.n} for r in rows]

    def daily_signups(self, since: str) -> list[dict]:
        """Active accounts created per UTC day since the given ISO timestamp."""
        day = func.substr(_accounts.c.created_at, 1, 10)
        stmt = (
            select(day.label("date"), func.count().label("n"))
            .where(and_(_accounts.c.created_at >= since, _accounts.c.is_active == 1))
            .group_by(day)
            .order_by(day)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [{"date": r.date, "count": r.n} for r in rows]

    def latest(self, limit: int = 5) -> list[Account]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                _accounts.select()
                .where(_accounts.c.is_active == 1)
                .order_by(_accounts.c.created_at.desc(), _accounts.c.id.desc())
                .limit(limit)
            ).fetchall()
        return [_row_to_account(r) for r in rows]

    def ping(self) -> bool:
        """Cheap connectivity probe for the health endpoint."""
        with self.engine.connect() as conn:
            conn.execute(select(1))
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_account(row) -> Account:
    return Account(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        role=row.role,
        permissions=json.loads(row.permissions or "[]"),
        is_active=bool(row.is_active),
        avatar=row.avatar or "",
        phone=row.phone,
        last_login=row.last_login,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
