"""
tests/conftest.py -- Shared test fixtures for Admissionshala unit and integration tests.

This module provides:
  - make_test_stores(): creates isolated in-memory DBs for accounts + CMS
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - account_store / cms_store: fresh stores per test for unit tests
  - new_account: factory fixture creating accounts with the shared PASSWORD
  - api: module-scoped ApiContext (TestClient plus one account per role)

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs route handlers in a thread pool. Plain :memory: DBs
are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

DEBUG and RATE_LIMIT_ENABLED must be set before any project import:
get_settings() is cached on first call, and api.limiter reads it at import.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

# CRITICAL: Set before any auth/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import Account, Permission, Role
from auth.store import AccountStore
from auth.tokens import create_access_token, hash_password
from cms.media import LocalMediaStore
from cms.store import CMSStore

PASSWORD = "testpass123"

# One bcrypt run for the whole session; accounts are created with the hash.
_PASSWORD_HASH = hash_password(PASSWORD)


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def make_test_stores(db_suffix: str) -> tuple[AccountStore, CMSStore]:
    """Create isolated named shared-memory SQLite stores.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    accounts_url = f"sqlite:///file:test_accounts_{db_suffix}?mode=memory&cache=shared&uri=true"
    cms_url = f"sqlite:///file:test_cms_{db_suffix}?mode=memory&cache=shared&uri=true"
    return AccountStore(db_url=accounts_url), CMSStore(db_url=cms_url)


def make_account(
    store: AccountStore,
    email: str,
    role: str = Role.user.value,
    permissions: list[str] | None = None,
    name: str = "Test Account",
) -> Account:
    account_id = store.create_account(
        Account(
            name=name,
            email=email,
            role=role,
            permissions=permissions or [],
            hashed_password=_PASSWORD_HASH,
        )
    )
    return store.get_by_id(account_id)


def _patch_lifespan(accounts: AccountStore, cms: CMSStore, upload_dir: str):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores into app.state so TestClient routes see
    isolated test DBs rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.account_store = accounts
        app.state.cms_store = cms
        app.state.media_store = LocalMediaStore(upload_dir, "/media")
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Unit-test fixtures -- a fresh database per test
# ---------------------------------------------------------------------------


@pytest.fixture
def account_store() -> Generator[AccountStore, None, None]:
    store = AccountStore(db_url=f"sqlite:///file:unit_accounts_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")
    yield store
    store.close()


@pytest.fixture
def new_account(account_store):
    """Factory: new_account(email, role=..., permissions=..., name=...) -> Account.

    Every account created this way has the password PASSWORD.
    """

    def _create(email: str, **kwargs) -> Account:
        return make_account(account_store, email, **kwargs)

    return _create


@pytest.fixture
def cms_store() -> Generator[CMSStore, None, None]:
    store = CMSStore(db_url=f"sqlite:///file:unit_cms_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")
    yield store
    store.close()


# ---------------------------------------------------------------------------
# Integration fixture -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@dataclass
class ApiContext:
    """Everything an integration test needs: the client, the stores, and one
    signed-in account per role.

    moderator        -- role moderator with explicit course + analytics grants
    bare_moderator   -- role moderator with no explicit grants
    """

    client: TestClient
    accounts: AccountStore
    cms: CMSStore
    users: dict[str, Account] = field(default_factory=dict)
    tokens: dict[str, str] = field(default_factory=dict)

    def headers(self, who: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.tokens[who]}"}

    def id_of(self, who: str) -> int:
        return self.users[who].id


@pytest.fixture(scope="module")
def api(request, tmp_path_factory) -> Generator[ApiContext, None, None]:
    """Yield an ApiContext bound to isolated in-memory stores.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers, guards and exception handlers.
    """
    suffix = request.module.__name__.replace(".", "_")
    accounts, cms = make_test_stores(suffix)
    upload_dir = str(tmp_path_factory.mktemp("uploads"))

    specs = {
        "admin": (Role.admin.value, []),
        "moderator": (
            Role.moderator.value,
            [Permission.create_course.value, Permission.edit_course.value, Permission.view_analytics.value],
        ),
        "bare_moderator": (Role.moderator.value, []),
        "user": (Role.user.value, []),
    }
    ctx_users: dict[str, Account] = {}
    ctx_tokens: dict[str, str] = {}
    for who, (role, perms) in specs.items():
        account = make_account(accounts, f"{who}@{suffix}.test", role=role, permissions=perms, name=who.title())
        ctx_users[who] = account
        ctx_tokens[who] = create_access_token(account.id, account.email, account.role, expire_seconds=3600)

    app.router.lifespan_context = _patch_lifespan(accounts, cms, upload_dir)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiContext(client=client, accounts=accounts, cms=cms, users=ctx_users, tokens=ctx_tokens)

    accounts.close()
    cms.close()
