"""
tests/conftest.py -- Shared test fixtures for the umovies test suite.

This module provides:
  - make_account_store(): isolated named shared-memory account DB
  - make_catalog_store(): isolated named shared-memory catalog DB
  - _patch_lifespan(): wires test stores, issuer and gate into app.state
  - api_client: TestClient over the real app with a seeded catalog and a
    known signing secret

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

Environment variables must be set before any api/ import: DEBUG so Settings
auto-generates a SECRET_KEY, ALLOWED_HOSTS so TrustedHostMiddleware accepts
the TestClient host, and generous rate limits so repeated logins in one
module are not throttled.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any api/ or core/ import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")
os.environ.setdefault("REGISTER_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.gate import AccessGate
from auth.store import AccountStore
from auth.tokens import TokenIssuer, TokenVerifier
from catalog.store import CatalogStore

TEST_SECRET = "test-signing-secret-0123456789abcdef"

CATALOG_FIXTURES = {
    "top_rated": [{"id": "tr1", "title": "The Godfather"}, {"id": "tr2", "title": "Parasite"}],
    "trending": [{"id": "tn1", "title": "Dune"}],
    "originals": [{"id": "or1", "title": "Stranger Things"}],
    "popular": [{"id": "po1", "title": "Inception"}, {"id": "po2", "title": "Heat"}],
    "movies": [
        {"id": "m1", "title": "Heat", "year": 1995},
        {"id": "m2", "title": "The Heat", "year": 2013},
        {"id": "m3", "title": "Up", "year": 2009},
        {"id": "m4", "title": "100% Wolf", "year": 2020},
    ],
}

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _memory_url(prefix: str) -> str:
    return f"sqlite:///file:{prefix}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


def make_account_store() -> AccountStore:
    return AccountStore(_memory_url("test_accounts"))


def make_catalog_store(seed: bool = True) -> CatalogStore:
    store = CatalogStore(_memory_url("test_catalog"))
    if seed:
        for collection, docs in CATALOG_FIXTURES.items():
            for doc in docs:
                store.add_document(collection, doc)
    return store


def _patch_lifespan(account_store: AccountStore, catalog: CatalogStore):
    """Return a lifespan that wires pre-built test collaborators into app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.account_store = account_store
        app.state.catalog = catalog
        app.state.token_issuer = TokenIssuer(TEST_SECRET)
        app.state.gate = AccessGate(TokenVerifier(TEST_SECRET))
        app.state.bcrypt_rounds = 10
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def account_store() -> Generator[AccountStore, None, None]:
    store = make_account_store()
    yield store
    store.close()


@pytest.fixture
def catalog_store() -> Generator[CatalogStore, None, None]:
    store = make_catalog_store()
    yield store
    store.close()


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def verifier() -> TokenVerifier:
    return TokenVerifier(TEST_SECRET)


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """Yield a TestClient over the real app with isolated in-memory stores.

    One client per test module; tests register accounts with unique emails so
    they do not collide within the module.
    """
    account_store = make_account_store()
    catalog = make_catalog_store()
    app.router.lifespan_context = _patch_lifespan(account_store, catalog)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    account_store.close()
    catalog.close()


@pytest.fixture
def unique_email():
    """Factory for emails that never collide inside a shared module-scoped store."""

    def _make(prefix: str = "user") -> str:
        return f"{prefix}-{uuid.uuid4().hex[:10]}@example.com"

    return _make
