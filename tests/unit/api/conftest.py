"""Fixtures for API tests: app wired to a SQLite-backed AuditService, AsyncClient, admin headers."""

import pytest
from httpx import ASGITransport, AsyncClient

from audit_trail.config.settings import AppSettings, get_settings
from audit_trail.main import app

ADMIN_KEY = "test-admin-key-0123456789"


@pytest.fixture
def app_with_overrides(audit_service, ledger_store):
    """App with the shared service, store and settings overridden for testing."""
    from audit_trail.api import dependencies

    app.dependency_overrides[dependencies.get_audit_service] = lambda: audit_service
    app.dependency_overrides[dependencies.get_ledger_store] = lambda: ledger_store
    app.dependency_overrides[get_settings] = lambda: AppSettings(admin_api_key=ADMIN_KEY)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app_with_overrides):
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}
