# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - An in-memory stand-in for the Supabase client that records every query
#   builder call and returns scripted rows
# - TestClient fixtures with auth dependencies overridden
# =============================================================================

import os
from uuid import UUID

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_NOTIFICATION_EMAIL", "admin@example.com")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from app.auth.models import AuthUser, CurrentEmployee
from lib.supabase_client import SupabaseClient
from workers.celery_app import celery_app

# Celery's current app is thread-local; TestClient runs endpoints in another
# thread, so make the project app the process default for shared_task lookups.
celery_app.set_default()

ADMIN_USER_ID = UUID("11111111-1111-1111-1111-111111111111")
STAFF_USER_ID = UUID("22222222-2222-2222-2222-222222222222")

MUTATIONS = ("insert", "update", "upsert", "delete")


# =============================================================================
# Fake Supabase Client
# =============================================================================

class FakeResponse:
    """Mimics postgrest's APIResponse: .data and .count."""

    def __init__(self, data=None, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """
    Chainable query builder that records calls.

    Every builder method returns self; execute() asks the owning client for
    the next scripted response for (table, operation).
    """

    BUILDER_METHODS = {
        "select", "eq", "neq", "in_", "ilike", "gte", "lte", "lt", "gt",
        "or_", "is_", "order", "range", "limit", "single", "match",
        *MUTATIONS,
    }

    def __init__(self, client: "FakeSupabase", table: str):
        self.client = client
        self.table = table
        self.calls: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name):
        if name not in self.BUILDER_METHODS:
            raise AttributeError(name)

        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return method

    @property
    def not_(self):
        self.calls.append(("not_", (), {}))
        return self

    @property
    def operation(self) -> str:
        for name, _, _ in self.calls:
            if name in MUTATIONS:
                return name
        return "select"

    def args_of(self, name: str) -> list[tuple]:
        """Positional args of every call to `name`, in order."""
        return [args for call, args, _ in self.calls if call == name]

    def kwargs_of(self, name: str) -> list[dict]:
        return [kwargs for call, _, kwargs in self.calls if call == name]

    def execute(self):
        return self.client._respond(self)


class FakeRpc:
    def __init__(self, client: "FakeSupabase", name: str, params: dict):
        self.client = client
        self.name = name
        self.params = params

    def execute(self):
        result = self.client.rpc_results.get(self.name)
        if isinstance(result, Exception):
            raise result
        return FakeResponse(data=result)


class FakeSupabase:
    """
    In-memory stand-in for supabase.Client.

    Usage:
        fake.on("employees", data=[{"employee_id": 1}])
        fake.on("schedules", "update", data=[...])
        fake.on("employees", error=Exception("PGRST116"))
        fake.rpc_results["calculate_available_sick_time"] = 12.5
    """

    def __init__(self):
        self.queries: list[FakeQuery] = []
        self.rpc_calls: list[tuple[str, dict]] = []
        self.rpc_results: dict = {}
        self._scripts: dict[tuple[str, str], list] = {}

    def on(self, table: str, operation: str = "select", data=None, count=None, error=None):
        """Queue the response for the next matching execute()."""
        entry = error if error is not None else FakeResponse(data, count)
        self._scripts.setdefault((table, operation), []).append(entry)
        return self

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query

    def rpc(self, name: str, params: dict | None = None) -> FakeRpc:
        self.rpc_calls.append((name, params or {}))
        return FakeRpc(self, name, params or {})

    def _respond(self, query: FakeQuery):
        queue = self._scripts.get((query.table, query.operation))
        if not queue:
            return FakeResponse([], 0)
        entry = queue.pop(0)
        if isinstance(entry, Exception):
            raise entry
        return entry

    def queries_for(self, table: str, operation: str | None = None) -> list[FakeQuery]:
        return [
            q for q in self.queries
            if q.table == table and (operation is None or q.operation == operation)
        ]


class NoRowsError(Exception):
    """What postgrest raises for .single() with zero rows."""

    def __init__(self):
        super().__init__({"code": "PGRST116", "message": "JSON object requested, multiple (or no) rows returned"})


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_supabase():
    """Install a FakeSupabase as the SupabaseClient singleton."""
    fake = FakeSupabase()
    previous = SupabaseClient._instance
    SupabaseClient._instance = fake
    yield fake
    SupabaseClient._instance = previous


@pytest.fixture
def admin_user():
    return AuthUser(
        id=ADMIN_USER_ID,
        email="manager@example.com",
        role="admin",
        full_name="Morgan Manager",
    )


@pytest.fixture
def admin_employee():
    return CurrentEmployee(
        employee_id=1,
        user_uuid=ADMIN_USER_ID,
        name="Morgan",
        role="admin",
        email="manager@example.com",
        department="Operations",
        lanid="MMANAGER",
        status="active",
    )


@pytest.fixture
def staff_user():
    return AuthUser(id=STAFF_USER_ID, email="clerk@example.com", role="user", full_name="Casey Clerk")


@pytest.fixture
def staff_employee():
    return CurrentEmployee(
        employee_id=2,
        user_uuid=STAFF_USER_ID,
        name="Casey",
        role="user",
        email="clerk@example.com",
        department="Sales",
        lanid="CCLERK",
        status="active",
    )


def _client_for(user: AuthUser, employee: CurrentEmployee):
    from fastapi.testclient import TestClient

    from app.auth.dependencies import get_current_employee, get_current_user
    from app.main import app

    async def override_user():
        return user

    async def override_employee():
        return employee

    app.dependency_overrides[get_current_user] = override_user
    app.dependency_overrides[get_current_employee] = override_employee
    return app, TestClient(app)


@pytest.fixture
def admin_client(fake_supabase, admin_user, admin_employee):
    """TestClient authenticated as an admin."""
    app, client = _client_for(admin_user, admin_employee)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def staff_client(fake_supabase, staff_user, staff_employee):
    """TestClient authenticated as a regular employee."""
    app, client = _client_for(staff_user, staff_employee)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_supabase):
    from fastapi.testclient import TestClient

    from app.main import app

    app.dependency_overrides.clear()
    return TestClient(app)
