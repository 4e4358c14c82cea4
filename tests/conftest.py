import operator
import re
import time
import uuid
from typing import Any, Callable, Dict, List

import jwt
import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.config import settings
from app.core.dependencies import get_neynar_client, get_quick_auth_verifier
from app.database.supabase_client import get_service_supabase, get_supabase
from app.main import app, limiter
from app.modules.auth.neynar_client import NeynarClient
from app.modules.auth.quick_auth import QuickAuthVerifier
from app.modules.auth.tokens import issue_session_token
from app.modules.users.schemas import UserProfile
from app.modules.users.service import UserService

QUICK_AUTH_SECRET = "quick-auth-test-secret-0123456789abcdef"
QUICK_AUTH_DOMAIN = "places.test"
QUICK_AUTH_ISSUER = "https://auth.farcaster.xyz"


class FakeResult:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


def _compare(stored: Any, value: Any, op: Callable) -> bool:
    try:
        return op(float(stored), float(value))
    except (TypeError, ValueError):
        return False


def _like_to_regex(pattern: str) -> str:
    """Postgres LIKE semantics: % and _ are wildcards, backslash escapes."""
    parts = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            parts.append(re.escape(next(chars, "\\")))
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "".join(parts)


class FakeQuery:
    """The slice of the supabase-py query builder the services use."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload = None
        self.columns = "*"
        self.filters: List[Callable[[Dict[str, Any]], bool]] = []
        self._limit = None
        self._order = None

    def select(self, columns: str = "*", **kwargs):
        self.columns = columns
        return self

    def insert(self, payload, **kwargs):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload, **kwargs):
        self.op, self.payload = "update", payload
        return self

    def delete(self, **kwargs):
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def ilike(self, column: str, pattern: str):
        regex = re.compile(_like_to_regex(pattern), re.IGNORECASE | re.DOTALL)
        self.filters.append(lambda row: isinstance(row.get(column), str) and bool(regex.fullmatch(row[column])))
        return self

    def gte(self, column: str, value: Any):
        self.filters.append(lambda row: _compare(row.get(column), value, operator.ge))
        return self

    def lte(self, column: str, value: Any):
        self.filters.append(lambda row: _compare(row.get(column), value, operator.le))
        return self

    def order(self, column: str, desc: bool = False, **kwargs):
        self._order = (column, desc)
        return self

    def limit(self, size: int, **kwargs):
        self._limit = size
        return self

    def execute(self) -> FakeResult:
        self.db.calls.append((self.table_name, self.op))
        if self.table_name in self.db.failing_tables:
            raise APIError({"message": f"relation \"{self.table_name}\" is unavailable", "code": "57P01"})
        rows = self.db.tables.setdefault(self.table_name, [])

        if self.op == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for payload in payloads:
                hook = self.db.before_insert.pop(self.table_name, None)
                if hook:
                    hook(self.db)
                for column in self.db.unique.get(self.table_name, ()):
                    if any(row.get(column) == payload.get(column) for row in rows):
                        raise APIError({
                            "message": f"duplicate key value violates unique constraint \"{self.table_name}_{column}_key\"",
                            "code": "23505",
                        })
                row = dict(payload)
                row.setdefault("id", str(uuid.uuid4()))
                rows.append(row)
                inserted.append(dict(row))
            return FakeResult(inserted)

        matched = [row for row in rows if all(f(row) for f in self.filters)]
        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResult([dict(row) for row in matched])
        if self.op == "delete":
            removed = {id(row) for row in matched}
            self.db.tables[self.table_name] = [row for row in rows if id(row) not in removed]
            return FakeResult([dict(row) for row in matched])

        if self._order:
            column, desc = self._order
            matched.sort(key=lambda row: (row.get(column) is None, str(row.get(column) or "")), reverse=desc)
        if self._limit is not None:
            matched = matched[:self._limit]
        if self.columns.strip() != "*":
            wanted = [c.strip() for c in self.columns.split(",")]
            return FakeResult([{c: row.get(c) for c in wanted} for row in matched])
        return FakeResult([dict(row) for row in matched])


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            "users": [], "places": [], "lists": [], "list_places": [],
        }
        self.unique = {"users": ("farcaster_id",)}
        self.failing_tables = set()
        self.before_insert: Dict[str, Callable] = {}
        self.calls = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(name, [])


@pytest.fixture
def quick_auth_token():
    def _token(fid=100, audience=QUICK_AUTH_DOMAIN, expires_in=300, secret=QUICK_AUTH_SECRET):
        now = int(time.time())
        return jwt.encode(
            {"sub": fid, "aud": audience, "iss": QUICK_AUTH_ISSUER, "iat": now, "exp": now + expires_in},
            secret,
            algorithm="HS256",
        )
    return _token


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def quick_auth_verifier():
    return QuickAuthVerifier(
        domain=QUICK_AUTH_DOMAIN,
        issuer=QUICK_AUTH_ISSUER,
        jwks_url="https://auth.invalid/jwks.json",
        key_resolver=lambda token: QUICK_AUTH_SECRET,
        algorithms=["HS256"],
    )


@pytest.fixture
def client(db, quick_auth_verifier):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    app.dependency_overrides[get_quick_auth_verifier] = lambda: quick_auth_verifier
    app.dependency_overrides[get_neynar_client] = lambda: NeynarClient(api_key=None)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(fid="100", handle="alice"):
        return UserService(db).reconcile(fid, UserProfile(handle=handle, display_name=handle.title()))
    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def headers_for():
    def _headers(user) -> Dict[str, str]:
        token = issue_session_token(user.id, user.farcaster_id, settings.session_secret, settings.session_ttl_seconds)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def auth_headers(user, headers_for):
    return headers_for(user)


@pytest.fixture(autouse=True)
def no_rate_limit(monkeypatch):
    monkeypatch.setattr(limiter, "enabled", False)
    yield
    limiter.reset()
