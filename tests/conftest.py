from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_auth_service
from app.database.store import BackingStore, StoreError, _is_membership, get_store
from app.main import app
from app.modules.auth.service import AuthService, clear_auth_cache


class FakeStore(BackingStore):
    """In-memory backing store with the same filter semantics as SupabaseStore."""

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.fail_writes = False
        self.fail_reads = False
        self.calls: List[tuple] = []
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _now(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def seed(self, table: str, **row: Any) -> Dict[str, Any]:
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._now())
        self.tables[table].append(row)
        return dict(row)

    @staticmethod
    def _matches(row: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
        for column, value in (filters or {}).items():
            if _is_membership(value):
                if row.get(column) not in value:
                    return False
            elif row.get(column) != value:
                return False
        return True

    def select(self, table, filters=None, order=None, desc=True, limit=None, columns="*"):
        self.calls.append(("select", table))
        if self.fail_reads:
            raise StoreError(f"read from {table} failed", table)
        rows = [dict(r) for r in self.tables[table] if self._matches(r, filters)]
        if order:
            rows.sort(key=lambda r: r.get(order) or "", reverse=desc)
        if limit is not None:
            rows = rows[:limit]
        return rows

    def insert(self, table, row):
        self.calls.append(("insert", table))
        if self.fail_writes:
            raise StoreError(f"insert into {table} failed", table)
        return self.seed(table, **dict(row))

    def update(self, table, patch, filters):
        self.calls.append(("update", table))
        if self.fail_writes:
            raise StoreError(f"update on {table} failed", table)
        updated = []
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(patch)
                updated.append(dict(row))
        return updated


class FakeSubscription:
    def __init__(self, auth: "FakeAuth", callback) -> None:
        self.auth = auth
        self.callback = callback

    def unsubscribe(self) -> None:
        self.auth.subscribers.remove(self)


class FakeAdmin:
    def __init__(self, auth: "FakeAuth") -> None:
        self.auth = auth

    def sign_out(self, jwt, scope="global"):
        self.auth.signed_out.append(jwt)


class FakeAuth:
    """Stand-in for the Supabase auth client (sync API).

    users, tokens, sent and signed_out model the auth server and are shared with
    clones; session and subscribers belong to one client instance.
    """

    def __init__(self) -> None:
        self.users: Dict[str, tuple] = {}
        self.tokens: Dict[str, SimpleNamespace] = {}
        self.subscribers: List[FakeSubscription] = []
        self.session = None
        self.sent: List[tuple] = []
        self.signed_out: List[str] = []
        self.admin = FakeAdmin(self)

    def clone(self) -> "FakeAuth":
        other = FakeAuth()
        other.users = self.users
        other.tokens = self.tokens
        other.sent = self.sent
        other.signed_out = self.signed_out
        return other

    def create_user(self, email: str, password: str, full_name: str = "") -> SimpleNamespace:
        user = SimpleNamespace(
            id=str(uuid.uuid4()),
            email=email,
            user_metadata={"full_name": full_name} if full_name else {},
            created_at="2025-01-01T00:00:00+00:00",
        )
        self.users[email] = (password, user)
        return user

    def sign_up(self, credentials):
        if credentials["email"] in self.users:
            raise Exception("User already registered")
        full_name = credentials.get("options", {}).get("data", {}).get("full_name", "")
        user = self.create_user(credentials["email"], credentials["password"], full_name)
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_password(self, credentials):
        password, user = self.users.get(credentials["email"], (None, None))
        if user is None or password != credentials["password"]:
            raise Exception("Invalid login credentials")
        token = f"token-{user.id}"
        self.tokens[token] = user
        self.session = SimpleNamespace(access_token=token, user=user)
        self.emit("SIGNED_IN", self.session)
        return SimpleNamespace(user=user, session=self.session)

    def get_user(self, jwt=None):
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.tokens[jwt])

    def reset_password_for_email(self, email, options=None):
        self.sent.append(("reset", email, options))

    def sign_in_with_otp(self, credentials):
        self.sent.append(("otp", credentials["email"], credentials.get("options")))

    def get_session(self):
        return self.session

    def on_auth_state_change(self, callback):
        subscription = FakeSubscription(self, callback)
        self.subscribers.append(subscription)
        return subscription

    def emit(self, event: str, session) -> None:
        for subscription in list(self.subscribers):
            subscription.callback(event, session)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_supabase() -> SimpleNamespace:
    return SimpleNamespace(auth=FakeAuth())


@pytest.fixture
def client(store, fake_supabase):
    clear_auth_cache()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_auth_service] = lambda: AuthService(
        fake_supabase, auth_client_factory=lambda: SimpleNamespace(auth=fake_supabase.auth.clone())
    )
    yield TestClient(app)
    app.dependency_overrides.clear()
    clear_auth_cache()


@pytest.fixture
def sign_in(fake_supabase):
    """Create a user and return (user_id, auth headers)."""

    def _sign_in(email: str = "ada@example.com", full_name: str = "Ada Lovelace"):
        user = fake_supabase.auth.create_user(email, "secret123", full_name)
        token = f"token-{user.id}"
        fake_supabase.auth.tokens[token] = user
        return user.id, {"Authorization": f"Bearer {token}"}

    return _sign_in
