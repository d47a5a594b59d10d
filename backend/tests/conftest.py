"""Shared test fixtures for the Task Planner backend tests."""

import os
import sys

import pytest

# Ensure backend is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SUPABASE_URL", "https://project.supabase.test")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("OPENROUTER_API_KEY", "")

from app.auth.provider import AuthProviderError, AuthSession, AuthUser, SignUpResult
from app.config import Settings
from app.db.database import create_db_and_tables
from app.llm.mock_client import MockChatClient
from app.main import create_app
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

ALICE_ID = "11111111-1111-4111-8111-111111111111"
BOB_ID = "22222222-2222-4222-8222-222222222222"


class FakeAuthClient:
    """In-memory stand-in for SupabaseAuthClient.

    Accounts are email -> (password, user); live sessions are token -> user.
    ``calls`` records (method, args) for assertions.
    """

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, AuthUser]] = {}
        self.tokens: dict[str, AuthUser] = {}
        self.refresh_tokens: dict[str, AuthUser] = {}
        self.calls: list[tuple[str, tuple]] = []
        self.fail_with: AuthProviderError | None = None

    def add_user(self, user_id: str, email: str, password: str = "secret123", token: str | None = None) -> AuthUser:
        user = AuthUser(id=user_id, email=email)
        self.accounts[email] = (password, user)
        if token:
            self.tokens[token] = user
        return user

    def _session(self, user: AuthUser) -> AuthSession:
        access = f"access-{user.id}-{len(self.tokens)}"
        refresh = f"refresh-{user.id}-{len(self.refresh_tokens)}"
        self.tokens[access] = user
        self.refresh_tokens[refresh] = user
        return AuthSession(access_token=access, refresh_token=refresh, expires_in=3600, user=user)

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def sign_in_with_password(self, email, password):
        self.calls.append(("sign_in_with_password", (email,)))
        self._maybe_fail()
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthProviderError("Invalid login credentials", status_code=400)
        return self._session(account[1])

    async def refresh_session(self, refresh_token):
        self.calls.append(("refresh_session", (refresh_token,)))
        user = self.refresh_tokens.pop(refresh_token, None)
        if user is None:
            raise AuthProviderError("Invalid Refresh Token", status_code=400)
        return self._session(user)

    async def sign_up(self, email, password, redirect_to=None):
        self.calls.append(("sign_up", (email, redirect_to)))
        self._maybe_fail()
        if email in self.accounts:
            raise AuthProviderError("User already registered", status_code=422)
        user = self.add_user(f"00000000-0000-4000-8000-{len(self.accounts):012d}", email, password)
        return SignUpResult(user=user)

    async def sign_out(self, access_token):
        self.calls.append(("sign_out", (access_token,)))
        self._maybe_fail()
        self.tokens.pop(access_token, None)

    async def reset_password_for_email(self, email, redirect_to=None):
        self.calls.append(("reset_password_for_email", (email, redirect_to)))
        self._maybe_fail()

    async def get_user(self, access_token):
        self.calls.append(("get_user", (access_token,)))
        return self.tokens.get(access_token)

    async def update_user(self, access_token, password):
        self.calls.append(("update_user", (access_token,)))
        user = self.tokens.get(access_token)
        if user is None:
            raise AuthProviderError("Invalid JWT", status_code=401)
        self.accounts[user.email] = (password, user)
        return user


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    return engine


@pytest.fixture
def fake_auth():
    auth = FakeAuthClient()
    auth.add_user(ALICE_ID, "alice@example.com", token="alice-token")
    auth.add_user(BOB_ID, "bob@example.com", token="bob-token")
    return auth


@pytest.fixture
def mock_ai():
    return MockChatClient()


@pytest.fixture
def test_settings():
    return Settings(
        supabase_url="https://project.supabase.test",
        supabase_key="test-anon-key",
        openrouter_api_key="",
        site_url="https://tasks.example.com",
        database_url="sqlite:///:memory:",
    )


@pytest.fixture
def app(test_settings, engine, fake_auth, mock_ai):
    return create_app(test_settings, engine=engine, auth_client=fake_auth, ai_client=mock_ai)


@pytest.fixture
def make_client(app):
    """Factory: a TestClient carrying the given session cookie (None = anonymous)."""

    def _make(token: str | None = None) -> TestClient:
        client = TestClient(app, follow_redirects=False)
        if token:
            client.cookies.set("sb-access-token", token)
        return client

    return _make


@pytest.fixture
def anon_client(make_client):
    return make_client()


@pytest.fixture
def alice(make_client):
    return make_client("alice-token")


@pytest.fixture
def bob(make_client):
    return make_client("bob-token")
