# Ensure src/ is at sys.path[0] when pytest runs from a checkout without an install
import sys
from pathlib import Path

_src = Path(__file__).resolve().parent.parent / "src"
_str_src = str(_src)
if sys.path[0:1] != [_str_src]:
    sys.path.insert(0, _str_src)

import itertools
import uuid
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest
import pytest_asyncio

from sweepstakes_hub.auth.provider import AuthSession, AuthUser
from sweepstakes_hub.core.database import dispose_database, init_database
from sweepstakes_hub.errors import AuthenticationFailed, RemoteUnavailable
from sweepstakes_hub.repositories import AdminUserRepository, CompetitionRowRepository, UserRepository


class FakeAuthProvider:
    """In-process stand-in for the hosted auth service."""

    def __init__(self) -> None:
        self._accounts: Dict[str, Tuple[str, AuthUser]] = {}
        self._tokens: Dict[str, AuthUser] = {}
        self._counter = itertools.count(1)
        self.signed_out: List[str] = []
        self.fail_sign_out = False
        self.unavailable = False

    def add_user(
        self, email: str, password: str = "secret123", *, role: Optional[str] = None, user_id: Optional[str] = None
    ) -> AuthUser:
        metadata = {"role": role} if role else {}
        user = AuthUser(id=user_id or str(uuid.uuid4()), email=email, user_metadata=metadata)
        self._accounts[email] = (password, user)
        return user

    def issue_token(self, user: AuthUser) -> str:
        token = f"token-{next(self._counter)}"
        self._tokens[token] = user
        return token

    def is_live(self, token: str) -> bool:
        return token in self._tokens

    async def sign_in(self, email: str, password: str) -> AuthSession:
        if self.unavailable:
            raise RemoteUnavailable("The authentication service is unreachable. Please try again later.")
        account = self._accounts.get(email)
        if account is None or account[0] != password:
            raise AuthenticationFailed("Invalid login credentials")
        user = account[1]
        return AuthSession(access_token=self.issue_token(user), user=user)

    async def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> AuthUser:
        if email in self._accounts:
            raise AuthenticationFailed("User already registered")
        user = AuthUser(id=str(uuid.uuid4()), email=email, user_metadata=dict(metadata))
        self._accounts[email] = (password, user)
        return user

    async def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)
        if self.fail_sign_out:
            raise RemoteUnavailable("The authentication service is unavailable. Please try again later.")
        self._tokens.pop(access_token, None)

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        return self._tokens.get(access_token)


@pytest.fixture
def fake_auth() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest_asyncio.fixture
async def db(tmp_path):
    """File-backed SQLite with every table created; the global manager is reset afterwards."""
    manager = await init_database(f"sqlite+aiosqlite:///{tmp_path / 'portal.db'}")
    await manager.create_all()
    yield manager
    await dispose_database()


@pytest.fixture
def form_payload():
    """Valid editor payload (camelCase), with overrides."""

    def _make(**overrides: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": "Wildlife Photo Challenge",
            "description": "Capture animals in their natural habitat.",
            "imageUrl": "https://images.example.com/wildlife.jpg",
            "competitionUrl": "https://contests.example.com/wildlife",
            "category": "Photography",
            "difficulty": "Easy",
            "prizeValue": "$2,500",
            "requirements": "Must be 18 or older\nOne entry per person",
            "rules": ["Original work only", "No watermarks"],
            "startDate": "2024-01-01",
            "endDate": "2024-06-30",
            "status": "active",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def insert_row(db):
    """Insert a raw storage row, bypassing the form boundary (legacy shapes included)."""

    async def _insert(**values: Any):
        row: Dict[str, Any] = {
            "title": "Untitled",
            "image_url": "https://images.example.com/x.jpg",
            "category": "Photography",
            "difficulty": "Medium",
            "prize_value": "$1,000",
            "requirements": "",
            "status": "active",
        }
        row.update(values)
        async with db.session() as session:
            created = await CompetitionRowRepository(session).insert(row)
            return created.id

    return _insert


@pytest.fixture
def make_admin(db, fake_auth):
    """Register an account with an existing admin membership row; returns (user, token)."""

    async def _make(email: str = "admin@example.com") -> Tuple[AuthUser, str]:
        user = fake_auth.add_user(email)
        async with db.session() as session:
            await UserRepository(session).ensure(user.id, user.email)
            await AdminUserRepository(session).grant(user.id)
        return user, fake_auth.issue_token(user)

    return _make
