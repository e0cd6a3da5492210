"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from photoflow.adapters.memory_storage import InMemoryStorage
from photoflow.adapters.sql_schema import metadata
from photoflow.config import Settings
from photoflow.containers import AppContainer, build_container
from photoflow.domain.models import ProjectDraft, User
from photoflow.security import hash_password
from photoflow.services.auth import AuthService
from photoflow.services.extraction import ExtractionClient
from photoflow.services.projects import ProjectService
from photoflow.services.sessions import SessionManager

TEST_SECRET = "test-session-secret"  # noqa: S105
TEST_ROUNDS = 4


@dataclass
class FakeExtractionClient(ExtractionClient):
    """Fake extraction client that returns a canned response."""

    response: dict[str, object] = field(
        default_factory=lambda: {
            "clientName": "Smith Wedding",
            "date": "2024-06-01",
            "location": "Lisbon",
            "photographer": "Ana",
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def extract(
        self, *, model: str, prompt: str, schema: dict[str, object]
    ) -> dict[str, object]:
        self.calls.append({"model": model, "prompt": prompt, "schema": schema})
        if self.error is not None:
            raise self.error
        return self.response


def make_user(email: str, password: str = "pw", **fields: object) -> User:
    """Return a user whose password is hashed with cheap rounds."""
    return User(
        email=email, password=hash_password(password, TEST_ROUNDS), **fields
    )


def make_draft(client_name: str = "Smith Wedding", **fields: object) -> ProjectDraft:
    """Return a project draft with sensible defaults."""
    day = fields.pop("date", date(2024, 6, 1))
    return ProjectDraft(client_name=client_name, date=day, **fields)


def sqlite_engine(path: Path) -> AsyncEngine:
    """Return an aiosqlite engine with foreign key enforcement.

    Connections are not pooled so the engine can be driven from several
    ``asyncio.run`` calls.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        admin_token="admin-token",
        session_secret=TEST_SECRET,
        bcrypt_rounds=TEST_ROUNDS,
        json_db_path="",
        db_host=None,
        openai_api_key=None,
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def sessions() -> SessionManager:
    return SessionManager(secret=TEST_SECRET)


@pytest.fixture
def auth_service(storage: InMemoryStorage, sessions: SessionManager) -> AuthService:
    return AuthService(storage=storage, sessions=sessions, bcrypt_rounds=TEST_ROUNDS)


@pytest.fixture
def project_service(
    storage: InMemoryStorage, sessions: SessionManager
) -> ProjectService:
    return ProjectService(storage=storage, sessions=sessions)


@pytest.fixture
def signed_in(auth_service: AuthService):
    """Register and log in a user, returning a session token factory."""

    def _sign_in(email: str, password: str = "pw") -> str:
        asyncio.run(auth_service.register(email, password))
        result = asyncio.run(auth_service.login(email, password))
        assert result.token is not None
        return result.token

    return _sign_in


@pytest.fixture
def sqlite_path(tmp_path: Path) -> Path:
    return tmp_path / "photoflow.db"


@pytest.fixture
def container(settings: Settings, storage: InMemoryStorage) -> AppContainer:
    return build_container(settings, storage=storage)
