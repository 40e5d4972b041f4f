import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from civicpulse.core.config import settings
from civicpulse.db.base_class import Base
from civicpulse.db.session import get_db
from civicpulse.models import User, UserRole
from main import app
from tests.utils import token_for


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def database_path(tmp_path):
    """A fresh SQLite file with every table created."""
    path = tmp_path / "civicpulse.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return path


@pytest.fixture
def session_factory(database_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{database_path}", poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def make_user(database_path):
    engine = create_engine(f"sqlite:///{database_path}")

    def _make(email, role=UserRole.CITIZEN, full_name=None, is_active=True):
        with Session(engine, expire_on_commit=False) as session:
            user = User(
                email=email,
                hashed_password="not-a-real-hash",
                full_name=full_name or email.split("@")[0].title(),
                role=role,
                is_active=is_active,
            )
            session.add(user)
            session.commit()
            return user

    yield _make
    engine.dispose()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def client_for(session_factory, upload_dir):
    """Build an API client authenticated as the given user (or anonymous)."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    def _client(user=None):
        headers = {"Authorization": f"Bearer {token_for(user)}"} if user else {}
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test/api",
            headers=headers,
        )

    yield _client
    app.dependency_overrides.clear()


@pytest.fixture
def citizens(make_user):
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")
    carol = make_user("carol@example.com")
    return alice, bob, carol


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role=UserRole.ADMIN)
