"""Shared fixtures: an isolated in-memory database and an ASGI test client."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

os.environ.setdefault("DB_DSN", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "school_admin_test.log"))
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from school_admin.controllers.dependencies import get_translation_store  # noqa: E402
from school_admin.database import (  # noqa: E402
    _create_engine,
    get_session,
    get_session_factory,
    init_models,
)
from school_admin.main import app  # noqa: E402
from school_admin.models import User  # noqa: E402
from school_admin.services.seeding import seed_permissions  # noqa: E402
from school_admin.services.settings_store import settings_cache  # noqa: E402
from school_admin.services.translations import TranslationStore  # noqa: E402
from school_admin.utils import create_access_token, hash_password  # noqa: E402


@pytest.fixture
async def engine():
    engine = _create_engine("sqlite+aiosqlite:///:memory:")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def clear_settings_cache():
    settings_cache.clear()
    yield
    settings_cache.clear()


@pytest.fixture
async def users(session) -> dict[str, User]:
    """One user per seeded role plus ``nobody`` without any role."""

    roles = await seed_permissions(session)
    created = {}
    for name in ("admin", "manager", "viewer", "nobody"):
        user = User(
            name=name.title(),
            email=f"{name}@school.edu",
            password_hash=hash_password("secret-password"),
            roles=[roles[name]] if name in roles else [],
        )
        session.add(user)
        created[name] = user
    await session.commit()
    return created


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(subject=str(user.id), name=user.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def lang_path(tmp_path) -> Path:
    return tmp_path / "lang"


@pytest.fixture
async def client(session_factory, lang_path):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_translation_store] = lambda: TranslationStore(lang_path)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def headers(users) -> dict[str, dict[str, str]]:
    return {name: auth_headers(user) for name, user in users.items()}
