"""
Blog API - Test Configuration (conftest.py)
===========================================

Shared fixtures for the test suite.

Fixture Hierarchy:
    Unit tests (no database):
    ├── user_repo / post_repo / comment_repo: AsyncMock repositories
    ├── alice, bob, admin_user: transient User objects with roles
    └── make_post / make_comment: factories for transient content rows

    API tests (two temporary SQLite stores):
    ├── database: creates both schemas, drops them and disposes the engines after
    ├── test_client: httpx AsyncClient bound to the ASGI app
    ├── signup: registers + logs in a user, returns id and auth headers
    └── make_admin: bootstraps an ADMIN account and logs it in
"""

import os
import tempfile

# Settings are read at import time, so the environment must be ready before
# anything from blogapi is imported.
_TEST_DIR = tempfile.mkdtemp(prefix="blogapi_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/credentials.db"
os.environ["CONTENT_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/content.db"
os.environ["JWT_SECRET"] = "test-secret-for-the-blog-api-suite-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CREATE_SCHEMA_ON_STARTUP"] = "false"

from datetime import datetime, timedelta, timezone  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from blogapi.database import (  # noqa: E402
    Base,
    ContentBase,
    async_session_factory,
    content_engine,
    engine,
)
from blogapi.models.comment import Comment  # noqa: E402
from blogapi.models.post import Post, new_document_id  # noqa: E402
from blogapi.models.user import Role, User  # noqa: E402
from blogapi.repositories.user_repository import UserRepository  # noqa: E402
from blogapi.services.user_service import UserService  # noqa: E402

DEFAULT_PASSWORD = "s3cret-pass"


# ══════════════════════════════════════════════════════════════════════════
# Unit test fixtures
# ══════════════════════════════════════════════════════════════════════════

def build_user(user_id: int, username: str, *roles: Role) -> User:
    now = datetime.now(timezone.utc)
    u = User(
        id=user_id,
        username=username,
        email=f"{username}@blog.io",
        password_hash="not-a-real-hash",
        created_at=now,
        updated_at=now,
    )
    for role in roles or (Role.USER,):
        u.grant(role)
    return u


@pytest.fixture
def alice():
    return build_user(1, "alice", Role.USER)


@pytest.fixture
def bob():
    return build_user(2, "bob", Role.USER)


@pytest.fixture
def admin_user():
    return build_user(99, "root", Role.USER, Role.ADMIN)


@pytest.fixture
def user_repo():
    repo = AsyncMock()
    repo.find_usernames.return_value = {}
    return repo


@pytest.fixture
def post_repo():
    repo = AsyncMock()
    # add/save hand back the row they were given, like the real repository
    repo.add.side_effect = lambda p: p
    repo.save.side_effect = lambda p: p
    return repo


@pytest.fixture
def comment_repo():
    repo = AsyncMock()
    repo.add.side_effect = lambda c: c
    repo.save.side_effect = lambda c: c
    repo.delete_by_post_id.return_value = 0
    return repo


@pytest.fixture
def make_post():
    base = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def _make_post(author_id: int = 1, title: str = "Hello", content: str = "World", age: int = 0):
        created = base - timedelta(minutes=age)
        return Post(
            id=new_document_id(),
            title=title,
            content=content,
            author_id=author_id,
            created_at=created,
            updated_at=created,
        )

    return _make_post


@pytest.fixture
def make_comment():
    base = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def _make_comment(post_id: str, author_id: int = 1, content: str = "Nice post"):
        return Comment(
            id=new_document_id(),
            post_id=post_id,
            author_id=author_id,
            content=content,
            created_at=base,
            updated_at=base,
        )

    return _make_comment


# ══════════════════════════════════════════════════════════════════════════
# API test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database():
    """
    Fresh tables in both SQLite stores for one test.

    Engines are disposed afterwards so no pooled connection outlives the
    test's event loop.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with content_engine.begin() as conn:
        await conn.run_sync(ContentBase.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    async with content_engine.begin() as conn:
        await conn.run_sync(ContentBase.metadata.drop_all)
    await engine.dispose()
    await content_engine.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient routed straight to the ASGI app (no server, no lifespan).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from blogapi.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def _login(client: AsyncClient, username: str, password: str) -> dict:
    response = await client.post(
        "/api/auth/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    body = response.json()
    return {
        "id": body["id"],
        "username": body["username"],
        "token": body["accessToken"],
        "headers": bearer(body["accessToken"]),
    }


@pytest.fixture
def signup(test_client):
    """Register and log in a USER; returns {"id", "username", "token", "headers"}."""

    async def _signup(username: str, password: str = DEFAULT_PASSWORD, email: str = None):
        response = await test_client.post(
            "/api/users/register",
            json={
                "username": username,
                "email": email or f"{username}@blog.io",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        return await _login(test_client, username, password)

    return _signup


@pytest.fixture
def make_admin(test_client):
    """Bootstrap an ADMIN account the way startup does, then log it in."""

    async def _make_admin(username: str = "admin", password: str = DEFAULT_PASSWORD):
        async with async_session_factory() as session:
            await UserService(UserRepository(session)).ensure_admin(
                username, f"{username}@blog.io", password
            )
            await session.commit()
        return await _login(test_client, username, password)

    return _make_admin
