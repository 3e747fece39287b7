"""Shared fixtures: an isolated app on a temporary SQLite file per test."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from app.core.config import Settings
from app.core.enums import Role
from app.core.security import hash_password
from app.main import create_application
from app.models.user import User

TEST_SECRET = "test-secret-key"
PASSWORD = "s3cret-pass"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_uri=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret_key=TEST_SECRET,
        api_prefix="",
        allow_open_role_registration=False,
    )


@pytest.fixture
async def app(settings):
    application = create_application(settings)
    await application.state.db.create_all()
    yield application
    await application.state.db.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(app, client):
    """Insert a user directly (any role) and return (id, auth headers)."""

    async def _make(email: str, role: Role = Role.USER, password: str = PASSWORD):
        async with app.state.db.session_maker() as session:
            user = User(email=email, password=hash_password(password), role=role)
            session.add(user)
            await session.commit()
            user_id = user.id
        resp = await client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return user_id, {"Authorization": f"Bearer {resp.json()['token']}"}

    return _make


@pytest.fixture
async def admin(make_user):
    return await make_user("admin@example.com", Role.ADMIN)


@pytest.fixture
async def coach(make_user):
    return await make_user("coach@example.com", Role.COACH)


@pytest.fixture
async def member(make_user):
    return await make_user("member@example.com", Role.USER)


@pytest.fixture
def count_rows(app):
    """Count rows of a model, optionally filtered."""

    async def _count(model, *where) -> int:
        async with app.state.db.session_maker() as session:
            stmt = select(func.count()).select_from(model)
            if where:
                stmt = stmt.where(*where)
            return (await session.execute(stmt)).scalar_one()

    return _count
