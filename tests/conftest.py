"""
Shared fixtures: in-memory SQLite database, in-memory session store and an
httpx client bound to the ASGI app.
"""
import os

# Settings are read at import time; these must be in place first
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import date, timedelta

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from globetrotter.core.db import Base, get_db
from globetrotter.core.session_store import MemorySessionStore
from globetrotter.main import create_app
from globetrotter import models  # noqa: F401

PASSWORD = "secret123"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def session_store():
    return MemorySessionStore(ttl_seconds=4 * 60 * 60)


@pytest.fixture
def app(session_maker, session_store):
    application = create_app(session_store=session_store)

    async def override_get_db():
        async with session_maker() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def other_client(app):
    """A second, independent cookie jar against the same app"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def registration(email="ada@example.com", phone="+16502530000", **overrides):
    payload = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": email,
        "phone": phone,
        "password": PASSWORD,
        "city": "London",
        "country": "United Kingdom",
    }
    payload.update(overrides)
    return payload


async def register_and_login(client, email="ada@example.com", phone="+16502530000"):
    r = await client.post("/api/auth/register", json=registration(email=email, phone=phone))
    assert r.status_code == 201, r.text
    r = await client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return r.json()["data"]["user"]


@pytest.fixture
async def logged_in(client):
    return await register_and_login(client)


@pytest.fixture
async def other_logged_in(other_client):
    return await register_and_login(other_client, email="grace@example.com", phone="+442083661177")


def trip_payload(start_offset=0, length=3, **overrides):
    start = date.today() + timedelta(days=start_offset)
    payload = {
        "title": "Lisbon getaway",
        "description": "Tiles and tarts",
        "startDate": start.isoformat(),
        "endDate": (start + timedelta(days=length)).isoformat(),
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_registration():
    return registration


@pytest.fixture
def make_trip_payload():
    return trip_payload


@pytest.fixture
def login_as():
    return register_and_login


@pytest.fixture
async def test_user(db_session):
    user = models.User(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone="+16502530000",
        password_hash="x",
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def other_user(db_session):
    user = models.User(
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
        phone="+442083661177",
        password_hash="x",
    )
    db_session.add(user)
    await db_session.commit()
    return user
