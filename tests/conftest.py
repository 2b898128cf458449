"""
Test configuration and fixtures
"""

import os
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Set test environment before the settings object is created
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./kidmap-test.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-at-least-32-characters"
os.environ["LOG_FORMAT"] = "text"

# Import all models BEFORE creating fixtures (create_all needs them registered)
from kidmap.core.database import Base, enable_sqlite_foreign_keys
from kidmap.models import User, UserFavorite, UserVisited  # noqa: F401
from kidmap.services.geocoding import NominatimGeocoder
from kidmap.services.overpass import OverpassClient, VenueSearchService
from kidmap.services.relations import FavoriteStore, VisitedStore
from kidmap.services.users import UserService


class FakeRedis:
    """In-memory stand-in for the few Redis commands the app uses"""

    def __init__(self):
        self.store: Dict[str, tuple] = {}

    async def get(self, key):
        value = self.store.get(key)
        if value is None:
            return None
        data, expires_at = value
        if expires_at < time.time():
            del self.store[key]
            return None
        return data

    async def setex(self, key, ttl, value):
        self.store[key] = (value, time.time() + ttl)
        return True

    async def ping(self):
        return True


class StubProvider:
    """
    Records outbound requests and answers them with a canned response or
    by raising a configured exception.
    """

    def __init__(self, json_body=None, status_code: int = 200):
        self.json_body = json_body if json_body is not None else {}
        self.status_code = status_code
        self.raises: Optional[Callable[[httpx.Request], Exception]] = None
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raises is not None:
            raise self.raises(request)
        return httpx.Response(self.status_code, json=self.json_body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def overpass_node():
    """Factory for Overpass node elements"""
    def make(element_id: int, lat: float, lon: float, **tags) -> dict:
        return {"type": "node", "id": element_id, "lat": lat, "lon": lon, "tags": tags}
    return make


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh SQLite database per test"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'kidmap.db'}",
        poolclass=NullPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def favorites(session_factory) -> FavoriteStore:
    return FavoriteStore(session_factory)


@pytest.fixture
def visited(session_factory) -> VisitedStore:
    return VisitedStore(session_factory)


@pytest.fixture
def users(session_factory) -> UserService:
    return UserService(session_factory)


@pytest_asyncio.fixture
async def test_user(users) -> User:
    return await users.upsert("user-1", {"email": "parent@example.com", "first_name": "Alex"})


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def overpass_stub() -> StubProvider:
    return StubProvider(json_body={"elements": []})


@pytest.fixture
def nominatim_stub() -> StubProvider:
    return StubProvider(json_body=[])


@pytest_asyncio.fixture
async def client(session_factory, favorites, visited, users, fake_redis, overpass_stub, nominatim_stub):
    """Create test client with dependency overrides"""
    from kidmap.main import app
    from kidmap.api import deps
    from kidmap.core.database import get_session_factory
    from kidmap.core.redis import get_redis

    overpass_http = overpass_stub.client()
    nominatim_http = nominatim_stub.client()
    venue_search = VenueSearchService(OverpassClient(overpass_http))
    geocoder = NominatimGeocoder(nominatim_http)

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_redis] = lambda: fake_redis
    app.dependency_overrides[deps.get_venue_search] = lambda: venue_search
    app.dependency_overrides[deps.get_geocoder] = lambda: geocoder
    app.dependency_overrides[deps.get_favorite_store] = lambda: favorites
    app.dependency_overrides[deps.get_visited_store] = lambda: visited
    app.dependency_overrides[deps.get_user_service] = lambda: users

    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
        await overpass_http.aclose()
        await nominatim_http.aclose()


@pytest.fixture
def issue_token() -> Callable[..., str]:
    """
    Sign tokens the way the identity provider does: the shared
    secret, plus audience and issuer when configured.
    """
    from kidmap.config import settings

    def issue(claims: dict, expires_delta: Optional[timedelta] = None) -> str:
        payload = dict(claims)
        payload["exp"] = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
        payload["iat"] = int(time.time())
        if settings.JWT_AUDIENCE:
            payload.setdefault("aud", settings.JWT_AUDIENCE)
        if settings.JWT_ISSUER:
            payload.setdefault("iss", settings.JWT_ISSUER)
        return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return issue


@pytest.fixture
def user_claims() -> dict:
    return {
        "sub": "user-1",
        "email": "parent@example.com",
        "first_name": "Alex",
        "last_name": "Rossi",
    }


@pytest.fixture
def auth_headers(issue_token, user_claims) -> dict:
    """Bearer token for the default test user"""
    token = issue_token(user_claims)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(issue_token) -> dict:
    token = issue_token({"sub": "user-2", "email": "other@example.com"})
    return {"Authorization": f"Bearer {token}"}
