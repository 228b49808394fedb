"""
Pytest configuration and shared fixtures for the learning plans test suite.
"""

import os
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import jwt
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set test environment before importing app
os.environ["LP_ENVIRONMENT"] = "test"
os.environ["LP_DB_URL"] = "sqlite+aiosqlite:///:memory:"
# Set test JWT secret for testing
os.environ["LP_JWT_SECRET"] = "test-secret"
os.environ["LP_JWT_ALGORITHM"] = "HS256"
# Disable rate limiting for tests
os.environ["LP_RATE_LIMIT_REQUESTS"] = "999999"
# Mock URL for the identity provider to avoid network calls
os.environ["LP_IDENTITY_USERINFO_URL"] = "http://mock-identity:8080/userinfo"

from lp.auth import Caller  # noqa: E402
from lp.config import get_settings  # noqa: E402
from lp.db.base import Base, ResourceBase  # noqa: E402
from lp.models import User, UserRole  # noqa: E402

settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database engine per test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.run_sync(ResourceBase.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_user(db_session):
    """Factory persisting a user and returning it."""

    async def _make_user(name: str = "Ada", role: UserRole = UserRole.user) -> User:
        user = User(name=name, email=f"{name.lower()}-{uuid4().hex[:8]}@example.com", role=role)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def test_user_id():
    """Test user ID for authentication."""
    return "550e8400-e29b-41d4-a716-446655440000"


def make_token(user_id: str, role: str = "user", email: str = "test@example.com", **overrides) -> str:
    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": datetime.utcnow() + timedelta(hours=1),
        "iat": datetime.utcnow(),
    }
    payload.update(overrides)
    # Must match LP_JWT_SECRET / LP_JWT_ALGORITHM
    return jwt.encode(payload, "test-secret", algorithm="HS256")


@pytest.fixture
def test_jwt_token(test_user_id):
    """Create a test JWT token."""
    return make_token(test_user_id)


@pytest.fixture
def app():
    """Create test app instance."""
    from contextlib import asynccontextmanager

    from fastapi import FastAPI

    from lp.db.base import close_db, init_db
    from lp.errors import register_error_handlers
    from lp.middleware import AuthMiddleware
    from lp.server import include_routers

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Initialize database connection on startup
        await init_db()
        yield
        # Close database connection on shutdown
        await close_db()

    # Simpler app for testing without rate limiting
    test_app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    test_app.add_middleware(AuthMiddleware)
    register_error_handlers(test_app)
    include_routers(test_app)

    # Health check
    @test_app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return test_app


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_identity_client():
    """Mock identity provider client to avoid external API calls."""
    mock_client = AsyncMock()
    mock_client.get_userinfo.return_value = {
        "email": "ada@example.com",
        "name": "Ada Lovelace",
        "picture": "https://example.com/ada.png",
    }
    return mock_client


@pytest.fixture(autouse=True)
def mock_external_services(mock_identity_client):
    """Auto-used fixture that mocks the identity provider client."""
    with patch("lp.services.identity.IdentityProviderClient") as mock_identity_class:
        mock_identity_class.return_value = mock_identity_client
        yield


@pytest.fixture
def sign_in(client, mock_identity_client):
    """Sign in through the identity provider mock; returns auth headers."""

    def _sign_in(email: str = "ada@example.com", name: str = "Ada Lovelace") -> dict:
        mock_identity_client.get_userinfo.return_value = {"email": email, "name": name}
        response = client.post("/v1/auth/session", json={"accessToken": f"provider-{email}"})
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _sign_in


@pytest.fixture
def caller_for():
    """Build the request caller for a persisted user."""

    def _caller_for(user: User) -> Caller:
        return Caller(user_id=user.id, role=user.role, email=user.email)

    return _caller_for


@pytest.fixture
def plan_payload():
    """Factory for a plan with two segments: three tasks in the first, none in the second."""

    def _plan_payload(**overrides) -> dict:
        data = {
            "title": "Learn Rust",
            "description": "Systems programming from scratch",
            "objectives": ["Ownership", "Async"],
            "tags": ["rust", "systems"],
            "category": {"name": "Programming", "icon": "code"},
            "isPublic": True,
            "start": "2026-01-01T00:00:00Z",
            "end": "2026-03-01T00:00:00Z",
            "segments": [
                {
                    "title": "Basics",
                    "start": "2026-01-01T00:00:00Z",
                    "end": "2026-01-31T00:00:00Z",
                    "tasks": [
                        "Read the book",
                        {"title": "Rustlings", "priority": "high", "type": "Project"},
                        {"title": "Write a CLI"},
                    ],
                },
                {
                    "title": "Async",
                    "start": "2026-02-01T00:00:00Z",
                    "tasks": [],
                },
            ],
        }
        data.update(overrides)
        return data

    return _plan_payload


@pytest.fixture
def admin_headers():
    """Session for an administrator; the account itself is not persisted."""
    from lp.auth import issue_session_token

    token = issue_session_token(uuid4(), "admin@example.com", UserRole.admin)
    return {"Authorization": f"Bearer {token}"}
