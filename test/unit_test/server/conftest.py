"""
Fixtures for API tests.

The application runs against the in-memory SQLite ``session`` fixture with
Supabase and n8n disabled; tests that need a token-verifying auth client
install one with ``use_auth_client``.
"""

import uuid
from typing import AsyncGenerator, Callable, Optional
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from legal_chatbot.core.database.entities.profiles import Profile
from legal_chatbot.integrations.supabase_auth import SupabaseAuthClient

SUPABASE_URL = "http://mock-supabase"


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from legal_chatbot.core.database import get_session
    from legal_chatbot.server.main import app
    from legal_chatbot.server.services.deps import get_auth_client, get_webhook_client

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_auth_client] = lambda: None
    app.dependency_overrides[get_webhook_client] = lambda: None

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("legal_chatbot.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def use_auth_client() -> Callable[[Optional[str]], SupabaseAuthClient]:
    """Install a Supabase auth client accepting ``valid-token`` for the given user id."""
    from legal_chatbot.server.main import app
    from legal_chatbot.server.services.deps import get_auth_client

    def install(user_id: Optional[str]) -> SupabaseAuthClient:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.headers.get("authorization") != "Bearer valid-token" or user_id is None:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json={"id": user_id, "email": "user@example.vn"})

        auth_client = SupabaseAuthClient(
            SUPABASE_URL, "test-anon-key", client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
        )
        app.dependency_overrides[get_auth_client] = lambda: auth_client
        return auth_client

    return install


@pytest_asyncio.fixture
async def profile(session: AsyncSession) -> Profile:
    """A registered user, accepted through the ``userId`` fallback."""
    row = Profile(id=uuid.uuid4(), full_name="Nguyễn Văn A")
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


@pytest.fixture
def user_id(profile: Profile) -> str:
    return str(profile.id)
