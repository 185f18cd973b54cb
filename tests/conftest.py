"""Shared test fixtures."""

import os

# Settings() requires the secret at import time; tests never see a real one.
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-not-for-production")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
