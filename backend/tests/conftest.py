"""
Pytest configuration and fixtures for host tests.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("ENVIRONMENT", "test")

import httpx  # noqa: E402
import pytest_asyncio  # noqa: E402

from backend.main import app  # noqa: E402


@pytest_asyncio.fixture
async def async_client():
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
