"""
Movie Blog API - Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Tests run against an in-memory SQLite database (aiosqlite) whose schema
       is built from Base.metadata, so no database server is needed.

Fixture Hierarchy (all function-scoped):
    ├── engine:              In-memory engine with the blog_posts table
    ├── empty_engine:        In-memory engine with NO tables (store failures)
    ├── repository:          PostRepository bound to `engine`
    ├── test_client:         HTTPX AsyncClient against an app using `engine`
    ├── broken_client:       HTTPX AsyncClient against an app using `empty_engine`
    └── sample_post_payload: A valid create/update body
"""

import os

# Settings are read at import time, so the environment is prepared first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from movie_blog.database import Base
from movie_blog.main import create_app
from movie_blog.models.post import Post  # noqa: F401
from movie_blog.services.post_repository import PostRepository


def _memory_engine():
    # StaticPool keeps the single in-memory database alive across checkouts
    return create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)


@pytest_asyncio.fixture
async def engine():
    """In-memory engine with the blog_posts schema created."""
    engine = _memory_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def empty_engine():
    """In-memory engine without any tables; every statement fails."""
    engine = _memory_engine()
    yield engine
    await engine.dispose()


@pytest.fixture
def repository(engine):
    return PostRepository(engine)


@pytest.fixture
def sample_post_payload():
    """A body that passes every field check."""
    return {
        "title": "A",
        "imgSrc": "http://x.test/a.png",
        "pelicula": "B",
        "content": "C",
    }


@pytest_asyncio.fixture
async def test_client(engine):
    """
    HTTPX AsyncClient talking to an app that uses the `engine` fixture.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/posts")
            assert response.status_code == 200
    """
    app = create_app(engine=engine)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def broken_client(empty_engine):
    """HTTPX AsyncClient whose database has no blog_posts table."""
    app = create_app(engine=empty_engine)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
