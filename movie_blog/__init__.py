"""
Movie Blog API - Application Package
=====================================

What:  CRUD service for movie blog posts stored in the `blog_posts` table.
Who:   Imported by uvicorn (`movie_blog.main:app`), Alembic and pytest.

Architecture Note:
    The service is two thin layers over a pooled SQLAlchemy engine:

    ┌─────────────────────────────────────┐
    │   Routes + Validation (HTTP layer)  │  ← status codes, JSON bodies
    ├─────────────────────────────────────┤
    │   PostRepository (data access)      │  ← bound-parameter statements
    ├─────────────────────────────────────┤
    │   AsyncEngine (connection pool)     │  ← created once, injected
    └─────────────────────────────────────┘

    Payload validation lives in `movie_blog.validation` as pure functions so it
    can be exercised without an HTTP client.
"""

__version__ = "1.0.0"
