"""
Alembic Migration Environment
===============================

What:  Runs the blog_posts migrations against the database the API uses.
How:   The URL comes from movie_blog.config.settings (DATABASE_URL or the
       DB_* parts), never from alembic.ini. Online runs open one unpooled
       async connection; SQLite targets use batch mode so ALTERs work there.
Who:   `alembic upgrade head`, `alembic downgrade base`, `alembic revision`.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection, URL
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from movie_blog.config import settings
from movie_blog.database import Base
from movie_blog.models.post import Post  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def migration_options(url: URL) -> dict:
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        "render_as_batch": url.get_backend_name() == "sqlite",
    }


def run_migrations_offline(url: URL) -> None:
    """Emit the migration SQL to stdout without connecting."""
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **migration_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection, url: URL) -> None:
    context.configure(connection=connection, **migration_options(url))
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online(url: URL) -> None:
    engine = create_async_engine(url, poolclass=NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate, url)
    finally:
        await engine.dispose()


database_url = settings.sqlalchemy_url

if context.is_offline_mode():
    run_migrations_offline(database_url)
else:
    asyncio.run(run_migrations_online(database_url))
