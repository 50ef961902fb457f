"""
Movie Blog API - Post Repository (Data Access Layer)
=====================================================

What:  One method per resource operation against the `blog_posts` table.
How:   Every method checks out a single pooled connection with
       `async with engine.connect()` / `engine.begin()`, runs exactly one
       statement, and returns the connection on every exit path. Writes commit
       when the `begin()` block exits cleanly.
Who:   Called by the post route handlers through `get_post_repository`.

Query Safety:
    All statements are SQLAlchemy Core expressions. Field values and the
    opaque post identifier always travel as bound parameters. The identifier
    is bound as a string and cast to the key type by the database:

        SELECT ... FROM blog_posts WHERE blog_posts.id = CAST(:param_1 AS INTEGER)

Error Handling:
    Driver and pool failures are logged with their details and re-raised as
    StoreError carrying a generic message. Nothing is retried.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Union

from fastapi import Depends
from sqlalchemy import Integer, String, cast, delete, insert, literal, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from movie_blog.database import get_engine
from movie_blog.exceptions import StoreError
from movie_blog.models.post import Post
from movie_blog.schemas.post import CreateResult, MutationResult, PostPayload, PostResponse

logger = logging.getLogger(__name__)

blog_posts = Post.__table__

PostId = Union[str, int]


def _id_matches(post_id: PostId):
    """WHERE clause matching `post_id`, bound as a parameter and cast by the store."""
    return blog_posts.c.id == cast(literal(str(post_id), String), Integer)


class PostRepository:
    """
    Data access for blog posts.

    Stateless apart from the engine it was given; a new instance per request
    is cheap.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    @asynccontextmanager
    async def _store_errors(self, operation: str, message: str) -> AsyncIterator[None]:
        """Translate driver, pool and network failures into StoreError."""
        try:
            yield
        except (SQLAlchemyError, OSError) as e:
            logger.error("Store failure during %s: %s", operation, str(e))
            raise StoreError(
                message=message,
                operation=operation,
                context={"error_type": type(e).__name__},
            ) from e

    async def list_all(self) -> List[PostResponse]:
        """
        Return every post in the store's natural order.

        Returns:
            All rows, or an empty list when the table is empty.

        Raises:
            StoreError: the query could not be executed
        """
        async with self._store_errors("list", "Could not retrieve posts. Please try again later."):
            async with self._engine.connect() as conn:
                result = await conn.execute(select(blog_posts))
                rows = result.mappings().all()
        return [PostResponse.model_validate(dict(row)) for row in rows]

    async def get_by_id(self, post_id: PostId) -> List[PostResponse]:
        """
        Return the post matching `post_id` as a list of zero or one items.

        Raises:
            StoreError: the query could not be executed (including an
                identifier the store cannot cast to an integer)
        """
        async with self._store_errors("get", "Could not retrieve the post. Please try again later."):
            async with self._engine.connect() as conn:
                result = await conn.execute(select(blog_posts).where(_id_matches(post_id)))
                rows = result.mappings().all()
        return [PostResponse.model_validate(dict(row)) for row in rows]

    async def create(self, title: str, imgSrc: str, pelicula: str, content: str) -> CreateResult:
        """
        Insert a new post.

        Returns:
            CreateResult with the database-assigned id.

        Raises:
            StoreError: constraint violation or unreachable store
        """
        async with self._store_errors("create", "Could not create the post. Please try again later."):
            async with self._engine.begin() as conn:
                result = await conn.execute(
                    insert(blog_posts).values(
                        title=title,
                        imgSrc=imgSrc,
                        pelicula=pelicula,
                        content=content,
                    )
                )
                insert_id = result.inserted_primary_key[0]

        logger.info("Post %s created", insert_id)
        # A single-row INSERT that returned without error wrote exactly one row
        return CreateResult(insertId=insert_id, affectedRows=1)

    async def update(
        self,
        post_id: PostId,
        title: str,
        imgSrc: str,
        pelicula: str,
        content: str,
    ) -> MutationResult:
        """
        Overwrite all four fields of the post matching `post_id`.

        Returns:
            MutationResult; affectedRows is 0 when nothing matched.

        Raises:
            StoreError: the statement could not be executed
        """
        async with self._store_errors("update", "Could not update the post. Please try again later."):
            async with self._engine.begin() as conn:
                result = await conn.execute(
                    update(blog_posts)
                    .where(_id_matches(post_id))
                    .values(title=title, imgSrc=imgSrc, pelicula=pelicula, content=content)
                )
                affected = result.rowcount

        logger.info("Post %s updated (%d row(s))", post_id, affected)
        return MutationResult(affectedRows=affected)

    async def delete(self, post_id: PostId) -> MutationResult:
        """
        Hard-delete the post matching `post_id`.

        Returns:
            MutationResult; affectedRows is 0 when nothing matched.
        """
        async with self._store_errors("delete", "Could not delete the post. Please try again later."):
            async with self._engine.begin() as conn:
                result = await conn.execute(delete(blog_posts).where(_id_matches(post_id)))
                affected = result.rowcount

        logger.info("Post %s deleted (%d row(s))", post_id, affected)
        return MutationResult(affectedRows=affected)

    async def create_from_payload(self, payload: PostPayload) -> CreateResult:
        return await self.create(payload.title, payload.imgSrc, payload.pelicula, payload.content)

    async def update_from_payload(self, post_id: PostId, payload: PostPayload) -> MutationResult:
        return await self.update(
            post_id, payload.title, payload.imgSrc, payload.pelicula, payload.content
        )


# ── FastAPI Dependency ────────────────────────────────────────────────────
def get_post_repository(engine: AsyncEngine = Depends(get_engine)) -> PostRepository:
    """
    Provide a repository bound to the application's engine.

    Tests replace this through `app.dependency_overrides`.
    """
    return PostRepository(engine)
