"""
Movie Blog API - Post SQLAlchemy Model
=======================================

What:  ORM model for the `blog_posts` table.
Who:   Its table is queried by PostRepository and tracked by Alembic.

Table Design:
    - id: Integer primary key assigned by the database on insert
    - title, imgSrc, pelicula, content: TEXT NOT NULL

    Attribute names mirror the column names used by existing clients
    (`imgSrc` is camel-cased on the wire and in the table).
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from movie_blog.database import Base


class Post(Base):
    """
    A single movie blog post.

    Lifecycle:
        1. Inserted by POST /posts (database assigns id)
        2. Fully overwritten by PUT /posts/{id} (all four fields at once)
        3. Hard-deleted by DELETE /posts/{id}
    """

    __tablename__ = "blog_posts"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    # Absolute URL of the post's image
    imgSrc: Mapped[str] = mapped_column(Text, nullable=False)

    # Free-text reference to the movie the post is about
    pelicula: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}')>"
