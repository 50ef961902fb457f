"""Create blog_posts table

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `blog_posts` table; one row per movie blog post.
How:   Integer autoincrement primary key plus four TEXT NOT NULL columns.
       Column names match the JSON field names (`imgSrc` is quoted by
       SQLAlchemy where the dialect needs it).

Rollback: downgrade() drops the table (destructive, all posts are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the blog_posts table. See movie_blog/models/post.py."""
    op.create_table(
        "blog_posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("imgSrc", sa.Text(), nullable=False),
        sa.Column("pelicula", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop the blog_posts table entirely."""
    op.drop_table("blog_posts")
