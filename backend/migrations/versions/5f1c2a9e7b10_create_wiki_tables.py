"""create user, article and historyentry tables

Revision ID: 5f1c2a9e7b10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


revision: str = "5f1c2a9e7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("password_hash", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_username"), "user", ["username"], unique=True)

    op.create_table(
        "article",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("content", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["user.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_article_title"), "article", ["title"], unique=True)
    op.create_index(
        op.f("ix_article_updated_at"), "article", ["updated_at"], unique=False
    )

    op.create_table(
        "historyentry",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("article_id", sa.Integer(), nullable=False),
        sa.Column("content", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["article_id"], ["article.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["author_id"], ["user.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_historyentry_article_id"), "historyentry", ["article_id"], unique=False
    )
    op.create_index(
        op.f("ix_historyentry_created_at"), "historyentry", ["created_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_historyentry_created_at"), table_name="historyentry")
    op.drop_index(op.f("ix_historyentry_article_id"), table_name="historyentry")
    op.drop_table("historyentry")
    op.drop_index(op.f("ix_article_updated_at"), table_name="article")
    op.drop_index(op.f("ix_article_title"), table_name="article")
    op.drop_table("article")
    op.drop_index(op.f("ix_user_username"), table_name="user")
    op.drop_table("user")
