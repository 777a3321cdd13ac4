"""add article.views counter

Revision ID: 9b3d7e4c2a61
Revises: 5f1c2a9e7b10
Create Date: 2026-10-19 10:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "9b3d7e4c2a61"
down_revision: Union[str, None] = "5f1c2a9e7b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "article",
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
    )


def downgrade() -> None:
    with op.batch_alter_table("article") as batch_op:
        batch_op.drop_column("views")
