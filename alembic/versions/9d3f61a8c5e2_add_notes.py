"""add_notes

Revision ID: 9d3f61a8c5e2
Revises: 4b1e9c2d7a10
Create Date: 2026-10-17 14:27:05.918340
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9d3f61a8c5e2'
down_revision: Union[str, Sequence[str], None] = '4b1e9c2d7a10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "notes",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "category IN ('Delivery Note', 'Reminder', 'Supply Cost', 'Internal Expense', 'Other')",
            name="ck_notes_category_valid",
        ),
        sa.CheckConstraint("amount IS NULL OR amount >= 0", name="ck_notes_amount_non_negative"),
    )
    op.create_index("ix_notes_author_id", "notes", ["author_id"], unique=False)
    op.create_index("ix_notes_created_at", "notes", ["created_at"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_notes_created_at", table_name="notes")
    op.drop_index("ix_notes_author_id", table_name="notes")
    op.drop_table("notes")
