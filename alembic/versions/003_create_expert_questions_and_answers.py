"""create expert_questions, expert_question_dogs, expert_answers

Revision ID: 003
Revises: 002
Create Date: 2026-09-15

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import text


revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "expert_questions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("author_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(32), nullable=False, server_default="GENERAL"),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        "expert_question_dogs",
        sa.Column(
            "question_id",
            sa.String(36),
            sa.ForeignKey("expert_questions.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("dog_id", sa.String(36), sa.ForeignKey("dogs.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_table(
        "expert_answers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "question_id",
            sa.String(36),
            sa.ForeignKey("expert_questions.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("expert_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_ai_generated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("endorsed_by_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("endorsed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    # At most one AI answer per question (partial unique index)
    op.create_index(
        "uq_expert_answers_one_ai_per_question",
        "expert_answers",
        ["question_id"],
        unique=True,
        postgresql_where=text("is_ai_generated"),
        sqlite_where=text("is_ai_generated = 1"),
    )


def downgrade() -> None:
    op.drop_index("uq_expert_answers_one_ai_per_question", table_name="expert_answers")
    op.drop_table("expert_answers")
    op.drop_table("expert_question_dogs")
    op.drop_table("expert_questions")
