"""m1_game_ladder_core_tables

Revision ID: 3c1d5e7f9a20
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "3c1d5e7f9a20"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("username", sa.Text(), nullable=True),
        sa.Column("balance", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("idx_users_username", "users", ["username"])
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "questions",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("level", sa.SmallInteger(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("answer1", sa.Text(), nullable=False),
        sa.Column("answer2", sa.Text(), nullable=False),
        sa.Column("answer3", sa.Text(), nullable=False),
        sa.Column("answer4", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("level >= 0 AND level <= 14", name="ck_questions_level_range"),
        sa.PrimaryKeyConstraint("id", name="pk_questions"),
    )
    op.create_index("idx_questions_level", "questions", ["level"])

    op.create_table(
        "games",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("current_level", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_failed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("prize", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "current_level >= 0 AND current_level <= 15",
            name="ck_games_current_level_range",
        ),
        sa.CheckConstraint("prize >= 0", name="ck_games_prize_non_negative"),
        sa.CheckConstraint(
            "(is_failed = false) OR finished_at IS NOT NULL",
            name="ck_games_failed_implies_finished",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_games_user_id_users"),
        sa.PrimaryKeyConstraint("id", name="pk_games"),
    )
    op.create_index("idx_games_user_created", "games", ["user_id", "created_at"])
    op.create_index("idx_games_unfinished_created", "games", ["finished_at", "created_at"])

    op.create_table(
        "game_questions",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("game_id", sa.BigInteger(), nullable=False),
        sa.Column("question_id", sa.BigInteger(), nullable=False),
        sa.Column("level", sa.SmallInteger(), nullable=False),
        sa.Column("a", sa.SmallInteger(), nullable=False),
        sa.Column("b", sa.SmallInteger(), nullable=False),
        sa.Column("c", sa.SmallInteger(), nullable=False),
        sa.Column("d", sa.SmallInteger(), nullable=False),
        sa.CheckConstraint("level >= 0 AND level <= 14", name="ck_game_questions_level_range"),
        sa.CheckConstraint(
            "a + b + c + d = 10 AND a * b * c * d = 24",
            name="ck_game_questions_key_permutation",
        ),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"], name="fk_game_questions_game_id_games"),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["questions.id"],
            name="fk_game_questions_question_id_questions",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_game_questions"),
        sa.UniqueConstraint("game_id", "level", name="uq_game_questions_game_level"),
        sa.UniqueConstraint("game_id", "question_id", name="uq_game_questions_game_question"),
    )
    op.create_index("idx_game_questions_question", "game_questions", ["question_id"])

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("game_id", sa.BigInteger(), nullable=True),
        sa.Column("entry_type", sa.String(length=32), nullable=False),
        sa.Column("direction", sa.String(length=8), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("balance_after", sa.BigInteger(), nullable=False),
        sa.Column("idempotency_key", sa.String(length=96), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_ledger_entries_amount_positive"),
        sa.CheckConstraint("entry_type IN ('GAME_PRIZE')", name="ck_ledger_entries_entry_type"),
        sa.CheckConstraint("direction IN ('CREDIT','DEBIT')", name="ck_ledger_entries_direction"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_ledger_entries_user_id_users"),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"], name="fk_ledger_entries_game_id_games"),
        sa.PrimaryKeyConstraint("id", name="pk_ledger_entries"),
        sa.UniqueConstraint("idempotency_key", name="uq_ledger_entries_idempotency_key"),
    )
    op.create_index("idx_ledger_user_created", "ledger_entries", ["user_id", "created_at"])
    op.create_index("idx_ledger_game", "ledger_entries", ["game_id"])


def downgrade() -> None:
    op.drop_index("idx_ledger_game", table_name="ledger_entries")
    op.drop_index("idx_ledger_user_created", table_name="ledger_entries")
    op.drop_table("ledger_entries")
    op.drop_index("idx_game_questions_question", table_name="game_questions")
    op.drop_table("game_questions")
    op.drop_index("idx_games_unfinished_created", table_name="games")
    op.drop_index("idx_games_user_created", table_name="games")
    op.drop_table("games")
    op.drop_index("idx_questions_level", table_name="questions")
    op.drop_table("questions")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_index("idx_users_username", table_name="users")
    op.drop_table("users")
