"""Create flashcard tables"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _json():
    return postgresql.JSONB(astext_type=sa.Text()).with_variant(sa.JSON(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "words",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("spanish", sa.String(length=255), nullable=False),
        sa.Column("english", sa.String(length=255), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("synonyms_spanish", _json(), nullable=False),
        sa.Column("synonyms_english", _json(), nullable=False),
        sa.Column("frequency_rank", sa.Integer(), server_default=sa.text("99999"), nullable=False),
        sa.Column("source", sa.String(length=20), server_default=sa.text("'scraped'"), nullable=False),
        sa.Column("user_priority", sa.String(length=10), server_default=sa.text("'normal'"), nullable=False),
        sa.Column("leitner_box", sa.Integer(), nullable=True),
        sa.Column("last_reviewed", sa.DateTime(timezone=True), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("exposure_level", sa.String(length=20), nullable=True),
        sa.Column("times_studied", sa.Integer(), nullable=True),
        sa.Column("times_correct", sa.Integer(), nullable=True),
        sa.Column("last_studied", sa.DateTime(timezone=True), nullable=True),
        sa.Column("game_performance", _json(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )
    op.create_index("ix_words_spanish", "words", ["spanish"], unique=False)
    op.create_index("ix_words_english", "words", ["english"], unique=False)
    op.create_index("ix_words_category", "words", ["category"], unique=False)
    op.create_index("ix_words_frequency_rank", "words", ["frequency_rank"], unique=False)
    op.create_index("ix_words_leitner_box", "words", ["leitner_box"], unique=False)
    op.create_index("ix_words_due_date", "words", ["due_date"], unique=False)

    op.create_table(
        "incomplete_words",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("spanish", sa.String(length=255), nullable=False),
        sa.Column("extraction_metadata", _json(), nullable=False),
        sa.Column("status", sa.String(length=30), server_default=sa.text("'needs_translation'"), nullable=False),
        sa.Column("extracted_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_incomplete_words_spanish", "incomplete_words", ["spanish"], unique=False)

    op.create_table(
        "hard_words",
        sa.Column("spanish", sa.String(length=255), nullable=False),
        sa.Column("english", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("spanish", "english"),
    )

    op.create_table(
        "app_state",
        sa.Column("id", sa.String(length=50), primary_key=True, nullable=False),
        sa.Column("value", _json(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )

    op.create_table(
        "daily_stats",
        sa.Column("date", sa.Date(), primary_key=True, nullable=False),
        sa.Column("cards_reviewed", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("correct_answers", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("incorrect_answers", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("game_type_stats", _json(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("daily_stats")
    op.drop_table("app_state")
    op.drop_table("hard_words")
    op.drop_index("ix_incomplete_words_spanish", table_name="incomplete_words")
    op.drop_table("incomplete_words")
    op.drop_index("ix_words_due_date", table_name="words")
    op.drop_index("ix_words_leitner_box", table_name="words")
    op.drop_index("ix_words_frequency_rank", table_name="words")
    op.drop_index("ix_words_category", table_name="words")
    op.drop_index("ix_words_english", table_name="words")
    op.drop_index("ix_words_spanish", table_name="words")
    op.drop_table("words")
