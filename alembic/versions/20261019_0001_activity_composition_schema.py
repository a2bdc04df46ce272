"""Activity composition schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _activity_fk(unique: bool = True) -> sa.Column:
    return sa.Column(
        "activity_id",
        sa.Uuid(),
        sa.ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
        unique=unique,
    )


def upgrade() -> None:
    op.create_table(
        "activities",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("lesson_id", sa.Uuid(), nullable=False),
        sa.Column("activity_type", sa.String(50), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_activities_lesson_id", "activities", ["lesson_id"])
    op.create_index("ix_activities_lesson_order", "activities", ["lesson_id", "order"])

    # Single-record payloads
    op.create_table(
        "readings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _activity_fk(),
        sa.Column("title", sa.String(500), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_table(
        "reading_addons",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _activity_fk(),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_table(
        "sub_readings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _activity_fk(),
        sa.Column("title", sa.String(500), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_table(
        "sources",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _activity_fk(),
        sa.Column("title_ce", sa.String(500), nullable=False, server_default=""),
        sa.Column("title_ad", sa.String(500), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("image_description", sa.Text(), nullable=True),
        sa.Column("image_location", sa.String(50), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_table(
        "in_text_sources",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _activity_fk(),
        sa.Column("title_ce", sa.String(500), nullable=False, server_default=""),
        sa.Column("title_ad", sa.String(500), nullable=False, server_default=""),
        sa.Column("intro", sa.Text(), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_table(
        "images",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _activity_fk(),
        sa.Column("image_url", sa.Text(), nullable=False, server_default=""),
        sa.Column("title", sa.String(500), nullable=False, server_default=""),
        sa.Column("description_title", sa.String(500), nullable=False, server_default=""),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("alt_text", sa.String(500), nullable=False, server_default=""),
        sa.Column("position", sa.String(10), nullable=False, server_default="center"),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_table(
        "graphic_organizers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _activity_fk(),
        sa.Column("template_type", sa.String(100), nullable=False, server_default=""),
        sa.Column("content", sa.JSON(), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    # Nested ordered payloads
    op.create_table(
        "vocabulary_items",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _activity_fk(unique=False),
        sa.Column("word", sa.String(255), nullable=False, server_default=""),
        sa.Column("definition", sa.Text(), nullable=False, server_default=""),
        sa.Column("vocab_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_vocabulary_items_activity_id", "vocabulary_items", ["activity_id"])
    op.create_index("ix_vocabulary_items_activity_order", "vocabulary_items", ["activity_id", "vocab_order"])

    op.create_table(
        "questions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _activity_fk(unique=False),
        sa.Column("question_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("question_title", sa.String(500), nullable=False, server_default=""),
        sa.Column("question_text", sa.Text(), nullable=False, server_default=""),
        sa.Column("question_type", sa.String(50), nullable=True),
        sa.Column("part_b", sa.Text(), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_questions_activity_id", "questions", ["activity_id"])
    op.create_index("ix_questions_activity_order", "questions", ["activity_id", "question_order"])

    op.create_table(
        "question_choices",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("question_id", sa.Uuid(), sa.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("choice_text", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_correct", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_question_choices_question_id", "question_choices", ["question_id"])

    # Lesson plan directions (owned by the lesson plan editor)
    op.create_table(
        "lesson_plan_directions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("lesson_plan_id", sa.Uuid(), nullable=False),
        sa.Column("activity_id", sa.Uuid(), sa.ForeignKey("activities.id", ondelete="SET NULL"), nullable=True),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("direction_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_lesson_plan_directions_lesson_plan_id", "lesson_plan_directions", ["lesson_plan_id"])
    op.create_index("ix_lesson_plan_directions_activity_id", "lesson_plan_directions", ["activity_id"])

    # Audit log
    op.create_table(
        "event_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("lesson_id", sa.Uuid(), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("request_id", sa.String(64), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_event_logs_event_type", "event_logs", ["event_type"])
    op.create_index("ix_event_logs_entity_id", "event_logs", ["entity_id"])
    op.create_index("ix_event_logs_lesson_id", "event_logs", ["lesson_id"])
    op.create_index("ix_event_logs_created_at", "event_logs", ["created_at"])
    op.create_index("ix_event_logs_entity", "event_logs", ["entity_type", "entity_id"])
    op.create_index("ix_event_logs_lesson_time", "event_logs", ["lesson_id", "created_at"])


def downgrade() -> None:
    op.drop_table("event_logs")
    op.drop_table("lesson_plan_directions")
    op.drop_table("question_choices")
    op.drop_table("questions")
    op.drop_table("vocabulary_items")
    op.drop_table("graphic_organizers")
    op.drop_table("images")
    op.drop_table("in_text_sources")
    op.drop_table("sources")
    op.drop_table("sub_readings")
    op.drop_table("reading_addons")
    op.drop_table("readings")
    op.drop_table("activities")
