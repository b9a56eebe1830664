"""analytics tables

visitors, visitor_events and error_logs. New environments may also rely on
SQLModel.metadata.create_all(engine) at startup; both produce the same schema.

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
import sqlmodel  # noqa: F401


revision: str = "0001_analytics_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "visitors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("page_path", sa.String(length=512), nullable=False),
        sa.Column("referrer", sa.String(), nullable=True),
        sa.Column("user_agent", sa.String(), nullable=True),
        sa.Column("country", sa.String(length=8), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_visitors_session_id", "visitors", ["session_id"])
    op.create_index("ix_visitors_created_at", "visitors", ["created_at"])

    op.create_table(
        "visitor_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("page_path", sa.String(length=512), nullable=False),
        sa.Column("event_type", sa.String(length=32), nullable=False),
        sa.Column("element_tag", sa.String(), nullable=True),
        sa.Column("element_text", sa.String(), nullable=True),
        sa.Column("element_id", sa.String(), nullable=True),
        sa.Column("element_class", sa.String(), nullable=True),
        sa.Column("x_position", sa.Integer(), nullable=True),
        sa.Column("y_position", sa.Integer(), nullable=True),
        sa.Column("viewport_width", sa.Integer(), nullable=True),
        sa.Column("viewport_height", sa.Integer(), nullable=True),
        sa.Column("scroll_depth", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_visitor_events_session_id", "visitor_events", ["session_id"])
    op.create_index("ix_visitor_events_event_type", "visitor_events", ["event_type"])
    op.create_index("ix_visitor_events_created_at", "visitor_events", ["created_at"])

    op.create_table(
        "error_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("endpoint", sa.String(), nullable=True),
        sa.Column("method", sa.String(), nullable=True),
        sa.Column("error_message", sa.String(), nullable=True),
        sa.Column("stack_trace", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("error_logs")
    op.drop_index("ix_visitor_events_created_at", table_name="visitor_events")
    op.drop_index("ix_visitor_events_event_type", table_name="visitor_events")
    op.drop_index("ix_visitor_events_session_id", table_name="visitor_events")
    op.drop_table("visitor_events")
    op.drop_index("ix_visitors_created_at", table_name="visitors")
    op.drop_index("ix_visitors_session_id", table_name="visitors")
    op.drop_table("visitors")
