"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates the tables for artist events:
events, event_rsvps, notifications.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

event_category = sa.Enum("live_stream", "concert", "meet_greet", "album_release", name="event_category")
notification_type = sa.Enum("event_reminder", name="notification_type")


def upgrade() -> None:
    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("artist_id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("category", event_category, nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("venue", sa.String(500), nullable=True),
        sa.Column("stream_url", sa.String(2048), nullable=True),
        sa.Column("ticket_url", sa.String(2048), nullable=True),
        sa.Column("is_virtual", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("attendee_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("attendee_count >= 0", name="ck_events_attendee_count_non_negative"),
    )
    op.create_index("ix_events_artist_id", "events", ["artist_id"])
    op.create_index("ix_events_start_time", "events", ["start_time"])
    op.create_index("ix_events_artist_start", "events", ["artist_id", "start_time"])

    # --- event_rsvps ---
    op.create_table(
        "event_rsvps",
        sa.Column("rsvp_id", sa.String(36), primary_key=True),
        sa.Column(
            "event_id", sa.String(36),
            sa.ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("reminder_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("reminder_sent", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_rsvps_event_user"),
    )
    op.create_index("ix_event_rsvps_event_id", "event_rsvps", ["event_id"])
    op.create_index("ix_event_rsvps_user_id", "event_rsvps", ["user_id"])
    op.create_index(
        "ix_event_rsvps_pending_reminder",
        "event_rsvps",
        ["reminder_enabled", "reminder_sent"],
        postgresql_where=sa.text("reminder_enabled = true AND reminder_sent = false"),
    )

    # --- notifications ---
    op.create_table(
        "notifications",
        sa.Column("notification_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("type", notification_type, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("data", sa.JSON, nullable=True),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_notifications_user_read", "notifications", ["user_id", "is_read"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("event_rsvps")
    op.drop_table("events")
    notification_type.drop(op.get_bind(), checkfirst=True)
    event_category.drop(op.get_bind(), checkfirst=True)
