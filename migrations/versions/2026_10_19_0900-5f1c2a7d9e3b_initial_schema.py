"""initial_schema

Revision ID: 5f1c2a7d9e3b
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "5f1c2a7d9e3b"
down_revision = None
branch_labels = None
depends_on = None

ENUMS = {
    "rsvp_status_enum": ("pending", "yes", "no"),
    "contact_method_enum": ("email", "text", "whatsapp", "phone_call"),
    "side_enum": ("bride", "groom", "both"),
    "guest_list_enum": ("a", "b", "c"),
    "email_type_enum": ("invitation", "rsvp_notification", "event_invitation", "event_rsvp_notification"),
    "email_status_enum": ("pending", "sent", "failed"),
}


def _enum(name: str) -> postgresql.ENUM:
    # types are created once up front; rsvp_status_enum is shared by two tables
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp()),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for name, values in ENUMS.items():
            postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "guests",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("invite_code", sa.String(length=9), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("is_companion", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("primary_guest_id", sa.UUID(), nullable=True),
        sa.Column("companion_allowed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("identity_ref", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("whatsapp", sa.String(length=50), nullable=True),
        sa.Column("preferred_contact_method", _enum("contact_method_enum"), nullable=True),
        sa.Column("mailing_address", sa.Text(), nullable=True),
        sa.Column("under_21", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("family", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("side", _enum("side_enum"), nullable=True),
        sa.Column("list", _enum("guest_list_enum"), nullable=False, server_default="a"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("rsvp_status", _enum("rsvp_status_enum"), nullable=False, server_default="pending"),
        sa.Column("number_of_resends", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("physical_invite_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["primary_guest_id"], ["guests.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("identity_ref", name="uq_guests_identity_ref"),
    )
    op.create_index("ix_guests_invite_code", "guests", ["invite_code"])
    op.create_index("ix_guests_first_name", "guests", ["first_name"])
    op.create_index("ix_guests_email", "guests", ["email"])
    op.create_index("ix_guests_primary_guest_id", "guests", ["primary_guest_id"])
    op.create_index(
        "uq_guests_invite_code_companion",
        "guests",
        ["invite_code"],
        unique=True,
        postgresql_where=sa.text("is_companion"),
        sqlite_where=sa.text("is_companion"),
    )

    op.create_table(
        "events",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=True),
        sa.Column("start_time", sa.String(length=20), nullable=True),
        sa.Column("end_time", sa.String(length=20), nullable=True),
        sa.Column("location_name", sa.String(length=255), nullable=True),
        sa.Column("location_address", sa.Text(), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("uuid"),
    )

    op.create_table(
        "event_invites",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("guest_id", sa.UUID(), nullable=False),
        sa.Column("rsvp_status", _enum("rsvp_status_enum"), nullable=False, server_default="pending"),
        sa.Column("email_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("email_resend_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("event_id", "guest_id", name="uq_event_invites_event_guest"),
    )
    op.create_index("ix_event_invites_event_id", "event_invites", ["event_id"])
    op.create_index("ix_event_invites_guest_id", "event_invites", ["guest_id"])

    op.create_table(
        "email_logs",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("resend_email_id", sa.String(length=255), nullable=True),
        sa.Column("to_address", sa.String(length=1000), nullable=False),
        sa.Column("from_address", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=500), nullable=False),
        sa.Column("html_body", sa.Text(), nullable=True),
        sa.Column("text_body", sa.Text(), nullable=True),
        sa.Column("email_type", _enum("email_type_enum"), nullable=False),
        sa.Column("guest_id", sa.UUID(), nullable=True),
        sa.Column("status", _enum("email_status_enum"), nullable=False, server_default="pending"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.uuid"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_email_logs_resend_email_id", "email_logs", ["resend_email_id"], unique=True)
    op.create_index("ix_email_logs_to_address", "email_logs", ["to_address"])
    op.create_index("ix_email_logs_email_type", "email_logs", ["email_type"])
    op.create_index("ix_email_logs_guest_id", "email_logs", ["guest_id"])
    op.create_index("ix_email_logs_status", "email_logs", ["status"])


def downgrade() -> None:
    op.drop_table("email_logs")
    op.drop_table("event_invites")
    op.drop_table("events")
    op.drop_index("uq_guests_invite_code_companion", table_name="guests")
    op.drop_table("guests")

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for name in ENUMS:
            op.execute(f"DROP TYPE IF EXISTS {name}")
