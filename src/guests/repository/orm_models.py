from datetime import datetime
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.guests.dtos import ContactMethod, GuestList, RSVPStatus, Side
from src.models.base import Base, TimeStamp


def _values(enum_cls):
    return [e.value for e in enum_cls]


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value
    __table_args__ = (
        # At most one companion per invite code
        sa.Index(
            "uq_guests_invite_code_companion",
            "invite_code",
            unique=True,
            postgresql_where=sa.text("is_companion"),
            sqlite_where=sa.text("is_companion"),
        ),
    )

    invite_code: Mapped[str] = mapped_column(String(9), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    # Companion ("plus-one") relationship
    # is_companion=False: primary guest, owns the invite code
    # is_companion=True: plus-one, primary_guest_id points to the owner
    is_companion: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    primary_guest_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    companion_allowed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Subject id issued by the identity provider; never set on a companion
    identity_ref: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)

    # Contact
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    whatsapp: Mapped[str | None] = mapped_column(String(50), nullable=True)
    preferred_contact_method: Mapped[ContactMethod | None] = mapped_column(
        Enum(ContactMethod, name="contact_method_enum", values_callable=_values),
        nullable=True,
    )
    mailing_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Profile
    under_21: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    family: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    side: Mapped[Side | None] = mapped_column(
        Enum(Side, name="side_enum", values_callable=_values),
        nullable=True,
    )
    guest_list: Mapped[GuestList] = mapped_column(
        "list",
        Enum(GuestList, name="guest_list_enum", values_callable=_values),
        default=GuestList.A,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    rsvp_status: Mapped[RSVPStatus] = mapped_column(
        Enum(RSVPStatus, name="rsvp_status_enum", values_callable=_values),
        default=RSVPStatus.PENDING,
        nullable=False,
    )

    # Invitation bookkeeping
    number_of_resends: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    physical_invite_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Guest {self.first_name} {self.invite_code} - {self.rsvp_status}>"


class EmailLog(Base, TimeStamp):
    __tablename__ = TableNames.EMAIL_LOGS.value

    resend_email_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True, unique=True
    )

    to_address: Mapped[str] = mapped_column(String(1000), nullable=False, index=True)
    from_address: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)

    # Stored for debugging/audit
    html_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    text_body: Mapped[str | None] = mapped_column(Text, nullable=True)

    email_type: Mapped[str] = mapped_column(
        Enum(
            "invitation",
            "rsvp_notification",
            "event_invitation",
            "event_rsvp_notification",
            name="email_type_enum",
        ),
        nullable=False,
        index=True,
    )

    guest_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        Enum("pending", "sent", "failed", name="email_status_enum"),
        default="pending",
        nullable=False,
        index=True,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<EmailLog {self.resend_email_id} to={self.to_address} type={self.email_type} status={self.status}>"
