from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

from src.guests.dtos import ErrorCode, GuestDTO, RSVPStatus


class EventNotFoundError(Exception):
    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__(f"Event with ID {event_id} not found")


class DefaultEventInvitesLockedError(Exception):
    """Default events invite every guest; their invite list cannot be edited."""

    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__("Cannot manage invites for default events")


@dataclass(frozen=True)
class EventDTO:
    name: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    event_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    location_name: str | None = None
    location_address: str | None = None
    is_default: bool = False
    display_order: int = 0


@dataclass(frozen=True)
class EventInviteDTO:
    event_id: UUID
    guest_id: UUID
    id: UUID = field(default_factory=uuid4)
    rsvp_status: RSVPStatus = RSVPStatus.PENDING
    email_sent: bool = False
    email_sent_at: datetime | None = None
    email_resend_count: int = 0


@dataclass(frozen=True)
class EventInviteViewDTO:
    """Result of verifying an invite code against one event."""

    guest: GuestDTO
    event: EventDTO
    rsvp_status: RSVPStatus
    invite_id: UUID | None = None


@dataclass(frozen=True)
class EventInviteLookupResultDTO:
    success: bool
    error: ErrorCode | None = None
    invite: EventInviteViewDTO | None = None


@dataclass(frozen=True)
class EventRSVPResultDTO:
    success: bool
    error: ErrorCode | None = None
    message: str | None = None
    status: RSVPStatus | None = None


@dataclass(frozen=True)
class GuestInviteStatusDTO:
    """One primary guest's state for an event, as shown on the admin invite list."""

    guest: GuestDTO
    invite: EventInviteDTO | None = None

    @property
    def is_invited(self) -> bool:
        return self.invite is not None


@dataclass(frozen=True)
class InviteCountsDTO:
    total: int = 0
    invited: int = 0
    email_sent: int = 0
    confirmed: int = 0
    declined: int = 0

    @property
    def pending(self) -> int:
        return self.invited - self.confirmed - self.declined


@dataclass(frozen=True)
class EventInviteListDTO:
    event: EventDTO
    guests: list[GuestInviteStatusDTO]
    counts: InviteCountsDTO


@dataclass(frozen=True)
class EventSummaryDTO:
    event: EventDTO
    invite_count: int
    confirmed_count: int
    declined_count: int


@dataclass(frozen=True)
class SendInvitesResultDTO:
    sent: list[UUID] = field(default_factory=list)
    failed: dict[UUID, str] = field(default_factory=dict)


class NoInvitedGuestsError(Exception):
    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__("No invited guests found with the provided IDs")
