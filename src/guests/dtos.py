from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID, uuid4


class RSVPStatus(str, Enum):
    PENDING = "pending"
    YES = "yes"
    NO = "no"


class ContactMethod(str, Enum):
    EMAIL = "email"
    TEXT = "text"
    WHATSAPP = "whatsapp"
    PHONE_CALL = "phone_call"


class Side(str, Enum):
    BRIDE = "bride"
    GROOM = "groom"
    BOTH = "both"


class GuestList(str, Enum):
    A = "a"
    B = "b"
    C = "c"


class ErrorCode(str, Enum):
    NOT_AUTHENTICATED = "not_authenticated"
    INVALID_INVITE_CODE = "invalid_invite_code"
    ALREADY_LINKED = "already_linked"
    PRIMARY_NOT_FOUND = "primary_not_found"
    MISSING_INVITE_CODE = "missing_invite_code"
    CODE_SPACE_EXHAUSTED = "code_space_exhausted"
    EVENT_NOT_FOUND = "event_not_found"
    NOT_INVITED = "not_invited"


class CodeSpaceExhaustedError(Exception):
    """Raised when no unused invite code was found within the attempt budget."""

    code = ErrorCode.CODE_SPACE_EXHAUSTED

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Failed to generate a unique invite code after {attempts} attempts")


class GuestNotFoundError(Exception):
    """Raised when an admin action targets a guest that does not exist."""

    def __init__(self, guest_id: UUID) -> None:
        self.guest_id = guest_id
        super().__init__(f"Guest with ID {guest_id} not found")


class GuestHasNoEmailError(Exception):
    """Raised when an invitation email is requested for a guest without an address."""

    def __init__(self, guest_id: UUID) -> None:
        self.guest_id = guest_id
        super().__init__(f"Guest with ID {guest_id} has no email address")


class NoGuestsFoundError(Exception):
    def __init__(self) -> None:
        super().__init__("No guests found with the provided IDs")


class GuestsWithoutEmailError(Exception):
    """Raised before sending when any selected guest has no usable email address."""

    def __init__(self, guest_names: list[str]) -> None:
        self.guest_names = guest_names
        super().__init__(f"{len(guest_names)} guest(s) don't have valid email addresses")


class GuestsAlreadyAttendingError(Exception):
    """Raised before sending invitations when any selected guest has already accepted."""

    def __init__(self, guest_names: list[str]) -> None:
        self.guest_names = guest_names
        super().__init__(f"{len(guest_names)} guest(s) have already RSVP'd yes")


class DuplicateCompanionError(Exception):
    """Raised by a guest store when a second companion is inserted for one invite code."""

    def __init__(self, invite_code: str) -> None:
        self.invite_code = invite_code
        super().__init__(f"Invite code '{invite_code}' already has a companion")


def normalize_invite_code(code: str | None) -> str:
    """Invite codes are case-insensitive; lookups and storage always use uppercase."""
    return (code or "").strip().upper()


def empty_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class GuestDTO:
    """One invited individual. Companions share the primary guest's invite code."""

    first_name: str
    invite_code: str
    id: UUID = field(default_factory=uuid4)
    last_name: str | None = None
    email: str | None = None
    is_companion: bool = False
    primary_guest_id: UUID | None = None
    companion_allowed: bool = False
    identity_ref: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    preferred_contact_method: ContactMethod | None = None
    mailing_address: str | None = None
    under_21: bool = False
    family: bool = False
    dietary_restrictions: str | None = None
    rsvp_status: RSVPStatus = RSVPStatus.PENDING
    side: Side | None = None
    guest_list: GuestList = GuestList.A
    notes: str | None = None
    number_of_resends: int = 0
    physical_invite_sent: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}" if self.last_name else self.first_name


@dataclass(frozen=True)
class PartyDTO:
    """A primary guest and the optional companion sharing one invite code."""

    invite_code: str
    primary_guest: GuestDTO
    companion: GuestDTO | None = None
    is_authenticated: bool = False
    is_admin: bool = False

    @property
    def members(self) -> list[GuestDTO]:
        if self.companion is None:
            return [self.primary_guest]
        return [self.primary_guest, self.companion]


def split_party(guests: list[GuestDTO]) -> tuple[GuestDTO | None, GuestDTO | None]:
    """Return (primary, companion) from the guests sharing one invite code."""
    primary = next((g for g in guests if not g.is_companion), None)
    companion = next((g for g in guests if g.is_companion), None)
    return primary, companion


@dataclass(frozen=True)
class ContactDetailsDTO:
    """Contact fields submitted with an RSVP. Absent values overwrite stored ones with null."""

    mailing_address: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    preferred_contact_method: ContactMethod | None = None

    def as_changes(self) -> dict:
        return {
            "mailing_address": empty_to_none(self.mailing_address),
            "phone": empty_to_none(self.phone),
            "whatsapp": empty_to_none(self.whatsapp),
            "preferred_contact_method": self.preferred_contact_method or None,
        }


@dataclass(frozen=True)
class CompanionDecisionDTO:
    attending: bool
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    preferred_contact_method: ContactMethod | None = None
    dietary_restrictions: str | None = None

    @property
    def has_name(self) -> bool:
        return empty_to_none(self.first_name) is not None


@dataclass(frozen=True)
class RSVPDecisionDTO:
    """An attendee's RSVP.

    ``companion`` is None when the form said nothing about the plus-one; that
    leaves an existing companion record untouched.
    """

    attending: bool
    dietary_restrictions: str | None = None
    contact: ContactDetailsDTO = field(default_factory=ContactDetailsDTO)
    companion: CompanionDecisionDTO | None = None


@dataclass(frozen=True)
class LinkResultDTO:
    success: bool
    error: ErrorCode | None = None
    guest_id: UUID | None = None


@dataclass(frozen=True)
class RSVPResultDTO:
    success: bool
    error: ErrorCode | None = None
    message: str | None = None
    status: RSVPStatus | None = None


@dataclass(frozen=True)
class ContactInfoResultDTO:
    success: bool
    error: ErrorCode | None = None
    guests: list[GuestDTO] = field(default_factory=list)


@dataclass(frozen=True)
class InvitationSendResultDTO:
    sent: list[UUID] = field(default_factory=list)
    failed: dict[UUID, str] = field(default_factory=dict)


@dataclass(frozen=True)
class NewGuestDTO:
    """Admin input for creating a primary guest."""

    first_name: str
    last_name: str | None = None
    email: str | None = None
    side: Side | None = None
    guest_list: GuestList = GuestList.A
    companion_allowed: bool = False
    companion_first_name: str | None = None
    companion_last_name: str | None = None
    mailing_address: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    preferred_contact_method: ContactMethod | None = None
    family: bool = False
    notes: str | None = None
    send_email: bool = False
