"""Write model for per-event RSVPs.

Each invited primary guest answers for themselves; there is no companion
cascade. Default events invite every guest, so their invite row is created
the first time the guest answers.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from src.email_service.base import EmailServiceBase
from src.events.dtos import (
    EventDTO,
    EventInviteDTO,
    EventInviteLookupResultDTO,
    EventInviteViewDTO,
    EventRSVPResultDTO,
)
from src.events.repository.event_store import EventStore
from src.guests.dtos import ErrorCode, GuestDTO, RSVPStatus, normalize_invite_code, split_party
from src.guests.repository.guest_store import GuestStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Lookup:
    error: ErrorCode | None = None
    guest: GuestDTO | None = None
    event: EventDTO | None = None
    invite: EventInviteDTO | None = None


class EventRSVPWriteModel:
    def __init__(
        self,
        guest_store: GuestStore,
        event_store: EventStore,
        email_service: EmailServiceBase | None = None,
        notification_emails: list[str] | None = None,
    ) -> None:
        self.guest_store = guest_store
        self.event_store = event_store
        self.email_service = email_service
        self.notification_emails = notification_emails or []

    async def _lookup(self, invite_code: str | None, event_id: UUID | None) -> _Lookup:
        code = normalize_invite_code(invite_code)
        if not code or event_id is None:
            return _Lookup(error=ErrorCode.MISSING_INVITE_CODE)

        guest, _ = split_party(await self.guest_store.find_by_invite_code(code))
        if guest is None:
            return _Lookup(error=ErrorCode.INVALID_INVITE_CODE)

        event = await self.event_store.find_event(event_id)
        if event is None:
            return _Lookup(error=ErrorCode.EVENT_NOT_FOUND)

        invite = await self.event_store.find_invite(event.id, guest.id)
        if invite is None and not event.is_default:
            return _Lookup(error=ErrorCode.NOT_INVITED)

        return _Lookup(guest=guest, event=event, invite=invite)

    async def verify_event_invite(
        self, invite_code: str | None, event_id: UUID | None
    ) -> EventInviteLookupResultDTO:
        lookup = await self._lookup(invite_code, event_id)
        if lookup.error is not None:
            return EventInviteLookupResultDTO(success=False, error=lookup.error)

        return EventInviteLookupResultDTO(
            success=True,
            invite=EventInviteViewDTO(
                guest=lookup.guest,
                event=lookup.event,
                rsvp_status=lookup.invite.rsvp_status if lookup.invite else RSVPStatus.PENDING,
                invite_id=lookup.invite.id if lookup.invite else None,
            ),
        )

    async def submit_event_rsvp(
        self, invite_code: str | None, event_id: UUID | None, attending: bool
    ) -> EventRSVPResultDTO:
        lookup = await self._lookup(invite_code, event_id)
        if lookup.error is not None:
            return EventRSVPResultDTO(success=False, error=lookup.error)

        status = RSVPStatus.YES if attending else RSVPStatus.NO
        await self.event_store.set_invite_status(lookup.event.id, lookup.guest.id, status)

        await self._notify_admins(lookup.guest, lookup.event, attending)

        message = "Thank you for confirming your attendance!" if attending else "Thank you for letting us know."
        return EventRSVPResultDTO(success=True, message=message, status=status)

    async def _notify_admins(self, guest: GuestDTO, event: EventDTO, attending: bool) -> None:
        if self.email_service is None or not self.notification_emails:
            return
        try:
            await self.email_service.send_event_rsvp_notification(
                to_addresses=self.notification_emails,
                guest_name=guest.full_name,
                guest_email=guest.email,
                invite_code=guest.invite_code,
                event_name=event.name,
                attending=attending,
            )
        except Exception:
            logger.exception("Failed to send event RSVP notification for %s", guest.invite_code)
