import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime
from uuid import UUID

from src.email_service.base import EmailServiceBase
from src.events.dtos import (
    DefaultEventInvitesLockedError,
    EventDTO,
    EventInviteListDTO,
    EventNotFoundError,
    EventSummaryDTO,
    GuestInviteStatusDTO,
    InviteCountsDTO,
    NoInvitedGuestsError,
    SendInvitesResultDTO,
)
from src.events.repository.event_store import EventStore
from src.guests.dtos import GuestsWithoutEmailError, RSVPStatus, normalize_invite_code
from src.guests.repository.guest_store import GuestStore

logger = logging.getLogger(__name__)


def _format_clock(value: str) -> str:
    hours, _, minutes = value.partition(":")
    hour = int(hours or 0)
    return f"{hour % 12 or 12}:{(minutes or '00')[:2]} {'PM' if hour >= 12 else 'AM'}"


def format_event_when(event: EventDTO) -> str:
    """Human readable date and time range, e.g. "2026-08-15, 7:00 PM - 11:30 PM"."""
    parts = []
    if event.event_date:
        parts.append(event.event_date.isoformat())
    if event.start_time:
        time_range = _format_clock(event.start_time)
        if event.end_time:
            time_range += f" - {_format_clock(event.end_time)}"
        parts.append(time_range)
    return ", ".join(parts)


def event_rsvp_url(frontend_url: str, invite_code: str, event_id: UUID) -> str:
    return f"{frontend_url.rstrip('/')}/events/rsvp?code={normalize_invite_code(invite_code)}&event={event_id}"


class EventInviteAdminWriteModel:
    """Admin management of events and their invite lists."""

    def __init__(
        self,
        guest_store: GuestStore,
        event_store: EventStore,
        email_service: EmailServiceBase | None = None,
        frontend_url: str = "",
    ) -> None:
        self.guest_store = guest_store
        self.event_store = event_store
        self.email_service = email_service
        self.frontend_url = frontend_url

    async def create_event(
        self,
        name: str,
        description: str | None = None,
        event_date: date | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        location_name: str | None = None,
        location_address: str | None = None,
        is_default: bool = False,
    ) -> EventDTO:
        event = await self.event_store.insert_event(
            EventDTO(
                name=name,
                description=description or None,
                event_date=event_date,
                start_time=start_time or None,
                end_time=end_time or None,
                location_name=location_name or None,
                location_address=location_address or None,
                is_default=is_default,
            )
        )
        logger.info("Created event %s (%s)", event.id, event.name)
        return event

    async def list_events(self) -> list[EventSummaryDTO]:
        """Events with invite counts.

        Every primary guest counts toward a default event: by their answer to the
        event where one was given, otherwise by their main RSVP.
        """
        summaries = []
        for event in await self.event_store.list_events():
            answered = {i.guest_id: i.rsvp_status for i in await self.event_store.list_invites(event.id)}
            if event.is_default:
                statuses = [
                    answered.get(g.id, g.rsvp_status) for g in await self.guest_store.list_primary_guests()
                ]
            else:
                statuses = list(answered.values())
            summaries.append(
                EventSummaryDTO(
                    event=event,
                    invite_count=len(statuses),
                    confirmed_count=statuses.count(RSVPStatus.YES),
                    declined_count=statuses.count(RSVPStatus.NO),
                )
            )
        return summaries

    async def _get_managed_event(self, event_id: UUID) -> EventDTO:
        event = await self.event_store.find_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        if event.is_default:
            raise DefaultEventInvitesLockedError(event_id)
        return event

    async def list_event_invites(self, event_id: UUID) -> EventInviteListDTO:
        """Every primary guest with their invite state for the event.

        Raises:
            EventNotFoundError: if the event does not exist
            DefaultEventInvitesLockedError: if the event is a default event
        """
        event = await self._get_managed_event(event_id)
        invites = {i.guest_id: i for i in await self.event_store.list_invites(event.id)}
        guests = [
            GuestInviteStatusDTO(guest=guest, invite=invites.get(guest.id))
            for guest in await self.guest_store.list_primary_guests()
        ]

        invited = [g.invite for g in guests if g.invite is not None]
        counts = InviteCountsDTO(
            total=len(guests),
            invited=len(invited),
            email_sent=sum(1 for i in invited if i.email_sent),
            confirmed=sum(1 for i in invited if i.rsvp_status == RSVPStatus.YES),
            declined=sum(1 for i in invited if i.rsvp_status == RSVPStatus.NO),
        )
        return EventInviteListDTO(event=event, guests=guests, counts=counts)

    async def add_invites(self, event_id: UUID, guest_ids: Iterable[UUID]) -> int:
        event = await self._get_managed_event(event_id)
        added = await self.event_store.add_invites(event.id, guest_ids)
        logger.info("Added %d invites to event %s", added, event.id)
        return added

    async def remove_invites(self, event_id: UUID, guest_ids: Iterable[UUID]) -> int:
        event = await self._get_managed_event(event_id)
        removed = await self.event_store.remove_invites(event.id, guest_ids)
        logger.info("Removed %d invites from event %s", removed, event.id)
        return removed

    async def send_event_invitations(self, event_id: UUID, guest_ids: Iterable[UUID]) -> SendInvitesResultDTO:
        """Email the event invitation to the selected invited guests.

        Sending failures are collected per guest rather than raised.

        Raises:
            EventNotFoundError: if the event does not exist
            DefaultEventInvitesLockedError: if the event is a default event
            NoInvitedGuestsError: if none of the guests is invited to the event
            GuestsWithoutEmailError: if any selected guest has no email address
        """
        event = await self._get_managed_event(event_id)
        selected = set(guest_ids)
        invites = [i for i in await self.event_store.list_invites(event.id) if i.guest_id in selected]
        if not invites:
            raise NoInvitedGuestsError(event.id)

        recipients = [(invite, await self.guest_store.find_by_id(invite.guest_id)) for invite in invites]
        without_email = [g.first_name for _, g in recipients if g is None or not g.email or "@" not in g.email]
        if without_email:
            raise GuestsWithoutEmailError(without_email)

        result = SendInvitesResultDTO()
        when, where = format_event_when(event), event.location_name or ""
        for invite, guest in recipients:
            try:
                await self.email_service.send_event_invitation(
                    to_address=guest.email,
                    guest_name=guest.full_name,
                    invite_code=guest.invite_code,
                    rsvp_url=event_rsvp_url(self.frontend_url, guest.invite_code, event.id),
                    event_name=event.name,
                    event_when=when,
                    event_where=where,
                    guest_id=guest.id,
                )
            except Exception as e:
                logger.exception("Failed to send event invitation to guest %s", guest.id)
                result.failed[guest.id] = str(e)
                continue
            await self.event_store.mark_email_sent(invite.id, datetime.now(UTC))
            result.sent.append(guest.id)
        return result
