from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from functools import partial
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.events.dtos import EventDTO, EventInviteDTO
from src.events.repository.orm_models import Event, EventInvite
from src.guests.dtos import RSVPStatus


def event_to_dto(event: Event) -> EventDTO:
    return EventDTO(
        id=event.uuid,
        name=event.name,
        description=event.description,
        event_date=event.event_date,
        start_time=event.start_time,
        end_time=event.end_time,
        location_name=event.location_name,
        location_address=event.location_address,
        is_default=event.is_default,
        display_order=event.display_order,
    )


def invite_to_dto(invite: EventInvite) -> EventInviteDTO:
    return EventInviteDTO(
        id=invite.uuid,
        event_id=invite.event_id,
        guest_id=invite.guest_id,
        rsvp_status=invite.rsvp_status,
        email_sent=invite.email_sent,
        email_sent_at=invite.email_sent_at,
        email_resend_count=invite.email_resend_count,
    )


class EventStore(ABC):
    @abstractmethod
    async def find_event(self, event_id: UUID) -> EventDTO | None:
        raise NotImplementedError

    @abstractmethod
    async def list_events(self) -> list[EventDTO]:
        """Events ordered by display order, then date."""
        raise NotImplementedError

    @abstractmethod
    async def insert_event(self, event: EventDTO) -> EventDTO:
        """Insert an event, placing it after every existing event."""
        raise NotImplementedError

    @abstractmethod
    async def find_invite(self, event_id: UUID, guest_id: UUID) -> EventInviteDTO | None:
        raise NotImplementedError

    @abstractmethod
    async def list_invites(self, event_id: UUID) -> list[EventInviteDTO]:
        raise NotImplementedError

    @abstractmethod
    async def add_invites(self, event_id: UUID, guest_ids: Iterable[UUID]) -> int:
        """Insert-or-ignore invite rows. Returns the number of rows created."""
        raise NotImplementedError

    @abstractmethod
    async def remove_invites(self, event_id: UUID, guest_ids: Iterable[UUID]) -> int:
        raise NotImplementedError

    @abstractmethod
    async def set_invite_status(
        self, event_id: UUID, guest_id: UUID, status: RSVPStatus
    ) -> EventInviteDTO:
        """Set the RSVP status of an invite row, creating the row if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    async def mark_email_sent(self, invite_id: UUID, sent_at: datetime) -> EventInviteDTO:
        """Record a sent invitation. Re-sends increment email_resend_count."""
        raise NotImplementedError


class SqlEventStore(EventStore):
    """SQL implementation of the event store."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def find_event(self, event_id: UUID) -> EventDTO | None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await session.get(Event, event_id)
            return event_to_dto(event) if event else None

    async def list_events(self) -> list[EventDTO]:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Event).order_by(Event.display_order, Event.event_date)
            )
            return [event_to_dto(event) for event in result.scalars().all()]

    async def insert_event(self, event: EventDTO) -> EventDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            max_order = await session.scalar(select(func.max(Event.display_order)))
            row = Event(
                uuid=event.id,
                name=event.name,
                description=event.description,
                event_date=event.event_date,
                start_time=event.start_time,
                end_time=event.end_time,
                location_name=event.location_name,
                location_address=event.location_address,
                is_default=event.is_default,
                display_order=(max_order or 0) + 1,
            )
            session.add(row)
            await session.flush()
            return event_to_dto(row)

    async def find_invite(self, event_id: UUID, guest_id: UUID) -> EventInviteDTO | None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            invite = await self._get_invite(session, event_id, guest_id)
            return invite_to_dto(invite) if invite else None

    async def list_invites(self, event_id: UUID) -> list[EventInviteDTO]:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(select(EventInvite).where(EventInvite.event_id == event_id))
            return [invite_to_dto(invite) for invite in result.scalars().all()]

    async def add_invites(self, event_id: UUID, guest_ids: Iterable[UUID]) -> int:
        added = 0
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            for guest_id in dict.fromkeys(guest_ids):
                if await self._get_invite(session, event_id, guest_id):
                    continue
                try:
                    async with session.begin_nested():
                        session.add(EventInvite(event_id=event_id, guest_id=guest_id))
                except IntegrityError:
                    # created concurrently
                    continue
                added += 1
        return added

    async def remove_invites(self, event_id: UUID, guest_ids: Iterable[UUID]) -> int:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                delete(EventInvite)
                .where(EventInvite.event_id == event_id)
                .where(EventInvite.guest_id.in_(list(guest_ids)))
            )
            return result.rowcount

    async def set_invite_status(
        self, event_id: UUID, guest_id: UUID, status: RSVPStatus
    ) -> EventInviteDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            invite = await self._get_invite(session, event_id, guest_id)
            if invite is None:
                invite = EventInvite(event_id=event_id, guest_id=guest_id)
                session.add(invite)
            invite.rsvp_status = status
            await session.flush()
            return invite_to_dto(invite)

    async def mark_email_sent(self, invite_id: UUID, sent_at: datetime) -> EventInviteDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            invite = await session.get(EventInvite, invite_id)
            if invite is None:
                raise ValueError(f"Event invite with ID {invite_id} not found")
            if invite.email_sent:
                invite.email_resend_count += 1
            invite.email_sent = True
            invite.email_sent_at = sent_at
            await session.flush()
            return invite_to_dto(invite)

    @staticmethod
    async def _get_invite(session: AsyncSession, event_id: UUID, guest_id: UUID) -> EventInvite | None:
        result = await session.execute(
            select(EventInvite)
            .where(EventInvite.event_id == event_id)
            .where(EventInvite.guest_id == guest_id)
        )
        return result.scalar_one_or_none()


def get_event_store() -> EventStore:
    """Dependency to get event store instance."""
    return SqlEventStore()
