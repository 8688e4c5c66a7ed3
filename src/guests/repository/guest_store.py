"""Guest store - the storage boundary of the RSVP core.

Read and write operations over guest records keyed by id, invite code or
identity reference. Returns DTOs, never ORM models.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import fields
from functools import partial
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import DuplicateCompanionError, GuestDTO, normalize_invite_code
from src.guests.repository.orm_models import Guest

logger = logging.getLogger(__name__)

GUEST_FIELDS = tuple(f.name for f in fields(GuestDTO) if f.name != "id")


def to_dto(guest: Guest) -> GuestDTO:
    return GuestDTO(id=guest.uuid, **{name: getattr(guest, name) for name in GUEST_FIELDS})


class GuestStore(ABC):
    @abstractmethod
    async def find_by_id(self, guest_id: UUID) -> GuestDTO | None:
        raise NotImplementedError

    @abstractmethod
    async def find_by_invite_code(self, invite_code: str) -> list[GuestDTO]:
        """All guests sharing the invite code (primary first)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_identity_ref(self, identity_ref: str) -> GuestDTO | None:
        raise NotImplementedError

    @abstractmethod
    async def find_primary_by_email(self, email: str) -> GuestDTO | None:
        """Case-insensitive email match. Companions are never returned."""
        raise NotImplementedError

    @abstractmethod
    async def invite_code_exists(self, invite_code: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def list_primary_guests(self) -> list[GuestDTO]:
        raise NotImplementedError

    @abstractmethod
    async def insert(self, guest: GuestDTO) -> GuestDTO:
        """Insert a guest.

        Raises DuplicateCompanionError if the guest is a companion and the
        invite code already has one.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, guest_id: UUID, changes: Mapping[str, object]) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def link_identity(self, guest_id: UUID, identity_ref: str) -> bool:
        """Set identity_ref only if the guest is unlinked or already linked to the same ref.

        Returns True when the guest holds identity_ref afterwards.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, guest_id: UUID) -> None:
        """Delete a guest. Deleting a primary guest also removes its companion."""
        raise NotImplementedError


class SqlGuestStore(GuestStore):
    """SQL implementation of the guest store."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def find_by_id(self, guest_id: UUID) -> GuestDTO | None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            return to_dto(guest) if guest else None

    async def find_by_invite_code(self, invite_code: str) -> list[GuestDTO]:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Guest)
                .where(Guest.invite_code == normalize_invite_code(invite_code))
                .order_by(Guest.is_companion)
            )
            return [to_dto(guest) for guest in result.scalars().all()]

    async def find_by_identity_ref(self, identity_ref: str) -> GuestDTO | None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(select(Guest).where(Guest.identity_ref == identity_ref))
            guest = result.scalar_one_or_none()
            return to_dto(guest) if guest else None

    async def find_primary_by_email(self, email: str) -> GuestDTO | None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Guest)
                .where(Guest.is_companion.is_(False))
                .where(func.lower(Guest.email) == email.strip().lower())
                .order_by(Guest.created_at)
                .limit(1)
            )
            guest = result.scalar_one_or_none()
            return to_dto(guest) if guest else None

    async def invite_code_exists(self, invite_code: str) -> bool:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Guest.uuid).where(Guest.invite_code == normalize_invite_code(invite_code)).limit(1)
            )
            return result.first() is not None

    async def list_primary_guests(self) -> list[GuestDTO]:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Guest).where(Guest.is_companion.is_(False)).order_by(Guest.first_name)
            )
            return [to_dto(guest) for guest in result.scalars().all()]

    async def insert(self, guest: GuestDTO) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            row = Guest(uuid=guest.id, **{name: getattr(guest, name) for name in GUEST_FIELDS})
            row.invite_code = normalize_invite_code(guest.invite_code)
            try:
                async with session.begin_nested():
                    session.add(row)
            except IntegrityError as e:
                if guest.is_companion:
                    raise DuplicateCompanionError(row.invite_code) from e
                raise
            return to_dto(row)

    async def update(self, guest_id: UUID, changes: Mapping[str, object]) -> GuestDTO:
        unknown = set(changes) - set(GUEST_FIELDS)
        if unknown:
            raise ValueError(f"Unknown guest fields: {sorted(unknown)}")

        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            if guest is None:
                raise ValueError(f"Guest with ID {guest_id} not found")
            for name, value in changes.items():
                setattr(guest, name, value)
            await session.flush()
            return to_dto(guest)

    async def link_identity(self, guest_id: UUID, identity_ref: str) -> bool:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = (
                update(Guest)
                .where(Guest.uuid == guest_id)
                .where(Guest.is_companion.is_(False))
                .where(or_(Guest.identity_ref.is_(None), Guest.identity_ref == identity_ref))
                .values(identity_ref=identity_ref)
                .execution_options(synchronize_session="fetch")
            )
            try:
                async with session.begin_nested():
                    result = await session.execute(stmt)
            except IntegrityError:
                # identity_ref is unique: the identity is already linked to another guest
                logger.warning("Identity %s is already linked to another guest", identity_ref)
                return False
            return result.rowcount == 1

    async def delete(self, guest_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            await session.execute(delete(Guest).where(Guest.primary_guest_id == guest_id))
            await session.execute(delete(Guest).where(Guest.uuid == guest_id))


def get_guest_store() -> GuestStore:
    """Dependency to get guest store instance."""
    return SqlGuestStore()
