import logging
from collections.abc import Iterable
from uuid import UUID

from src.email_service.base import EmailServiceBase
from src.guests.dtos import (
    GuestDTO,
    GuestHasNoEmailError,
    GuestNotFoundError,
    GuestsAlreadyAttendingError,
    GuestsWithoutEmailError,
    InvitationSendResultDTO,
    NoGuestsFoundError,
    RSVPStatus,
)
from src.guests.invite_code import rsvp_url
from src.guests.repository.guest_store import GuestStore

logger = logging.getLogger(__name__)


def _has_valid_email(guest: GuestDTO) -> bool:
    return bool(guest.email) and "@" in guest.email


class GuestAdminWriteModel:
    """Admin actions on existing guests."""

    def __init__(
        self,
        store: GuestStore,
        email_service: EmailServiceBase,
        frontend_url: str = "",
    ) -> None:
        self.store = store
        self.email_service = email_service
        self.frontend_url = frontend_url

    async def _send_invitation(self, guest: GuestDTO) -> GuestDTO:
        await self.email_service.send_invitation(
            to_address=guest.email,
            guest_name=guest.full_name,
            invite_code=guest.invite_code,
            rsvp_url=rsvp_url(guest.invite_code, self.frontend_url),
            guest_id=guest.id,
        )
        return await self.store.update(guest.id, {"number_of_resends": guest.number_of_resends + 1})

    async def resend_invitation(self, guest_id: UUID) -> GuestDTO:
        """Send the invitation email again and count the resend.

        Raises:
            GuestNotFoundError: if the guest does not exist
            GuestHasNoEmailError: if the guest has no email address
        """
        guest = await self.store.find_by_id(guest_id)
        if guest is None:
            raise GuestNotFoundError(guest_id)
        if not guest.email:
            raise GuestHasNoEmailError(guest_id)

        guest = await self._send_invitation(guest)
        logger.info("Resent invitation to guest %s", guest.id)
        return guest

    async def send_invitations(self, guest_ids: Iterable[UUID]) -> InvitationSendResultDTO:
        """Email the invitation to every selected guest, counting each send.

        Unknown ids are skipped. The batch is checked as a whole before anything
        is sent; failures while sending are collected per guest.

        Raises:
            NoGuestsFoundError: if none of the ids belongs to a guest
            GuestsWithoutEmailError: if any selected guest has no usable address
            GuestsAlreadyAttendingError: if any selected guest already accepted
        """
        guests = [g for g in [await self.store.find_by_id(i) for i in dict.fromkeys(guest_ids)] if g is not None]
        if not guests:
            raise NoGuestsFoundError()

        without_email = [g.first_name for g in guests if not _has_valid_email(g)]
        if without_email:
            raise GuestsWithoutEmailError(without_email)
        attending = [g.first_name for g in guests if g.rsvp_status == RSVPStatus.YES]
        if attending:
            raise GuestsAlreadyAttendingError(attending)

        result = InvitationSendResultDTO()
        for guest in guests:
            try:
                await self._send_invitation(guest)
            except Exception as e:
                logger.exception("Failed to send invitation to guest %s", guest.id)
                result.failed[guest.id] = str(e)
                continue
            result.sent.append(guest.id)
        logger.info("Sent %d of %d invitations", len(result.sent), len(guests))
        return result

    async def delete_guest(self, guest_id: UUID) -> None:
        """Delete a guest; a primary guest takes its companion with it.

        Raises:
            GuestNotFoundError: if the guest does not exist
        """
        if await self.store.find_by_id(guest_id) is None:
            raise GuestNotFoundError(guest_id)
        await self.store.delete(guest_id)
        logger.info("Deleted guest %s", guest_id)
