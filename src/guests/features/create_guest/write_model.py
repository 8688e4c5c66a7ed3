"""Write model for creating guests.

Creates a primary guest under a fresh invite code and, when the guest may
bring someone, a placeholder companion sharing the same code.
Returns DTOs instead of ORM models.
"""

import logging

from src.email_service.base import EmailServiceBase
from src.guests.dtos import GuestDTO, NewGuestDTO, RSVPStatus, empty_to_none
from src.guests.invite_code import InviteCodeGenerator, generate_unique_invite_code, rsvp_url
from src.guests.repository.guest_store import GuestStore

logger = logging.getLogger(__name__)

PLACEHOLDER_COMPANION_LAST_NAME = "- Plus One"


class GuestCreateWriteModel:
    def __init__(
        self,
        store: GuestStore,
        email_service: EmailServiceBase | None = None,
        code_generator: InviteCodeGenerator | None = None,
        max_code_attempts: int = 10,
        frontend_url: str = "",
    ) -> None:
        self.store = store
        self.email_service = email_service
        self.code_generator = code_generator or InviteCodeGenerator()
        self.max_code_attempts = max_code_attempts
        self.frontend_url = frontend_url

    async def create_guest(self, new_guest: NewGuestDTO) -> GuestDTO:
        """Create a primary guest (and placeholder companion). Returns DTO.

        Raises:
            CodeSpaceExhaustedError: if no unused invite code could be generated
        """
        invite_code = await generate_unique_invite_code(
            self.store, self.code_generator, self.max_code_attempts
        )

        primary = await self.store.insert(
            GuestDTO(
                first_name=new_guest.first_name.strip(),
                last_name=empty_to_none(new_guest.last_name),
                email=empty_to_none(new_guest.email),
                invite_code=invite_code,
                companion_allowed=new_guest.companion_allowed,
                side=new_guest.side,
                guest_list=new_guest.guest_list,
                family=new_guest.family,
                mailing_address=empty_to_none(new_guest.mailing_address),
                phone=empty_to_none(new_guest.phone),
                whatsapp=empty_to_none(new_guest.whatsapp),
                preferred_contact_method=new_guest.preferred_contact_method,
                notes=empty_to_none(new_guest.notes),
                rsvp_status=RSVPStatus.PENDING,
            )
        )
        logger.info("Created guest %s with invite code %s", primary.id, invite_code)

        if new_guest.companion_allowed:
            await self.store.insert(self._placeholder_companion(primary, new_guest))

        if new_guest.send_email and primary.email:
            await self._send_invitation(primary)

        return primary

    @staticmethod
    def _placeholder_companion(primary: GuestDTO, new_guest: NewGuestDTO) -> GuestDTO:
        return GuestDTO(
            first_name=empty_to_none(new_guest.companion_first_name) or primary.full_name,
            last_name=empty_to_none(new_guest.companion_last_name) or PLACEHOLDER_COMPANION_LAST_NAME,
            email=None,
            invite_code=primary.invite_code,
            is_companion=True,
            primary_guest_id=primary.id,
            side=primary.side,
            guest_list=primary.guest_list,
            family=primary.family,
            rsvp_status=RSVPStatus.PENDING,
        )

    async def _send_invitation(self, guest: GuestDTO) -> None:
        if self.email_service is None:
            return
        try:
            await self.email_service.send_invitation(
                to_address=guest.email,
                guest_name=guest.full_name,
                invite_code=guest.invite_code,
                rsvp_url=rsvp_url(guest.invite_code, self.frontend_url),
                guest_id=guest.id,
            )
        except Exception:
            # the guest exists; the invitation can be resent
            logger.exception("Failed to send invitation to guest %s", guest.id)
