"""Write model for RSVP submission.

Applies an attendee's decision to every record of the party. When the
primary guest may bring a plus-one, the companion record follows the
primary's decision:

    primary declines                     -> companion (if any) set to "no"
    accepts, companion attending + name  -> companion updated, or created
    accepts, companion not attending     -> existing companion set to "no"
    accepts, companion not mentioned     -> companion left as it is
"""

import logging

from src.email_service.base import EmailServiceBase
from src.guests.dtos import (
    CompanionDecisionDTO,
    DuplicateCompanionError,
    ErrorCode,
    GuestDTO,
    RSVPDecisionDTO,
    RSVPResultDTO,
    RSVPStatus,
    empty_to_none,
    normalize_invite_code,
    split_party,
)
from src.guests.repository.guest_store import GuestStore

logger = logging.getLogger(__name__)

COMPANION_DECLINED = {"rsvp_status": RSVPStatus.NO, "dietary_restrictions": None}


class RSVPWriteModel:
    def __init__(
        self,
        store: GuestStore,
        email_service: EmailServiceBase | None = None,
        notification_emails: list[str] | None = None,
    ) -> None:
        self.store = store
        self.email_service = email_service
        self.notification_emails = notification_emails or []

    async def submit_rsvp(self, invite_code: str | None, decision: RSVPDecisionDTO) -> RSVPResultDTO:
        code = normalize_invite_code(invite_code)
        if not code:
            return RSVPResultDTO(success=False, error=ErrorCode.MISSING_INVITE_CODE)

        guests = await self.store.find_by_invite_code(code)
        if not guests:
            return RSVPResultDTO(success=False, error=ErrorCode.INVALID_INVITE_CODE)

        primary, companion = split_party(guests)
        if primary is None:
            return RSVPResultDTO(success=False, error=ErrorCode.PRIMARY_NOT_FOUND)

        status = RSVPStatus.YES if decision.attending else RSVPStatus.NO
        await self.store.update(
            primary.id,
            {
                "rsvp_status": status,
                "dietary_restrictions": (
                    empty_to_none(decision.dietary_restrictions) if decision.attending else None
                ),
                **decision.contact.as_changes(),
            },
        )

        if primary.companion_allowed:
            await self._apply_companion_decision(primary, companion, decision)

        await self._notify_admins(code, decision.attending)

        if decision.attending:
            message = "Thank you for confirming your attendance!"
        else:
            message = "We're sorry you can't make it. Your response has been recorded."
        return RSVPResultDTO(success=True, message=message, status=status)

    async def _apply_companion_decision(
        self,
        primary: GuestDTO,
        companion: GuestDTO | None,
        decision: RSVPDecisionDTO,
    ) -> None:
        if not decision.attending:
            # companion is never created for a declined party
            if companion is not None:
                await self.store.update(companion.id, COMPANION_DECLINED)
            return

        companion_decision = decision.companion
        if companion_decision is None:
            return

        if companion_decision.attending and companion_decision.has_name:
            await self._accept_companion(primary, companion, companion_decision, decision)
        elif not companion_decision.attending and companion is not None:
            await self.store.update(companion.id, COMPANION_DECLINED)

    async def _accept_companion(
        self,
        primary: GuestDTO,
        companion: GuestDTO | None,
        companion_decision: CompanionDecisionDTO,
        decision: RSVPDecisionDTO,
    ) -> None:
        if companion is None:
            try:
                created = await self.store.insert(
                    self._new_companion(primary, companion_decision, decision)
                )
            except DuplicateCompanionError:
                # another submission created the companion first
                logger.info("Companion for %s created concurrently, updating it", primary.invite_code)
                _, companion = split_party(await self.store.find_by_invite_code(primary.invite_code))
                if companion is None:
                    raise
            else:
                logger.info("Created companion %s for %s", created.id, primary.invite_code)
                return

        await self.store.update(
            companion.id,
            {
                "first_name": companion_decision.first_name.strip(),
                "last_name": empty_to_none(companion_decision.last_name),
                "email": empty_to_none(companion_decision.email) or companion.email,
                "rsvp_status": RSVPStatus.YES,
                "dietary_restrictions": empty_to_none(companion_decision.dietary_restrictions),
                "phone": empty_to_none(companion_decision.phone),
                "whatsapp": empty_to_none(companion_decision.whatsapp),
                "preferred_contact_method": companion_decision.preferred_contact_method,
            },
        )

    @staticmethod
    def _new_companion(
        primary: GuestDTO,
        companion_decision: CompanionDecisionDTO,
        decision: RSVPDecisionDTO,
    ) -> GuestDTO:
        return GuestDTO(
            first_name=companion_decision.first_name.strip(),
            last_name=empty_to_none(companion_decision.last_name),
            email=empty_to_none(companion_decision.email) or primary.email,
            invite_code=primary.invite_code,
            is_companion=True,
            primary_guest_id=primary.id,
            companion_allowed=False,
            side=primary.side,
            guest_list=primary.guest_list,
            family=primary.family,
            rsvp_status=RSVPStatus.YES,
            dietary_restrictions=empty_to_none(companion_decision.dietary_restrictions),
            mailing_address=empty_to_none(decision.contact.mailing_address),
            phone=empty_to_none(companion_decision.phone),
            whatsapp=empty_to_none(companion_decision.whatsapp),
            preferred_contact_method=companion_decision.preferred_contact_method,
        )

    async def _notify_admins(self, invite_code: str, attending: bool) -> None:
        if self.email_service is None or not self.notification_emails:
            return
        try:
            party = await self.store.find_by_invite_code(invite_code)
            await self.email_service.send_rsvp_notification(
                to_addresses=self.notification_emails,
                invite_code=invite_code,
                attending=attending,
                guests=party,
            )
        except Exception:
            # the RSVP is already stored
            logger.exception("Failed to send RSVP notification for %s", invite_code)
