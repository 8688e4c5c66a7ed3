"""Read model for resolving a party.

A party is found, in order of precedence, through:

1. the guest already linked to the signed-in identity
2. a primary guest whose email matches one of the identity's verified
   emails (the identity is linked to that guest on the way)
3. the invite code supplied by the caller
"""

import logging

from src.auth.identity import AdminAllowList, Identity
from src.guests.dtos import PartyDTO, normalize_invite_code, split_party
from src.guests.repository.guest_store import GuestStore

logger = logging.getLogger(__name__)


class PartyReadModel:
    def __init__(self, store: GuestStore, admin_allow_list: AdminAllowList | None = None) -> None:
        self.store = store
        self.admin_allow_list = admin_allow_list or AdminAllowList()

    async def resolve_party(
        self,
        explicit_code: str | None = None,
        identity: Identity | None = None,
    ) -> PartyDTO | None:
        code = None
        if identity is not None:
            linked = await self.store.find_by_identity_ref(identity.subject_id)
            if linked is not None:
                code = linked.invite_code
            else:
                code = await self.auto_link_by_email(identity)

        if code is None:
            code = normalize_invite_code(explicit_code) or None
        if code is None:
            return None

        primary, companion = split_party(await self.store.find_by_invite_code(code))
        if primary is None:
            return None

        return PartyDTO(
            invite_code=code,
            primary_guest=primary,
            companion=companion,
            is_authenticated=identity is not None,
            is_admin=identity is not None and self.admin_allow_list.contains_any(identity.verified_emails),
        )

    async def auto_link_by_email(self, identity: Identity) -> str | None:
        """Link the identity to the primary guest owning one of its emails.

        Returns the guest's invite code, or None when no primary guest matched
        or the matching guest belongs to another identity.
        """
        for email in identity.verified_emails:
            guest = await self.store.find_primary_by_email(email)
            if guest is None or guest.is_companion:
                continue

            if await self.store.link_identity(guest.id, identity.subject_id):
                logger.info("Auto-linked identity %s to guest %s", identity.subject_id, guest.id)
                return guest.invite_code

            logger.warning(
                "Guest %s matches identity %s by email but is linked to another identity",
                guest.id,
                identity.subject_id,
            )
        return None
