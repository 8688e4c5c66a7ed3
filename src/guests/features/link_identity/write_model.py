import logging
from collections.abc import Iterable

from src.guests.dtos import ErrorCode, LinkResultDTO, normalize_invite_code, split_party
from src.guests.repository.guest_store import GuestStore

logger = logging.getLogger(__name__)


class IdentityLinkWriteModel:
    """Binds a signed-in identity to the primary guest of an invite code.

    Only primary guests carry an identity. The identity's emails do not pick
    the target: a companion never holds an identity, so an identity whose email
    belongs to the companion is linked to the primary guest like any other.
    """

    def __init__(self, store: GuestStore) -> None:
        self.store = store

    async def link_identity(
        self,
        identity_subject_id: str | None,
        identity_emails: Iterable[str],
        invite_code: str | None,
    ) -> LinkResultDTO:
        if not identity_subject_id:
            return LinkResultDTO(success=False, error=ErrorCode.NOT_AUTHENTICATED)

        code = normalize_invite_code(invite_code)
        guests = await self.store.find_by_invite_code(code) if code else []
        if not guests:
            return LinkResultDTO(success=False, error=ErrorCode.INVALID_INVITE_CODE)

        primary, _ = split_party(guests)
        if primary is None:
            return LinkResultDTO(success=False, error=ErrorCode.PRIMARY_NOT_FOUND)

        if primary.identity_ref is not None and primary.identity_ref != identity_subject_id:
            return LinkResultDTO(success=False, error=ErrorCode.ALREADY_LINKED)

        current = await self.store.find_by_identity_ref(identity_subject_id)
        if current is not None and current.id != primary.id:
            logger.warning(
                "Identity %s is linked to guest %s, refusing to link %s",
                identity_subject_id,
                current.id,
                code,
            )
            return LinkResultDTO(success=False, error=ErrorCode.ALREADY_LINKED)

        if not await self.store.link_identity(primary.id, identity_subject_id):
            # lost a race against another link
            return LinkResultDTO(success=False, error=ErrorCode.ALREADY_LINKED)

        return LinkResultDTO(success=True, guest_id=primary.id)
