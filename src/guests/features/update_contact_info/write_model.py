from src.guests.dtos import (
    ContactDetailsDTO,
    ContactInfoResultDTO,
    ErrorCode,
    normalize_invite_code,
)
from src.guests.repository.guest_store import GuestStore


class ContactInfoWriteModel:
    def __init__(self, store: GuestStore) -> None:
        self.store = store

    async def update_contact_info(
        self, invite_code: str | None, contact: ContactDetailsDTO
    ) -> ContactInfoResultDTO:
        """Overwrite the contact details of every guest in the party."""
        code = normalize_invite_code(invite_code)
        if not code:
            return ContactInfoResultDTO(success=False, error=ErrorCode.MISSING_INVITE_CODE)

        guests = await self.store.find_by_invite_code(code)
        if not guests:
            return ContactInfoResultDTO(success=False, error=ErrorCode.INVALID_INVITE_CODE)

        changes = contact.as_changes()
        updated = [await self.store.update(guest.id, changes) for guest in guests]
        return ContactInfoResultDTO(success=True, guests=updated)
