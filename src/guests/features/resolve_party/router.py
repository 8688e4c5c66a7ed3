from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from src.auth.identity import AdminAllowList, Identity, get_admin_allow_list, get_identity
from src.guests.dtos import ContactMethod, GuestDTO, RSVPStatus
from src.guests.features.resolve_party.read_model import PartyReadModel
from src.guests.invite_code import is_plausible_invite_code
from src.guests.repository.guest_store import GuestStore, get_guest_store
from src.guests.urls import RESOLVE_PARTY_URL

router = APIRouter()


class GuestResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str | None = None
    email: str | None = None
    is_companion: bool
    rsvp_status: RSVPStatus
    dietary_restrictions: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    preferred_contact_method: ContactMethod | None = None
    mailing_address: str | None = None

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        return cls(
            id=guest.id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            is_companion=guest.is_companion,
            rsvp_status=guest.rsvp_status,
            dietary_restrictions=guest.dietary_restrictions,
            phone=guest.phone,
            whatsapp=guest.whatsapp,
            preferred_contact_method=guest.preferred_contact_method,
            mailing_address=guest.mailing_address,
        )


class PartyResponse(BaseModel):
    invite_code: str
    companion_allowed: bool
    primary_guest: GuestResponse
    companion: GuestResponse | None = None
    is_authenticated: bool
    is_admin: bool


def get_party_read_model(
    store: GuestStore = Depends(get_guest_store),
    admin_allow_list: AdminAllowList = Depends(get_admin_allow_list),
) -> PartyReadModel:
    """Dependency to get party read model instance."""
    return PartyReadModel(store=store, admin_allow_list=admin_allow_list)


@router.get(RESOLVE_PARTY_URL, response_model=PartyResponse)
async def resolve_party(
    code: str | None = None,
    identity: Identity | None = Depends(get_identity),
    read_model: PartyReadModel = Depends(get_party_read_model),
) -> PartyResponse:
    """
    Resolve the party for the signed-in guest or the given invite code.
    Signed-in guests always get their own party, whatever code is passed.
    """
    if identity is None and code is not None and not is_plausible_invite_code(code):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invite code is too short")

    party = await read_model.resolve_party(explicit_code=code, identity=identity)
    if party is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No party found")

    return PartyResponse(
        invite_code=party.invite_code,
        companion_allowed=party.primary_guest.companion_allowed,
        primary_guest=GuestResponse.from_dto(party.primary_guest),
        companion=GuestResponse.from_dto(party.companion) if party.companion else None,
        is_authenticated=party.is_authenticated,
        is_admin=party.is_admin,
    )
