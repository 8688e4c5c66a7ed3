from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.auth.identity import Identity, require_identity
from src.guests.errors import raise_for_error
from src.guests.features.link_identity.write_model import IdentityLinkWriteModel
from src.guests.repository.guest_store import GuestStore, get_guest_store
from src.guests.urls import LINK_IDENTITY_URL

router = APIRouter()


class LinkIdentitySubmit(BaseModel):
    invite_code: str | None = None


class LinkIdentityResponse(BaseModel):
    success: bool
    guest_id: UUID


def get_identity_link_write_model(store: GuestStore = Depends(get_guest_store)) -> IdentityLinkWriteModel:
    """Dependency to get identity link write model instance."""
    return IdentityLinkWriteModel(store=store)


@router.post(LINK_IDENTITY_URL, response_model=LinkIdentityResponse)
async def link_identity(
    link_data: LinkIdentitySubmit,
    identity: Identity = Depends(require_identity),
    write_model: IdentityLinkWriteModel = Depends(get_identity_link_write_model),
) -> LinkIdentityResponse:
    """Link the signed-in account to the invitation."""
    result = await write_model.link_identity(
        identity.subject_id,
        identity.verified_emails,
        link_data.invite_code,
    )
    if not result.success:
        raise_for_error(result.error)

    return LinkIdentityResponse(success=True, guest_id=result.guest_id)
