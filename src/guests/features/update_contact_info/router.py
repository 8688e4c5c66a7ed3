from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.guests.dtos import ContactDetailsDTO, ContactMethod
from src.guests.errors import raise_for_error
from src.guests.features.update_contact_info.write_model import ContactInfoWriteModel
from src.guests.repository.guest_store import GuestStore, get_guest_store
from src.guests.urls import UPDATE_CONTACT_INFO_URL

router = APIRouter()


class ContactInfoSubmit(BaseModel):
    invite_code: str | None = None
    mailing_address: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    preferred_contact_method: ContactMethod | None = None


class ContactInfoResponse(BaseModel):
    success: bool
    updated_guests: int


def get_contact_info_write_model(store: GuestStore = Depends(get_guest_store)) -> ContactInfoWriteModel:
    """Dependency to get contact info write model instance."""
    return ContactInfoWriteModel(store=store)


@router.post(UPDATE_CONTACT_INFO_URL, response_model=ContactInfoResponse)
async def update_contact_info(
    contact_data: ContactInfoSubmit,
    write_model: ContactInfoWriteModel = Depends(get_contact_info_write_model),
) -> ContactInfoResponse:
    result = await write_model.update_contact_info(
        contact_data.invite_code,
        ContactDetailsDTO(**contact_data.model_dump(exclude={"invite_code"})),
    )
    if not result.success:
        raise_for_error(result.error)

    return ContactInfoResponse(success=True, updated_guests=len(result.guests))
