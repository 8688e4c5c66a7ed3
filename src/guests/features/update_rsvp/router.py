from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from src.config.settings import settings
from src.email_service import EmailServiceBase, get_email_service
from src.guests.dtos import (
    CompanionDecisionDTO,
    ContactDetailsDTO,
    ContactMethod,
    RSVPDecisionDTO,
    RSVPStatus,
)
from src.guests.errors import raise_for_error
from src.guests.features.update_rsvp.write_model import RSVPWriteModel
from src.guests.repository.guest_store import GuestStore, get_guest_store
from src.guests.urls import SUBMIT_RSVP_URL

router = APIRouter()


class ContactDetailsSubmit(BaseModel):
    mailing_address: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    preferred_contact_method: ContactMethod | None = None


class CompanionSubmit(BaseModel):
    """Plus-one decision. Leave out entirely when the plus-one was not asked about."""

    attending: bool
    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    whatsapp: str | None = None
    preferred_contact_method: ContactMethod | None = None
    dietary_restrictions: str | None = None


class RSVPSubmit(BaseModel):
    invite_code: str | None = None
    attending: bool
    dietary_restrictions: str | None = None
    contact: ContactDetailsSubmit = ContactDetailsSubmit()
    companion: CompanionSubmit | None = None


class RSVPResponse(BaseModel):
    success: bool
    message: str
    status: RSVPStatus


def get_rsvp_write_model(
    store: GuestStore = Depends(get_guest_store),
    email_service: EmailServiceBase = Depends(get_email_service),
) -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return RSVPWriteModel(
        store=store,
        email_service=email_service,
        notification_emails=settings.rsvp_notification_emails,
    )


@router.post(SUBMIT_RSVP_URL, response_model=RSVPResponse)
async def submit_rsvp(
    rsvp_data: RSVPSubmit,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> RSVPResponse:
    """Submit the party's RSVP."""
    companion = None
    if rsvp_data.companion is not None:
        companion = CompanionDecisionDTO(**rsvp_data.companion.model_dump())

    result = await write_model.submit_rsvp(
        rsvp_data.invite_code,
        RSVPDecisionDTO(
            attending=rsvp_data.attending,
            dietary_restrictions=rsvp_data.dietary_restrictions,
            contact=ContactDetailsDTO(**rsvp_data.contact.model_dump()),
            companion=companion,
        ),
    )
    if not result.success:
        raise_for_error(result.error)

    return RSVPResponse(success=True, message=result.message, status=result.status)
