from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr

from src.auth.identity import require_admin
from src.config.settings import settings
from src.email_service import EmailServiceBase, get_email_service
from src.guests.dtos import CodeSpaceExhaustedError, ContactMethod, GuestList, NewGuestDTO, Side
from src.guests.features.create_guest.write_model import GuestCreateWriteModel
from src.guests.features.resolve_party.router import GuestResponse
from src.guests.repository.guest_store import GuestStore, get_guest_store
from src.guests.urls import ADMIN_GUESTS_URL

router = APIRouter(dependencies=[Depends(require_admin)])


class GuestCreate(BaseModel):
    first_name: str
    last_name: str | None = None
    email: EmailStr | None = None
    side: Side | None = None
    guest_list: GuestList = GuestList.A
    companion_allowed: bool = False
    companion_first_name: str | None = None
    companion_last_name: str | None = None
    mailing_address: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    preferred_contact_method: ContactMethod | None = None
    family: bool = False
    notes: str | None = None
    send_email: bool = False


class GuestCreatedResponse(BaseModel):
    invite_code: str
    guest: GuestResponse


def get_guest_create_write_model(
    store: GuestStore = Depends(get_guest_store),
    email_service: EmailServiceBase = Depends(get_email_service),
) -> GuestCreateWriteModel:
    """Dependency to get guest create write model instance."""
    return GuestCreateWriteModel(
        store=store,
        email_service=email_service,
        max_code_attempts=settings.invite_code_max_attempts,
        frontend_url=settings.frontend_url,
    )


@router.post(ADMIN_GUESTS_URL, response_model=GuestCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_guest(
    guest_data: GuestCreate,
    write_model: GuestCreateWriteModel = Depends(get_guest_create_write_model),
) -> GuestCreatedResponse:
    try:
        guest = await write_model.create_guest(NewGuestDTO(**guest_data.model_dump()))
    except CodeSpaceExhaustedError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return GuestCreatedResponse(invite_code=guest.invite_code, guest=GuestResponse.from_dto(guest))
