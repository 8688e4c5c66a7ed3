from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from src.auth.identity import require_admin
from src.config.settings import settings
from src.email_service import EmailServiceBase, get_email_service
from src.guests.dtos import (
    GuestHasNoEmailError,
    GuestNotFoundError,
    GuestsAlreadyAttendingError,
    GuestsWithoutEmailError,
    NoGuestsFoundError,
)
from src.guests.features.manage_guests.write_model import GuestAdminWriteModel
from src.guests.features.resolve_party.router import GuestResponse
from src.guests.repository.guest_store import GuestStore, get_guest_store
from src.guests.urls import (
    ADMIN_BULK_SEND_INVITATIONS_URL,
    ADMIN_GUEST_URL,
    ADMIN_GUESTS_URL,
    ADMIN_RESEND_INVITATION_URL,
)

router = APIRouter(dependencies=[Depends(require_admin)])


class AdminGuestResponse(GuestResponse):
    invite_code: str
    companion_allowed: bool
    number_of_resends: int


class ResendInvitationResponse(BaseModel):
    success: bool
    number_of_resends: int


class BulkSendRequest(BaseModel):
    guest_ids: list[UUID] = Field(min_length=1)


class BulkSendResponse(BaseModel):
    success: bool
    sent: list[UUID]
    failed: dict[UUID, str]


def get_guest_admin_write_model(
    store: GuestStore = Depends(get_guest_store),
    email_service: EmailServiceBase = Depends(get_email_service),
) -> GuestAdminWriteModel:
    """Dependency to get guest admin write model instance."""
    return GuestAdminWriteModel(store=store, email_service=email_service, frontend_url=settings.frontend_url)


@router.get(ADMIN_GUESTS_URL, response_model=list[AdminGuestResponse])
async def list_guests(store: GuestStore = Depends(get_guest_store)) -> list[AdminGuestResponse]:
    return [
        AdminGuestResponse(
            **GuestResponse.from_dto(guest).model_dump(),
            invite_code=guest.invite_code,
            companion_allowed=guest.companion_allowed,
            number_of_resends=guest.number_of_resends,
        )
        for guest in await store.list_primary_guests()
    ]


@router.post(ADMIN_RESEND_INVITATION_URL, response_model=ResendInvitationResponse)
async def resend_invitation(
    guest_id: UUID,
    write_model: GuestAdminWriteModel = Depends(get_guest_admin_write_model),
) -> ResendInvitationResponse:
    try:
        guest = await write_model.resend_invitation(guest_id)
    except GuestNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GuestHasNoEmailError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ResendInvitationResponse(success=True, number_of_resends=guest.number_of_resends)


@router.post(ADMIN_BULK_SEND_INVITATIONS_URL, response_model=BulkSendResponse)
async def send_invitations(
    request: BulkSendRequest,
    write_model: GuestAdminWriteModel = Depends(get_guest_admin_write_model),
) -> BulkSendResponse:
    try:
        result = await write_model.send_invitations(request.guest_ids)
    except NoGuestsFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (GuestsWithoutEmailError, GuestsAlreadyAttendingError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(e), "guests": e.guest_names},
        )

    return BulkSendResponse(success=not result.failed, sent=result.sent, failed=result.failed)


@router.delete(ADMIN_GUEST_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_guest(
    guest_id: UUID,
    write_model: GuestAdminWriteModel = Depends(get_guest_admin_write_model),
) -> Response:
    try:
        await write_model.delete_guest(guest_id)
    except GuestNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
