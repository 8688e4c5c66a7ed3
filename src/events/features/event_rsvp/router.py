from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.config.settings import settings
from src.email_service import EmailServiceBase, get_email_service
from src.events.features.event_rsvp.write_model import EventRSVPWriteModel
from src.events.repository.event_store import EventStore, get_event_store
from src.events.urls import EVENT_RSVP_SUBMIT_URL, EVENT_RSVP_VERIFY_URL
from src.guests.dtos import RSVPStatus
from src.guests.errors import raise_for_error
from src.guests.repository.guest_store import GuestStore, get_guest_store

router = APIRouter()


class EventGuestResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str | None = None
    email: str | None = None
    invite_code: str


class EventResponse(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    event_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    location_name: str | None = None
    location_address: str | None = None


class EventInviteResponse(BaseModel):
    id: UUID | None = None
    rsvp_status: RSVPStatus


class VerifyEventInviteResponse(BaseModel):
    guest: EventGuestResponse
    event: EventResponse
    invite: EventInviteResponse


class EventRSVPSubmit(BaseModel):
    invite_code: str | None = None
    event_id: UUID | None = None
    attending: bool


class EventRSVPResponse(BaseModel):
    success: bool
    rsvp_status: RSVPStatus
    message: str


def get_event_rsvp_write_model(
    guest_store: GuestStore = Depends(get_guest_store),
    event_store: EventStore = Depends(get_event_store),
    email_service: EmailServiceBase = Depends(get_email_service),
) -> EventRSVPWriteModel:
    """Dependency to get event RSVP write model instance."""
    return EventRSVPWriteModel(
        guest_store=guest_store,
        event_store=event_store,
        email_service=email_service,
        notification_emails=settings.rsvp_notification_emails,
    )


@router.get(EVENT_RSVP_VERIFY_URL, response_model=VerifyEventInviteResponse)
async def verify_event_invite(
    code: str | None = None,
    event_id: UUID | None = None,
    write_model: EventRSVPWriteModel = Depends(get_event_rsvp_write_model),
) -> VerifyEventInviteResponse:
    """Check that the invite code's guest is invited to the event."""
    result = await write_model.verify_event_invite(code, event_id)
    if not result.success:
        raise_for_error(result.error)

    guest, event = result.invite.guest, result.invite.event
    return VerifyEventInviteResponse(
        guest=EventGuestResponse(
            id=guest.id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            invite_code=guest.invite_code,
        ),
        event=EventResponse(
            id=event.id,
            name=event.name,
            description=event.description,
            event_date=event.event_date,
            start_time=event.start_time,
            end_time=event.end_time,
            location_name=event.location_name,
            location_address=event.location_address,
        ),
        invite=EventInviteResponse(id=result.invite.invite_id, rsvp_status=result.invite.rsvp_status),
    )


@router.post(EVENT_RSVP_SUBMIT_URL, response_model=EventRSVPResponse)
async def submit_event_rsvp(
    rsvp_data: EventRSVPSubmit,
    write_model: EventRSVPWriteModel = Depends(get_event_rsvp_write_model),
) -> EventRSVPResponse:
    result = await write_model.submit_event_rsvp(rsvp_data.invite_code, rsvp_data.event_id, rsvp_data.attending)
    if not result.success:
        raise_for_error(result.error)

    return EventRSVPResponse(success=True, rsvp_status=result.status, message=result.message)
