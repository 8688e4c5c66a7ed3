from datetime import date, datetime
from typing import NoReturn
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.auth.identity import require_admin
from src.config.settings import settings
from src.email_service import EmailServiceBase, get_email_service
from src.events.dtos import (
    DefaultEventInvitesLockedError,
    EventNotFoundError,
    NoInvitedGuestsError,
)
from src.events.features.event_rsvp.router import EventResponse
from src.events.features.manage_invites.write_model import EventInviteAdminWriteModel
from src.events.repository.event_store import EventStore, get_event_store
from src.events.urls import ADMIN_EVENT_INVITES_URL, ADMIN_EVENT_SEND_INVITES_URL, ADMIN_EVENTS_URL
from src.guests.dtos import GuestsWithoutEmailError, RSVPStatus
from src.guests.repository.guest_store import GuestStore, get_guest_store

router = APIRouter(dependencies=[Depends(require_admin)])


class EventCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    event_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    location_name: str | None = None
    location_address: str | None = None
    is_default: bool = False


class AdminEventResponse(EventResponse):
    is_default: bool
    display_order: int


class EventSummaryResponse(BaseModel):
    event: AdminEventResponse
    invite_count: int
    confirmed_count: int
    declined_count: int


class GuestInviteStatusResponse(BaseModel):
    guest_id: UUID
    first_name: str
    last_name: str | None = None
    email: str | None = None
    is_invited: bool
    rsvp_status: RSVPStatus | None = None
    email_sent: bool = False
    email_sent_at: datetime | None = None
    email_resend_count: int = 0


class InviteCountsResponse(BaseModel):
    total: int
    invited: int
    email_sent: int
    confirmed: int
    declined: int
    pending: int


class EventInviteListResponse(BaseModel):
    event: AdminEventResponse
    guests: list[GuestInviteStatusResponse]
    counts: InviteCountsResponse


class GuestIdsRequest(BaseModel):
    guest_ids: list[UUID] = Field(min_length=1)


class InviteChangeResponse(BaseModel):
    success: bool
    count: int


class SendInvitesResponse(BaseModel):
    success: bool
    sent: list[UUID]
    failed: dict[UUID, str]


def get_event_invite_admin_write_model(
    guest_store: GuestStore = Depends(get_guest_store),
    event_store: EventStore = Depends(get_event_store),
    email_service: EmailServiceBase = Depends(get_email_service),
) -> EventInviteAdminWriteModel:
    """Dependency to get event invite admin write model instance."""
    return EventInviteAdminWriteModel(
        guest_store=guest_store,
        event_store=event_store,
        email_service=email_service,
        frontend_url=settings.frontend_url,
    )


def _event_response(event) -> AdminEventResponse:
    return AdminEventResponse(
        id=event.id,
        name=event.name,
        description=event.description,
        event_date=event.event_date,
        start_time=event.start_time,
        end_time=event.end_time,
        location_name=event.location_name,
        location_address=event.location_address,
        is_default=event.is_default,
        display_order=event.display_order,
    )


def _raise_for_event_error(error: Exception) -> NoReturn:
    if isinstance(error, EventNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.get(ADMIN_EVENTS_URL, response_model=list[EventSummaryResponse])
async def list_events(
    write_model: EventInviteAdminWriteModel = Depends(get_event_invite_admin_write_model),
) -> list[EventSummaryResponse]:
    return [
        EventSummaryResponse(
            event=_event_response(summary.event),
            invite_count=summary.invite_count,
            confirmed_count=summary.confirmed_count,
            declined_count=summary.declined_count,
        )
        for summary in await write_model.list_events()
    ]


@router.post(ADMIN_EVENTS_URL, response_model=AdminEventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    write_model: EventInviteAdminWriteModel = Depends(get_event_invite_admin_write_model),
) -> AdminEventResponse:
    event = await write_model.create_event(**event_data.model_dump())
    return _event_response(event)


@router.get(ADMIN_EVENT_INVITES_URL, response_model=EventInviteListResponse)
async def list_event_invites(
    event_id: UUID,
    write_model: EventInviteAdminWriteModel = Depends(get_event_invite_admin_write_model),
) -> EventInviteListResponse:
    try:
        invite_list = await write_model.list_event_invites(event_id)
    except (EventNotFoundError, DefaultEventInvitesLockedError) as e:
        _raise_for_event_error(e)

    counts = invite_list.counts
    return EventInviteListResponse(
        event=_event_response(invite_list.event),
        guests=[
            GuestInviteStatusResponse(
                guest_id=entry.guest.id,
                first_name=entry.guest.first_name,
                last_name=entry.guest.last_name,
                email=entry.guest.email,
                is_invited=entry.is_invited,
                rsvp_status=entry.invite.rsvp_status if entry.invite else None,
                email_sent=entry.invite.email_sent if entry.invite else False,
                email_sent_at=entry.invite.email_sent_at if entry.invite else None,
                email_resend_count=entry.invite.email_resend_count if entry.invite else 0,
            )
            for entry in invite_list.guests
        ],
        counts=InviteCountsResponse(
            total=counts.total,
            invited=counts.invited,
            email_sent=counts.email_sent,
            confirmed=counts.confirmed,
            declined=counts.declined,
            pending=counts.pending,
        ),
    )


@router.post(ADMIN_EVENT_INVITES_URL, response_model=InviteChangeResponse)
async def add_invites(
    event_id: UUID,
    request: GuestIdsRequest,
    write_model: EventInviteAdminWriteModel = Depends(get_event_invite_admin_write_model),
) -> InviteChangeResponse:
    try:
        added = await write_model.add_invites(event_id, request.guest_ids)
    except (EventNotFoundError, DefaultEventInvitesLockedError) as e:
        _raise_for_event_error(e)
    return InviteChangeResponse(success=True, count=added)


@router.delete(ADMIN_EVENT_INVITES_URL, response_model=InviteChangeResponse)
async def remove_invites(
    event_id: UUID,
    request: GuestIdsRequest,
    write_model: EventInviteAdminWriteModel = Depends(get_event_invite_admin_write_model),
) -> InviteChangeResponse:
    try:
        removed = await write_model.remove_invites(event_id, request.guest_ids)
    except (EventNotFoundError, DefaultEventInvitesLockedError) as e:
        _raise_for_event_error(e)
    return InviteChangeResponse(success=True, count=removed)


@router.post(ADMIN_EVENT_SEND_INVITES_URL, response_model=SendInvitesResponse)
async def send_event_invitations(
    event_id: UUID,
    request: GuestIdsRequest,
    write_model: EventInviteAdminWriteModel = Depends(get_event_invite_admin_write_model),
) -> SendInvitesResponse:
    try:
        result = await write_model.send_event_invitations(event_id, request.guest_ids)
    except (
        EventNotFoundError,
        DefaultEventInvitesLockedError,
        NoInvitedGuestsError,
        GuestsWithoutEmailError,
    ) as e:
        _raise_for_event_error(e)
    return SendInvitesResponse(success=not result.failed, sent=result.sent, failed=result.failed)
