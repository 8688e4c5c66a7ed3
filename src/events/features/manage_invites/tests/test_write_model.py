"""Tests for EventInviteAdminWriteModel."""

from datetime import date
from uuid import uuid4

import pytest

from src.events.dtos import (
    DefaultEventInvitesLockedError,
    EventDTO,
    EventInviteDTO,
    EventNotFoundError,
    NoInvitedGuestsError,
)
from src.events.features.event_rsvp.write_model import EventRSVPWriteModel
from src.events.features.manage_invites.write_model import (
    EventInviteAdminWriteModel,
    event_rsvp_url,
    format_event_when,
)
from src.events.tests.inmemory_models import InMemoryEventStore
from src.guests.dtos import GuestsWithoutEmailError, RSVPStatus
from src.guests.tests.inmemory_models import (
    InMemoryEmailService,
    InMemoryGuestStore,
    SelectiveFailureEmailService,
    make_party,
)

REHEARSAL = EventDTO(
    name="Rehearsal Dinner",
    event_date=date(2026, 8, 14),
    start_time="19:00",
    end_time="21:00",
    location_name="Trattoria",
    display_order=2,
)
CEREMONY = EventDTO(name="Ceremony", is_default=True, display_order=1)


@pytest.fixture
def alice():
    return make_party(invite_code="ABCD-1234", with_companion=True)


@pytest.fixture
def carol():
    return make_party(invite_code="EFGH-5678", first_name="Carol", email="carol@example.com")


def _write_model(guests, invites=(), email_service=None):
    guest_store = InMemoryGuestStore(guests)
    event_store = InMemoryEventStore([REHEARSAL, CEREMONY], list(invites))
    write_model = EventInviteAdminWriteModel(
        guest_store=guest_store,
        event_store=event_store,
        email_service=email_service or InMemoryEmailService(),
        frontend_url="https://wedding.example.com/",
    )
    return write_model, event_store


def test_format_event_when():
    assert format_event_when(REHEARSAL) == "2026-08-14, 7:00 PM - 9:00 PM"
    assert format_event_when(EventDTO(name="Brunch", start_time="00:30")) == "12:30 AM"
    assert format_event_when(EventDTO(name="Party")) == ""


def test_event_rsvp_url():
    event_id = uuid4()
    assert (
        event_rsvp_url("https://wedding.example.com/", "abcd-1234", event_id)
        == f"https://wedding.example.com/events/rsvp?code=ABCD-1234&event={event_id}"
    )


async def test_create_event_is_placed_last(alice):
    write_model, event_store = _write_model(alice)

    event = await write_model.create_event(name="After Party", start_time="23:00", description="")

    assert event.display_order == 3
    assert event.description is None
    assert (await event_store.list_events())[-1].name == "After Party"


async def test_list_events_with_counts(alice, carol):
    invites = [
        EventInviteDTO(event_id=REHEARSAL.id, guest_id=alice[0].id, rsvp_status=RSVPStatus.YES),
        EventInviteDTO(event_id=REHEARSAL.id, guest_id=carol[0].id, rsvp_status=RSVPStatus.NO),
    ]
    write_model, _ = _write_model(alice + carol, invites)

    ceremony, rehearsal = await write_model.list_events()

    assert ceremony.event.name == "Ceremony"
    assert (rehearsal.invite_count, rehearsal.confirmed_count, rehearsal.declined_count) == (2, 1, 1)


async def test_default_event_counts_use_main_rsvp(alice, carol):
    confirmed = make_party(invite_code="JKLM-2345", first_name="Dan", rsvp_status=RSVPStatus.YES)
    write_model, _ = _write_model(alice + carol + confirmed)

    ceremony, _ = await write_model.list_events()

    assert ceremony.invite_count == 3
    assert ceremony.confirmed_count == 1
    assert ceremony.declined_count == 0


async def test_default_event_counts_answers_given_to_the_event(alice, carol):
    write_model, event_store = _write_model(alice + carol)
    event_rsvp = EventRSVPWriteModel(guest_store=write_model.guest_store, event_store=event_store)

    result = await event_rsvp.submit_event_rsvp("EFGH-5678", CEREMONY.id, attending=False)
    ceremony, _ = await write_model.list_events()

    assert result.status == RSVPStatus.NO
    assert ceremony.invite_count == 2
    assert ceremony.confirmed_count == 0
    assert ceremony.declined_count == 1


async def test_list_event_invites(alice, carol):
    invites = [EventInviteDTO(event_id=REHEARSAL.id, guest_id=alice[0].id, email_sent=True)]
    write_model, _ = _write_model(alice + carol, invites)

    invite_list = await write_model.list_event_invites(REHEARSAL.id)

    assert [g.guest.first_name for g in invite_list.guests] == ["Alice", "Carol"]
    assert [g.is_invited for g in invite_list.guests] == [True, False]
    assert invite_list.counts.total == 2
    assert invite_list.counts.invited == 1
    assert invite_list.counts.email_sent == 1
    assert invite_list.counts.pending == 1


async def test_unknown_event_raises(alice):
    write_model, _ = _write_model(alice)

    with pytest.raises(EventNotFoundError):
        await write_model.list_event_invites(uuid4())


async def test_default_event_invites_are_locked(alice):
    write_model, _ = _write_model(alice)

    with pytest.raises(DefaultEventInvitesLockedError, match="Cannot manage invites for default events"):
        await write_model.add_invites(CEREMONY.id, [alice[0].id])
    with pytest.raises(DefaultEventInvitesLockedError):
        await write_model.remove_invites(CEREMONY.id, [alice[0].id])
    with pytest.raises(DefaultEventInvitesLockedError):
        await write_model.send_event_invitations(CEREMONY.id, [alice[0].id])


async def test_add_invites_is_idempotent(alice, carol):
    write_model, event_store = _write_model(alice + carol)

    assert await write_model.add_invites(REHEARSAL.id, [alice[0].id, alice[0].id]) == 1
    assert await write_model.add_invites(REHEARSAL.id, [alice[0].id, carol[0].id]) == 1
    assert len(await event_store.list_invites(REHEARSAL.id)) == 2


async def test_remove_invites(alice, carol):
    invites = [EventInviteDTO(event_id=REHEARSAL.id, guest_id=g[0].id) for g in (alice, carol)]
    write_model, event_store = _write_model(alice + carol, invites)

    removed = await write_model.remove_invites(REHEARSAL.id, [carol[0].id, uuid4()])

    assert removed == 1
    assert [i.guest_id for i in await event_store.list_invites(REHEARSAL.id)] == [alice[0].id]


async def test_send_event_invitations(alice):
    email_service = InMemoryEmailService()
    write_model, event_store = _write_model(
        alice, [EventInviteDTO(event_id=REHEARSAL.id, guest_id=alice[0].id)], email_service
    )

    result = await write_model.send_event_invitations(REHEARSAL.id, [alice[0].id])

    assert result.sent == [alice[0].id]
    assert result.failed == {}
    [email] = email_service.sent_emails
    assert email["kind"] == "event_invitation"
    assert email["to_address"] == "alice@example.com"
    assert email["event_name"] == "Rehearsal Dinner"
    assert email["rsvp_url"] == f"https://wedding.example.com/events/rsvp?code=ABCD-1234&event={REHEARSAL.id}"
    invite = await event_store.find_invite(REHEARSAL.id, alice[0].id)
    assert invite.email_sent is True
    assert invite.email_sent_at is not None
    assert invite.email_resend_count == 0


async def test_resending_counts_resends(alice):
    write_model, event_store = _write_model(alice, [EventInviteDTO(event_id=REHEARSAL.id, guest_id=alice[0].id)])

    await write_model.send_event_invitations(REHEARSAL.id, [alice[0].id])
    await write_model.send_event_invitations(REHEARSAL.id, [alice[0].id])

    assert (await event_store.find_invite(REHEARSAL.id, alice[0].id)).email_resend_count == 1


async def test_send_requires_invited_guests(alice):
    write_model, _ = _write_model(alice)

    with pytest.raises(NoInvitedGuestsError):
        await write_model.send_event_invitations(REHEARSAL.id, [alice[0].id])


async def test_send_rejects_guests_without_email(alice):
    no_email = make_party(invite_code="EFGH-5678", first_name="Carol", email=None)
    invites = [EventInviteDTO(event_id=REHEARSAL.id, guest_id=g[0].id) for g in (alice, no_email)]
    email_service = InMemoryEmailService()
    write_model, _ = _write_model(alice + no_email, invites, email_service)

    with pytest.raises(GuestsWithoutEmailError) as exc_info:
        await write_model.send_event_invitations(REHEARSAL.id, [alice[0].id, no_email[0].id])

    assert exc_info.value.guest_names == ["Carol"]
    assert email_service.sent_emails == []


async def test_send_collects_per_guest_failures(alice, carol):
    invites = [EventInviteDTO(event_id=REHEARSAL.id, guest_id=g[0].id) for g in (alice, carol)]
    email_service = SelectiveFailureEmailService({"carol@example.com"})
    write_model, event_store = _write_model(alice + carol, invites, email_service)

    result = await write_model.send_event_invitations(REHEARSAL.id, [alice[0].id, carol[0].id])

    assert result.sent == [alice[0].id]
    assert list(result.failed) == [carol[0].id]
    assert (await event_store.find_invite(REHEARSAL.id, carol[0].id)).email_sent is False
