from uuid import uuid4

from src.auth.identity import AdminAllowList, Identity, get_admin_allow_list, get_identity
from src.email_service import get_email_service
from src.events.dtos import EventDTO, EventInviteDTO
from src.events.repository.event_store import get_event_store
from src.events.tests.inmemory_models import InMemoryEventStore
from src.events.urls import ADMIN_EVENT_INVITES_URL, ADMIN_EVENT_SEND_INVITES_URL, ADMIN_EVENTS_URL
from src.guests.repository.guest_store import get_guest_store
from src.guests.tests.inmemory_models import InMemoryEmailService, InMemoryGuestStore, make_party

ADMIN = Identity(subject_id="admin-1", verified_emails=("admin@example.com",))
GALA = EventDTO(name="Gala", start_time="20:00")
CEREMONY = EventDTO(name="Ceremony", is_default=True)


def _overrides(guests, invites=(), identity=ADMIN):
    guest_store = InMemoryGuestStore(guests)
    event_store = InMemoryEventStore([GALA, CEREMONY], list(invites))
    email_service = InMemoryEmailService()
    return event_store, {
        get_guest_store: lambda: guest_store,
        get_event_store: lambda: event_store,
        get_email_service: lambda: email_service,
        get_identity: lambda: identity,
        get_admin_allow_list: lambda: AdminAllowList.from_emails(["admin@example.com"]),
    }


async def test_non_admin_is_forbidden(client_factory):
    _, overrides = _overrides(make_party(), identity=Identity(subject_id="guest-1"))

    async with client_factory(overrides) as client:
        response = await client.get(ADMIN_EVENTS_URL)

    assert response.status_code == 403


async def test_create_and_list_events(client_factory):
    event_store, overrides = _overrides(make_party())

    async with client_factory(overrides) as client:
        created = await client.post(ADMIN_EVENTS_URL, json={"name": "Brunch", "event_date": "2026-08-16"})
        listed = await client.get(ADMIN_EVENTS_URL)

    assert created.status_code == 201
    assert created.json()["name"] == "Brunch"
    assert created.json()["is_default"] is False
    assert [summary["event"]["name"] for summary in listed.json()] == ["Gala", "Ceremony", "Brunch"]


async def test_add_and_list_invites(client_factory):
    party = make_party()
    _, overrides = _overrides(party)
    url = ADMIN_EVENT_INVITES_URL.format(event_id=GALA.id)

    async with client_factory(overrides) as client:
        added = await client.post(url, json={"guest_ids": [str(party[0].id)]})
        listed = await client.get(url)

    assert added.json() == {"success": True, "count": 1}
    data = listed.json()
    assert data["counts"]["invited"] == 1
    assert data["counts"]["pending"] == 1
    assert data["guests"][0]["is_invited"] is True
    assert data["guests"][0]["rsvp_status"] == "pending"


async def test_remove_invites(client_factory):
    party = make_party()
    event_store, overrides = _overrides(party, [EventInviteDTO(event_id=GALA.id, guest_id=party[0].id)])

    async with client_factory(overrides) as client:
        response = await client.request(
            "DELETE",
            ADMIN_EVENT_INVITES_URL.format(event_id=GALA.id),
            json={"guest_ids": [str(party[0].id)]},
        )

    assert response.json() == {"success": True, "count": 1}
    assert await event_store.list_invites(GALA.id) == []


async def test_default_event_invites_are_locked(client_factory):
    party = make_party()
    _, overrides = _overrides(party)

    async with client_factory(overrides) as client:
        response = await client.post(
            ADMIN_EVENT_INVITES_URL.format(event_id=CEREMONY.id),
            json={"guest_ids": [str(party[0].id)]},
        )

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot manage invites for default events"


async def test_unknown_event(client_factory):
    _, overrides = _overrides(make_party())

    async with client_factory(overrides) as client:
        response = await client.get(ADMIN_EVENT_INVITES_URL.format(event_id=uuid4()))

    assert response.status_code == 404


async def test_send_invites(client_factory):
    party = make_party()
    _, overrides = _overrides(party, [EventInviteDTO(event_id=GALA.id, guest_id=party[0].id)])

    async with client_factory(overrides) as client:
        response = await client.post(
            ADMIN_EVENT_SEND_INVITES_URL.format(event_id=GALA.id),
            json={"guest_ids": [str(party[0].id)]},
        )

    assert response.status_code == 200
    assert response.json() == {"success": True, "sent": [str(party[0].id)], "failed": {}}


async def test_send_invites_to_uninvited_guests(client_factory):
    party = make_party()
    _, overrides = _overrides(party)

    async with client_factory(overrides) as client:
        response = await client.post(
            ADMIN_EVENT_SEND_INVITES_URL.format(event_id=GALA.id),
            json={"guest_ids": [str(party[0].id)]},
        )

    assert response.status_code == 400
