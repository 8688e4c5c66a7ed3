"""Tests for PartyReadModel."""

from src.auth.identity import AdminAllowList, Identity
from src.guests.dtos import GuestDTO
from src.guests.features.resolve_party.read_model import PartyReadModel
from src.guests.tests.inmemory_models import InMemoryGuestStore, make_party


async def test_resolves_explicit_code_case_insensitively():
    store = InMemoryGuestStore(make_party(with_companion=True))
    read_model = PartyReadModel(store=store)

    lower = await read_model.resolve_party("abcd-1234")
    upper = await read_model.resolve_party(" ABCD-1234 ")

    assert lower == upper
    assert lower.invite_code == "ABCD-1234"
    assert lower.primary_guest.first_name == "Alice"
    assert lower.companion.first_name == "Bob"
    assert lower.is_authenticated is False
    assert lower.is_admin is False


async def test_no_code_and_no_identity_resolves_nothing():
    read_model = PartyReadModel(store=InMemoryGuestStore(make_party()))

    assert await read_model.resolve_party() is None
    assert await read_model.resolve_party("   ") is None


async def test_unknown_code_resolves_nothing():
    read_model = PartyReadModel(store=InMemoryGuestStore(make_party()))

    assert await read_model.resolve_party("ZZZZ-9999") is None


async def test_code_without_primary_resolves_nothing():
    orphan = GuestDTO(first_name="Bob", invite_code="ABCD-1234", is_companion=True)
    read_model = PartyReadModel(store=InMemoryGuestStore([orphan]))

    assert await read_model.resolve_party("ABCD-1234") is None


async def test_linked_identity_overrides_explicit_code():
    own = make_party(invite_code="OWNP-2222", identity_ref="user-1", email="me@example.com")
    other = make_party(invite_code="OTHR-3333", email="other@example.com")
    read_model = PartyReadModel(store=InMemoryGuestStore(own + other))

    party = await read_model.resolve_party("OTHR-3333", Identity(subject_id="user-1"))

    assert party.invite_code == "OWNP-2222"
    assert party.is_authenticated is True


async def test_auto_links_primary_by_verified_email():
    store = InMemoryGuestStore(make_party(email="Alice@Example.com"))
    read_model = PartyReadModel(store=store)
    identity = Identity(subject_id="user-1", verified_emails=("alice@example.com",))

    party = await read_model.resolve_party(identity=identity)

    assert party.invite_code == "ABCD-1234"
    assert party.primary_guest.identity_ref == "user-1"


async def test_auto_link_is_idempotent():
    store = InMemoryGuestStore(make_party())
    read_model = PartyReadModel(store=store)
    identity = Identity(subject_id="user-1", verified_emails=("alice@example.com",))

    first = await read_model.resolve_party(identity=identity)
    second = await read_model.resolve_party(identity=identity)

    assert first == second
    linked = [g for g in store.guests.values() if g.identity_ref == "user-1"]
    assert len(linked) == 1


async def test_companion_is_never_auto_linked():
    store = InMemoryGuestStore(make_party(with_companion=True))
    read_model = PartyReadModel(store=store)
    identity = Identity(subject_id="user-2", verified_emails=("bob@example.com",))

    party = await read_model.resolve_party(identity=identity)

    assert party is None
    assert all(g.identity_ref is None for g in store.guests.values())


async def test_auto_link_skips_guest_linked_to_other_identity():
    store = InMemoryGuestStore(make_party(identity_ref="someone-else"))
    read_model = PartyReadModel(store=store)
    identity = Identity(subject_id="user-1", verified_emails=("alice@example.com",))

    party = await read_model.resolve_party("ABCD-1234", identity)

    # falls back to the explicit code without stealing the link
    assert party.invite_code == "ABCD-1234"
    assert party.primary_guest.identity_ref == "someone-else"


async def test_unmatched_identity_falls_back_to_explicit_code():
    read_model = PartyReadModel(store=InMemoryGuestStore(make_party()))
    identity = Identity(subject_id="user-1", verified_emails=("nobody@example.com",))

    party = await read_model.resolve_party("abcd-1234", identity)

    assert party.invite_code == "ABCD-1234"
    assert party.primary_guest.identity_ref is None


async def test_admin_flag_comes_from_allow_list():
    store = InMemoryGuestStore(make_party())
    identity = Identity(subject_id="user-9", verified_emails=("Admin@Example.com",))

    as_admin = PartyReadModel(store, AdminAllowList.from_emails(["admin@example.com"]))
    as_guest = PartyReadModel(store, AdminAllowList.from_emails(["other@example.com"]))

    assert (await as_admin.resolve_party("ABCD-1234", identity)).is_admin is True
    assert (await as_guest.resolve_party("ABCD-1234", identity)).is_admin is False
