"""Tests for RSVPWriteModel."""

from src.guests.dtos import (
    CompanionDecisionDTO,
    ContactDetailsDTO,
    ContactMethod,
    ErrorCode,
    GuestDTO,
    GuestList,
    RSVPDecisionDTO,
    RSVPStatus,
    Side,
    split_party,
)
from src.guests.features.update_rsvp.write_model import RSVPWriteModel
from src.guests.tests.inmemory_models import (
    InMemoryEmailService,
    InMemoryGuestStore,
    RacingCompanionGuestStore,
    make_party,
)

ATTENDING_WITH_JANE = RSVPDecisionDTO(
    attending=True,
    companion=CompanionDecisionDTO(attending=True, first_name="Jane"),
)


async def _party(store, code="ABCD-1234"):
    return split_party(await store.find_by_invite_code(code))


# Preconditions


async def test_missing_invite_code_does_not_touch_store():
    store = InMemoryGuestStore(make_party())
    write_model = RSVPWriteModel(store=store)

    result = await write_model.submit_rsvp("", RSVPDecisionDTO(attending=True))

    assert result.success is False
    assert result.error == ErrorCode.MISSING_INVITE_CODE
    assert store.writes == 0


async def test_unknown_invite_code():
    write_model = RSVPWriteModel(store=InMemoryGuestStore(make_party()))

    result = await write_model.submit_rsvp("ZZZZ-9999", RSVPDecisionDTO(attending=True))

    assert result.error == ErrorCode.INVALID_INVITE_CODE


async def test_code_with_only_a_companion_has_no_primary():
    orphan = GuestDTO(first_name="Bob", invite_code="ABCD-1234", is_companion=True)
    write_model = RSVPWriteModel(store=InMemoryGuestStore([orphan]))

    result = await write_model.submit_rsvp("ABCD-1234", RSVPDecisionDTO(attending=True))

    assert result.error == ErrorCode.PRIMARY_NOT_FOUND


# Primary guest update


async def test_accept_sets_status_dietary_and_contact():
    store = InMemoryGuestStore(make_party(companion_allowed=False, phone="555-0000"))
    write_model = RSVPWriteModel(store=store)

    result = await write_model.submit_rsvp(
        "abcd-1234",
        RSVPDecisionDTO(
            attending=True,
            dietary_restrictions="no nuts",
            contact=ContactDetailsDTO(
                mailing_address="1 Main St",
                whatsapp="",
                preferred_contact_method=ContactMethod.EMAIL,
            ),
        ),
    )

    assert result.success is True
    assert result.status == RSVPStatus.YES
    primary, _ = await _party(store)
    assert primary.rsvp_status == RSVPStatus.YES
    assert primary.dietary_restrictions == "no nuts"
    assert primary.mailing_address == "1 Main St"
    # full overwrite: absent and empty values become null
    assert primary.phone is None
    assert primary.whatsapp is None
    assert primary.preferred_contact_method == ContactMethod.EMAIL


async def test_decline_clears_primary_dietary():
    store = InMemoryGuestStore(make_party(dietary_restrictions="vegan"))
    write_model = RSVPWriteModel(store=store)

    await write_model.submit_rsvp(
        "ABCD-1234", RSVPDecisionDTO(attending=False, dietary_restrictions="vegan")
    )

    primary, _ = await _party(store)
    assert primary.rsvp_status == RSVPStatus.NO
    assert primary.dietary_restrictions is None


async def test_companion_input_ignored_when_companion_not_allowed():
    store = InMemoryGuestStore(make_party(companion_allowed=False))
    write_model = RSVPWriteModel(store=store)

    await write_model.submit_rsvp("ABCD-1234", ATTENDING_WITH_JANE)

    _, companion = await _party(store)
    assert companion is None


# Companion state machine


async def test_primary_decline_cascades_to_companion():
    party = make_party(with_companion=True, rsvp_status=RSVPStatus.YES)
    store = InMemoryGuestStore(party)
    write_model = RSVPWriteModel(store=store)

    await write_model.submit_rsvp("ABCD-1234", RSVPDecisionDTO(attending=False))

    primary, companion = await _party(store)
    assert primary.rsvp_status == RSVPStatus.NO
    assert companion.rsvp_status == RSVPStatus.NO
    assert companion.dietary_restrictions is None


async def test_primary_decline_does_not_create_companion():
    store = InMemoryGuestStore(make_party())
    write_model = RSVPWriteModel(store=store)

    await write_model.submit_rsvp(
        "ABCD-1234",
        RSVPDecisionDTO(
            attending=False,
            companion=CompanionDecisionDTO(attending=True, first_name="Jane"),
        ),
    )

    _, companion = await _party(store)
    assert companion is None


async def test_accept_with_named_companion_creates_it_once():
    party = make_party(side=Side.BRIDE, guest_list=GuestList.B, family=True)
    store = InMemoryGuestStore(party)
    write_model = RSVPWriteModel(store=store)

    first = await write_model.submit_rsvp("ABCD-1234", ATTENDING_WITH_JANE)
    second = await write_model.submit_rsvp("ABCD-1234", ATTENDING_WITH_JANE)

    assert first.success and second.success
    guests = await store.find_by_invite_code("ABCD-1234")
    companions = [g for g in guests if g.is_companion]
    assert len(companions) == 1
    companion = companions[0]
    assert companion.first_name == "Jane"
    assert companion.rsvp_status == RSVPStatus.YES
    assert companion.primary_guest_id == party[0].id
    assert companion.companion_allowed is False
    assert companion.side == Side.BRIDE
    assert companion.guest_list == GuestList.B
    assert companion.family is True
    # no email given: falls back to the primary's address
    assert companion.email == "alice@example.com"
    assert store.inserts == 1


async def test_accept_with_named_companion_updates_existing_record():
    party = make_party(with_companion=True)
    store = InMemoryGuestStore(party)
    write_model = RSVPWriteModel(store=store)

    await write_model.submit_rsvp(
        "ABCD-1234",
        RSVPDecisionDTO(
            attending=True,
            companion=CompanionDecisionDTO(
                attending=True,
                first_name=" Jane ",
                last_name="Doe",
                dietary_restrictions="gluten free",
            ),
        ),
    )

    _, companion = await _party(store)
    assert companion.id == party[1].id
    assert companion.first_name == "Jane"
    assert companion.last_name == "Doe"
    assert companion.email == "bob@example.com"
    assert companion.rsvp_status == RSVPStatus.YES
    assert companion.dietary_restrictions == "gluten free"
    assert store.inserts == 0


async def test_companion_explicitly_not_attending():
    party = make_party(with_companion=True, rsvp_status=RSVPStatus.YES)
    store = InMemoryGuestStore(party)
    write_model = RSVPWriteModel(store=store)

    await write_model.submit_rsvp(
        "ABCD-1234",
        RSVPDecisionDTO(attending=True, companion=CompanionDecisionDTO(attending=False)),
    )

    primary, companion = await _party(store)
    assert primary.rsvp_status == RSVPStatus.YES
    assert companion.rsvp_status == RSVPStatus.NO
    assert companion.dietary_restrictions is None


async def test_unknown_companion_decision_leaves_companion_unchanged():
    party = make_party(with_companion=True, rsvp_status=RSVPStatus.YES)
    store = InMemoryGuestStore(party)
    write_model = RSVPWriteModel(store=store)

    await write_model.submit_rsvp("ABCD-1234", RSVPDecisionDTO(attending=True))

    _, companion = await _party(store)
    assert companion == party[1]


async def test_companion_attending_without_name_is_a_noop():
    store = InMemoryGuestStore(make_party())
    write_model = RSVPWriteModel(store=store)

    await write_model.submit_rsvp(
        "ABCD-1234",
        RSVPDecisionDTO(attending=True, companion=CompanionDecisionDTO(attending=True, first_name="  ")),
    )

    _, companion = await _party(store)
    assert companion is None


async def test_concurrently_created_companion_is_updated_not_duplicated():
    party = make_party()
    competing = GuestDTO(
        first_name="Other",
        invite_code="ABCD-1234",
        is_companion=True,
        primary_guest_id=party[0].id,
        rsvp_status=RSVPStatus.YES,
    )
    store = RacingCompanionGuestStore(party, competing_companion=competing)
    write_model = RSVPWriteModel(store=store)

    result = await write_model.submit_rsvp("ABCD-1234", ATTENDING_WITH_JANE)

    assert result.success is True
    guests = await store.find_by_invite_code("ABCD-1234")
    companions = [g for g in guests if g.is_companion]
    assert len(companions) == 1
    assert companions[0].id == competing.id
    assert companions[0].first_name == "Jane"


# Admin notification


async def test_notification_summarises_party():
    store = InMemoryGuestStore(make_party())
    email_service = InMemoryEmailService()
    write_model = RSVPWriteModel(
        store=store,
        email_service=email_service,
        notification_emails=["admin@example.com"],
    )

    await write_model.submit_rsvp("ABCD-1234", ATTENDING_WITH_JANE)

    assert len(email_service.sent_emails) == 1
    sent = email_service.sent_emails[0]
    assert sent["kind"] == "rsvp_notification"
    assert sent["to_addresses"] == ["admin@example.com"]
    assert sent["invite_code"] == "ABCD-1234"
    assert sent["attending"] is True
    assert {g.first_name for g in sent["guests"]} == {"Alice", "Jane"}


async def test_email_failure_does_not_fail_submission():
    store = InMemoryGuestStore(make_party())
    write_model = RSVPWriteModel(
        store=store,
        email_service=InMemoryEmailService(fail=True),
        notification_emails=["admin@example.com"],
    )

    result = await write_model.submit_rsvp("ABCD-1234", RSVPDecisionDTO(attending=True))

    assert result.success is True
    primary, _ = await _party(store)
    assert primary.rsvp_status == RSVPStatus.YES


async def test_no_notification_without_recipients():
    email_service = InMemoryEmailService()
    write_model = RSVPWriteModel(store=InMemoryGuestStore(make_party()), email_service=email_service)

    await write_model.submit_rsvp("ABCD-1234", RSVPDecisionDTO(attending=True))

    assert email_service.sent_emails == []
