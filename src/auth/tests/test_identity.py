import pytest
from jose import JWTError, jwt

from src.auth.identity import AdminAllowList, decode_identity
from src.config.settings import settings
from src.guests.repository.guest_store import get_guest_store
from src.guests.tests.inmemory_models import InMemoryGuestStore, make_party
from src.guests.urls import RESOLVE_PARTY_URL


def _token(claims: dict, secret: str | None = None) -> str:
    return jwt.encode(claims, secret or settings.auth_secret_key, algorithm=settings.auth_algorithm)


def test_decode_identity_with_email_list():
    identity = decode_identity(_token({"sub": "user-1", "emails": ["a@example.com", "b@example.com"]}))

    assert identity.subject_id == "user-1"
    assert identity.verified_emails == ("a@example.com", "b@example.com")


def test_decode_identity_with_single_email():
    identity = decode_identity(_token({"sub": "user-1", "email": "a@example.com"}))

    assert identity.verified_emails == ("a@example.com",)


def test_unverified_email_is_ignored():
    identity = decode_identity(_token({"sub": "user-1", "email": "a@example.com", "email_verified": False}))

    assert identity.verified_emails == ()


def test_token_without_subject_is_rejected():
    with pytest.raises(JWTError):
        decode_identity(_token({"email": "a@example.com"}))


def test_token_with_wrong_secret_is_rejected():
    with pytest.raises(JWTError):
        decode_identity(_token({"sub": "user-1"}, secret="not-the-secret"))


def test_audience_is_checked_when_configured(monkeypatch):
    monkeypatch.setattr(settings, "auth_audience", "wedding-api")

    assert decode_identity(_token({"sub": "user-1", "aud": "wedding-api"})).subject_id == "user-1"
    with pytest.raises(JWTError):
        decode_identity(_token({"sub": "user-1", "aud": "another-api"}))


def test_admin_allow_list_is_case_insensitive():
    allow_list = AdminAllowList.from_emails([" Couple@Example.com ", ""])

    assert allow_list.contains_any(["couple@example.COM"])
    assert not allow_list.contains_any(["guest@example.com"])
    assert not AdminAllowList().contains_any(["couple@example.com"])


async def test_invalid_bearer_token_is_unauthorized(client_factory):
    overrides = {get_guest_store: lambda: InMemoryGuestStore(make_party())}

    async with client_factory(overrides) as client:
        response = await client.get(
            RESOLVE_PARTY_URL,
            params={"code": "ABCD-1234"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

    assert response.status_code == 401


async def test_valid_bearer_token_resolves_linked_party(client_factory):
    store = InMemoryGuestStore(make_party(identity_ref="user-1"))
    overrides = {get_guest_store: lambda: store}

    async with client_factory(overrides) as client:
        response = await client.get(
            RESOLVE_PARTY_URL,
            headers={"Authorization": f"Bearer {_token({'sub': 'user-1'})}"},
        )

    assert response.status_code == 200
    assert response.json()["invite_code"] == "ABCD-1234"
