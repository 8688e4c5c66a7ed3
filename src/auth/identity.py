"""Authenticated identity extraction.

Tokens are issued by the external identity provider. This service only
verifies them and reads the subject id and verified email addresses.
"""

import logging
from dataclasses import dataclass, field

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from src.config.settings import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    subject_id: str
    verified_emails: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AdminAllowList:
    """Emails allowed into the admin back office. Matching is case-insensitive."""

    emails: frozenset[str] = frozenset()

    @classmethod
    def from_emails(cls, emails) -> "AdminAllowList":
        return cls(frozenset(e.strip().lower() for e in emails if e and e.strip()))

    def contains_any(self, emails) -> bool:
        return any(e.strip().lower() in self.emails for e in emails if e)


def _verified_emails(payload: dict) -> tuple[str, ...]:
    emails = payload.get("emails")
    if isinstance(emails, list):
        return tuple(e for e in emails if isinstance(e, str) and e)

    email = payload.get("email")
    if isinstance(email, str) and email and payload.get("email_verified", True) is not False:
        return (email,)
    return ()


def decode_identity(token: str) -> Identity:
    """Verify a bearer token and build the identity it carries.

    Raises:
        JWTError: if the token is invalid, expired or has no subject
    """
    options = {"verify_aud": bool(settings.auth_audience)}
    payload = jwt.decode(
        token,
        settings.auth_secret_key,
        algorithms=[settings.auth_algorithm],
        audience=settings.auth_audience or None,
        options=options,
    )
    subject_id = payload.get("sub")
    if not subject_id:
        raise JWTError("Token has no subject")
    return Identity(subject_id=str(subject_id), verified_emails=_verified_emails(payload))


async def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity | None:
    """Optional identity: anonymous requests get None, invalid tokens a 401."""
    if credentials is None:
        return None
    try:
        return decode_identity(credentials.credentials)
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def require_identity(identity: Identity | None = Depends(get_identity)) -> Identity:
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def get_admin_allow_list() -> AdminAllowList:
    """Dependency to get the configured admin allow-list."""
    return AdminAllowList.from_emails(settings.admin_emails)


async def require_admin(
    identity: Identity = Depends(require_identity),
    allow_list: AdminAllowList = Depends(get_admin_allow_list),
) -> Identity:
    if not allow_list.contains_any(identity.verified_emails):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return identity
