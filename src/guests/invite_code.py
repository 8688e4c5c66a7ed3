"""Invite code generation.

Codes are two groups of four characters joined by ``-`` (e.g. ``K7QX-M2PA``),
drawn from an alphabet without the easily confused ``0 O 1 I``.
"""

import logging
import re
import secrets

from src.guests.dtos import CodeSpaceExhaustedError, normalize_invite_code
from src.guests.repository.guest_store import GuestStore

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
INVITE_CODE_GROUP_LENGTH = 4
INVITE_CODE_SEPARATOR = "-"
MIN_SIGNIFICANT_CHARACTERS = 8


class InviteCodeGenerator:
    def __init__(
        self,
        alphabet: str = INVITE_CODE_ALPHABET,
        group_length: int = INVITE_CODE_GROUP_LENGTH,
    ) -> None:
        self.alphabet = alphabet
        self.group_length = group_length

    def _group(self) -> str:
        return "".join(secrets.choice(self.alphabet) for _ in range(self.group_length))

    def generate(self) -> str:
        return f"{self._group()}{INVITE_CODE_SEPARATOR}{self._group()}"


async def generate_unique_invite_code(
    store: GuestStore,
    generator: InviteCodeGenerator | None = None,
    max_attempts: int = 10,
) -> str:
    """Generate a code no guest uses yet.

    Raises:
        CodeSpaceExhaustedError: if every candidate within max_attempts collided
    """
    generator = generator or InviteCodeGenerator()
    for attempt in range(1, max_attempts + 1):
        code = normalize_invite_code(generator.generate())
        if not await store.invite_code_exists(code):
            return code
        logger.debug("Invite code collision on attempt %d", attempt)

    logger.error("No unique invite code found after %d attempts", max_attempts)
    raise CodeSpaceExhaustedError(max_attempts)


def is_plausible_invite_code(code: str | None) -> bool:
    """Minimum-length gate applied before a code is looked up."""
    return len(re.sub(r"[^A-Z0-9]", "", normalize_invite_code(code))) >= MIN_SIGNIFICANT_CHARACTERS


def rsvp_url(invite_code: str, frontend_url: str) -> str:
    """Deep link that opens the RSVP page with the code filled in."""
    return f"{frontend_url.rstrip('/')}/rsvp?code={normalize_invite_code(invite_code)}"
