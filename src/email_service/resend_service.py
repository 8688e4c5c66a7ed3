import logging
from typing import Protocol
from uuid import UUID

import httpx

from src.email_service.base import (
    EmailServiceBase,
    RenderedEmail,
    render_event_invitation,
    render_event_rsvp_notification,
    render_invitation,
    render_rsvp_notification,
)
from src.email_service.email_logger import EmailLogger, NoOpEmailLogger
from src.guests.dtos import GuestDTO

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailConfig(Protocol):
    resend_api_key: str
    emails_from: str


class ResendEmailService(EmailServiceBase):
    def __init__(
        self,
        config: ResendEmailConfig,
        email_logger: EmailLogger | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._http_client_class = http_client_class
        self.email_logger = email_logger or NoOpEmailLogger()

    async def _send(
        self,
        to_addresses: list[str],
        email: RenderedEmail,
        email_type: str,
        guest_id: UUID | None = None,
    ) -> str:
        """Send email via Resend and log via injected logger."""

        log_uuid = await self.email_logger.log_email_attempt(
            to_address=", ".join(to_addresses),
            from_address=self._config.emails_from,
            subject=email.subject,
            html_body=email.html_body,
            text_body=email.text_body,
            email_type=email_type,
            guest_id=guest_id,
        )

        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    RESEND_EMAILS_URL,
                    headers={
                        "Authorization": f"Bearer {self._config.resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self._config.emails_from,
                        "to": to_addresses,
                        "subject": email.subject,
                        "html": email.html_body,
                        "text": email.text_body,
                    },
                )
                response.raise_for_status()
                resend_email_id = response.json().get("id")
        except httpx.HTTPError as e:
            await self.email_logger.log_email_failure(log_uuid=log_uuid, error_message=str(e))
            raise

        await self.email_logger.log_email_success(log_uuid=log_uuid, resend_email_id=resend_email_id)
        logger.info("Sent %s email %s", email_type, resend_email_id)
        return resend_email_id

    async def send_invitation(
        self,
        to_address: str,
        guest_name: str,
        invite_code: str,
        rsvp_url: str,
        guest_id: UUID | None = None,
    ) -> None:
        await self._send(
            [to_address],
            render_invitation(guest_name, invite_code, rsvp_url),
            email_type="invitation",
            guest_id=guest_id,
        )

    async def send_rsvp_notification(
        self,
        to_addresses: list[str],
        invite_code: str,
        attending: bool,
        guests: list[GuestDTO],
    ) -> None:
        await self._send(
            to_addresses,
            render_rsvp_notification(invite_code, attending, guests),
            email_type="rsvp_notification",
        )

    async def send_event_invitation(
        self,
        to_address: str,
        guest_name: str,
        invite_code: str,
        rsvp_url: str,
        event_name: str,
        event_when: str = "",
        event_where: str = "",
        guest_id: UUID | None = None,
    ) -> None:
        await self._send(
            [to_address],
            render_event_invitation(guest_name, invite_code, rsvp_url, event_name, event_when, event_where),
            email_type="event_invitation",
            guest_id=guest_id,
        )

    async def send_event_rsvp_notification(
        self,
        to_addresses: list[str],
        guest_name: str,
        guest_email: str | None,
        invite_code: str,
        event_name: str,
        attending: bool,
    ) -> None:
        await self._send(
            to_addresses,
            render_event_rsvp_notification(guest_name, guest_email, invite_code, event_name, attending),
            email_type="event_rsvp_notification",
        )
