import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from uuid import UUID

from src.config.settings import settings
from src.email_service.base import (
    EmailServiceBase,
    RenderedEmail,
    render_event_invitation,
    render_event_rsvp_notification,
    render_invitation,
    render_rsvp_notification,
)
from src.guests.dtos import GuestDTO


class SMTPEmailService(EmailServiceBase):
    """Plain SMTP delivery, used against Mailhog during local development."""

    def __init__(self):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_user
        self.password = settings.smtp_password
        self.from_address = settings.emails_from

    def _create_message(self, to_addresses: list[str], email: RenderedEmail) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = email.subject
        msg["From"] = self.from_address
        msg["To"] = ", ".join(to_addresses)

        msg.attach(MIMEText(email.text_body, "plain"))
        msg.attach(MIMEText(email.html_body, "html"))

        return msg

    def _send(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port) as server:
            if self.username and self.password:
                server.starttls()
                server.login(self.username, self.password)
            server.send_message(msg)

    async def send_invitation(
        self,
        to_address: str,
        guest_name: str,
        invite_code: str,
        rsvp_url: str,
        guest_id: UUID | None = None,
    ) -> None:
        self._send(self._create_message([to_address], render_invitation(guest_name, invite_code, rsvp_url)))

    async def send_rsvp_notification(
        self,
        to_addresses: list[str],
        invite_code: str,
        attending: bool,
        guests: list[GuestDTO],
    ) -> None:
        email = render_rsvp_notification(invite_code, attending, guests)
        self._send(self._create_message(to_addresses, email))

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
        email = render_event_invitation(guest_name, invite_code, rsvp_url, event_name, event_when, event_where)
        self._send(self._create_message([to_address], email))

    async def send_event_rsvp_notification(
        self,
        to_addresses: list[str],
        guest_name: str,
        guest_email: str | None,
        invite_code: str,
        event_name: str,
        attending: bool,
    ) -> None:
        email = render_event_rsvp_notification(guest_name, guest_email, invite_code, event_name, attending)
        self._send(self._create_message(to_addresses, email))
