from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from src.config.settings import settings
from src.email_service.templates import EmailTemplates
from src.guests.dtos import GuestDTO, RSVPStatus


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str
    text_body: str


def _party_lines(guests: list[GuestDTO]) -> tuple[str, str]:
    html_lines, text_lines = [], []
    for guest in guests:
        role = "Plus one" if guest.is_companion else "Guest"
        status = RSVPStatus(guest.rsvp_status).value
        details = f"{role}: {guest.full_name} <{guest.email or 'no email'}> - {status}"
        if guest.dietary_restrictions:
            details += f" (dietary: {guest.dietary_restrictions})"
        html_lines.append(f"            <li>{details.replace('<', '&lt;').replace('>', '&gt;')}</li>")
        text_lines.append(f"- {details}")
    return "\n".join(html_lines), "\n".join(text_lines)


def render_invitation(guest_name: str, invite_code: str, rsvp_url: str) -> RenderedEmail:
    values = dict(
        guest_name=guest_name,
        invite_code=invite_code,
        rsvp_url=rsvp_url,
        couple_names=settings.couple_names,
    )
    return RenderedEmail(
        subject=EmailTemplates.INVITATION_SUBJECT,
        html_body=EmailTemplates.INVITATION_HTML.format(**values),
        text_body=EmailTemplates.INVITATION_TEXT.format(**values),
    )


def render_rsvp_notification(invite_code: str, attending: bool, guests: list[GuestDTO]) -> RenderedEmail:
    attendance = "Attending" if attending else "Not Attending"
    html_lines, text_lines = _party_lines(guests)
    subject = EmailTemplates.RSVP_NOTIFICATION_SUBJECT.format(
        icon="✅" if attending else "❌",
        names=", ".join(g.first_name for g in guests),
        attendance=attendance,
    )
    return RenderedEmail(
        subject=subject,
        html_body=EmailTemplates.RSVP_NOTIFICATION_HTML.format(
            invite_code=invite_code, attendance=attendance, guest_lines_html=html_lines
        ),
        text_body=EmailTemplates.RSVP_NOTIFICATION_TEXT.format(
            invite_code=invite_code, attendance=attendance, guest_lines_text=text_lines
        ),
    )


def render_event_invitation(
    guest_name: str,
    invite_code: str,
    rsvp_url: str,
    event_name: str,
    event_when: str,
    event_where: str,
) -> RenderedEmail:
    values = dict(
        guest_name=guest_name,
        invite_code=invite_code,
        rsvp_url=rsvp_url,
        event_name=event_name,
        event_when=event_when or "To be announced",
        event_where=event_where or "To be announced",
        couple_names=settings.couple_names,
    )
    return RenderedEmail(
        subject=EmailTemplates.EVENT_INVITATION_SUBJECT.format(event_name=event_name),
        html_body=EmailTemplates.EVENT_INVITATION_HTML.format(**values),
        text_body=EmailTemplates.EVENT_INVITATION_TEXT.format(**values),
    )


def render_event_rsvp_notification(
    guest_name: str,
    guest_email: str | None,
    invite_code: str,
    event_name: str,
    attending: bool,
) -> RenderedEmail:
    values = dict(
        guest_name=guest_name,
        guest_email=guest_email or "no email",
        invite_code=invite_code,
        event_name=event_name,
        attendance="is attending" if attending else "declined",
    )
    return RenderedEmail(
        subject=EmailTemplates.EVENT_RSVP_NOTIFICATION_SUBJECT.format(**values),
        html_body=EmailTemplates.EVENT_RSVP_NOTIFICATION_HTML.format(**values),
        text_body=EmailTemplates.EVENT_RSVP_NOTIFICATION_TEXT.format(**values),
    )


class EmailServiceBase(ABC):
    @abstractmethod
    async def send_invitation(
        self,
        to_address: str,
        guest_name: str,
        invite_code: str,
        rsvp_url: str,
        guest_id: UUID | None = None,
    ) -> None:
        pass

    @abstractmethod
    async def send_rsvp_notification(
        self,
        to_addresses: list[str],
        invite_code: str,
        attending: bool,
        guests: list[GuestDTO],
    ) -> None:
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def send_event_rsvp_notification(
        self,
        to_addresses: list[str],
        guest_name: str,
        guest_email: str | None,
        invite_code: str,
        event_name: str,
        attending: bool,
    ) -> None:
        pass
