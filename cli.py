"""CLI commands for wedding guest management."""

import asyncio
from datetime import date
from uuid import UUID

import typer

from src.config.logging import setup_logging
from src.config.settings import settings
from src.email_service import get_email_service
from src.events.dtos import (
    DefaultEventInvitesLockedError,
    EventNotFoundError,
    NoInvitedGuestsError,
)
from src.events.features.manage_invites.write_model import EventInviteAdminWriteModel
from src.events.repository.event_store import SqlEventStore
from src.guests.dtos import CodeSpaceExhaustedError, GuestList, GuestsWithoutEmailError, NewGuestDTO, Side
from src.guests.features.create_guest.write_model import GuestCreateWriteModel
from src.guests.features.link_identity.write_model import IdentityLinkWriteModel
from src.guests.features.resolve_party.read_model import PartyReadModel
from src.guests.invite_code import InviteCodeGenerator, rsvp_url
from src.guests.repository.guest_store import SqlGuestStore

app = typer.Typer(help="CLI commands for wedding guest management")


@app.callback()
def main():
    setup_logging()


@app.command()
def create_guest(
    first_name: str = typer.Argument(..., help="First name of the primary guest"),
    last_name: str = typer.Option(None, "--last-name", "-l", help="Last name"),
    email: str = typer.Option(None, "--email", "-e", help="Email address"),
    side: Side = typer.Option(None, "--side", help="Whose side the guest is on"),
    guest_list: GuestList = typer.Option(GuestList.A, "--list", help="Guest list priority"),
    companion: bool = typer.Option(False, "--companion", "-c", help="Allow a plus-one"),
    companion_first_name: str = typer.Option(None, "--companion-first-name", help="Known plus-one first name"),
    send_email: bool = typer.Option(False, "--send-email", help="Email the invitation"),
):
    """Create a primary guest with a fresh invite code."""
    write_model = GuestCreateWriteModel(
        store=SqlGuestStore(),
        email_service=get_email_service() if send_email else None,
        max_code_attempts=settings.invite_code_max_attempts,
        frontend_url=settings.frontend_url,
    )
    new_guest = NewGuestDTO(
        first_name=first_name,
        last_name=last_name,
        email=email,
        side=side,
        guest_list=guest_list,
        companion_allowed=companion,
        companion_first_name=companion_first_name,
        send_email=send_email,
    )

    try:
        guest = asyncio.run(write_model.create_guest(new_guest))
    except CodeSpaceExhaustedError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Guest created!", fg=typer.colors.GREEN)
    typer.secho(f"  Name: {guest.full_name}", fg=typer.colors.BLUE)
    typer.secho(f"  Guest ID: {guest.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Invite code: {guest.invite_code}", fg=typer.colors.CYAN)
    typer.secho(f"  RSVP URL: {rsvp_url(guest.invite_code, settings.frontend_url)}", fg=typer.colors.CYAN)
    if companion:
        typer.secho("  Plus-one placeholder created", fg=typer.colors.MAGENTA)


@app.command()
def generate_code(
    count: int = typer.Option(1, "--count", "-n", help="Number of codes to print"),
):
    """Print random invite codes without storing them."""
    generator = InviteCodeGenerator()
    for _ in range(count):
        typer.echo(generator.generate())


@app.command()
def show_party(
    invite_code: str = typer.Argument(..., help="Invite code of the party"),
):
    """Show the primary guest and companion sharing an invite code."""
    party = asyncio.run(PartyReadModel(store=SqlGuestStore()).resolve_party(invite_code))
    if party is None:
        typer.secho(f"No party found for invite code {invite_code}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Party {party.invite_code}", fg=typer.colors.GREEN)
    for member in party.members:
        role = "companion" if member.is_companion else "primary"
        typer.secho(f"  - {member.full_name} ({role})", fg=typer.colors.BLUE)
        typer.secho(f"    ID: {member.id}", fg=typer.colors.CYAN)
        typer.secho(f"    Email: {member.email or 'N/A'}", fg=typer.colors.BLUE)
        typer.secho(f"    RSVP: {member.rsvp_status.value}", fg=typer.colors.MAGENTA)
        if member.identity_ref:
            typer.secho(f"    Linked identity: {member.identity_ref}", fg=typer.colors.YELLOW)


@app.command()
def link_identity(
    invite_code: str = typer.Argument(..., help="Invite code of the party"),
    subject_id: str = typer.Argument(..., help="Identity provider subject id"),
    emails: list[str] = typer.Option([], "--email", "-e", help="Verified emails of the identity"),
):
    """Bind an identity to the primary guest of an invite code."""
    write_model = IdentityLinkWriteModel(store=SqlGuestStore())
    result = asyncio.run(write_model.link_identity(subject_id, emails, invite_code))
    if not result.success:
        typer.secho(f"Could not link identity: {result.error.value}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Identity linked!", fg=typer.colors.GREEN)
    typer.secho(f"  Guest ID: {result.guest_id}", fg=typer.colors.CYAN)


def _event_admin(send_email: bool = False) -> EventInviteAdminWriteModel:
    return EventInviteAdminWriteModel(
        guest_store=SqlGuestStore(),
        event_store=SqlEventStore(),
        email_service=get_email_service() if send_email else None,
        frontend_url=settings.frontend_url,
    )


@app.command()
def create_event(
    name: str = typer.Argument(..., help="Event name"),
    event_date: str = typer.Option(None, "--date", "-d", help="Date as YYYY-MM-DD"),
    start_time: str = typer.Option(None, "--start", help="Start time as HH:MM"),
    end_time: str = typer.Option(None, "--end", help="End time as HH:MM"),
    location: str = typer.Option(None, "--location", help="Venue name"),
    address: str = typer.Option(None, "--address", help="Venue address"),
    default: bool = typer.Option(False, "--default", help="Every guest is invited"),
):
    """Create an event."""
    event = asyncio.run(
        _event_admin().create_event(
            name=name,
            event_date=date.fromisoformat(event_date) if event_date else None,
            start_time=start_time,
            end_time=end_time,
            location_name=location,
            location_address=address,
            is_default=default,
        )
    )

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Name: {event.name}", fg=typer.colors.BLUE)
    typer.secho(f"  Event ID: {event.id}", fg=typer.colors.CYAN)
    if event.is_default:
        typer.secho("  Default event: every guest is invited", fg=typer.colors.YELLOW)


@app.command()
def invite_to_event(
    event_id: str = typer.Argument(..., help="Event UUID"),
    guests: list[str] = typer.Option([], "--guest", "-g", help="Primary guest UUIDs to invite"),
    send_email: bool = typer.Option(False, "--send-email", help="Email the event invitation"),
):
    """Invite primary guests to an event."""
    guest_ids = [UUID(guest_id) for guest_id in guests]
    write_model = _event_admin(send_email)

    async def _invite():
        added = await write_model.add_invites(UUID(event_id), guest_ids)
        result = await write_model.send_event_invitations(UUID(event_id), guest_ids) if send_email else None
        return added, result

    try:
        added, result = asyncio.run(_invite())
    except (EventNotFoundError, DefaultEventInvitesLockedError, NoInvitedGuestsError, GuestsWithoutEmailError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"{added} guest(s) invited", fg=typer.colors.GREEN)
    if result is not None:
        typer.secho(f"  Emails sent: {len(result.sent)}", fg=typer.colors.CYAN)
        for guest_id, error in result.failed.items():
            typer.secho(f"  Failed for {guest_id}: {error}", fg=typer.colors.RED)


if __name__ == "__main__":
    app()
