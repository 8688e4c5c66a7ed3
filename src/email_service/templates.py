from dataclasses import dataclass

_HTML_HEAD = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
"""

_HTML_FOOT = """
    </body>
    </html>
"""


@dataclass
class EmailTemplates:
    # Wedding invitation
    INVITATION_SUBJECT = "You're Invited to Our Wedding!"
    INVITATION_HTML = (
        _HTML_HEAD
        + """
        <p>Dear {guest_name},</p>

        <p>We are delighted to invite you to our wedding celebration!</p>

        <p>Your invite code is:</p>
        <p style="font-family: 'Courier New', monospace; font-size: 20px; letter-spacing: 2px;"><strong>{invite_code}</strong></p>

        <div style="text-align: center; margin: 30px 0;">
            <a href="{rsvp_url}" style="background-color: #d4a373; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; font-size: 18px;">
                RSVP Now
            </a>
        </div>

        <p>If the button doesn't work, copy this link into your browser:</p>
        <p style="word-break: break-all;"><a href="{rsvp_url}">{rsvp_url}</a></p>

        <p>With love,<br>{couple_names}</p>
"""
        + _HTML_FOOT
    )
    INVITATION_TEXT = """
Dear {guest_name},

We are delighted to invite you to our wedding celebration!

Your invite code is: {invite_code}

RSVP here: {rsvp_url}

With love,
{couple_names}
"""

    # Admin notification after a wedding RSVP
    RSVP_NOTIFICATION_SUBJECT = "{icon} RSVP: {names} - {attendance}"
    RSVP_NOTIFICATION_HTML = (
        _HTML_HEAD
        + """
        <h2>New RSVP received</h2>
        <p><strong>Invite code:</strong> {invite_code}</p>
        <p><strong>Attendance:</strong> {attendance}</p>
        <ul>
{guest_lines_html}
        </ul>
"""
        + _HTML_FOOT
    )
    RSVP_NOTIFICATION_TEXT = """
New RSVP received

Invite code: {invite_code}
Attendance: {attendance}

{guest_lines_text}
"""

    # Invitation to a single event
    EVENT_INVITATION_SUBJECT = "You're Invited to the {event_name}!"
    EVENT_INVITATION_HTML = (
        _HTML_HEAD
        + """
        <p>Dear {guest_name},</p>

        <p>We would love for you to join us at the <strong>{event_name}</strong>.</p>

        <div style="background-color: #fefae0; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <p><strong>When:</strong> {event_when}</p>
            <p><strong>Where:</strong> {event_where}</p>
        </div>

        <p>Your invite code is <strong>{invite_code}</strong>.</p>

        <div style="text-align: center; margin: 30px 0;">
            <a href="{rsvp_url}" style="background-color: #d4a373; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; font-size: 18px;">
                RSVP Now
            </a>
        </div>

        <p>With love,<br>{couple_names}</p>
"""
        + _HTML_FOOT
    )
    EVENT_INVITATION_TEXT = """
Dear {guest_name},

We would love for you to join us at the {event_name}.

When: {event_when}
Where: {event_where}

Your invite code is {invite_code}.
RSVP here: {rsvp_url}

With love,
{couple_names}
"""

    # Admin notification after an event RSVP
    EVENT_RSVP_NOTIFICATION_SUBJECT = "Event RSVP: {guest_name} {attendance} {event_name}"
    EVENT_RSVP_NOTIFICATION_HTML = (
        _HTML_HEAD
        + """
        <h2>New event RSVP received</h2>
        <p><strong>Event:</strong> {event_name}</p>
        <p><strong>Guest:</strong> {guest_name} ({guest_email})</p>
        <p><strong>Invite code:</strong> {invite_code}</p>
        <p><strong>Response:</strong> {attendance}</p>
"""
        + _HTML_FOOT
    )
    EVENT_RSVP_NOTIFICATION_TEXT = """
New event RSVP received

Event: {event_name}
Guest: {guest_name} ({guest_email})
Invite code: {invite_code}
Response: {attendance}
"""
