from enum import Enum


class TableNames(str, Enum):
    GUESTS = "guests"
    EVENTS = "events"
    EVENT_INVITES = "event_invites"
    EMAIL_LOGS = "email_logs"
