import logging

from src.config.settings import settings
from src.email_service.base import EmailServiceBase, RenderedEmail
from src.email_service.email_logger import SQLEmailLogger
from src.email_service.resend_service import ResendEmailService
from src.email_service.smtp_service import SMTPEmailService

logger = logging.getLogger(__name__)


def get_email_service() -> EmailServiceBase:
    """Dependency to get the configured email backend: Resend when an API key is set, SMTP otherwise."""
    if settings.resend_api_key:
        return ResendEmailService(config=settings, email_logger=SQLEmailLogger())
    logger.debug("No Resend API key configured, delivering email over SMTP to %s", settings.smtp_host)
    return SMTPEmailService()


__all__ = [
    "EmailServiceBase",
    "RenderedEmail",
    "ResendEmailService",
    "SMTPEmailService",
    "get_email_service",
]
