import logging
import sys
from logging import StreamHandler

from src.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# third-party loggers that are too chatty at DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "aiosqlite")


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[StreamHandler(sys.stdout)],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    # engine echo is controlled by settings.log_db
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.log_db else logging.WARNING)
