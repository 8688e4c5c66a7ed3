import asyncio
import logging
from contextlib import asynccontextmanager

import sentry_sdk
from alembic import command
from alembic.config import Config
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.config.logging import setup_logging
from src.config.settings import settings
from src.events.routers import admin_router as events_admin_router
from src.events.routers import router as events_router
from src.guests.routers import admin_router as guests_admin_router
from src.guests.routers import router as guests_router
from src.routers.healthz.router import API_VERSION
from src.routers.healthz.router import router as healthz_router

setup_logging()
logger = logging.getLogger(__name__)


def init_sentry() -> None:
    if not settings.SENTRY_DSN:
        logger.info("Sentry disabled, no DSN configured")
        return
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )


async def upgrade_database() -> None:
    logger.info("Upgrading database schema to head")
    await asyncio.to_thread(command.upgrade, Config("alembic.ini"), "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        await upgrade_database()
    yield


def create_app() -> FastAPI:
    init_sentry()
    api = FastAPI(
        title="Wedding Guest API",
        description="Invite codes, guest parties, RSVPs and per-event invitations",
        version=API_VERSION,
        lifespan=lifespan,
    )
    api.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
    api.include_router(guests_router, tags=["Guests"])
    api.include_router(events_router, tags=["Events"])
    # admin routers carry their own require_admin dependency
    api.include_router(guests_admin_router, tags=["Admin"])
    api.include_router(events_admin_router, tags=["Admin"])

    @api.get("/", tags=["Root"])
    async def root():
        return {"message": "Welcome to the Wedding Guest API", "version": API_VERSION}

    return api


app = create_app()
