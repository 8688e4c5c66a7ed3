from fastapi import APIRouter

from .features.event_rsvp.router import router as event_rsvp_router
from .features.manage_invites.router import router as manage_invites_router

router = APIRouter()

router.include_router(event_rsvp_router)

admin_router = APIRouter()

admin_router.include_router(manage_invites_router)
