from fastapi import APIRouter

from .features.create_guest.router import router as create_guest_router
from .features.link_identity.router import router as link_identity_router
from .features.manage_guests.router import router as manage_guests_router
from .features.resolve_party.router import router as resolve_party_router
from .features.update_contact_info.router import router as update_contact_info_router
from .features.update_rsvp.router import router as update_rsvp_router

router = APIRouter()

router.include_router(resolve_party_router)
router.include_router(link_identity_router)
router.include_router(update_rsvp_router)
router.include_router(update_contact_info_router)

admin_router = APIRouter()

admin_router.include_router(create_guest_router)
admin_router.include_router(manage_guests_router)
