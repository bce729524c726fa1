# API endpoints and routers

from .auth_endpoints import router as auth_router
from .trips_endpoints import router as trips_router
from .itinerary_endpoints import days_router, blocks_router
from .photo_endpoints import router as photo_router
from .ping_endpoints import router as ping_router

__all__ = [
    "auth_router",
    "trips_router",
    "days_router",
    "blocks_router",
    "photo_router",
    "ping_router",
]
