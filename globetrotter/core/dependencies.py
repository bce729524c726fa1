"""
Dependency providers for FastAPI routes.

Holds the access guard (session + role gate) and the service factories the
routers depend on.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Callable, Iterable, Optional, Sequence
import logging

from globetrotter.config.settings import RoleCheckMode, get_settings
from globetrotter.core.db import get_db
from globetrotter.core.exceptions import ForbiddenError, UnauthorizedError
from globetrotter.core.session_store import SessionStore, UserContext
from globetrotter.services.auth_service import AuthService
from globetrotter.services.itinerary_service import ItineraryService
from globetrotter.services.photo_search_service import PexelsPhotoService, get_photo_service
from globetrotter.services.scheduling_rules import policies_from_settings
from globetrotter.services.trip_service import TripService

logger = logging.getLogger(__name__)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_session_context(request: Request) -> Optional[UserContext]:
    """The UserContext loaded by the session middleware, if any."""
    return getattr(request.state, "session", None)


def role_allowed(roles: Sequence[str], allowed: Iterable[str], mode: RoleCheckMode) -> bool:
    """
    Match session roles against an allow-set.

    PRIMARY consults only roles[0]; ANY accepts any intersection.
    """
    if not roles:
        return False
    allowed = set(allowed)
    if mode == RoleCheckMode.ANY:
        return any(role in allowed for role in roles)
    return roles[0] in allowed


def require_session(request: Request) -> UserContext:
    context = get_session_context(request)
    if context is None:
        raise UnauthorizedError()
    return context


def require_roles(*allowed_roles: str) -> Callable[[Request], UserContext]:
    """
    Build a dependency that admits only sessions whose role is allowed

    Raises:
        UnauthorizedError: No session on the request
        ForbiddenError: Session present but its role is not in the allow-set
    """
    allowed = frozenset(allowed_roles)

    def guard(request: Request) -> UserContext:
        context = require_session(request)
        mode = get_settings().auth.role_check_mode
        if not role_allowed(context.roles, allowed, mode):
            logger.warning(
                "Role check failed",
                extra={
                    "user_id": context.user_id,
                    "path": request.url.path,
                    "request_id": getattr(request.state, "request_id", "unknown"),
                },
            )
            raise ForbiddenError()
        return context

    return guard


USER_OR_ADMIN = require_roles("USER", "ADMIN")


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_trip_service(db: AsyncSession = Depends(get_db)) -> TripService:
    return TripService(db)


def get_itinerary_service(db: AsyncSession = Depends(get_db)) -> ItineraryService:
    overlap, day_numbers = policies_from_settings(get_settings().itinerary)
    return ItineraryService(db, overlap_policy=overlap, day_number_policy=day_numbers)


def get_photo_search() -> PexelsPhotoService:
    return get_photo_service()
