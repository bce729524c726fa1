"""Authentication endpoints: registration, session login/logout and profile."""

from fastapi import APIRouter, Depends, Request, Response, status
import logging

from globetrotter.core.dependencies import get_auth_service, get_session_store, require_session
from globetrotter.core.exceptions import UnauthorizedError
from globetrotter.core.security import new_session_id, sign_session_id
from globetrotter.core.session_store import SessionStore, UserContext
from globetrotter.middleware.auth import clear_session_cookie, set_session_cookie
from globetrotter.schemas.base import Envelope
from globetrotter.schemas.user import LoginRequest, RegisterRequest, SessionRead, UserRead
from globetrotter.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_read(user, roles) -> UserRead:
    return UserRead.model_validate(user).model_copy(update={"roles": list(roles)})


@router.post("/register", response_model=Envelope[UserRead], status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Create an account with the default USER role

    - **firstName**, **lastName**: trimmed, inner whitespace collapsed
    - **email**, **phone**: must both be unused
    - **city**, **country**: optional, letters/spaces/hyphens/apostrophes
    """
    user, roles = await service.register(payload)
    return Envelope(message="User registered successfully", data=_user_read(user, roles))


@router.post("/login", response_model=Envelope[SessionRead])
async def login_user(
    payload: LoginRequest,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    store: SessionStore = Depends(get_session_store),
):
    """
    Establish a session for an email/phone + password pair

    The session id travels in an http-only signed cookie.
    """
    user, roles = await service.authenticate(payload.identifier, payload.password)

    # Never reuse a session id across logins
    previous = getattr(request.state, "session_id", None)
    if previous:
        await store.delete(previous)

    session_id = new_session_id()
    await store.set(session_id, UserContext(user_id=user.id, email=user.email, roles=roles))
    set_session_cookie(response, sign_session_id(session_id))

    logger.info("User logged in", extra={"user_id": user.id})
    return Envelope(
        message="Login successful",
        data=SessionRead(user=_user_read(user, roles), roles=roles),
    )


@router.post("/logout", response_model=Envelope)
async def logout_user(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    """Destroy the current session, if any, and clear the cookie."""
    session_id = getattr(request.state, "session_id", None)
    if session_id:
        await store.delete(session_id)
    clear_session_cookie(response)
    return Envelope(message="Logged out")


@router.get("/me", response_model=Envelope[SessionRead])
async def get_current_user(
    context: UserContext = Depends(require_session),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.get_user(context.user_id)
    if user is None:
        # Account vanished while the session was alive
        raise UnauthorizedError()
    return Envelope(data=SessionRead(user=_user_read(user, context.roles), roles=context.roles))
