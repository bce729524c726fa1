"""
Session middleware: resolves the session cookie into a UserContext.

Public and protected routes alike get ``request.state.session`` (None when
there is no valid session); the access guard in ``core.dependencies``
decides whether a route requires one.
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
import logging

from globetrotter.config.settings import settings
from globetrotter.core.security import unsign_session_id

logger = logging.getLogger(__name__)


def set_session_cookie(response: Response, signed_value: str) -> None:
    response.set_cookie(
        key=settings.session.cookie_name,
        value=signed_value,
        max_age=settings.session.ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session.cookie_secure or settings.is_production(),
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session.cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.session.cookie_secure or settings.is_production(),
        path="/",
    )


def _response_sets_session_cookie(response: Response) -> bool:
    prefix = f"{settings.session.cookie_name}="
    return any(
        value.startswith(prefix)
        for value in response.headers.getlist("set-cookie")
    )


class SessionAuthMiddleware(BaseHTTPMiddleware):
    """
    Loads the session for every request and slides its expiry.

    A valid session has its TTL pushed forward in the store and its cookie
    re-issued with a fresh max-age, unless the route itself set or cleared
    the cookie (login/logout).
    """

    async def dispatch(self, request: Request, call_next):
        request.state.session = None
        request.state.session_id = None

        cookie = request.cookies.get(settings.session.cookie_name)
        if cookie:
            session_id = unsign_session_id(cookie)
            if session_id is None:
                logger.warning(
                    "Rejected session cookie with bad signature",
                    extra={"request_id": getattr(request.state, 'request_id', 'unknown')},
                )
            else:
                store = request.app.state.session_store
                context = await store.get(session_id)
                if context is not None and await store.touch(session_id):
                    request.state.session = context
                    request.state.session_id = session_id

        response = await call_next(request)

        if request.state.session_id and cookie and not _response_sets_session_cookie(response):
            set_session_cookie(response, cookie)
        return response
