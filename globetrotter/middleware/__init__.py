"""
Middleware package for FastAPI application.
"""

from .auth import SessionAuthMiddleware, set_session_cookie, clear_session_cookie
from .request_context import RequestContextMiddleware

__all__ = [
    "SessionAuthMiddleware",
    "RequestContextMiddleware",
    "set_session_cookie",
    "clear_session_cookie",
]
