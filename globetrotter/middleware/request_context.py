"""Request id assignment and one access-log line per request."""
from starlette.middleware.base import BaseHTTPMiddleware
import logging
import re
import time
import uuid

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# Caller-supplied ids are kept only if they look like an id, not arbitrary text
_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9\-]{8,64}$")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = incoming if _ACCEPTED_ID.match(incoming) else str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        session = getattr(request.state, "session", None)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {duration_ms:.2f}ms",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "user_id": session.user_id if session else None,
            },
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
