"""
Server-side session storage.

A session maps an opaque session id (carried, signed, in the session cookie)
to the authenticated user's ``UserContext``. Stores apply a sliding TTL:
``touch`` pushes the expiry forward on every authenticated request.
"""

import abc
import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from globetrotter.config.settings import settings
from globetrotter.core.exceptions import InternalError

logger = logging.getLogger(__name__)


class UserContext(BaseModel):
    """Identity recorded in a session"""
    user_id: int
    email: str
    roles: List[str] = Field(default_factory=list)


class SessionStore(abc.ABC):
    """Pluggable session backing store"""

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds

    @abc.abstractmethod
    async def get(self, session_id: str) -> Optional[UserContext]:
        ...

    @abc.abstractmethod
    async def set(self, session_id: str, context: UserContext) -> None:
        ...

    @abc.abstractmethod
    async def delete(self, session_id: str) -> None:
        ...

    @abc.abstractmethod
    async def touch(self, session_id: str) -> bool:
        """Extend a live session's expiry; False if it no longer exists."""

    async def close(self) -> None:
        return None


class MemorySessionStore(SessionStore):
    """
    Process-local store; suitable for a single worker and for tests.

    Expired entries are dropped when read, and swept in bulk from ``set`` at
    most once per ``sweep_interval`` seconds so abandoned sessions do not
    accumulate.
    """

    def __init__(
        self,
        ttl_seconds: int,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = 60.0,
    ):
        super().__init__(ttl_seconds)
        self._clock = clock
        self._sessions: Dict[str, Tuple[float, UserContext]] = {}
        self._lock = asyncio.Lock()
        self.sweep_interval = sweep_interval
        self._last_sweep = clock()

    def _expired(self, expires_at: float) -> bool:
        return self._clock() >= expires_at

    def _sweep(self) -> None:
        now = self._clock()
        stale = [sid for sid, (expires_at, _) in self._sessions.items() if now >= expires_at]
        for sid in stale:
            del self._sessions[sid]
        self._last_sweep = now
        if stale:
            logger.debug(f"Swept {len(stale)} expired sessions")

    async def get(self, session_id: str) -> Optional[UserContext]:
        async with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            expires_at, context = entry
            if self._expired(expires_at):
                del self._sessions[session_id]
                return None
            return context.model_copy(deep=True)

    async def set(self, session_id: str, context: UserContext) -> None:
        async with self._lock:
            if self._clock() - self._last_sweep >= self.sweep_interval:
                self._sweep()
            self._sessions[session_id] = (self._clock() + self.ttl_seconds, context.model_copy(deep=True))

    async def delete(self, session_id: str) -> None:
        async with self._lock:
            self._sessions.pop(session_id, None)

    async def touch(self, session_id: str) -> bool:
        async with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None or self._expired(entry[0]):
                self._sessions.pop(session_id, None)
                return False
            self._sessions[session_id] = (self._clock() + self.ttl_seconds, entry[1])
            return True

    def __len__(self) -> int:
        return len(self._sessions)


class RedisSessionStore(SessionStore):
    """Redis-backed store shared by every worker process."""

    def __init__(
        self,
        ttl_seconds: int,
        redis_client: Optional[aioredis.Redis] = None,
        redis_url: Optional[str] = None,
        key_prefix: str = "sess:",
    ):
        super().__init__(ttl_seconds)
        self.key_prefix = key_prefix
        self.redis_client = redis_client or aioredis.from_url(
            redis_url or settings.redis.url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=float(settings.redis.socket_timeout),
            socket_connect_timeout=float(settings.redis.socket_timeout),
            health_check_interval=30,
        )

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    async def get(self, session_id: str) -> Optional[UserContext]:
        try:
            raw = await self.redis_client.get(self._key(session_id))
        except RedisError as e:
            logger.error(f"Session lookup failed: {e}")
            raise InternalError("Session store unavailable") from e
        if not raw:
            return None
        try:
            return UserContext.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable session payload")
            await self.delete(session_id)
            return None

    async def set(self, session_id: str, context: UserContext) -> None:
        try:
            await self.redis_client.setex(self._key(session_id), self.ttl_seconds, context.model_dump_json())
        except RedisError as e:
            logger.error(f"Session write failed: {e}")
            raise InternalError("Session store unavailable") from e

    async def delete(self, session_id: str) -> None:
        try:
            await self.redis_client.delete(self._key(session_id))
        except RedisError as e:
            logger.error(f"Session delete failed: {e}")
            raise InternalError("Session store unavailable") from e

    async def touch(self, session_id: str) -> bool:
        try:
            return bool(await self.redis_client.expire(self._key(session_id), self.ttl_seconds))
        except RedisError as e:
            logger.error(f"Session refresh failed: {e}")
            raise InternalError("Session store unavailable") from e

    async def close(self) -> None:
        try:
            await self.redis_client.aclose()
        except RedisError as e:
            logger.warning(f"Error during Redis disconnect: {e}")


def create_session_store() -> SessionStore:
    """Build the session store selected by SESSION_BACKEND."""
    ttl = settings.session.ttl_seconds
    if settings.session.backend == "redis":
        logger.info("Using Redis session store")
        return RedisSessionStore(ttl, key_prefix=settings.session.key_prefix)
    logger.info("Using in-memory session store")
    return MemorySessionStore(ttl)
