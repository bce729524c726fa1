"""
Session store behaviour: TTL expiry, sliding refresh and Redis error mapping
"""
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from globetrotter.core.exceptions import InternalError
from globetrotter.core.session_store import MemorySessionStore, RedisSessionStore, UserContext


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the session store"""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, key):
        self.data.pop(key, None)
        self.ttls.pop(key, None)

    async def expire(self, key, ttl):
        if key not in self.data:
            return False
        self.ttls[key] = ttl
        return True

    async def aclose(self):
        self.closed = True


class BrokenRedis(FakeRedis):
    async def get(self, key):
        raise RedisConnectionError("connection refused")


CONTEXT = UserContext(user_id=7, email="ada@example.com", roles=["USER"])


async def test_memory_store_set_get_delete():
    store = MemorySessionStore(ttl_seconds=60)
    await store.set("abc", CONTEXT)
    assert await store.get("abc") == CONTEXT
    await store.delete("abc")
    assert await store.get("abc") is None
    assert len(store) == 0


async def test_memory_store_expires_after_ttl():
    clock = FakeClock()
    store = MemorySessionStore(ttl_seconds=60, clock=clock)
    await store.set("abc", CONTEXT)
    clock.now += 59
    assert await store.get("abc") is not None
    clock.now += 1
    assert await store.get("abc") is None


async def test_memory_store_touch_slides_expiry():
    clock = FakeClock()
    store = MemorySessionStore(ttl_seconds=60, clock=clock)
    await store.set("abc", CONTEXT)
    clock.now += 50
    assert await store.touch("abc") is True
    clock.now += 50
    assert await store.get("abc") == CONTEXT
    clock.now += 61
    assert await store.touch("abc") is False


async def test_memory_store_sweeps_abandoned_sessions():
    clock = FakeClock()
    store = MemorySessionStore(ttl_seconds=10, clock=clock)
    for i in range(1000):
        await store.set(f"s{i}", CONTEXT)
    assert len(store) == 1000
    clock.now += 3600
    await store.set("fresh", CONTEXT)
    assert len(store) == 1
    assert await store.get("fresh") == CONTEXT


async def test_memory_store_sweep_is_rate_limited():
    clock = FakeClock()
    store = MemorySessionStore(ttl_seconds=10, clock=clock, sweep_interval=60)
    await store.set("old", CONTEXT)
    clock.now += 30
    await store.set("new", CONTEXT)
    # expired but not yet swept; reads still hide it
    assert len(store) == 2
    assert await store.get("old") is None
    clock.now += 5
    await store.set("other", CONTEXT)
    clock.now += 30
    await store.set("last", CONTEXT)
    assert len(store) == 1


async def test_memory_store_returns_copies():
    store = MemorySessionStore(ttl_seconds=60)
    await store.set("abc", CONTEXT)
    loaded = await store.get("abc")
    loaded.roles.append("ADMIN")
    assert (await store.get("abc")).roles == ["USER"]


async def test_redis_store_roundtrip_and_touch():
    client = FakeRedis()
    store = RedisSessionStore(ttl_seconds=120, redis_client=client, key_prefix="t:")
    await store.set("abc", CONTEXT)
    assert client.ttls["t:abc"] == 120
    assert await store.get("abc") == CONTEXT
    assert await store.touch("abc") is True
    await store.delete("abc")
    assert await store.get("abc") is None
    assert await store.touch("abc") is False
    await store.close()
    assert client.closed


async def test_redis_store_discards_unreadable_payload():
    client = FakeRedis()
    client.data["sess:abc"] = "{not json"
    store = RedisSessionStore(ttl_seconds=120, redis_client=client)
    assert await store.get("abc") is None
    assert "sess:abc" not in client.data


async def test_redis_failure_surfaces_as_internal_error():
    store = RedisSessionStore(ttl_seconds=120, redis_client=BrokenRedis())
    with pytest.raises(InternalError):
        await store.get("abc")
