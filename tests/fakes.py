"""In-memory stand-ins for Redis and the SDK's async pager."""

import asyncio

from redis.exceptions import ConnectionError as RedisConnectionError


class FakeLock:
    def __init__(self, lock: asyncio.Lock):
        self._lock = lock

    async def acquire(self):
        await self._lock.acquire()
        return True

    async def release(self):
        self._lock.release()


class FakePipeline:
    """Buffers SET commands and applies them together on execute()."""

    def __init__(self, redis):
        self.redis = redis
        self.commands = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.commands = []

    def set(self, key, value, ex=None):
        self.commands.append((key, value, ex))
        return self

    async def execute(self):
        for key, value, ex in self.commands:
            await self.redis.set(key, value, ex=ex)
        self.redis.transactions += 1
        return [True] * len(self.commands)


class FakeRedis:
    def __init__(self):
        self.data: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}
        self.locks: dict[str, asyncio.Lock] = {}
        self.transactions = 0

    async def get(self, key):
        return self.data.get(key)

    async def mget(self, *keys):
        return [self.data.get(k) for k in keys]

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed

    async def ping(self):
        return True

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    def lock(self, name, timeout=None, blocking_timeout=None):
        return FakeLock(self.locks.setdefault(name, asyncio.Lock()))


class InterleavingRedis(FakeRedis):
    """Yields to the event loop after every read, as a networked Redis would."""

    async def mget(self, *keys):
        values = await super().mget(*keys)
        await asyncio.sleep(0)
        return values


class FakeAsyncPager:
    def __init__(self, items):
        self.items = list(items)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self.items:
            yield item


class DownRedis(FakeRedis):
    """Redis whose reads and writes fail with a connection error."""

    async def mget(self, *keys):
        raise RedisConnectionError("Connection refused")

    async def set(self, key, value, ex=None):
        raise RedisConnectionError("Connection refused")
