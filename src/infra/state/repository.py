import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from redis.asyncio import Redis
from redis.exceptions import LockError, RedisError

from src.core.config.settings import settings
from src.core.errors import StateStorageError
from src.domains.state.slices import AppState

logger = logging.getLogger(__name__)

# Volatile state (current result, fetched documents) outlives a request but
# not a working session.
VOLATILE_TTL_SECONDS = 60 * 60

# A held session lock expires after LOCK_TIMEOUT_SECONDS; waiters give up
# after LOCK_WAIT_SECONDS.
LOCK_TIMEOUT_SECONDS = 10
LOCK_WAIT_SECONDS = 5


class StateRepository:
    """Redis-backed storage for per-session ``AppState``."""

    def __init__(self, redis_client: Redis, ttl_seconds: int | None = None):
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds or settings.STATE_TTL_SECONDS

    def _key(self, session_id: str) -> str:
        return f"{settings.STATE_KEY_PREFIX}:{session_id}"

    def _volatile_key(self, session_id: str) -> str:
        return f"{self._key(session_id)}:volatile"

    def _lock_key(self, session_id: str) -> str:
        return f"{self._key(session_id)}:lock"

    async def load(self, session_id: str) -> AppState:
        """Load a session's state; unknown or corrupt sessions start empty."""
        try:
            persisted_raw, volatile_raw = await self.redis.mget(
                self._key(session_id), self._volatile_key(session_id)
            )
        except RedisError as e:
            raise StateStorageError(f"Failed to load session {session_id}: {e}") from e

        try:
            persisted = json.loads(persisted_raw) if persisted_raw else {}
            volatile = json.loads(volatile_raw) if volatile_raw else {}
            return AppState.restore(persisted, volatile)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Discarding unreadable state for session {session_id}: {e}")
            return AppState()

    async def save(self, session_id: str, state: AppState) -> None:
        """Write both parts of the state in one MULTI/EXEC."""
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(self._key(session_id), state.persisted_json(), ex=self.ttl_seconds)
                pipe.set(
                    self._volatile_key(session_id),
                    state.volatile_json(),
                    ex=VOLATILE_TTL_SECONDS,
                )
                await pipe.execute()
        except RedisError as e:
            raise StateStorageError(f"Failed to save session {session_id}: {e}") from e

    @asynccontextmanager
    async def transaction(self, session_id: str) -> AsyncIterator[AppState]:
        """
        Load a session's state under its lock and save it when the block exits.

        Concurrent requests for the same session are serialized, so no update
        is lost between load and save. The state is not saved if the block
        raises.
        """
        lock = self.redis.lock(
            self._lock_key(session_id),
            timeout=LOCK_TIMEOUT_SECONDS,
            blocking_timeout=LOCK_WAIT_SECONDS,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            raise StateStorageError(f"Failed to lock session {session_id}: {e}") from e
        if not acquired:
            raise StateStorageError(f"Session {session_id} is busy")

        try:
            state = await self.load(session_id)
            yield state
            await self.save(session_id, state)
        finally:
            try:
                await lock.release()
            except LockError as e:
                # The lock outlived its timeout and may now belong to another request.
                logger.warning(f"Session lock for {session_id} expired before release: {e}")
