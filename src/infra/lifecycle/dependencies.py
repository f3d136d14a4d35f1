from fastapi import Depends, Request
from redis.asyncio import Redis

from src.infra.state.repository import StateRepository


async def get_redis_client(request: Request) -> Redis:
    """
    Get the Redis client from app state.
    Use this in routes instead of importing the global client directly.
    """
    return request.app.state.redis


def get_state_repository(
    redis: Redis = Depends(get_redis_client),
) -> StateRepository:
    return StateRepository(redis)
