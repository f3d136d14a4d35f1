import logging

import redis.asyncio as redis

from src.core.config.settings import settings

logger = logging.getLogger(__name__)


def create_redis_client(url: str | None = None) -> redis.Redis:
    """Client for session state; values are JSON text, so responses are decoded."""
    return redis.from_url(
        url or settings.REDIS_URI,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=5,
        retry_on_timeout=True,
        health_check_interval=30,
    )


redis_client = create_redis_client()


async def check_redis_connection():
    try:
        await redis_client.ping()
    except Exception as e:
        logger.error(f"Redis at {settings.REDIS_URI} unreachable: {e}")
        raise


async def close_redis_connection():
    try:
        await redis_client.aclose()
    except Exception as e:
        logger.error(f"Error closing Redis connection: {e}")
