import logging
from typing import Awaitable, Callable

from src.infra.cache.redis import check_redis_connection

logger = logging.getLogger(__name__)

# Backing services of this process. Gemini is not probed: every caller brings
# their own key.
CHECKS: dict[str, Callable[[], Awaitable[None]]] = {
    "redis": check_redis_connection,
}


async def check_all_infrastructure() -> dict[str, bool | str]:
    """
    Run every registered check.
    Returns a dict mapping component name to True, or to the error text on failure.
    """
    status: dict[str, bool | str] = {}
    for name, check in CHECKS.items():
        try:
            await check()
            status[name] = True
        except Exception as e:
            logger.error(f"Health check failed ({name}): {e}")
            status[name] = str(e)
    return status
