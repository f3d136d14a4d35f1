import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from src.core.config.settings import settings
from src.domains.file_search.errors import upstream_status

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Rate limiting and transient server failures.
RETRIABLE_STATUSES = frozenset({429, 500, 503})


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    max_retries: int | None = None,
    base_delay: float | None = None,
) -> T:
    """
    Await ``fn()`` and retry it with exponential backoff on retriable statuses.
    Delay before retry n (0-based) is ``base_delay * 2**n``.
    Non-retriable errors and the last failure are re-raised unchanged.
    """
    if max_retries is None:
        max_retries = settings.GEMINI_MAX_RETRIES
    if base_delay is None:
        base_delay = settings.GEMINI_RETRY_BASE_DELAY

    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as e:
            status = upstream_status(e)
            if attempt >= max_retries or status not in RETRIABLE_STATUSES:
                raise
            delay = base_delay * (2**attempt)
            attempt += 1
            logger.warning(
                f"Retry {attempt}/{max_retries} after status {status}, sleeping {delay}s"
            )
            await asyncio.sleep(delay)
