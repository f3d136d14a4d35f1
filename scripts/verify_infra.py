"""
Pre-deploy check: Redis must answer, and an optional Gemini API key must be
able to list File Search stores.

    GEMINI_API_KEY=... python -m scripts.verify_infra
"""

import asyncio
import logging
import os
import sys

from src.core.logging import configure_logging
from src.infra.cache.redis import close_redis_connection
from src.infra.monitoring import check_all_infrastructure
from src.services.gemini import GeminiFileSearchClient

configure_logging("INFO")
logger = logging.getLogger("verify_infra")


async def check_gemini(api_key: str) -> bool | str:
    try:
        stores = await GeminiFileSearchClient(api_key).list_stores()
    except Exception as e:
        return str(e)
    logger.info(f"Gemini key can see {len(stores)} stores")
    return True


async def verify():
    logger.info("Starting infrastructure verification...")

    infra_status = await check_all_infrastructure()
    api_key = os.environ.get("GEMINI_API_KEY")
    if api_key:
        infra_status["gemini"] = await check_gemini(api_key)
    else:
        logger.info("GEMINI_API_KEY not set, skipping Gemini check")

    errors = []
    for comp, result in infra_status.items():
        if result is True:
            logger.info(f"{comp.capitalize()}: OK")
        else:
            logger.error(f"{comp.capitalize()}: FAILED ({result})")
            errors.append(comp)

    await close_redis_connection()

    if errors:
        logger.error(f"Verification FAILED for: {', '.join(errors)}")
        sys.exit(1)

    logger.info("All systems operational.")


if __name__ == "__main__":
    try:
        asyncio.run(verify())
    except KeyboardInterrupt:
        pass
