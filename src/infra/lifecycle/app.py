from contextlib import asynccontextmanager
from fastapi import FastAPI
from src.core.config.settings import settings
from src.infra.cache.redis import redis_client, close_redis_connection
from src.infra.monitoring import check_all_infrastructure
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting up {settings.PROJECT_NAME}...")

    app.state.redis = redis_client

    # Session state needs Redis; the proxy routes do not, so a missing Redis
    # only degrades the service.
    infra_status = await check_all_infrastructure()
    failed_components = [k for k, v in infra_status.items() if v is not True]
    if failed_components:
        for comp in failed_components:
            logger.warning(f"{comp} unavailable at startup: {infra_status[comp]}")
        logger.warning("Session state endpoints will fail until Redis is reachable.")
    else:
        logger.info("All infrastructure operational.")

    yield

    logger.info(f"Shutting down {settings.PROJECT_NAME}...")

    logger.info("Closing Redis connection...")
    await close_redis_connection()

    logger.info("Shutdown complete.")
