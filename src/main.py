from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from src.api.router import router as api_router
from src.core.config.settings import settings
from src.core.errors import InfraError
from src.core.logging import configure_logging
from src.infra.lifecycle.app import lifespan
from src.api.exceptions import (
    ApiError,
    api_error_handler,
    infra_error_handler,
    global_exception_handler,
    validation_exception_handler,
)


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Proxy for the Gemini File Search API: stores, documents, uploads and RAG queries.",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(InfraError, infra_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
