import logging
from uuid import uuid4

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.errors import bad_request
from src.api.responses import error_response
from src.core.errors import AppError, InfraError

logger = logging.getLogger(__name__)


class ApiError(AppError):
    """Request rejected at the HTTP boundary with a fixed status and message."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def infra_error_handler(request: Request, exc: InfraError) -> JSONResponse:
    logger.error(f"Infrastructure failure on {request.url.path}: {exc}")
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "세션 저장소를 일시적으로 사용할 수 없습니다. 잠시 후 다시 시도해주세요.",
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return error_response(status.HTTP_400_BAD_REQUEST, bad_request(details))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Safety net for unexpected exceptions.
    Does not leak exception details to the client; the error_id ties the
    response to the logged traceback.
    """
    error_id = uuid4()
    logger.error(f"Unhandled exception {error_id}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "서버 내부 오류가 발생했습니다",
            "errorId": str(error_id),
        },
    )
