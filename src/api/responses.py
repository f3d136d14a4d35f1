from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(
    data: Any = None, message: str | None = None, status_code: int = 200
) -> JSONResponse:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def error_response(
    status_code: int, error: str, code: int | None = None, data: Any = None
) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "error": error}
    if code is not None:
        body["code"] = code
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
