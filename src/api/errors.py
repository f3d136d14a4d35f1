"""
Upstream error translation.

Every proxy route catches failures once and turns them into a fixed user
message chosen by HTTP status. Routes differ slightly in their tables, so each
route family owns an ``ErrorCatalog``.
"""

from dataclasses import dataclass, field
from typing import Callable, Mapping

from fastapi.responses import JSONResponse

from src.api.responses import error_response
from src.domains.file_search.errors import NOT_FOUND_MARKER, error_message, upstream_status

MSG_API_KEY_REQUIRED = "API 키가 필요합니다. x-api-key 헤더를 포함해주세요."
MSG_SESSION_REQUIRED = "세션 ID가 필요합니다. x-session-id 헤더를 포함해주세요."
MSG_INVALID_API_KEY = "API 키가 유효하지 않습니다."
MSG_INVALID_API_KEY_ENV = "API 키가 유효하지 않습니다. 환경 변수를 확인해주세요."
MSG_PERMISSION_DENIED = "API 키 권한이 없거나 File Search가 활성화되지 않았습니다."
MSG_RATE_LIMITED = "API 호출 한도를 초과했습니다. 잠시 후 다시 시도해주세요."
MSG_SERVICE_UNAVAILABLE = (
    "Google AI 서비스가 일시적으로 사용 불가합니다. 잠시 후 다시 시도해주세요."
)
MSG_MODEL_OVERLOADED = "현재 Gemini 모델이 과부하 상태입니다. 잠시 후 다시 시도해주세요."
MSG_FILE_TOO_LARGE = "파일 크기가 너무 큽니다. 50MB 이하의 파일만 업로드 가능합니다."

MessageTemplate = str | Callable[[str], str]


def bad_request(message: str) -> str:
    return f"잘못된 요청입니다: {message}"


def resource_not_found(message: str) -> str:
    return f"리소스를 찾을 수 없습니다: {message}"


def server_error(message: str) -> str:
    return f"서버 오류가 발생했습니다: {message}"


@dataclass(frozen=True)
class ErrorCatalog:
    default_message: str
    messages: Mapping[int, MessageTemplate] = field(default_factory=dict)
    # Treat "not found" messages without a status as 404.
    not_found_fallback: bool = True
    # Statuses missing from ``messages`` answer 500 instead of passing through.
    strict_statuses: bool = False
    # Echo the upstream status as ``code`` in the body.
    include_code: bool = False

    def resolve_status(self, exc: BaseException) -> int:
        status = upstream_status(exc)
        if status is not None:
            return status
        if self.not_found_fallback and NOT_FOUND_MARKER in str(exc):
            return 404
        return 500

    def message_for(self, status: int, exc: BaseException) -> str:
        raw = error_message(exc) or self.default_message
        template = self.messages.get(status)
        if template is None:
            return raw
        if callable(template):
            return template(raw)
        return template

    def to_response(self, exc: BaseException) -> JSONResponse:
        status = self.resolve_status(exc)
        http_status = status
        if self.strict_statuses and status not in self.messages:
            http_status = 500
        return error_response(
            http_status,
            self.message_for(status, exc),
            code=status if self.include_code else None,
        )


COMMON_MESSAGES: dict[int, MessageTemplate] = {
    401: MSG_INVALID_API_KEY,
    403: MSG_PERMISSION_DENIED,
    429: MSG_RATE_LIMITED,
    503: MSG_SERVICE_UNAVAILABLE,
}

LIST_STORES = ErrorCatalog(
    "스토어 목록 조회 중 오류가 발생했습니다",
    {**COMMON_MESSAGES, 401: MSG_INVALID_API_KEY_ENV},
    not_found_fallback=False,
)
CREATE_STORE = ErrorCatalog(
    "스토어 생성 중 오류가 발생했습니다",
    {**COMMON_MESSAGES, 400: bad_request, 401: MSG_INVALID_API_KEY_ENV},
    not_found_fallback=False,
)
GET_STORE = ErrorCatalog("스토어 조회 중 오류가 발생했습니다", COMMON_MESSAGES)
DELETE_STORE = ErrorCatalog("스토어 삭제 중 오류가 발생했습니다", COMMON_MESSAGES)
LIST_DOCUMENTS = ErrorCatalog("문서 목록 조회 중 오류가 발생했습니다", COMMON_MESSAGES)
DELETE_DOCUMENT = ErrorCatalog("문서 삭제 중 오류가 발생했습니다", COMMON_MESSAGES)
UPLOAD = ErrorCatalog(
    "파일 업로드 중 오류가 발생했습니다",
    {**COMMON_MESSAGES, 400: bad_request, 413: MSG_FILE_TOO_LARGE},
)
QUERY = ErrorCatalog(
    "알 수 없는 오류가 발생했습니다",
    {
        400: bad_request,
        403: MSG_PERMISSION_DENIED,
        404: resource_not_found,
        429: MSG_RATE_LIMITED,
        500: server_error,
        503: MSG_MODEL_OVERLOADED,
    },
    not_found_fallback=False,
    strict_statuses=True,
    include_code=True,
)
