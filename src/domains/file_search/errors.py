from src.core.errors import DomainError

# Messages that mean "resource missing" carry this marker; routes without an
# explicit upstream status map them to 404.
NOT_FOUND_MARKER = "찾을 수 없습니다"


class FileSearchError(DomainError):
    """Base File Search error, optionally carrying an HTTP-like status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MissingApiKey(FileSearchError):
    def __init__(self):
        super().__init__("API 키가 필요합니다. API 키를 입력해주세요.", status_code=401)


class StoreNotFound(FileSearchError):
    def __init__(self, display_name: str):
        super().__init__(f"'{display_name}' 이름의 스토어를 찾을 수 없습니다.")


class DocumentNotFound(FileSearchError):
    def __init__(self, display_name: str):
        super().__init__(f"'{display_name}' 문서를 찾을 수 없습니다.")


class OperationTimeout(FileSearchError):
    def __init__(self, display_name: str):
        super().__init__(f"파일 처리 시간 초과: {display_name}")


class InvalidStoreResponse(FileSearchError):
    def __init__(self, detail: str):
        super().__init__(f"Failed to create store: {detail}")


def upstream_status(exc: BaseException) -> int | None:
    """
    HTTP-like status carried by an error, if any.

    ``status`` wins over ``status_code``. google-genai's ``APIError`` exposes
    the numeric status as ``code``; its ``status`` is the textual gRPC name and
    is skipped.
    """
    for attr in ("status", "status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool) and 400 <= value <= 599:
            return value
    return None


def error_message(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc)


class InvalidRequest(DomainError):
    """Client input rejected before any upstream call; reported verbatim as 400."""

    pass
