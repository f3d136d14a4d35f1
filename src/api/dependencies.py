from typing import Annotated, Callable

from fastapi import Depends, Header

from src.api.errors import MSG_API_KEY_REQUIRED, MSG_SESSION_REQUIRED
from src.api.exceptions import ApiError
from src.application.documents.documents import DocumentService
from src.application.documents.upload import UploadService
from src.application.search.query import QueryService
from src.application.state.session import SessionStateService
from src.application.stores.stores import StoreService
from src.infra.lifecycle.dependencies import get_state_repository
from src.infra.state.repository import StateRepository
from src.services.gemini import GeminiFileSearchClient

GeminiClientFactory = Callable[[str | None], GeminiFileSearchClient]


def get_api_key(x_api_key: Annotated[str | None, Header()] = None) -> str | None:
    return x_api_key or None


def require_api_key(api_key: Annotated[str | None, Depends(get_api_key)]) -> str:
    if not api_key:
        raise ApiError(401, MSG_API_KEY_REQUIRED)
    return api_key


def get_gemini_factory() -> GeminiClientFactory:
    """Builds one SDK client per caller key. Overridden in tests."""
    return GeminiFileSearchClient


def get_gemini_client(
    api_key: Annotated[str, Depends(require_api_key)],
    factory: Annotated[GeminiClientFactory, Depends(get_gemini_factory)],
) -> GeminiFileSearchClient:
    return factory(api_key)


def get_store_service(
    gemini: Annotated[GeminiFileSearchClient, Depends(get_gemini_client)],
) -> StoreService:
    return StoreService(gemini)


def get_document_service(
    gemini: Annotated[GeminiFileSearchClient, Depends(get_gemini_client)],
) -> DocumentService:
    return DocumentService(gemini)


def get_upload_service(
    gemini: Annotated[GeminiFileSearchClient, Depends(get_gemini_client)],
) -> UploadService:
    return UploadService(gemini)


def get_query_service(
    gemini: Annotated[GeminiFileSearchClient, Depends(get_gemini_client)],
) -> QueryService:
    return QueryService(gemini)


def get_session_id(x_session_id: Annotated[str | None, Header()] = None) -> str | None:
    return x_session_id or None


def require_session_id(
    session_id: Annotated[str | None, Depends(get_session_id)],
) -> str:
    if not session_id:
        raise ApiError(400, MSG_SESSION_REQUIRED)
    return session_id


def get_session_state_service(
    repository: Annotated[StateRepository, Depends(get_state_repository)],
) -> SessionStateService:
    return SessionStateService(repository)
