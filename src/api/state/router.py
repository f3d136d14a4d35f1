import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from src.api.dependencies import get_session_state_service, require_session_id
from src.api.responses import success_response
from src.application.state.session import SessionStateService
from src.domains.file_search.schemas import ApiResponse
from src.domains.state.schemas import (
    ApiKeyRequest,
    CurrentStoreRequest,
    ModelUpdateRequest,
)
from src.domains.state.slices import SUPPORTED_MODELS, AppState

router = APIRouter(prefix="/state", tags=["state"])
logger = logging.getLogger(__name__)

SessionId = Annotated[str, Depends(require_session_id)]
StateService = Annotated[SessionStateService, Depends(get_session_state_service)]


def snapshot(state: AppState) -> dict[str, Any]:
    data = state.model_dump(mode="json", by_alias=True)
    data["hasApiKey"] = state.has_api_key()
    data["supportedModels"] = list(SUPPORTED_MODELS)
    return data


@router.get("", response_model=ApiResponse)
async def get_state(session_id: SessionId, service: StateService):
    return success_response(snapshot(await service.get(session_id)))


@router.put("/api-key", response_model=ApiResponse)
async def set_api_key(request: ApiKeyRequest, session_id: SessionId, service: StateService):
    state = await service.set_api_key(session_id, request.api_key)
    return success_response({"hasApiKey": state.has_api_key()})


@router.delete("/api-key", response_model=ApiResponse)
async def clear_api_key(session_id: SessionId, service: StateService):
    """Forget the key and reset every slice fetched with it."""
    state = await service.clear_api_key(session_id)
    logger.info(f"Cleared API key and session data for {session_id}")
    return success_response(snapshot(state))


@router.patch("/model", response_model=ApiResponse)
async def update_model(
    request: ModelUpdateRequest, session_id: SessionId, service: StateService
):
    state = await service.update_model(session_id, request)
    return success_response(state.model)


@router.get("/history", response_model=ApiResponse)
async def get_history(session_id: SessionId, service: StateService):
    state = await service.get(session_id)
    return success_response(
        {"data": state.query.history, "count": len(state.query.history)}
    )


@router.delete("/history", response_model=ApiResponse)
async def clear_history(session_id: SessionId, service: StateService):
    await service.clear_history(session_id)
    return success_response(message="히스토리가 삭제되었습니다")


@router.delete("/current-result", response_model=ApiResponse)
async def clear_current_result(session_id: SessionId, service: StateService):
    await service.clear_current_result(session_id)
    return success_response()


@router.put("/stores/current", response_model=ApiResponse)
async def set_current_store(
    request: CurrentStoreRequest, session_id: SessionId, service: StateService
):
    state = await service.set_current_store(session_id, request.store)
    return success_response(state.stores.current_store)
