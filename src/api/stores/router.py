import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from src.api import errors
from src.api.dependencies import (
    GeminiClientFactory,
    get_api_key,
    get_gemini_factory,
    get_store_service,
)
from src.api.responses import error_response, success_response
from src.application.stores.stores import StoreService
from src.domains.file_search.errors import InvalidRequest
from src.domains.file_search.schemas import (
    ApiResponse,
    CreateStoreRequest,
    StoreList,
    StoreSummary,
)

router = APIRouter(prefix="/stores", tags=["stores"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ApiResponse)
async def list_stores(
    api_key: Annotated[str | None, Depends(get_api_key)],
    factory: Annotated[GeminiClientFactory, Depends(get_gemini_factory)],
):
    """
    List all File Search stores.
    The key is optional here; a missing key fails inside the client.
    """
    try:
        stores = await StoreService(factory(api_key)).list_stores()
        return success_response(StoreList(data=stores, count=len(stores)))
    except Exception as e:
        logger.error(f"Failed to list stores: {e}")
        return errors.LIST_STORES.to_response(e)


@router.post("", response_model=ApiResponse)
async def create_store(
    request: CreateStoreRequest,
    service: Annotated[StoreService, Depends(get_store_service)],
):
    try:
        store = await service.create_store(request.display_name)
        return success_response(
            StoreSummary(name=store.name, display_name=store.display_name),
            message="스토어가 생성되었습니다",
        )
    except InvalidRequest as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Failed to create store: {e}")
        return errors.CREATE_STORE.to_response(e)


@router.get("/{store_id}", response_model=ApiResponse)
async def get_store(
    store_id: str,
    service: Annotated[StoreService, Depends(get_store_service)],
):
    try:
        store = await service.get_store(store_id)
        return success_response(
            store.model_dump(
                by_alias=True,
                include={"name", "display_name", "create_time", "update_time"},
            )
        )
    except Exception as e:
        logger.error(f"Failed to get store {store_id}: {e}")
        return errors.GET_STORE.to_response(e)


@router.delete("/{store_id}", response_model=ApiResponse)
async def delete_store(
    store_id: str,
    service: Annotated[StoreService, Depends(get_store_service)],
):
    try:
        await service.delete_store(store_id)
        return success_response(message="스토어가 삭제되었습니다")
    except Exception as e:
        logger.error(f"Failed to delete store {store_id}: {e}")
        return errors.DELETE_STORE.to_response(e)
