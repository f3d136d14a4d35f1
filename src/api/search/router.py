import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from src.api import errors
from src.api.dependencies import (
    get_query_service,
    get_session_id,
    get_session_state_service,
)
from src.api.responses import error_response, success_response
from src.application.search.query import QueryService
from src.application.state.session import SessionStateService
from src.domains.file_search.errors import InvalidRequest
from src.domains.file_search.schemas import ApiResponse, QueryRequest, QueryResponseData

router = APIRouter(prefix="/stores/{store_id}", tags=["query"])
logger = logging.getLogger(__name__)


@router.post("/query", response_model=ApiResponse)
async def query_store(
    store_id: str,
    request: QueryRequest,
    service: Annotated[QueryService, Depends(get_query_service)],
    session_state: Annotated[SessionStateService, Depends(get_session_state_service)],
    session_id: Annotated[str | None, Depends(get_session_id)] = None,
):
    """
    Run a retrieval-augmented query against a store.
    With an x-session-id header the result is also added to that session's history.
    """
    try:
        response = await service.query(store_id, request)
    except InvalidRequest as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Query on {store_id} failed: {e}")
        return errors.QUERY.to_response(e)

    if session_id:
        try:
            await session_state.record_query(
                session_id, store_id, request.query.strip(), response
            )
        except Exception as e:
            # The answer is still returned; only the history entry is lost.
            logger.warning(f"Could not record query for session {session_id}: {e}")

    return success_response(
        QueryResponseData(
            text=response.text, grounding_metadata=response.grounding_metadata
        )
    )
