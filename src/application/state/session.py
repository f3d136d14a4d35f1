import logging
from uuid import uuid4

from src.domains.file_search.models import FileSearchStore, QueryResponse
from src.domains.state.schemas import ModelUpdateRequest
from src.domains.state.slices import AppState, QueryHistoryItem, QueryResult, now_ms
from src.infra.state.repository import StateRepository

logger = logging.getLogger(__name__)


class SessionStateService:
    """Load-mutate-save operations on one session's slices, each under the session lock."""

    def __init__(self, repository: StateRepository):
        self.repository = repository

    async def get(self, session_id: str) -> AppState:
        return await self.repository.load(session_id)

    async def set_api_key(self, session_id: str, key: str) -> AppState:
        async with self.repository.transaction(session_id) as state:
            state.set_api_key(key)
        return state

    async def clear_api_key(self, session_id: str) -> AppState:
        async with self.repository.transaction(session_id) as state:
            state.clear_api_key()
        return state

    async def update_model(self, session_id: str, update: ModelUpdateRequest) -> AppState:
        async with self.repository.transaction(session_id) as state:
            for field in update.model_fields_set:
                value = getattr(update, field)
                if field == "selected_model" and value is None:
                    continue
                if field in ("system_instruction", "metadata_filter") and value is None:
                    value = ""
                getattr(state.model, f"set_{field}")(value)
        return state

    async def clear_history(self, session_id: str) -> AppState:
        async with self.repository.transaction(session_id) as state:
            state.query.clear_history()
        return state

    async def clear_current_result(self, session_id: str) -> AppState:
        async with self.repository.transaction(session_id) as state:
            state.query.clear_current_result()
        return state

    async def set_current_store(
        self, session_id: str, store: FileSearchStore | None
    ) -> AppState:
        async with self.repository.transaction(session_id) as state:
            state.stores.set_current_store(store)
        return state

    async def record_query(
        self, session_id: str, store_id: str, query: str, response: QueryResponse
    ) -> AppState:
        """Store a query outcome as the current result and newest history entry."""
        timestamp = now_ms()
        async with self.repository.transaction(session_id) as state:
            state.query.set_current_result(
                QueryResult(
                    text=response.text,
                    grounding_metadata=response.grounding_metadata,
                    timestamp=timestamp,
                )
            )
            state.query.add_to_history(
                QueryHistoryItem(
                    id=str(uuid4()),
                    query=query,
                    response=response.text,
                    timestamp=timestamp,
                    store_name=store_id,
                )
            )
        logger.info(f"Recorded query for session {session_id}")
        return state
