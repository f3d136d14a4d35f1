from src.core.config.settings import settings
from src.domains.file_search.errors import InvalidRequest
from src.domains.file_search.models import FileSearchStore, QueryResponse
from src.domains.file_search.schemas import QueryRequest
from src.services.gemini import GeminiFileSearchClient


class QueryService:
    def __init__(self, gemini: GeminiFileSearchClient):
        self.gemini = gemini

    async def query(self, store_id: str, request: QueryRequest) -> QueryResponse:
        query = (request.query or "").strip()
        if not query:
            raise InvalidRequest("query가 필요합니다")

        return await self.gemini.generate_content_with_file_search(
            FileSearchStore.from_path(store_id),
            query,
            metadata_filter=request.metadata_filter or None,
            model=request.model or settings.DEFAULT_MODEL,
            system_instruction=request.system_instruction,
            generation_config=request.generation_config,
            safety_settings=request.safety_settings,
        )
