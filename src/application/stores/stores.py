from src.domains.file_search.errors import InvalidRequest
from src.domains.file_search.models import FileSearchStore
from src.services.gemini import GeminiFileSearchClient


class StoreService:
    def __init__(self, gemini: GeminiFileSearchClient):
        self.gemini = gemini

    async def list_stores(self) -> list[FileSearchStore]:
        return await self.gemini.list_stores()

    async def create_store(self, display_name: str | None) -> FileSearchStore:
        if not display_name or not display_name.strip():
            raise InvalidRequest("displayName이 필요합니다")
        return await self.gemini.create_store(display_name.strip())

    async def get_store(self, store_id: str) -> FileSearchStore:
        # Display names are kept client-side; the id is all the server knows.
        return FileSearchStore.from_path(store_id)

    async def delete_store(self, store_id: str) -> None:
        await self.gemini.delete_store(FileSearchStore.from_path(store_id))
