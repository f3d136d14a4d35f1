import logging
from urllib.parse import unquote

from src.domains.file_search.models import FileSearchDocument, FileSearchStore
from src.services.gemini import GeminiFileSearchClient

logger = logging.getLogger(__name__)


class DocumentService:
    def __init__(self, gemini: GeminiFileSearchClient):
        self.gemini = gemini

    async def list_documents(self, store_id: str) -> list[FileSearchDocument]:
        return await self.gemini.list_documents(FileSearchStore.from_path(store_id))

    async def delete_document(self, store_id: str, doc_name: str) -> FileSearchDocument:
        """Delete the document whose display name matches ``doc_name``."""
        display_name = unquote(doc_name)
        logger.info(f"Deleting document '{display_name}' from {store_id}")

        store = FileSearchStore.from_path(store_id)
        document = await self.gemini.find_document_by_display_name(store, display_name)
        await self.gemini.delete_document(document)
        return document
