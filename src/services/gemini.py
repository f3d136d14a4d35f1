"""
Gemini File Search client.

Thin async wrapper around google-genai's File Search surface. A new SDK client
is created per API key, since every caller brings their own key.
"""

import asyncio
import io
import logging
import os
from pathlib import Path
from typing import IO, Any

from google import genai
from google.genai import types

from src.core.config.settings import settings
from src.domains.file_search.errors import (
    DocumentNotFound,
    FileSearchError,
    InvalidStoreResponse,
    MissingApiKey,
    OperationTimeout,
    StoreNotFound,
)
from src.domains.file_search.models import (
    FileSearchDocument,
    FileSearchStore,
    QueryResponse,
    UploadOptions,
)
from src.domains.file_search.schemas import GenerationConfig, SafetySetting
from src.services.retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".txt": "text/plain",
    ".text": "text/plain",
    ".pdf": "application/pdf",
    ".csv": "text/csv",
    ".json": "application/json",
    ".html": "text/html",
    ".htm": "text/html",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

DEFAULT_SYSTEM_INSTRUCTION = (
    "답변은 다음 형식으로 작성해주세요: 답변을 md형식으로 작성해주세요. "
    "답변은 짧고 요점을 명확하게 작성해주세요. 순서대로 정리되게 작성해주세요."
)


def guess_mime_type(file_path: str) -> str:
    return MIME_TYPES.get(Path(file_path).suffix.lower(), DEFAULT_MIME_TYPE)


class GeminiFileSearchClient:
    def __init__(
        self,
        api_key: str | None,
        client: genai.Client | None = None,
        poll_interval: float | None = None,
        max_poll_attempts: int | None = None,
        retry_base_delay: float | None = None,
    ):
        if not api_key:
            raise MissingApiKey()
        self.client = client or genai.Client(api_key=api_key)
        self.poll_interval = (
            settings.OPERATION_POLL_INTERVAL if poll_interval is None else poll_interval
        )
        self.max_poll_attempts = max_poll_attempts or settings.OPERATION_POLL_MAX_ATTEMPTS
        self.retry_base_delay = retry_base_delay

    # Stores

    async def list_stores(self) -> list[FileSearchStore]:
        pager = await self.client.aio.file_search_stores.list(
            config={"page_size": settings.STORE_LIST_PAGE_SIZE}
        )
        stores = []
        async for store in pager:
            if store.name and store.display_name:
                stores.append(FileSearchStore.from_sdk(store))

        logger.info(f"Found {len(stores)} stores")
        return stores

    async def create_store(self, display_name: str) -> FileSearchStore:
        logger.info(f"Creating file search store: {display_name}")
        store = await self.client.aio.file_search_stores.create(
            config={"display_name": display_name}
        )
        if not store.name:
            raise InvalidStoreResponse("Name is missing")

        logger.info(f"Store created: {store.name}")
        return FileSearchStore.from_sdk(store, fallback_display_name=display_name)

    async def find_store_by_display_name(self, display_name: str) -> FileSearchStore:
        pager = await self.client.aio.file_search_stores.list(
            config={"page_size": settings.STORE_LIST_PAGE_SIZE}
        )
        async for store in pager:
            if store.display_name == display_name and store.name:
                logger.info(f"Found store {store.name} for '{display_name}'")
                return FileSearchStore.from_sdk(store)

        raise StoreNotFound(display_name)

    async def delete_store(self, store: FileSearchStore) -> None:
        logger.info(f"Deleting file search store: {store.display_name}")
        await self.client.aio.file_search_stores.delete(
            name=store.full_name, config={"force": True}
        )

    # Upload

    async def upload_document(
        self,
        store: FileSearchStore,
        file: str | os.PathLike | IO[bytes],
        options: UploadOptions | None = None,
    ) -> Any:
        """
        Upload and index a file with a whitespace chunking config.

        Accepts a filesystem path or a binary stream. The upload call is
        retried on transient failures, then the long-running operation is
        polled until done.

        Returns the finished SDK operation.
        """
        options = options or UploadOptions()
        is_path = isinstance(file, (str, os.PathLike))
        display_name = options.display_name or (Path(file).name if is_path else "file")
        mime_type = options.mime_type or (
            guess_mime_type(str(file)) if is_path else DEFAULT_MIME_TYPE
        )

        config = types.UploadToFileSearchStoreConfig(
            display_name=display_name,
            mime_type=mime_type,
            custom_metadata=[types.CustomMetadata(**entry) for entry in options.custom_metadata]
            if options.custom_metadata
            else None,
            chunking_config=types.ChunkingConfig(
                white_space_config=types.WhiteSpaceConfig(
                    max_tokens_per_chunk=options.max_tokens_per_chunk,
                    max_overlap_tokens=options.max_overlap_tokens,
                )
            ),
        )

        logger.info(f"Uploading {display_name} ({mime_type}) to {store.full_name}")

        async def _upload():
            # A retried attempt must resend the whole stream.
            if isinstance(file, io.IOBase) and file.seekable():
                file.seek(0)
            return await self.client.aio.file_search_stores.upload_to_file_search_store(
                file=file,
                file_search_store_name=store.full_name,
                config=config,
            )

        operation = await retry_with_backoff(_upload, base_delay=self.retry_base_delay)
        operation = await self._wait_for_operation(operation, display_name)

        logger.info(f"Indexed {display_name}")
        return operation

    async def _wait_for_operation(self, operation: Any, display_name: str) -> Any:
        attempts = 0
        while not operation.done and attempts < self.max_poll_attempts:
            await asyncio.sleep(self.poll_interval)
            operation = await self.client.aio.operations.get(operation)
            attempts += 1

        if not operation.done:
            raise OperationTimeout(display_name)

        error = getattr(operation, "error", None)
        if error:
            raise FileSearchError(error.get("message", str(error)))
        return operation

    # Query

    async def generate_content_with_file_search(
        self,
        store: FileSearchStore,
        query: str,
        metadata_filter: str | None = None,
        model: str | None = None,
        system_instruction: str | None = None,
        generation_config: GenerationConfig | None = None,
        safety_settings: list[SafetySetting] | None = None,
    ) -> QueryResponse:
        model = model or settings.DEFAULT_MODEL
        logger.info(f"Generating content for query on {store.full_name} (model: {model})")

        config: dict[str, Any] = {
            "tools": [
                types.Tool(
                    file_search=types.FileSearch(
                        file_search_store_names=[store.full_name],
                        metadata_filter=metadata_filter or None,
                    )
                )
            ],
            "system_instruction": system_instruction or DEFAULT_SYSTEM_INSTRUCTION,
        }
        if generation_config:
            config.update(generation_config.model_dump(exclude_none=True))
        if safety_settings:
            config["safety_settings"] = [
                types.SafetySetting(category=s.category, threshold=s.threshold)
                for s in safety_settings
            ]

        response = await retry_with_backoff(
            lambda: self.client.aio.models.generate_content(
                model=model,
                contents=query,
                config=types.GenerateContentConfig(**config),
            ),
            base_delay=self.retry_base_delay,
        )

        grounding = response.candidates[0].grounding_metadata if response.candidates else None
        if grounding is not None:
            logger.info("Response carries grounding metadata")
            grounding = grounding.model_dump(mode="json", by_alias=True, exclude_none=True)

        return QueryResponse(text=response.text or "", grounding_metadata=grounding)

    # Documents

    async def list_documents(self, store: FileSearchStore) -> list[FileSearchDocument]:
        logger.info(f"Listing documents in {store.display_name}")
        pager = await self.client.aio.file_search_stores.documents.list(
            parent=store.full_name
        )
        documents = []
        async for doc in pager:
            if doc.name:
                documents.append(FileSearchDocument.from_sdk(doc))

        logger.info(f"Found {len(documents)} documents")
        return documents

    async def find_document_by_display_name(
        self, store: FileSearchStore, display_name: str
    ) -> FileSearchDocument:
        pager = await self.client.aio.file_search_stores.documents.list(
            parent=store.full_name
        )
        async for doc in pager:
            if doc.display_name == display_name and doc.name:
                return FileSearchDocument.from_sdk(doc)

        raise DocumentNotFound(display_name)

    async def delete_document(self, document: FileSearchDocument) -> None:
        logger.info(f"Deleting document: {document.display_name}")
        await self.client.aio.file_search_stores.documents.delete(
            name=document.name, config={"force": True}
        )

    async def update_document(
        self,
        store: FileSearchStore,
        display_name: str,
        file: str | os.PathLike | IO[bytes],
    ) -> Any:
        """Replace a document: delete any same-named version, then upload."""
        try:
            existing = await self.find_document_by_display_name(store, display_name)
        except DocumentNotFound:
            existing = None

        if existing:
            await self.delete_document(existing)
            logger.info(f"Deleted previous version of {display_name}")

        return await self.upload_document(
            store, file, UploadOptions(display_name=display_name)
        )

