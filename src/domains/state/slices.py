"""
Session state slices.

Each slice is an independent mutable record with setter methods. ``AppState``
composes them into one object per browser session; only part of it survives
between requests (see ``PERSISTED_FIELDS``).
"""

import time
from typing import Any

from pydantic import Field

from src.core.config.settings import settings
from src.domains.base import CamelModel
from src.domains.file_search.models import FileSearchDocument, FileSearchStore

# Gemini models that support the File Search tool.
SUPPORTED_MODELS = (
    "gemini-3-pro-preview",
    "gemini-2.5-pro",
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
)
DEFAULT_MODEL = "gemini-2.5-flash"

MAX_HISTORY_SIZE = settings.MAX_HISTORY_SIZE


def now_ms() -> int:
    return int(time.time() * 1000)


class ApiKeySlice(CamelModel):
    api_key: str | None = None

    def set_api_key(self, key: str) -> None:
        self.api_key = key.strip()

    def clear_api_key(self) -> None:
        self.api_key = None

    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


class QueryHistoryItem(CamelModel):
    id: str
    query: str
    response: str
    timestamp: int
    store_name: str


class QueryResult(CamelModel):
    text: str
    grounding_metadata: dict[str, Any] | None = None
    timestamp: int


class QuerySlice(CamelModel):
    history: list[QueryHistoryItem] = Field(default_factory=list)
    current_result: QueryResult | None = None
    max_history_size: int = MAX_HISTORY_SIZE

    def add_to_history(self, item: QueryHistoryItem) -> None:
        """Prepend ``item``; entries beyond the limit are dropped from the tail."""
        self.history = [item, *self.history][: self.max_history_size]

    def set_current_result(self, result: QueryResult | None) -> None:
        self.current_result = result

    def clear_current_result(self) -> None:
        self.current_result = None

    def clear_history(self) -> None:
        self.history = []


class ModelSlice(CamelModel):
    selected_model: str = DEFAULT_MODEL
    system_instruction: str = ""
    temperature: float | None = None
    max_output_tokens: int | None = None
    top_p: float | None = None
    top_k: int | None = None
    metadata_filter: str = ""

    def set_selected_model(self, model: str) -> None:
        self.selected_model = model

    def set_system_instruction(self, instruction: str) -> None:
        self.system_instruction = instruction

    def set_temperature(self, temperature: float | None) -> None:
        self.temperature = temperature

    def set_max_output_tokens(self, tokens: int | None) -> None:
        self.max_output_tokens = tokens

    def set_top_p(self, top_p: float | None) -> None:
        self.top_p = top_p

    def set_top_k(self, top_k: int | None) -> None:
        self.top_k = top_k

    def set_metadata_filter(self, metadata_filter: str) -> None:
        self.metadata_filter = metadata_filter


class StoresSlice(CamelModel):
    stores: list[FileSearchStore] = Field(default_factory=list)
    current_store: FileSearchStore | None = None
    last_updated: int | None = None
    cache_ttl: int = settings.STORES_CACHE_TTL_MS

    def set_stores(self, stores: list[FileSearchStore]) -> None:
        self.stores = list(stores)
        self.last_updated = now_ms()

    def set_current_store(self, store: FileSearchStore | None) -> None:
        self.current_store = store

    def add_store(self, store: FileSearchStore) -> None:
        self.stores = [*self.stores, store]
        self.last_updated = now_ms()

    def remove_store(self, display_name: str) -> None:
        self.stores = [s for s in self.stores if s.display_name != display_name]
        if self.current_store and self.current_store.display_name == display_name:
            self.current_store = None
        self.last_updated = now_ms()

    def clear_stores(self) -> None:
        self.stores = []
        self.current_store = None
        self.last_updated = None

    def is_cache_valid(self, now: int | None = None) -> bool:
        if not self.last_updated:
            return False
        return (now if now is not None else now_ms()) - self.last_updated < self.cache_ttl


class DocumentsSlice(CamelModel):
    documents: list[FileSearchDocument] = Field(default_factory=list)
    selected_documents: list[str] = Field(default_factory=list)
    last_updated: int | None = None

    def set_documents(self, documents: list[FileSearchDocument]) -> None:
        self.documents = list(documents)
        self.last_updated = now_ms()

    def add_document(self, document: FileSearchDocument) -> None:
        self.documents = [*self.documents, document]
        self.last_updated = now_ms()

    def remove_document(self, document_name: str) -> None:
        self.documents = [d for d in self.documents if d.name != document_name]
        self.selected_documents = [n for n in self.selected_documents if n != document_name]
        self.last_updated = now_ms()

    def toggle_select_document(self, document_name: str) -> None:
        if document_name in self.selected_documents:
            self.selected_documents = [
                n for n in self.selected_documents if n != document_name
            ]
        else:
            self.selected_documents = [*self.selected_documents, document_name]

    def clear_selected_documents(self) -> None:
        self.selected_documents = []

    def clear_documents(self) -> None:
        self.documents = []
        self.selected_documents = []
        self.last_updated = None


# Fields written to long-lived storage. The current result and the documents
# slice are session-volatile.
PERSISTED_FIELDS: dict[str, Any] = {
    "auth": {"api_key"},
    "model": True,
    "stores": {"stores", "current_store", "last_updated", "cache_ttl"},
    "query": {"history", "max_history_size"},
}
VOLATILE_FIELDS: dict[str, Any] = {
    "query": {"current_result"},
    "documents": True,
}


class AppState(CamelModel):
    auth: ApiKeySlice = Field(default_factory=ApiKeySlice)
    query: QuerySlice = Field(default_factory=QuerySlice)
    model: ModelSlice = Field(default_factory=ModelSlice)
    stores: StoresSlice = Field(default_factory=StoresSlice)
    documents: DocumentsSlice = Field(default_factory=DocumentsSlice)

    def set_api_key(self, key: str) -> None:
        self.auth.set_api_key(key)

    def has_api_key(self) -> bool:
        return self.auth.has_api_key()

    def clear_api_key(self) -> None:
        """Forget the key and everything fetched with it."""
        self.auth.clear_api_key()
        self.stores.clear_stores()
        self.documents.clear_documents()
        self.query.clear_history()
        self.query.clear_current_result()

    def persisted_json(self) -> str:
        return self.model_dump_json(include=PERSISTED_FIELDS, by_alias=True)

    def volatile_json(self) -> str:
        return self.model_dump_json(include=VOLATILE_FIELDS, by_alias=True)

    @classmethod
    def restore(cls, persisted: dict[str, Any], volatile: dict[str, Any]) -> "AppState":
        merged: dict[str, Any] = {key: dict(value) for key, value in persisted.items()}
        for key, value in volatile.items():
            merged.setdefault(key, {}).update(value)
        return cls.model_validate(merged)
