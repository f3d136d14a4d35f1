from typing import Any

from pydantic import Field

from src.domains.base import CamelModel
from src.domains.file_search.models import FileSearchDocument, FileSearchStore


class ApiResponse(CamelModel):
    """Envelope shared by every endpoint."""

    success: bool
    message: str | None = None
    data: Any = None
    error: str | None = None
    code: int | None = None


class CreateStoreRequest(CamelModel):
    display_name: str | None = None


class StoreSummary(CamelModel):
    name: str
    display_name: str


class StoreList(CamelModel):
    data: list[FileSearchStore]
    count: int


class DocumentList(CamelModel):
    data: list[FileSearchDocument]
    count: int


class GenerationConfig(CamelModel):
    temperature: float | None = None
    max_output_tokens: int | None = None
    top_p: float | None = None
    top_k: int | None = None


class SafetySetting(CamelModel):
    category: str
    threshold: str


class QueryRequest(CamelModel):
    query: str | None = None
    metadata_filter: str | None = None
    model: str | None = None
    system_instruction: str | None = None
    generation_config: GenerationConfig | None = None
    safety_settings: list[SafetySetting] | None = None


class QueryResponseData(CamelModel):
    text: str
    grounding_metadata: dict[str, Any] | None = None


class UploadFileResult(CamelModel):
    file_name: str
    success: bool
    error: str | None = None


class UploadSummary(CamelModel):
    results: list[UploadFileResult] = Field(default_factory=list)
    success_count: int = 0
    fail_count: int = 0
