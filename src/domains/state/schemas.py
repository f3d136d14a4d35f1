from src.domains.base import CamelModel
from src.domains.file_search.models import FileSearchStore


class ApiKeyRequest(CamelModel):
    api_key: str


class ModelUpdateRequest(CamelModel):
    """Partial update; only fields present in the body are applied."""

    selected_model: str | None = None
    system_instruction: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None
    top_p: float | None = None
    top_k: int | None = None
    metadata_filter: str | None = None


class CurrentStoreRequest(CamelModel):
    store: FileSearchStore | None = None
